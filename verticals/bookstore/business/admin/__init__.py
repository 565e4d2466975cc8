"""Models of the administration pages."""

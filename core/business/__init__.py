"""Business-object model framework.

Model base classes (editable/read-only roots, collections and command
objects), factories with URL-friendly method aliases, a per-request
context carrying the user and database session, and the error types the
API portal passes through to callers.
"""

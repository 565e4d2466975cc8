"""Bookstore vertical — demo application of the business-object layer.

Shows the pieces working together in one domain:
- SQLAlchemy tables for books and their tags
- DAOs built on the async repository pattern
- Business models (editable, read-only, collections, command) and factories
- Authorization rules per model action and property
- Template-rendered pages whose scripts call the API portal
"""

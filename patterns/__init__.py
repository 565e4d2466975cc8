"""Reusable patterns of the business-object layer.

Each module covers one concern and knows nothing about a particular domain:
authorization and validation rules, the model state machine, the DAO base
class and the application configuration. They share the framework's core
types (``core.business.user.UserInfo``, ``core.business.errors``) and the
declarative base of ``core.models``; nothing here imports a vertical.
"""

"""
Application package initializer.

The API is split into ``core`` (configuration, logging, errors, the
MongoDB connection manager and token verification), ``schemas``,
``services`` holding the business logic per resource, and ``api``
holding the HTTP routes.
"""

from .main import app, create_app  # noqa: F401

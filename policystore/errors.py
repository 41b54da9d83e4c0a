"""
Adapter errors.

Database failures are not translated: whatever SQLAlchemy raises reaches
the caller as is. ``StorageError`` names the root of that hierarchy so
callers can catch it without importing SQLAlchemy.
"""

from sqlalchemy.exc import SQLAlchemyError


class ConfigError(ValueError):
    """Adapter constructed without a usable engine or table name."""


StorageError = SQLAlchemyError

__all__ = ["ConfigError", "StorageError"]

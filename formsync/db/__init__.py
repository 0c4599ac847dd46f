"""Database bootstrap utilities for the form service.

This module exposes convenience imports for engine construction and schema
creation. The DB layer is intentionally minimal and does not leak ORM models
into route handlers.
"""

from formsync.db.base import get_engine
from formsync.db.schema import ensure_schema

__all__ = [
    "get_engine",
    "ensure_schema",
]

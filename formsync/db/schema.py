"""Schema bootstrap.

Creates the form tables when absent. There is no migration history; the
table definitions in `formsync.models.records` are the single source.
"""

from __future__ import annotations

import logging

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from formsync.models.records import Base

logger = logging.getLogger(__name__)


def ensure_schema(engine: Engine) -> None:
    """Create missing tables on ``engine``; existing tables are left alone."""
    try:
        Base.metadata.create_all(engine)
    except SQLAlchemyError:
        logger.error("schema_bootstrap_failed dialect=%s", engine.dialect.name, exc_info=True)
        raise
    logger.info("schema_ready tables=%s", sorted(Base.metadata.tables.keys()))

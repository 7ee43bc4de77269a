"""
Engine construction and schema management.

The engine owns the process-wide connection pool; each unit of work
borrows one connection from it for the length of its scope.
"""

import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from shopapp.core.config import Settings
from shopapp.infrastructure.shop.tables import metadata

logger = logging.getLogger(__name__)


def build_engine(settings: Settings) -> Engine:
    """Build a SQLAlchemy engine from application settings."""
    url = settings.get_database_url()
    logger.info(
        "Creating database engine: backend=%s driver=%s",
        url.get_backend_name(),
        url.get_driver_name(),
    )
    return create_engine(url, pool_pre_ping=True, echo=settings.db_show_sql)


def create_schema(engine: Engine) -> None:
    """Create every shop table that does not exist yet."""
    metadata.create_all(engine)
    logger.info("Schema ensured: %s", ", ".join(sorted(metadata.tables)))

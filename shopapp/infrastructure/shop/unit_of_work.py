"""
Adapter: Transactional scope over a SQLAlchemy engine.

Implements UnitOfWork port. One pooled connection and one transaction per
scope; every repository handed out by the scope shares that connection.
"""

import logging
from types import TracebackType
from typing import Optional

from sqlalchemy.engine import Connection, Engine, RootTransaction

from shopapp.domain.shop.ports import UnitOfWork
from shopapp.infrastructure.shop.order_repository import OrderRepositoryAdapter
from shopapp.infrastructure.shop.product_repository import ProductRepositoryAdapter
from shopapp.infrastructure.shop.report_repository import ReportRepositoryAdapter
from shopapp.infrastructure.shop.user_repository import UserRepositoryAdapter
from shopapp.infrastructure.shop.watchlist_repository import (
    WatchlistRepositoryAdapter,
)

logger = logging.getLogger(__name__)


class SqlAlchemyUnitOfWork(UnitOfWork):
    """Commit on a clean exit, roll back on any exception."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._conn: Optional[Connection] = None
        self._transaction: Optional[RootTransaction] = None

    def __enter__(self) -> "SqlAlchemyUnitOfWork":
        if self._conn is not None:
            raise RuntimeError("Unit of work is already active")
        self._conn = self._engine.connect()
        self._transaction = self._conn.begin()
        self.users = UserRepositoryAdapter(self._conn)
        self.products = ProductRepositoryAdapter(self._conn)
        self.orders = OrderRepositoryAdapter(self._conn)
        self.watchlist = WatchlistRepositoryAdapter(self._conn)
        self.reports = ReportRepositoryAdapter(self._conn)
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        try:
            if exc_type is None:
                self._transaction.commit()
            else:
                logger.debug("Rolling back scope after %s", exc_type.__name__)
                self._transaction.rollback()
        finally:
            self._conn.close()
            self._conn = None
            self._transaction = None

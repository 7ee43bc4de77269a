"""
Adapter: Watchlist persistence.

Implements WatchlistRepository port over the watchlist table.
"""

import logging

from sqlalchemy import delete, exists, insert, select
from sqlalchemy.engine import Connection
from sqlalchemy.exc import IntegrityError

from shopapp.domain.shop.entities import Product
from shopapp.domain.shop.ports import WatchlistRepository
from shopapp.infrastructure.shop.product_repository import to_product
from shopapp.infrastructure.shop.tables import product_table, watchlist_table

logger = logging.getLogger(__name__)


class WatchlistRepositoryAdapter(WatchlistRepository):
    """SQL adapter for the watchlist table."""

    def __init__(self, conn: Connection) -> None:
        self._conn = conn

    def exists(self, user_id: int, product_id: int) -> bool:
        query = select(
            exists().where(
                watchlist_table.c.user_id == user_id,
                watchlist_table.c.product_id == product_id,
            )
        )
        return bool(self._conn.execute(query).scalar())

    def add(self, user_id: int, product_id: int) -> bool:
        """Insert an entry unless one exists; return True if a row was added.

        A concurrent scope may insert the same pair between the caller's
        ``exists`` check and this insert. The insert runs in a savepoint so
        the unique-key violation can be discarded without aborting the
        enclosing transaction.
        """
        try:
            with self._conn.begin_nested():
                self._conn.execute(
                    insert(watchlist_table).values(
                        user_id=user_id, product_id=product_id
                    )
                )
        except IntegrityError:
            logger.debug(
                "Watchlist entry already present: user=%s product=%s",
                user_id,
                product_id,
            )
            return False
        return True

    def remove(self, user_id: int, product_id: int) -> int:
        result = self._conn.execute(
            delete(watchlist_table).where(
                watchlist_table.c.user_id == user_id,
                watchlist_table.c.product_id == product_id,
            )
        )
        return result.rowcount

    def list_in_stock_products(self, user_id: int) -> list[Product]:
        watched = select(watchlist_table.c.product_id).where(
            watchlist_table.c.user_id == user_id
        )
        query = (
            select(product_table)
            .where(
                product_table.c.id.in_(watched),
                product_table.c.quantity > 0,
            )
            .order_by(product_table.c.id)
        )
        return [to_product(row) for row in self._conn.execute(query)]

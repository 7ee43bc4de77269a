"""
Adapter: Sales report queries.

Implements ReportRepository port. Every aggregation runs over order lines
joined to their order with the excluded status filtered out, and profit
uses the prices stored on the line rather than the product's current ones.
Ties in the score are broken by product id ascending so results are a
deterministic total order.
"""

from sqlalchemy import func, select
from sqlalchemy.engine import Connection

from shopapp.domain.shop.entities import (
    OrderStatus,
    ProductLastPurchase,
    ProductProfit,
    ProductQuantity,
)
from shopapp.domain.shop.ports import ReportRepository
from shopapp.infrastructure.shop.product_repository import to_product
from shopapp.infrastructure.shop.tables import (
    order_item_table,
    order_table,
    product_table,
)

PRODUCT_COLUMNS = tuple(product_table.c)

_lines = order_item_table.join(
    order_table, order_table.c.id == order_item_table.c.order_id
).join(product_table, product_table.c.id == order_item_table.c.product_id)


def _ranked_by(score, excluded_status: OrderStatus, limit: int, user_id=None):
    """Build a per-product aggregation ordered by ``score`` descending."""
    query = (
        select(*PRODUCT_COLUMNS, score.label("score"))
        .select_from(_lines)
        .where(order_table.c.status != excluded_status.value)
        .group_by(*PRODUCT_COLUMNS)
        .order_by(score.desc(), product_table.c.id.asc())
        .limit(limit)
    )
    if user_id is not None:
        query = query.where(order_table.c.user_id == user_id)
    return query


class ReportRepositoryAdapter(ReportRepository):
    """SQL adapter for reporting aggregations."""

    def __init__(self, conn: Connection) -> None:
        self._conn = conn

    def most_frequent_for_user(
        self, user_id: int, limit: int, excluded_status: OrderStatus
    ) -> list[ProductQuantity]:
        score = func.sum(order_item_table.c.quantity)
        rows = self._conn.execute(
            _ranked_by(score, excluded_status, limit, user_id=user_id)
        )
        return [ProductQuantity(to_product(r), int(r.score)) for r in rows]

    def most_recent_for_user(
        self, user_id: int, limit: int, excluded_status: OrderStatus
    ) -> list[ProductLastPurchase]:
        score = func.max(order_table.c.placed_at)
        rows = self._conn.execute(
            _ranked_by(score, excluded_status, limit, user_id=user_id)
        )
        return [ProductLastPurchase(to_product(r), r.score) for r in rows]

    def most_popular(
        self, limit: int, excluded_status: OrderStatus
    ) -> list[ProductQuantity]:
        score = func.sum(order_item_table.c.quantity)
        rows = self._conn.execute(_ranked_by(score, excluded_status, limit))
        return [ProductQuantity(to_product(r), int(r.score)) for r in rows]

    def most_profitable(
        self, limit: int, excluded_status: OrderStatus
    ) -> list[ProductProfit]:
        score = func.sum(
            (order_item_table.c.retail_price - order_item_table.c.wholesale_price)
            * order_item_table.c.quantity
        )
        rows = self._conn.execute(_ranked_by(score, excluded_status, limit))
        return [ProductProfit(to_product(r), r.score) for r in rows]

    def total_sold(self, excluded_status: OrderStatus) -> int:
        query = (
            select(func.coalesce(func.sum(order_item_table.c.quantity), 0))
            .select_from(
                order_item_table.join(
                    order_table, order_table.c.id == order_item_table.c.order_id
                )
            )
            .where(order_table.c.status != excluded_status.value)
        )
        return int(self._conn.execute(query).scalar_one())

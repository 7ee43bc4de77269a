"""
Adapter: Order persistence.

Implements OrderRepository port. Order headers and lines are written in
the caller's scope, which is the same scope that decremented stock.
Detail reads attach lines with one joined query instead of one query
per order.
"""

import logging
from typing import Optional

from sqlalchemy import insert, select, update
from sqlalchemy.engine import Connection, Row

from shopapp.domain.shop.entities import Order, OrderItem, OrderStatus
from shopapp.domain.shop.ports import OrderRepository
from shopapp.infrastructure.shop.tables import (
    order_item_table,
    order_table,
    product_table,
    user_table,
)

logger = logging.getLogger(__name__)


def _to_order(row: Row) -> Order:
    return Order(
        id=row.id,
        user_id=row.user_id,
        placed_at=row.placed_at,
        status=OrderStatus(row.status),
    )


def _detail_query():
    """Orders joined with owner name and, when present, lines and product names."""
    return (
        select(
            order_table.c.id,
            order_table.c.user_id,
            order_table.c.placed_at,
            order_table.c.status,
            user_table.c.username,
            order_item_table.c.id.label("item_id"),
            order_item_table.c.product_id,
            order_item_table.c.quantity,
            order_item_table.c.retail_price,
            order_item_table.c.wholesale_price,
            product_table.c.name.label("product_name"),
        )
        .select_from(
            order_table.join(user_table, user_table.c.id == order_table.c.user_id)
            .outerjoin(
                order_item_table, order_item_table.c.order_id == order_table.c.id
            )
            .outerjoin(
                product_table, product_table.c.id == order_item_table.c.product_id
            )
        )
    )


def _group_details(rows: list[Row]) -> list[Order]:
    """Fold joined rows into orders, keeping the row order of the headers."""
    headers: dict[int, Row] = {}
    items: dict[int, list[OrderItem]] = {}
    for row in rows:
        if row.id not in headers:
            headers[row.id] = row
            items[row.id] = []
        if row.item_id is not None:
            items[row.id].append(
                OrderItem(
                    id=row.item_id,
                    order_id=row.id,
                    product_id=row.product_id,
                    quantity=row.quantity,
                    retail_price_at_order=row.retail_price,
                    wholesale_price_at_order=row.wholesale_price,
                    product_name=row.product_name,
                )
            )
    return [
        Order(
            id=header.id,
            user_id=header.user_id,
            placed_at=header.placed_at,
            status=OrderStatus(header.status),
            items=tuple(items[order_id]),
            placed_by=header.username,
        )
        for order_id, header in headers.items()
    ]


class OrderRepositoryAdapter(OrderRepository):
    """SQL adapter for the order and order_item tables."""

    def __init__(self, conn: Connection) -> None:
        self._conn = conn

    def get(self, order_id: int) -> Optional[Order]:
        row = self._conn.execute(
            select(order_table).where(order_table.c.id == order_id)
        ).first()
        return _to_order(row) if row else None

    def get_for_update(self, order_id: int) -> Optional[Order]:
        row = self._conn.execute(
            select(order_table)
            .where(order_table.c.id == order_id)
            .with_for_update()
        ).first()
        return _to_order(row) if row else None

    def get_with_items(self, order_id: int) -> Optional[Order]:
        query = (
            _detail_query()
            .where(order_table.c.id == order_id)
            .order_by(order_item_table.c.id)
        )
        orders = _group_details(self._conn.execute(query).all())
        return orders[0] if orders else None

    def list_with_items(self, user_id: Optional[int] = None) -> list[Order]:
        query = _detail_query().order_by(
            order_table.c.placed_at.desc(),
            order_table.c.id.desc(),
            order_item_table.c.id,
        )
        if user_id is not None:
            query = query.where(order_table.c.user_id == user_id)
        return _group_details(self._conn.execute(query).all())

    def add(self, order: Order, items: list[OrderItem]) -> Order:
        result = self._conn.execute(
            insert(order_table).values(
                user_id=order.user_id,
                placed_at=order.placed_at,
                status=order.status.value,
            )
        )
        order_id = result.inserted_primary_key[0]

        stored_items = []
        for item in items:
            item_result = self._conn.execute(
                insert(order_item_table).values(
                    order_id=order_id,
                    product_id=item.product_id,
                    quantity=item.quantity,
                    retail_price=item.retail_price_at_order,
                    wholesale_price=item.wholesale_price_at_order,
                )
            )
            stored_items.append(
                OrderItem(
                    id=item_result.inserted_primary_key[0],
                    order_id=order_id,
                    product_id=item.product_id,
                    quantity=item.quantity,
                    retail_price_at_order=item.retail_price_at_order,
                    wholesale_price_at_order=item.wholesale_price_at_order,
                    product_name=item.product_name,
                )
            )

        logger.debug("Inserted order id=%s with %d lines", order_id, len(stored_items))
        return Order(
            id=order_id,
            user_id=order.user_id,
            placed_at=order.placed_at,
            status=order.status,
            items=tuple(stored_items),
            placed_by=order.placed_by,
        )

    def update_status(
        self, order_id: int, expected: OrderStatus, target: OrderStatus
    ) -> bool:
        result = self._conn.execute(
            update(order_table)
            .where(
                order_table.c.id == order_id,
                order_table.c.status == expected.value,
            )
            .values(status=target.value)
        )
        return result.rowcount == 1

"""
Adapter: Product persistence and stock mutation.

Implements ProductRepository port. Stock changes are single conditional
statements so that no caller ever reads, decides and writes without the
database arbitrating between concurrent scopes.
"""

import logging
from typing import Optional

from sqlalchemy import insert, select, update
from sqlalchemy.engine import Connection, Row

from shopapp.domain.shop.entities import Product
from shopapp.domain.shop.ports import ProductRepository
from shopapp.infrastructure.shop.tables import product_table

logger = logging.getLogger(__name__)


def to_product(row: Row) -> Product:
    """Map a row carrying the product columns to a Product entity."""
    return Product(
        id=row.id,
        name=row.name,
        description=row.description,
        wholesale_price=row.wholesale_price,
        retail_price=row.retail_price,
        quantity=row.quantity,
    )


class ProductRepositoryAdapter(ProductRepository):
    """SQL adapter for the product table."""

    def __init__(self, conn: Connection) -> None:
        self._conn = conn

    def get(self, product_id: int, for_admin: bool = True) -> Optional[Product]:
        query = select(product_table).where(product_table.c.id == product_id)
        if not for_admin:
            query = query.where(product_table.c.quantity > 0)
        row = self._conn.execute(query).first()
        return to_product(row) if row else None

    def get_for_update(self, product_id: int) -> Optional[Product]:
        query = (
            select(product_table)
            .where(product_table.c.id == product_id)
            .with_for_update()
        )
        row = self._conn.execute(query).first()
        return to_product(row) if row else None

    def list_all(self, for_admin: bool = True) -> list[Product]:
        query = select(product_table).order_by(product_table.c.id)
        if not for_admin:
            query = query.where(product_table.c.quantity > 0)
        return [to_product(row) for row in self._conn.execute(query)]

    def add(self, product: Product) -> Product:
        result = self._conn.execute(
            insert(product_table).values(
                name=product.name,
                description=product.description,
                wholesale_price=product.wholesale_price,
                retail_price=product.retail_price,
                quantity=product.quantity,
            )
        )
        return product.with_changes(id=result.inserted_primary_key[0])

    def save(self, product: Product) -> Product:
        self._conn.execute(
            update(product_table)
            .where(product_table.c.id == product.id)
            .values(
                name=product.name,
                description=product.description,
                wholesale_price=product.wholesale_price,
                retail_price=product.retail_price,
                quantity=product.quantity,
            )
        )
        return product

    def decrement_stock(self, product_id: int, quantity: int) -> bool:
        result = self._conn.execute(
            update(product_table)
            .where(
                product_table.c.id == product_id,
                product_table.c.quantity >= quantity,
            )
            .values(quantity=product_table.c.quantity - quantity)
        )
        if result.rowcount != 1:
            logger.debug(
                "Conditional decrement missed: product=%s quantity=%d",
                product_id,
                quantity,
            )
            return False
        return True

    def increment_stock(self, product_id: int, quantity: int) -> None:
        self._conn.execute(
            update(product_table)
            .where(product_table.c.id == product_id)
            .values(quantity=product_table.c.quantity + quantity)
        )

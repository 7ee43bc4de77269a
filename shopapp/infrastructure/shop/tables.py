"""
SQLAlchemy Core table definitions for the shop schema.

order_item.retail_price and order_item.wholesale_price are snapshots taken
at placement time; nothing ever back-fills them from product.
"""

from datetime import timezone

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
    TypeDecorator,
    UniqueConstraint,
)

MONEY = Numeric(12, 2)


class UtcDateTime(TypeDecorator):
    """Timezone-aware timestamp stored and returned in UTC.

    Backends without a zoned timestamp type (SQLite) hand back naive
    values; those are read as UTC.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


metadata = MetaData()

user_table = Table(
    "user",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("username", String(100), nullable=False, unique=True),
    Column("email", String(255), nullable=False, unique=True),
    Column("password_hash", String(255), nullable=False),
    Column("is_admin", Boolean, nullable=False, default=False),
)

product_table = Table(
    "product",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(255), nullable=False),
    Column("description", Text, nullable=True),
    Column("wholesale_price", MONEY, nullable=False),
    Column("retail_price", MONEY, nullable=False),
    Column("quantity", Integer, nullable=False),
    CheckConstraint("quantity >= 0", name="ck_product_quantity_non_negative"),
    CheckConstraint("wholesale_price >= 0", name="ck_product_wholesale_non_negative"),
    CheckConstraint("retail_price >= 0", name="ck_product_retail_non_negative"),
)

order_table = Table(
    "order",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", Integer, ForeignKey("user.id"), nullable=False, index=True),
    Column("placed_at", UtcDateTime(), nullable=False),
    Column("status", String(20), nullable=False),
)

order_item_table = Table(
    "order_item",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("order_id", Integer, ForeignKey("order.id"), nullable=False, index=True),
    Column("product_id", Integer, ForeignKey("product.id"), nullable=False, index=True),
    Column("quantity", Integer, nullable=False),
    Column("retail_price", MONEY, nullable=False),
    Column("wholesale_price", MONEY, nullable=False),
    CheckConstraint("quantity >= 1", name="ck_order_item_quantity_positive"),
)

watchlist_table = Table(
    "watchlist",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", Integer, ForeignKey("user.id"), nullable=False),
    Column("product_id", Integer, ForeignKey("product.id"), nullable=False),
    UniqueConstraint("user_id", "product_id", name="uq_watchlist_user_product"),
)

"""
Domain entities for the shop bounded context.

Entities represent core business objects with identity and lifecycle.
They contain no framework imports and no IO operations.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

ROLE_USER = "ROLE_USER"
ROLE_ADMIN = "ROLE_ADMIN"


class OrderStatus(Enum):
    """Lifecycle state of an order."""

    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    CANCELED = "CANCELED"


@dataclass(frozen=True)
class User:
    """A registered shop account."""

    id: Optional[int]
    username: str
    email: str
    password_hash: str
    is_admin: bool = False


@dataclass(frozen=True)
class Product:
    """A catalog entry with pricing and on-hand stock."""

    id: Optional[int]
    name: str
    description: Optional[str]
    wholesale_price: Decimal
    retail_price: Decimal
    quantity: int

    def with_changes(self, **changes) -> "Product":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)


@dataclass(frozen=True)
class OrderItem:
    """A single order line.

    The two prices are snapshots taken when the order was placed and
    are never refreshed from the product afterwards.
    """

    id: Optional[int]
    order_id: Optional[int]
    product_id: int
    quantity: int
    retail_price_at_order: Decimal
    wholesale_price_at_order: Decimal
    product_name: Optional[str] = None


@dataclass(frozen=True)
class Order:
    """A customer order and, when loaded with detail, its lines."""

    id: Optional[int]
    user_id: int
    placed_at: datetime
    status: OrderStatus
    items: tuple[OrderItem, ...] = field(default_factory=tuple)
    placed_by: Optional[str] = None

    def is_owned_by(self, user_id: int) -> bool:
        return self.user_id == user_id


@dataclass(frozen=True)
class CartLine:
    """A requested (product, quantity) pair in an order placement."""

    product_id: int
    quantity: int


@dataclass(frozen=True)
class Principal:
    """The authenticated caller: a user plus the role tags granted to it."""

    user_id: int
    username: str
    authorities: frozenset[str]

    @property
    def is_admin(self) -> bool:
        return ROLE_ADMIN in self.authorities

    def has_role(self, role: str) -> bool:
        return role in self.authorities

    @classmethod
    def for_user(cls, user: User) -> "Principal":
        """Build a principal whose roles follow the stored admin flag."""
        roles = {ROLE_USER}
        if user.is_admin:
            roles.add(ROLE_ADMIN)
        return cls(user_id=user.id, username=user.username, authorities=frozenset(roles))


@dataclass(frozen=True)
class ProductQuantity:
    """A product paired with an aggregated unit count."""

    product: Product
    quantity: int


@dataclass(frozen=True)
class ProductLastPurchase:
    """A product paired with the latest time it was bought."""

    product: Product
    last_purchased_at: datetime


@dataclass(frozen=True)
class ProductProfit:
    """A product paired with the profit earned from it at historical prices."""

    product: Product
    profit: Decimal

"""
Data Transfer Objects for the shop application layer.

DTOs carry data between the interface and application layers.
They are plain dataclasses with no behavior.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Optional

from shopapp.domain.shop.entities import CartLine, Principal
from shopapp.domain.shop.ports import UnitOfWork

UnitOfWorkFactory = Callable[[], UnitOfWork]


@dataclass(frozen=True)
class RegisterUserCommand:
    """Input DTO for creating an account.

    Attributes:
        username: Unique login name.
        email: Unique contact address.
        password: Plain-text password; only its hash is stored.
    """

    username: str
    email: str
    password: str


@dataclass(frozen=True)
class LoginCommand:
    """Input DTO for exchanging credentials for a token."""

    username: str
    password: str


@dataclass(frozen=True)
class AccessTokenResult:
    """Output DTO for a successful login.

    Attributes:
        access_token: Signed JWT whose subject is the username.
        token_type: Always "Bearer".
    """

    access_token: str
    token_type: str = "Bearer"


@dataclass(frozen=True)
class AddProductCommand:
    """Input DTO for listing a new product."""

    name: str
    wholesale_price: Decimal
    retail_price: Decimal
    quantity: int
    description: Optional[str] = None


@dataclass(frozen=True)
class PatchProductCommand:
    """Input DTO for a partial product update.

    Attributes:
        product_id: Product to change.
        changes: Only the fields the caller actually sent, keyed by
            entity attribute name.
    """

    product_id: int
    changes: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class PlaceOrderCommand:
    """Input DTO for placing an order.

    Attributes:
        principal: The customer placing the order.
        lines: Requested (product, quantity) pairs; must not be empty.
    """

    principal: Principal
    lines: tuple[CartLine, ...]


@dataclass(frozen=True)
class ReportQuery:
    """Input DTO for a top-N report.

    Attributes:
        limit: Maximum number of rows to return.
        user_id: Restricts per-user reports; None for global ones.
    """

    limit: int
    user_id: Optional[int] = None

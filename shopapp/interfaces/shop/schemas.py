"""
Pydantic schemas for shop API request/response validation.

These schemas enforce input validation and define the API contract.
Field names are camelCase on the wire and snake_case in Python;
inputs accept either. No business logic belongs here.
"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

from shopapp.domain.shop.entities import Order, OrderItem, Product, User

USERNAME_MAX_LEN = 50
EMAIL_MAX_LEN = 255
EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+$"
NAME_MAX_LEN = 255

Money = Annotated[
    Decimal, PlainSerializer(float, return_type=float, when_used="json")
]


class ApiModel(BaseModel):
    """Base for every request and response body."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ------------------------------------------------------------------
# Identity
# ------------------------------------------------------------------


class SignupRequest(ApiModel):
    """Request schema for account registration."""

    username: str = Field(..., min_length=1, max_length=USERNAME_MAX_LEN)
    email: str = Field(
        ..., min_length=3, max_length=EMAIL_MAX_LEN, pattern=EMAIL_PATTERN
    )
    password: str = Field(..., min_length=1)


class LoginRequest(ApiModel):
    """Request schema for credential exchange."""

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserResponse(ApiModel):
    """A registered account. The password hash is never exposed."""

    id: int
    username: str
    email: str
    is_admin: bool

    @classmethod
    def from_entity(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id, username=user.username, email=user.email, is_admin=user.is_admin
        )


class TokenResponse(ApiModel):
    """Response schema for a successful login."""

    access_token: str
    token_type: str = "Bearer"


# ------------------------------------------------------------------
# Catalog
# ------------------------------------------------------------------


class ProductCreateRequest(ApiModel):
    """Request schema for listing a new product.

    Attributes:
        name: Display name, required.
        description: Optional free text.
        wholesale_price: Purchase price, >= 0.
        retail_price: Selling price, >= 0.
        quantity: Initial stock, >= 1.
    """

    name: str = Field(..., min_length=1, max_length=NAME_MAX_LEN)
    description: Optional[str] = None
    wholesale_price: Decimal = Field(..., ge=0)
    retail_price: Decimal = Field(..., ge=0)
    quantity: int = Field(..., ge=1)


class ProductPatchRequest(ApiModel):
    """Request schema for a partial product update.

    Only the fields present in the body are changed.
    """

    name: Optional[str] = Field(default=None, min_length=1, max_length=NAME_MAX_LEN)
    description: Optional[str] = None
    wholesale_price: Optional[Decimal] = Field(default=None, ge=0)
    retail_price: Optional[Decimal] = Field(default=None, ge=0)
    quantity: Optional[int] = Field(default=None, ge=0)

    def changes(self) -> dict:
        """Return the fields the client actually sent, keyed by attribute name."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


class ProductPublicView(ApiModel):
    """Product as seen by customers: no wholesale price, no stock level."""

    id: int
    name: str
    description: Optional[str] = None
    retail_price: Money

    @classmethod
    def from_entity(cls, product: Product) -> "ProductPublicView":
        return cls(
            id=product.id,
            name=product.name,
            description=product.description,
            retail_price=product.retail_price,
        )


class ProductAdminView(ApiModel):
    """Product as seen by operators: every field."""

    id: int
    name: str
    description: Optional[str] = None
    wholesale_price: Money
    retail_price: Money
    quantity: int

    @classmethod
    def from_entity(cls, product: Product) -> "ProductAdminView":
        return cls(
            id=product.id,
            name=product.name,
            description=product.description,
            wholesale_price=product.wholesale_price,
            retail_price=product.retail_price,
            quantity=product.quantity,
        )


# ------------------------------------------------------------------
# Orders
# ------------------------------------------------------------------


class OrderLineRequest(ApiModel):
    """A single requested cart line."""

    product_id: int
    quantity: int = Field(..., ge=1)


class PlaceOrderRequest(ApiModel):
    """Request schema for order placement."""

    items: list[OrderLineRequest] = Field(..., min_length=1)


class OrderResponse(ApiModel):
    """Order header returned by placement and completion."""

    id: int
    user_id: int
    placed_at: datetime
    status: str

    @classmethod
    def from_entity(cls, order: Order) -> "OrderResponse":
        return cls(
            id=order.id,
            user_id=order.user_id,
            placed_at=order.placed_at,
            status=order.status.value,
        )


class OrderItemResponse(ApiModel):
    """An order line with the retail price captured at placement."""

    product_id: int
    product_name: Optional[str] = None
    quantity: int
    retail_price_at_order: Money

    @classmethod
    def from_entity(cls, item: OrderItem) -> "OrderItemResponse":
        return cls(
            product_id=item.product_id,
            product_name=item.product_name,
            quantity=item.quantity,
            retail_price_at_order=item.retail_price_at_order,
        )


class OrderDetailResponse(ApiModel):
    """Order header plus its lines."""

    id: int
    user_id: int
    placed_by_username: Optional[str] = None
    placed_at: datetime
    status: str
    items: list[OrderItemResponse]

    @classmethod
    def from_entity(cls, order: Order) -> "OrderDetailResponse":
        return cls(
            id=order.id,
            user_id=order.user_id,
            placed_by_username=order.placed_by,
            placed_at=order.placed_at,
            status=order.status.value,
            items=[OrderItemResponse.from_entity(item) for item in order.items],
        )


# ------------------------------------------------------------------
# Reports
# ------------------------------------------------------------------


class FrequentProductResponse(ApiModel):
    product: ProductPublicView
    total_bought: int


class RecentProductResponse(ApiModel):
    product: ProductPublicView
    last_purchased_at: datetime


class PopularProductResponse(ApiModel):
    product: ProductAdminView
    total_sold: int


class ProfitableProductResponse(ApiModel):
    product: ProductAdminView
    total_profit: Money


# ------------------------------------------------------------------
# Ambient
# ------------------------------------------------------------------


class HealthResponse(BaseModel):
    """Response schema for the health check endpoint."""

    status: str
    version: str


class ErrorResponse(BaseModel):
    """Standard error response returned by all error handlers."""

    status: int
    error: str
    message: str
    path: str

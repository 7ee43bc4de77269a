"""
Domain-specific errors for the shop bounded context.

All errors raised from the domain and application layers are defined here.
These are mapped to HTTP responses at the interface layer.
No framework imports allowed.
"""


class ShopDomainError(Exception):
    """Base error for all shop domain errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class ValidationError(ShopDomainError):
    """Raised when an input or an effective entity state breaks a value rule."""

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"{field}: {reason}")
        self.field = field
        self.reason = reason


class AuthenticationError(ShopDomainError):
    """Raised when credentials or a bearer token cannot be verified."""


class ForbiddenError(ShopDomainError):
    """Raised when the principal lacks the role or ownership an operation needs."""


class IllegalStateTransitionError(ForbiddenError):
    """Raised when an order is asked to leave a terminal state."""

    def __init__(self, order_id: int, current: str, target: str) -> None:
        super().__init__(
            f"Order {order_id} cannot move from {current} to {target}"
        )
        self.order_id = order_id
        self.current = current
        self.target = target


class ResourceNotFoundError(ShopDomainError):
    """Raised when a record with the given id does not exist."""

    resource = "Resource"

    def __init__(self, resource_id: object) -> None:
        super().__init__(f"{self.resource} not found with ID: {resource_id}")
        self.resource_id = resource_id


class UserNotFoundError(ResourceNotFoundError):
    resource = "User"


class ProductNotFoundError(ResourceNotFoundError):
    resource = "Product"


class OrderNotFoundError(ResourceNotFoundError):
    resource = "Order"


class ConflictError(ShopDomainError):
    """Raised when a write collides with existing state."""


class UniqueViolationError(ConflictError):
    """Raised when a unique field value is already taken."""

    def __init__(self, field: str, value: str) -> None:
        super().__init__(f"{field} is already taken: {value}")
        self.field = field
        self.value = value


class InsufficientStockError(ShopDomainError):
    """Raised when a cart line asks for more units than are on hand."""

    def __init__(self, product_id: int, available: int, requested: int) -> None:
        super().__init__(
            f"Not enough stock for product ID {product_id}. "
            f"Available: {available}, Requested: {requested}"
        )
        self.product_id = product_id
        self.available = available
        self.requested = requested

"""
Order state machine.

PROCESSING is the only non-terminal state. From it an order may be
canceled (by its owner or an admin, restoring stock) or completed
(by an admin only, no stock change). Nothing leaves COMPLETED or CANCELED.
"""

from shopapp.domain.shop.entities import Order, OrderStatus, Principal
from shopapp.domain.shop.errors import ForbiddenError, IllegalStateTransitionError

ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PROCESSING: frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELED}),
    OrderStatus.COMPLETED: frozenset(),
    OrderStatus.CANCELED: frozenset(),
}


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    """Return True if the state machine permits ``current -> target``."""
    return target in ALLOWED_TRANSITIONS[current]


def ensure_transition(order: Order, target: OrderStatus) -> None:
    """Raise IllegalStateTransitionError unless ``order`` may move to ``target``."""
    if not can_transition(order.status, target):
        raise IllegalStateTransitionError(
            order.id, order.status.value, target.value
        )


def restores_stock(current: OrderStatus, target: OrderStatus) -> bool:
    """Only PROCESSING -> CANCELED gives the reserved units back."""
    return current is OrderStatus.PROCESSING and target is OrderStatus.CANCELED


def ensure_can_view(order: Order, principal: Principal) -> None:
    """Admins see every order; everyone else only their own."""
    if principal.is_admin or order.is_owned_by(principal.user_id):
        return
    raise ForbiddenError(f"Order {order.id} does not belong to {principal.username}")


def ensure_can_cancel(order: Order, principal: Principal) -> None:
    """Cancelling follows the same owner-or-admin rule as reading."""
    if principal.is_admin or order.is_owned_by(principal.user_id):
        return
    raise ForbiddenError(
        f"User {principal.username} is not allowed to cancel order {order.id}"
    )


def ensure_can_complete(principal: Principal) -> None:
    if not principal.is_admin:
        raise ForbiddenError("Only admins can complete orders")

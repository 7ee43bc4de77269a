"""
Use case: Place an order.

Input: PlaceOrderCommand (principal, cart lines)
Output: Order (PROCESSING, with its lines)
Side effects: Decrements product stock and inserts the order with its
    lines, all in one transactional scope.
Failure cases: ValidationError, UserNotFoundError, ProductNotFoundError,
    InsufficientStockError. Any failure leaves stock and orders untouched.
"""

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from shopapp.application.shop.dtos import PlaceOrderCommand, UnitOfWorkFactory
from shopapp.domain.shop.entities import CartLine, Order, OrderItem, OrderStatus
from shopapp.domain.shop.errors import (
    InsufficientStockError,
    ProductNotFoundError,
    UserNotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def merge_lines(lines: tuple[CartLine, ...]) -> list[CartLine]:
    """Sum quantities of repeated product ids and sort by product id.

    Locking rows in ascending id order keeps two concurrent placements
    from waiting on each other's locks in opposite orders.
    """
    totals: dict[int, int] = {}
    for line in lines:
        if line.quantity < 1:
            raise ValidationError("quantity", "must be at least 1")
        totals[line.product_id] = totals.get(line.product_id, 0) + line.quantity
    return [CartLine(product_id=pid, quantity=qty) for pid, qty in sorted(totals.items())]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PlaceOrderUseCase:
    """All-or-nothing order placement with historical price capture.

    Each product row is locked before its stock is checked, and the
    decrement itself is conditional on enough stock remaining, so two
    placements racing for the last units cannot both succeed.
    """

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._uow_factory = uow_factory
        self._clock = clock

    def execute(self, command: PlaceOrderCommand) -> Order:
        """Run the placement use case.

        Args:
            command: The customer and the requested lines.

        Returns:
            The persisted order in PROCESSING.

        Raises:
            ValidationError: If the cart is empty or a quantity is below 1.
            UserNotFoundError: If the customer no longer exists.
            ProductNotFoundError: If a line names an unknown product.
            InsufficientStockError: If any line cannot be fully served.
        """
        if not command.lines:
            raise ValidationError("items", "must contain at least one line")
        lines = merge_lines(command.lines)
        user_id = command.principal.user_id

        with self._uow_factory() as uow:
            if uow.users.get_by_id(user_id) is None:
                raise UserNotFoundError(user_id)

            items: list[OrderItem] = []
            for line in lines:
                product = uow.products.get_for_update(line.product_id)
                if product is None:
                    raise ProductNotFoundError(line.product_id)
                if product.quantity < line.quantity:
                    raise InsufficientStockError(
                        product.id, product.quantity, line.quantity
                    )
                items.append(
                    OrderItem(
                        id=None,
                        order_id=None,
                        product_id=product.id,
                        quantity=line.quantity,
                        retail_price_at_order=product.retail_price,
                        wholesale_price_at_order=product.wholesale_price,
                        product_name=product.name,
                    )
                )

            for item in items:
                if not uow.products.decrement_stock(item.product_id, item.quantity):
                    current = uow.products.get(item.product_id)
                    available = current.quantity if current else 0
                    raise InsufficientStockError(
                        item.product_id, available, item.quantity
                    )

            order = uow.orders.add(
                Order(
                    id=None,
                    user_id=user_id,
                    placed_at=self._clock(),
                    status=OrderStatus.PROCESSING,
                    placed_by=command.principal.username,
                ),
                items,
            )

        logger.info(
            "Placed order id=%s user=%s lines=%d", order.id, user_id, len(items)
        )
        return order

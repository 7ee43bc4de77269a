"""
Use cases: Order state transitions.

Input: order id and the acting principal
Output: Order
Side effects: Status update; cancellation also restores stock.
Failure cases: OrderNotFoundError, ForbiddenError, IllegalStateTransitionError.
"""

import logging

from shopapp.application.shop.dtos import UnitOfWorkFactory
from shopapp.domain.shop.entities import Order, OrderStatus, Principal
from shopapp.domain.shop.errors import IllegalStateTransitionError, OrderNotFoundError
from shopapp.domain.shop.order_lifecycle import (
    ensure_can_cancel,
    ensure_can_complete,
    ensure_transition,
    restores_stock,
)

logger = logging.getLogger(__name__)


class CancelOrderUseCase:
    """PROCESSING -> CANCELED for the order's owner or an admin.

    The order row is locked and its status is flipped with a conditional
    update, so the stock restoration below happens at most once even if
    two cancellations race.
    """

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, order_id: int, principal: Principal) -> Order:
        """Run the cancel use case.

        Returns:
            The canceled order with its lines.

        Raises:
            OrderNotFoundError: If the order does not exist.
            ForbiddenError: If the principal is neither owner nor admin.
            IllegalStateTransitionError: If the order is already terminal.
        """
        target = OrderStatus.CANCELED
        with self._uow_factory() as uow:
            order = uow.orders.get_for_update(order_id)
            if order is None:
                raise OrderNotFoundError(order_id)
            ensure_can_cancel(order, principal)
            ensure_transition(order, target)

            if not uow.orders.update_status(order_id, order.status, target):
                raise IllegalStateTransitionError(
                    order_id, order.status.value, target.value
                )

            detail = uow.orders.get_with_items(order_id)
            if restores_stock(order.status, target):
                for item in detail.items:
                    uow.products.increment_stock(item.product_id, item.quantity)

        logger.info(
            "Canceled order id=%s by user=%s admin=%s",
            order_id,
            principal.user_id,
            principal.is_admin,
        )
        return detail


class CompleteOrderUseCase:
    """PROCESSING -> COMPLETED, admins only, no stock change."""

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, order_id: int, principal: Principal) -> Order:
        ensure_can_complete(principal)
        target = OrderStatus.COMPLETED
        with self._uow_factory() as uow:
            order = uow.orders.get_for_update(order_id)
            if order is None:
                raise OrderNotFoundError(order_id)
            ensure_transition(order, target)

            if not uow.orders.update_status(order_id, order.status, target):
                raise IllegalStateTransitionError(
                    order_id, order.status.value, target.value
                )
            completed = uow.orders.get(order_id)

        logger.info("Completed order id=%s", order_id)
        return completed

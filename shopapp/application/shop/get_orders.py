"""
Use cases: Order reads.

Input: order id (detail) or nothing (listing), plus the principal
Output: Order / list[Order] with lines attached
Side effects: None (read-only).
Failure cases: OrderNotFoundError, ForbiddenError.
"""

from shopapp.application.shop.dtos import UnitOfWorkFactory
from shopapp.domain.shop.entities import Order, Principal
from shopapp.domain.shop.errors import OrderNotFoundError
from shopapp.domain.shop.order_lifecycle import ensure_can_view


class GetOrderDetailUseCase:
    """Loads an order with its lines, then checks ownership."""

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, order_id: int, principal: Principal) -> Order:
        with self._uow_factory() as uow:
            order = uow.orders.get_with_items(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        ensure_can_view(order, principal)
        return order


class ListOrdersUseCase:
    """Admins see every order; customers see their own, newest first."""

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, principal: Principal) -> list[Order]:
        user_id = None if principal.is_admin else principal.user_id
        with self._uow_factory() as uow:
            return uow.orders.list_with_items(user_id=user_id)

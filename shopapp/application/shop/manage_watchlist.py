"""
Use cases: Per-user watchlist.

Adding is idempotent (one entry per user and product), removing a
missing entry succeeds, and listing hides products without stock
while leaving their entries in place.
"""

import logging

from shopapp.application.shop.dtos import UnitOfWorkFactory
from shopapp.domain.shop.entities import Product
from shopapp.domain.shop.errors import ProductNotFoundError, UserNotFoundError

logger = logging.getLogger(__name__)


class AddToWatchlistUseCase:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, user_id: int, product_id: int) -> None:
        """Watch a product.

        Raises:
            UserNotFoundError: If the user does not exist.
            ProductNotFoundError: If the product does not exist, in stock or not.
        """
        with self._uow_factory() as uow:
            if uow.users.get_by_id(user_id) is None:
                raise UserNotFoundError(user_id)
            if uow.products.get(product_id, for_admin=True) is None:
                raise ProductNotFoundError(product_id)
            if uow.watchlist.exists(user_id, product_id):
                return
            added = uow.watchlist.add(user_id, product_id)

        if added:
            logger.info("User id=%s watches product id=%s", user_id, product_id)


class RemoveFromWatchlistUseCase:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, user_id: int, product_id: int) -> None:
        with self._uow_factory() as uow:
            removed = uow.watchlist.remove(user_id, product_id)
        if removed:
            logger.info("User id=%s unwatched product id=%s", user_id, product_id)


class ListWatchlistUseCase:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, user_id: int) -> list[Product]:
        with self._uow_factory() as uow:
            return uow.watchlist.list_in_stock_products(user_id)

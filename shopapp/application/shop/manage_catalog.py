"""
Use cases: Catalog administration and browsing.

AddProductUseCase and PatchProductUseCase are admin operations;
GetProductUseCase and ListProductsUseCase serve both roles, with
non-admin callers seeing only products that have stock.
"""

import logging

from shopapp.application.shop.dtos import (
    AddProductCommand,
    PatchProductCommand,
    UnitOfWorkFactory,
)
from shopapp.domain.shop.catalog_rules import check_new_product, check_product
from shopapp.domain.shop.entities import Principal, Product
from shopapp.domain.shop.errors import ProductNotFoundError

logger = logging.getLogger(__name__)


class AddProductUseCase:
    """Validates and inserts a new listing."""

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, command: AddProductCommand) -> Product:
        """Run the add product use case.

        Raises:
            ValidationError: Blank name, negative price or quantity below 1.
        """
        product = Product(
            id=None,
            name=command.name,
            description=command.description,
            wholesale_price=command.wholesale_price,
            retail_price=command.retail_price,
            quantity=command.quantity,
        )
        check_new_product(product)

        with self._uow_factory() as uow:
            saved = uow.products.add(product)

        logger.info("Added product id=%s quantity=%d", saved.id, saved.quantity)
        return saved


class PatchProductUseCase:
    """Read-modify-write over the admin view of a product.

    Only fields present in the command change. The merged result is
    validated before the write, so a rejected patch leaves the row as it was.
    """

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, command: PatchProductCommand) -> Product:
        with self._uow_factory() as uow:
            current = uow.products.get_for_update(command.product_id)
            if current is None:
                raise ProductNotFoundError(command.product_id)
            if not command.changes:
                return current

            updated = current.with_changes(**command.changes)
            check_product(updated)
            uow.products.save(updated)

        logger.info(
            "Patched product id=%s fields=%s",
            command.product_id,
            ",".join(sorted(command.changes)),
        )
        return updated


class GetProductUseCase:
    """Returns one product; out-of-stock products are hidden from non-admins."""

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, product_id: int, principal: Principal) -> Product:
        with self._uow_factory() as uow:
            product = uow.products.get(product_id, for_admin=principal.is_admin)
        if product is None:
            raise ProductNotFoundError(product_id)
        return product


class ListProductsUseCase:
    """Returns every product for admins, in-stock products for everyone else."""

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, principal: Principal) -> list[Product]:
        with self._uow_factory() as uow:
            return uow.products.list_all(for_admin=principal.is_admin)

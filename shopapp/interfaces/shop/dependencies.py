"""
Dependency injection for the shop bounded context.

Provides FastAPI dependency functions that wire infrastructure
adapters into use cases via constructor injection.
These are the composition root for the shop context.
"""

from functools import lru_cache, partial

from fastapi import Depends
from sqlalchemy.engine import Engine

from shopapp.application.shop.change_order_status import (
    CancelOrderUseCase,
    CompleteOrderUseCase,
)
from shopapp.application.shop.dtos import UnitOfWorkFactory
from shopapp.application.shop.get_orders import GetOrderDetailUseCase, ListOrdersUseCase
from shopapp.application.shop.login import LoginUseCase
from shopapp.application.shop.manage_catalog import (
    AddProductUseCase,
    GetProductUseCase,
    ListProductsUseCase,
    PatchProductUseCase,
)
from shopapp.application.shop.manage_watchlist import (
    AddToWatchlistUseCase,
    ListWatchlistUseCase,
    RemoveFromWatchlistUseCase,
)
from shopapp.application.shop.place_order import PlaceOrderUseCase
from shopapp.application.shop.register_user import RegisterUserUseCase
from shopapp.application.shop.resolve_principal import ResolvePrincipalUseCase
from shopapp.application.shop.sales_reports import (
    GetFrequentProductsUseCase,
    GetPopularProductsUseCase,
    GetProfitableProductsUseCase,
    GetRecentProductsUseCase,
    GetTotalSoldUseCase,
)
from shopapp.core.config import settings
from shopapp.domain.shop.ports import PasswordHasher, TokenProvider
from shopapp.infrastructure.shop.database import build_engine
from shopapp.infrastructure.shop.password_hasher import PasslibPasswordHasher
from shopapp.infrastructure.shop.token_provider import JoseTokenProvider
from shopapp.infrastructure.shop.unit_of_work import SqlAlchemyUnitOfWork


@lru_cache
def get_engine() -> Engine:
    """Build the process-wide SQLAlchemy engine from application settings."""
    return build_engine(settings)


def get_uow_factory(engine: Engine = Depends(get_engine)) -> UnitOfWorkFactory:
    """Return a factory opening one transactional scope per call."""
    return partial(SqlAlchemyUnitOfWork, engine)


@lru_cache
def get_password_hasher() -> PasswordHasher:
    return PasslibPasswordHasher()


@lru_cache
def get_token_provider() -> TokenProvider:
    return JoseTokenProvider(
        key=settings.jwt_key,
        expiration_minutes=settings.jwt_expiration_minutes,
    )


# ------------------------------------------------------------------
# Identity
# ------------------------------------------------------------------


def get_register_user_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> RegisterUserUseCase:
    """Build RegisterUserUseCase with its infrastructure dependencies."""
    return RegisterUserUseCase(uow_factory=uow_factory, hasher=hasher)


def get_login_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenProvider = Depends(get_token_provider),
) -> LoginUseCase:
    """Build LoginUseCase with its infrastructure dependencies."""
    return LoginUseCase(uow_factory=uow_factory, hasher=hasher, tokens=tokens)


def get_resolve_principal_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
    tokens: TokenProvider = Depends(get_token_provider),
) -> ResolvePrincipalUseCase:
    """Build ResolvePrincipalUseCase with its infrastructure dependencies."""
    return ResolvePrincipalUseCase(uow_factory=uow_factory, tokens=tokens)


# ------------------------------------------------------------------
# Catalog
# ------------------------------------------------------------------


def get_add_product_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> AddProductUseCase:
    return AddProductUseCase(uow_factory=uow_factory)


def get_patch_product_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> PatchProductUseCase:
    return PatchProductUseCase(uow_factory=uow_factory)


def get_product_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> GetProductUseCase:
    return GetProductUseCase(uow_factory=uow_factory)


def get_list_products_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> ListProductsUseCase:
    return ListProductsUseCase(uow_factory=uow_factory)


# ------------------------------------------------------------------
# Orders
# ------------------------------------------------------------------


def get_place_order_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> PlaceOrderUseCase:
    """Build PlaceOrderUseCase with its infrastructure dependencies."""
    return PlaceOrderUseCase(uow_factory=uow_factory)


def get_order_detail_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> GetOrderDetailUseCase:
    return GetOrderDetailUseCase(uow_factory=uow_factory)


def get_list_orders_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> ListOrdersUseCase:
    return ListOrdersUseCase(uow_factory=uow_factory)


def get_cancel_order_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> CancelOrderUseCase:
    return CancelOrderUseCase(uow_factory=uow_factory)


def get_complete_order_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> CompleteOrderUseCase:
    return CompleteOrderUseCase(uow_factory=uow_factory)


# ------------------------------------------------------------------
# Watchlist
# ------------------------------------------------------------------


def get_add_to_watchlist_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> AddToWatchlistUseCase:
    return AddToWatchlistUseCase(uow_factory=uow_factory)


def get_remove_from_watchlist_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> RemoveFromWatchlistUseCase:
    return RemoveFromWatchlistUseCase(uow_factory=uow_factory)


def get_list_watchlist_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> ListWatchlistUseCase:
    return ListWatchlistUseCase(uow_factory=uow_factory)


# ------------------------------------------------------------------
# Reports
# ------------------------------------------------------------------


def get_frequent_products_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> GetFrequentProductsUseCase:
    return GetFrequentProductsUseCase(uow_factory=uow_factory)


def get_recent_products_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> GetRecentProductsUseCase:
    return GetRecentProductsUseCase(uow_factory=uow_factory)


def get_popular_products_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> GetPopularProductsUseCase:
    return GetPopularProductsUseCase(uow_factory=uow_factory)


def get_profitable_products_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> GetProfitableProductsUseCase:
    return GetProfitableProductsUseCase(uow_factory=uow_factory)


def get_total_sold_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> GetTotalSoldUseCase:
    return GetTotalSoldUseCase(uow_factory=uow_factory)

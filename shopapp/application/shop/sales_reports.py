"""
Use cases: Sales reports.

Input: ReportQuery (limit, optional user id)
Output: ranked product rows, or a total unit count
Side effects: None (read-only query).
Failure cases: ValidationError, UserNotFoundError (per-user reports).

Canceled orders never count towards any report.
"""

from shopapp.application.shop.dtos import ReportQuery, UnitOfWorkFactory
from shopapp.domain.shop.entities import (
    OrderStatus,
    ProductLastPurchase,
    ProductProfit,
    ProductQuantity,
)
from shopapp.domain.shop.errors import UserNotFoundError, ValidationError
from shopapp.domain.shop.ports import UnitOfWork

EXCLUDED_STATUS = OrderStatus.CANCELED
MAX_REPORT_LIMIT = 100


def _check_limit(limit: int) -> None:
    if not 1 <= limit <= MAX_REPORT_LIMIT:
        raise ValidationError("limit", f"must be between 1 and {MAX_REPORT_LIMIT}")


def _require_user(uow: UnitOfWork, user_id: int) -> None:
    if uow.users.get_by_id(user_id) is None:
        raise UserNotFoundError(user_id)


class GetFrequentProductsUseCase:
    """Top products by units bought by one user."""

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, query: ReportQuery) -> list[ProductQuantity]:
        _check_limit(query.limit)
        with self._uow_factory() as uow:
            _require_user(uow, query.user_id)
            return uow.reports.most_frequent_for_user(
                query.user_id, query.limit, EXCLUDED_STATUS
            )


class GetRecentProductsUseCase:
    """Top products by the latest time one user bought them."""

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, query: ReportQuery) -> list[ProductLastPurchase]:
        _check_limit(query.limit)
        with self._uow_factory() as uow:
            _require_user(uow, query.user_id)
            return uow.reports.most_recent_for_user(
                query.user_id, query.limit, EXCLUDED_STATUS
            )


class GetPopularProductsUseCase:
    """Top products by units sold across all customers."""

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, query: ReportQuery) -> list[ProductQuantity]:
        _check_limit(query.limit)
        with self._uow_factory() as uow:
            return uow.reports.most_popular(query.limit, EXCLUDED_STATUS)


class GetProfitableProductsUseCase:
    """Top products by (retail - wholesale) x quantity at historical prices."""

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, query: ReportQuery) -> list[ProductProfit]:
        _check_limit(query.limit)
        with self._uow_factory() as uow:
            return uow.reports.most_profitable(query.limit, EXCLUDED_STATUS)


class GetTotalSoldUseCase:
    """Units sold across every non-canceled order."""

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self) -> int:
        with self._uow_factory() as uow:
            return uow.reports.total_sold(EXCLUDED_STATUS)

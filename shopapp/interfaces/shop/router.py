"""
FastAPI router for the shop bounded context.

All routes delegate to use cases. No business logic here.
Input validation is handled by Pydantic schemas.
Role gates are declared per route; ownership is checked by the use cases.
Error mapping is handled by centralized error handlers.

Fixed paths under /products and /orders are declared before the
/{id} routes that would otherwise capture them.
"""

from typing import Union

from fastapi import APIRouter, Depends, Response, status

from shopapp.application.shop.change_order_status import (
    CancelOrderUseCase,
    CompleteOrderUseCase,
)
from shopapp.application.shop.dtos import (
    AddProductCommand,
    PatchProductCommand,
    PlaceOrderCommand,
    ReportQuery,
)
from shopapp.application.shop.get_orders import GetOrderDetailUseCase, ListOrdersUseCase
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
from shopapp.application.shop.sales_reports import (
    GetFrequentProductsUseCase,
    GetPopularProductsUseCase,
    GetProfitableProductsUseCase,
    GetRecentProductsUseCase,
    GetTotalSoldUseCase,
)
from shopapp.domain.shop.entities import CartLine, Principal, Product
from shopapp.interfaces.shop.dependencies import (
    get_add_product_use_case,
    get_add_to_watchlist_use_case,
    get_cancel_order_use_case,
    get_complete_order_use_case,
    get_frequent_products_use_case,
    get_list_orders_use_case,
    get_list_products_use_case,
    get_list_watchlist_use_case,
    get_order_detail_use_case,
    get_patch_product_use_case,
    get_place_order_use_case,
    get_popular_products_use_case,
    get_product_use_case,
    get_profitable_products_use_case,
    get_recent_products_use_case,
    get_remove_from_watchlist_use_case,
    get_total_sold_use_case,
)
from shopapp.interfaces.shop.schemas import (
    ErrorResponse,
    FrequentProductResponse,
    OrderDetailResponse,
    OrderResponse,
    PlaceOrderRequest,
    PopularProductResponse,
    ProductAdminView,
    ProductCreateRequest,
    ProductPatchRequest,
    ProductPublicView,
    ProfitableProductResponse,
    RecentProductResponse,
)
from shopapp.interfaces.shop.security import (
    get_current_principal,
    require_admin,
    require_user,
)

router = APIRouter(tags=["shop"])

ProductView = Union[ProductAdminView, ProductPublicView]


def _product_view(product: Product, principal: Principal) -> ProductView:
    """Pick the serializer for the caller's role."""
    if principal.is_admin:
        return ProductAdminView.from_entity(product)
    return ProductPublicView.from_entity(product)


# ------------------------------------------------------------------
# Catalog
# ------------------------------------------------------------------


@router.get(
    "/products/all",
    response_model=None,
    summary="List products",
    description="Admins see every product; customers see products with stock.",
)
def list_products(
    principal: Principal = Depends(get_current_principal),
    use_case: ListProductsUseCase = Depends(get_list_products_use_case),
) -> list[ProductView]:
    products = use_case.execute(principal)
    return [_product_view(p, principal) for p in products]


@router.get(
    "/products/frequent/{n}",
    response_model=list[FrequentProductResponse],
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Products the caller buys most",
)
def frequent_products(
    n: int,
    principal: Principal = Depends(require_user),
    use_case: GetFrequentProductsUseCase = Depends(get_frequent_products_use_case),
) -> list[FrequentProductResponse]:
    rows = use_case.execute(ReportQuery(limit=n, user_id=principal.user_id))
    return [
        FrequentProductResponse(
            product=ProductPublicView.from_entity(row.product),
            total_bought=row.quantity,
        )
        for row in rows
    ]


@router.get(
    "/products/recent/{n}",
    response_model=list[RecentProductResponse],
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Products the caller bought most recently",
)
def recent_products(
    n: int,
    principal: Principal = Depends(require_user),
    use_case: GetRecentProductsUseCase = Depends(get_recent_products_use_case),
) -> list[RecentProductResponse]:
    rows = use_case.execute(ReportQuery(limit=n, user_id=principal.user_id))
    return [
        RecentProductResponse(
            product=ProductPublicView.from_entity(row.product),
            last_purchased_at=row.last_purchased_at,
        )
        for row in rows
    ]


@router.get(
    "/products/popular/{n}",
    response_model=list[PopularProductResponse],
    responses={400: {"model": ErrorResponse}},
    summary="Best-selling products",
)
def popular_products(
    n: int,
    _admin: Principal = Depends(require_admin),
    use_case: GetPopularProductsUseCase = Depends(get_popular_products_use_case),
) -> list[PopularProductResponse]:
    rows = use_case.execute(ReportQuery(limit=n))
    return [
        PopularProductResponse(
            product=ProductAdminView.from_entity(row.product),
            total_sold=row.quantity,
        )
        for row in rows
    ]


@router.get(
    "/products/profit/{n}",
    response_model=list[ProfitableProductResponse],
    responses={400: {"model": ErrorResponse}},
    summary="Most profitable products",
    description="Profit is computed from the prices captured on each order line.",
)
def profitable_products(
    n: int,
    _admin: Principal = Depends(require_admin),
    use_case: GetProfitableProductsUseCase = Depends(get_profitable_products_use_case),
) -> list[ProfitableProductResponse]:
    rows = use_case.execute(ReportQuery(limit=n))
    return [
        ProfitableProductResponse(
            product=ProductAdminView.from_entity(row.product),
            total_profit=row.profit,
        )
        for row in rows
    ]


@router.get(
    "/products/sold/total",
    response_model=int,
    summary="Total units sold",
)
def total_sold(
    _admin: Principal = Depends(require_admin),
    use_case: GetTotalSoldUseCase = Depends(get_total_sold_use_case),
) -> int:
    return use_case.execute()


@router.get(
    "/products/{product_id}",
    response_model=None,
    responses={404: {"model": ErrorResponse}},
    summary="Get a product",
)
def get_product(
    product_id: int,
    principal: Principal = Depends(get_current_principal),
    use_case: GetProductUseCase = Depends(get_product_use_case),
) -> ProductView:
    return _product_view(use_case.execute(product_id, principal), principal)


@router.post(
    "/products",
    response_model=ProductAdminView,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
    summary="Add a product",
)
def add_product(
    payload: ProductCreateRequest,
    _admin: Principal = Depends(require_admin),
    use_case: AddProductUseCase = Depends(get_add_product_use_case),
) -> ProductAdminView:
    product = use_case.execute(
        AddProductCommand(
            name=payload.name,
            description=payload.description,
            wholesale_price=payload.wholesale_price,
            retail_price=payload.retail_price,
            quantity=payload.quantity,
        )
    )
    return ProductAdminView.from_entity(product)


@router.patch(
    "/products/{product_id}",
    response_model=ProductAdminView,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Partially update a product",
    description="Only the fields present in the body change.",
)
def patch_product(
    product_id: int,
    payload: ProductPatchRequest,
    _admin: Principal = Depends(require_admin),
    use_case: PatchProductUseCase = Depends(get_patch_product_use_case),
) -> ProductAdminView:
    product = use_case.execute(
        PatchProductCommand(product_id=product_id, changes=payload.changes())
    )
    return ProductAdminView.from_entity(product)


# ------------------------------------------------------------------
# Orders
# ------------------------------------------------------------------


@router.post(
    "/orders",
    response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
    summary="Place an order",
    description="Reserves stock for every line atomically; all lines succeed or none do.",
)
def place_order(
    payload: PlaceOrderRequest,
    principal: Principal = Depends(require_user),
    use_case: PlaceOrderUseCase = Depends(get_place_order_use_case),
) -> OrderResponse:
    order = use_case.execute(
        PlaceOrderCommand(
            principal=principal,
            lines=tuple(
                CartLine(product_id=line.product_id, quantity=line.quantity)
                for line in payload.items
            ),
        )
    )
    return OrderResponse.from_entity(order)


@router.get(
    "/orders/all",
    response_model=list[OrderDetailResponse],
    summary="List orders",
    description="Admins see every order; customers see their own, newest first.",
)
def list_orders(
    principal: Principal = Depends(get_current_principal),
    use_case: ListOrdersUseCase = Depends(get_list_orders_use_case),
) -> list[OrderDetailResponse]:
    return [OrderDetailResponse.from_entity(o) for o in use_case.execute(principal)]


@router.get(
    "/orders/{order_id}",
    response_model=OrderDetailResponse,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Get an order with its lines",
)
def get_order(
    order_id: int,
    principal: Principal = Depends(get_current_principal),
    use_case: GetOrderDetailUseCase = Depends(get_order_detail_use_case),
) -> OrderDetailResponse:
    return OrderDetailResponse.from_entity(use_case.execute(order_id, principal))


@router.patch(
    "/orders/{order_id}/cancel",
    response_model=OrderDetailResponse,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Cancel an order",
    description="Owner or admin. Restores the stock of every line.",
)
def cancel_order(
    order_id: int,
    principal: Principal = Depends(require_user),
    use_case: CancelOrderUseCase = Depends(get_cancel_order_use_case),
) -> OrderDetailResponse:
    return OrderDetailResponse.from_entity(use_case.execute(order_id, principal))


@router.patch(
    "/orders/{order_id}/complete",
    response_model=OrderResponse,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Complete an order",
)
def complete_order(
    order_id: int,
    principal: Principal = Depends(require_admin),
    use_case: CompleteOrderUseCase = Depends(get_complete_order_use_case),
) -> OrderResponse:
    return OrderResponse.from_entity(use_case.execute(order_id, principal))


# ------------------------------------------------------------------
# Watchlist
# ------------------------------------------------------------------


@router.get(
    "/watchlist",
    response_model=None,
    summary="List watched products that are in stock",
)
def list_watchlist(
    principal: Principal = Depends(require_user),
    use_case: ListWatchlistUseCase = Depends(get_list_watchlist_use_case),
) -> list[ProductView]:
    return [_product_view(p, principal) for p in use_case.execute(principal.user_id)]


@router.post(
    "/watchlist/{product_id}",
    status_code=status.HTTP_201_CREATED,
    response_class=Response,
    responses={404: {"model": ErrorResponse}},
    summary="Watch a product",
)
def add_to_watchlist(
    product_id: int,
    principal: Principal = Depends(require_user),
    use_case: AddToWatchlistUseCase = Depends(get_add_to_watchlist_use_case),
) -> Response:
    use_case.execute(principal.user_id, product_id)
    return Response(status_code=status.HTTP_201_CREATED)


@router.delete(
    "/watchlist/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Stop watching a product",
)
def remove_from_watchlist(
    product_id: int,
    principal: Principal = Depends(require_user),
    use_case: RemoveFromWatchlistUseCase = Depends(get_remove_from_watchlist_use_case),
) -> Response:
    use_case.execute(principal.user_id, product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

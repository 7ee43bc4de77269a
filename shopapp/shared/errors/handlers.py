"""
Centralized error handlers for FastAPI.

Maps domain-specific errors to HTTP responses.
No stack traces or internal details are exposed to clients.
Every error response has the shape {status, error, message, path}.
"""

import logging
import uuid
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from shopapp.domain.shop.errors import (
    AuthenticationError,
    ConflictError,
    ForbiddenError,
    InsufficientStockError,
    ResourceNotFoundError,
    ShopDomainError,
    ValidationError,
)
from shopapp.shared.security.headers import (
    REQUEST_ID_HEADER,
    REQUEST_ID_PATTERN,
    SECURE_HEADERS,
)

logger = logging.getLogger(__name__)


def error_response(request: Request, status_code: int, message: str) -> JSONResponse:
    """Build a consistent JSON error response."""
    try:
        reason = HTTPStatus(status_code).phrase
    except ValueError:
        reason = "Error"
    body = {
        "status": int(status_code),
        "error": reason,
        "message": message,
        "path": request.url.path,
    }
    headers = None
    if status_code == HTTPStatus.UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(status_code=status_code, content=body, headers=headers)


def _request_id(request: Request) -> str:
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        return request_id
    incoming = request.headers.get(REQUEST_ID_HEADER, "")
    return incoming if REQUEST_ID_PATTERN.match(incoming) else uuid.uuid4().hex


def _describe_validation(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        location = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{location}: {err.get('msg')}" if location else err.get("msg"))
    return "; ".join(parts) or "Invalid request"


def register_error_handlers(app: FastAPI) -> None:
    """Register all domain error handlers on the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation(request: Request, exc: ValidationError) -> JSONResponse:
        """Handle rejected input or entity state."""
        logger.warning("Validation failed on %s: %s", exc.field, exc.reason)
        return error_response(request, HTTPStatus.BAD_REQUEST, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle malformed request bodies, paths and queries."""
        message = _describe_validation(exc)
        logger.warning("Request validation failed: %s", message)
        return error_response(request, HTTPStatus.BAD_REQUEST, message)

    @app.exception_handler(AuthenticationError)
    async def handle_authentication(
        request: Request, exc: AuthenticationError
    ) -> JSONResponse:
        """Handle missing, invalid or expired credentials."""
        logger.info("Authentication failed: %s", exc.message)
        return error_response(request, HTTPStatus.UNAUTHORIZED, exc.message)

    @app.exception_handler(ForbiddenError)
    async def handle_forbidden(request: Request, exc: ForbiddenError) -> JSONResponse:
        """Handle role, ownership and terminal-state refusals."""
        logger.warning("Forbidden: %s", exc.message)
        return error_response(request, HTTPStatus.FORBIDDEN, exc.message)

    @app.exception_handler(ResourceNotFoundError)
    async def handle_not_found(
        request: Request, exc: ResourceNotFoundError
    ) -> JSONResponse:
        """Handle unknown ids."""
        logger.warning("%s not found: %s", exc.resource, exc.resource_id)
        return error_response(request, HTTPStatus.NOT_FOUND, exc.message)

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError) -> JSONResponse:
        """Handle duplicate usernames and emails."""
        logger.warning("Conflict: %s", exc.message)
        return error_response(request, HTTPStatus.CONFLICT, exc.message)

    @app.exception_handler(InsufficientStockError)
    async def handle_insufficient_stock(
        request: Request, exc: InsufficientStockError
    ) -> JSONResponse:
        """Handle placements that cannot be fully served."""
        logger.warning(
            "Insufficient stock: product=%s available=%d requested=%d",
            exc.product_id,
            exc.available,
            exc.requested,
        )
        return error_response(request, HTTPStatus.CONFLICT, exc.message)

    @app.exception_handler(ShopDomainError)
    async def handle_shop_domain(request: Request, exc: ShopDomainError) -> JSONResponse:
        """Catch-all for unhandled shop domain errors."""
        request_id = _request_id(request)
        logger.error("Unhandled shop domain error [%s]: %s", request_id, exc.message)
        return error_response(
            request,
            HTTPStatus.INTERNAL_SERVER_ERROR,
            f"Internal server error (ref {request_id})",
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """Keep framework statuses (unknown route, wrong method) in our body shape."""
        return error_response(request, exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all for unexpected errors. Never exposes internals."""
        request_id = _request_id(request)
        logger.exception("Unexpected error [%s]: %s", request_id, type(exc).__name__)
        response = error_response(
            request,
            HTTPStatus.INTERNAL_SERVER_ERROR,
            f"Internal server error (ref {request_id})",
        )
        # Served outside the middleware stack, so its headers are set here.
        response.headers.update(SECURE_HEADERS)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response

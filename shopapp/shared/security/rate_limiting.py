"""
Rate limiting configuration and setup.

Uses slowapi to enforce per-endpoint rate limits.
Protects the public credential endpoints against brute force.
"""

from http import HTTPStatus

from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.requests import Request
from starlette.responses import JSONResponse

from shopapp.core.config import settings
from shopapp.shared.errors.handlers import error_response

AUTH_RATE_LIMIT = settings.rate_limit_auth

limiter = Limiter(key_func=get_remote_address)


async def rate_limit_exceeded_handler(
    request: Request, exc: RateLimitExceeded
) -> JSONResponse:
    """Handle rate limit exceeded errors with the standard error body.

    Args:
        request: The incoming HTTP request.
        exc: The rate limit exceeded exception.

    Returns:
        A 429 JSON response.
    """
    return error_response(
        request, HTTPStatus.TOO_MANY_REQUESTS, f"Rate limit exceeded: {exc.detail}"
    )

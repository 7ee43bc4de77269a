"""
Principal resolution and role gates.

Every shop route except signup and login depends on
get_current_principal. Role predicates are enforced here; ownership
is checked by the use cases once the record is loaded.
"""

from collections.abc import Callable
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from shopapp.application.shop.resolve_principal import ResolvePrincipalUseCase
from shopapp.domain.shop.entities import ROLE_ADMIN, ROLE_USER, Principal
from shopapp.domain.shop.errors import AuthenticationError, ForbiddenError
from shopapp.interfaces.shop.dependencies import get_resolve_principal_use_case

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    use_case: ResolvePrincipalUseCase = Depends(get_resolve_principal_use_case),
) -> Principal:
    """Resolve the bearer token into the calling principal.

    Raises:
        AuthenticationError: If the header is missing or the token is
            invalid, expired or names an unknown user.
    """
    if credentials is None:
        raise AuthenticationError(
            "Full authentication is required to access this resource"
        )
    return use_case.execute(credentials.credentials)


def require_role(role: str) -> Callable[..., Principal]:
    """Build a dependency that admits only principals holding ``role``."""

    def check_role(principal: Principal = Depends(get_current_principal)) -> Principal:
        if not principal.has_role(role):
            raise ForbiddenError("Access denied")
        return principal

    return check_role


require_user = require_role(ROLE_USER)
require_admin = require_role(ROLE_ADMIN)

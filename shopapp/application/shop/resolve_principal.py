"""
Use case: Resolve a bearer token into a principal.

Input: raw token string
Output: Principal
Side effects: None (read-only).
Failure cases: AuthenticationError.
"""

from shopapp.application.shop.dtos import UnitOfWorkFactory
from shopapp.domain.shop.entities import Principal
from shopapp.domain.shop.errors import AuthenticationError
from shopapp.domain.shop.ports import TokenProvider


class ResolvePrincipalUseCase:
    """Verifies the token, then loads the user named by its subject.

    Roles are read from the stored user on every request, so revoking
    the admin flag takes effect without reissuing tokens.
    """

    def __init__(self, uow_factory: UnitOfWorkFactory, tokens: TokenProvider) -> None:
        self._uow_factory = uow_factory
        self._tokens = tokens

    def execute(self, token: str) -> Principal:
        username = self._tokens.subject_of(token)
        with self._uow_factory() as uow:
            user = uow.users.get_by_username(username)
        if user is None:
            raise AuthenticationError("Token subject no longer exists")
        return Principal.for_user(user)

"""
Use case: Exchange credentials for an access token.

Input: LoginCommand (username, password)
Output: AccessTokenResult
Side effects: None.
Failure cases: AuthenticationError.
"""

import logging

from shopapp.application.shop.dtos import (
    AccessTokenResult,
    LoginCommand,
    UnitOfWorkFactory,
)
from shopapp.domain.shop.errors import AuthenticationError
from shopapp.domain.shop.ports import PasswordHasher, TokenProvider

logger = logging.getLogger(__name__)


class LoginUseCase:
    """Verifies a password hash and issues a JWT for the username."""

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        hasher: PasswordHasher,
        tokens: TokenProvider,
    ) -> None:
        self._uow_factory = uow_factory
        self._hasher = hasher
        self._tokens = tokens

    def execute(self, command: LoginCommand) -> AccessTokenResult:
        with self._uow_factory() as uow:
            user = uow.users.get_by_username(command.username)

        # Same error for unknown user and wrong password.
        if user is None or not self._hasher.verify(command.password, user.password_hash):
            logger.info("Failed login attempt")
            raise AuthenticationError("Bad credentials")

        logger.info("User id=%s logged in", user.id)
        return AccessTokenResult(access_token=self._tokens.issue(user.username))

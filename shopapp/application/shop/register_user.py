"""
Use case: Register a customer account.

Input: RegisterUserCommand (username, email, password)
Output: User
Side effects: Inserts one user row with a salted password hash.
Failure cases: ValidationError, UniqueViolationError.
"""

import logging

from shopapp.application.shop.dtos import RegisterUserCommand, UnitOfWorkFactory
from shopapp.domain.shop.entities import User
from shopapp.domain.shop.errors import UniqueViolationError, ValidationError
from shopapp.domain.shop.ports import PasswordHasher

logger = logging.getLogger(__name__)


class RegisterUserUseCase:
    """Creates a non-admin user.

    The admin flag is never taken from the caller; operators are created
    through the command-line tooling instead.
    """

    def __init__(
        self, uow_factory: UnitOfWorkFactory, hasher: PasswordHasher
    ) -> None:
        self._uow_factory = uow_factory
        self._hasher = hasher

    def execute(self, command: RegisterUserCommand, is_admin: bool = False) -> User:
        """Run the registration use case.

        Args:
            command: The account details.
            is_admin: Grant the admin role. Only operator tooling passes True.

        Returns:
            The persisted user.

        Raises:
            ValidationError: If a required field is blank.
            UniqueViolationError: If the username or email is taken.
        """
        for name in ("username", "email", "password"):
            if not (getattr(command, name) or "").strip():
                raise ValidationError(name, "must not be blank")

        with self._uow_factory() as uow:
            if uow.users.get_by_username(command.username) is not None:
                raise UniqueViolationError("username", command.username)
            if uow.users.get_by_email(command.email) is not None:
                raise UniqueViolationError("email", command.email)

            user = uow.users.add(
                User(
                    id=None,
                    username=command.username,
                    email=command.email,
                    password_hash=self._hasher.hash(command.password),
                    is_admin=is_admin,
                )
            )

        logger.info("Registered user id=%s admin=%s", user.id, user.is_admin)
        return user

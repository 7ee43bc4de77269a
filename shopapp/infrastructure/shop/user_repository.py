"""
Adapter: User persistence.

Implements UserRepository port over a connection owned by a unit of work.
"""

import logging
from typing import Optional

from sqlalchemy import insert, select
from sqlalchemy.engine import Connection, Row
from sqlalchemy.exc import IntegrityError

from shopapp.domain.shop.entities import User
from shopapp.domain.shop.errors import UniqueViolationError
from shopapp.domain.shop.ports import UserRepository
from shopapp.infrastructure.shop.tables import user_table

logger = logging.getLogger(__name__)


def _to_user(row: Row) -> User:
    return User(
        id=row.id,
        username=row.username,
        email=row.email,
        password_hash=row.password_hash,
        is_admin=bool(row.is_admin),
    )


class UserRepositoryAdapter(UserRepository):
    """SQL adapter for the user table."""

    def __init__(self, conn: Connection) -> None:
        self._conn = conn

    def _find_one(self, *criteria) -> Optional[User]:
        row = self._conn.execute(select(user_table).where(*criteria)).first()
        return _to_user(row) if row else None

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._find_one(user_table.c.id == user_id)

    def get_by_username(self, username: str) -> Optional[User]:
        return self._find_one(user_table.c.username == username)

    def get_by_email(self, email: str) -> Optional[User]:
        return self._find_one(user_table.c.email == email)

    def add(self, user: User) -> User:
        """Insert a user and return it with its assigned id.

        A unique-key race that slips past the caller's lookups surfaces
        here as an IntegrityError and is reported as UniqueViolationError.
        """
        try:
            result = self._conn.execute(
                insert(user_table).values(
                    username=user.username,
                    email=user.email,
                    password_hash=user.password_hash,
                    is_admin=user.is_admin,
                )
            )
        except IntegrityError as exc:
            detail = str(exc.orig).lower()
            if "email" in detail:
                raise UniqueViolationError("email", user.email) from exc
            raise UniqueViolationError("username", user.username) from exc

        user_id = result.inserted_primary_key[0]
        logger.debug("Inserted user id=%s", user_id)
        return User(
            id=user_id,
            username=user.username,
            email=user.email,
            password_hash=user.password_hash,
            is_admin=user.is_admin,
        )

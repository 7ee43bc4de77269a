"""
Adapter: Salted password hashing.

Implements PasswordHasher port with passlib. Each hash embeds its own
random salt and round count, so stored values stay verifiable when the
default scheme settings change.
"""

from passlib.context import CryptContext

from shopapp.domain.shop.ports import PasswordHasher


class PasslibPasswordHasher(PasswordHasher):
    """PBKDF2-SHA256 hashing through a passlib CryptContext."""

    def __init__(self, context: CryptContext | None = None) -> None:
        self._context = context or CryptContext(
            schemes=["pbkdf2_sha256"], deprecated="auto"
        )

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return self._context.verify(password, password_hash)
        except ValueError:
            # Stored value is not a hash this context recognizes.
            return False

"""
Adapter: JWT issue and verification.

Implements TokenProvider port with python-jose. Tokens are compact JWS
(header.claims.signature, base64url) signed with HMAC-SHA-256; the subject
claim carries the username.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from shopapp.domain.shop.errors import AuthenticationError
from shopapp.domain.shop.ports import TokenProvider

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"


class JoseTokenProvider(TokenProvider):
    """HS256 tokens with subject, issued-at and expiry claims."""

    def __init__(self, key: bytes, expiration_minutes: int) -> None:
        self._key = key
        self._lifetime = timedelta(minutes=expiration_minutes)

    def issue(self, subject: str, now: Optional[datetime] = None) -> str:
        issued_at = now or datetime.now(timezone.utc)
        claims = {
            "sub": subject,
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + self._lifetime).timestamp()),
        }
        return jwt.encode(claims, self._key, algorithm=JWT_ALGORITHM)

    def subject_of(self, token: str) -> str:
        try:
            claims = jwt.decode(
                token,
                self._key,
                algorithms=[JWT_ALGORITHM],
                options={"require_exp": True, "require_sub": True},
            )
        except JWTError as exc:
            logger.info("Rejected bearer token: %s", type(exc).__name__)
            raise AuthenticationError("Invalid or expired token") from exc

        subject = claims.get("sub")
        if not isinstance(subject, str) or not subject:
            raise AuthenticationError("Token has no subject")
        return subject

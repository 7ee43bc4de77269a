"""
Application configuration.

Loads settings from environment variables and .env file.
All configuration is centralized here.
"""

import base64
import binascii
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL, make_url

MIN_JWT_KEY_BYTES = 32


class Settings(BaseSettings):
    """Application settings loaded from environment.

    Attributes:
        project_name: Display name for the API.
        version: Current API version string.
        debug: Enable debug mode. Must be False in production.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        api_prefix: Optional prefix mounted in front of every shop route.
        rate_limit_auth: Rate limit for the public signup/login endpoints.

        db_url: SQLAlchemy database URL.
        db_driver: DBAPI driver overriding the one in ``db_url``.
        db_username: User name injected into the URL when set.
        db_password: Password injected into the URL when set.
        db_dialect: Backend name overriding the one in ``db_url``.
        db_show_sql: Echo every statement through the SQLAlchemy logger.
        db_create_schema: Create missing tables on startup.

        jwt_secret: Base64-encoded HMAC-SHA-256 key (at least 256 bits).
        jwt_expiration_minutes: Lifetime of issued access tokens.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    project_name: str = "Shop API"
    version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    api_prefix: str = ""
    rate_limit_auth: str = "20/minute"

    db_url: str = "postgresql+psycopg2://localhost:5432/shop"
    db_driver: Optional[str] = None
    db_username: Optional[str] = None
    db_password: Optional[str] = None
    db_dialect: Optional[str] = None
    db_show_sql: bool = False
    db_create_schema: bool = False

    jwt_secret: str
    jwt_expiration_minutes: int = 60 * 24

    @field_validator("jwt_secret")
    @classmethod
    def _check_jwt_secret(cls, value: str) -> str:
        try:
            key = base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValueError("jwt_secret must be base64-encoded") from exc
        if len(key) < MIN_JWT_KEY_BYTES:
            raise ValueError(
                f"jwt_secret must decode to at least {MIN_JWT_KEY_BYTES} bytes"
            )
        return value

    @property
    def jwt_key(self) -> bytes:
        """Return the raw HMAC key bytes."""
        return base64.b64decode(self.jwt_secret)

    def get_database_url(self) -> URL:
        """Return the effective database URL.

        ``db_dialect`` and ``db_driver`` replace the matching halves of the
        URL's ``backend+driver`` name; credentials replace the URL's own.
        """
        url = make_url(self.db_url)
        backend = url.get_backend_name()
        driver = url.drivername.partition("+")[2]
        if self.db_dialect and self.db_dialect != backend:
            backend, driver = self.db_dialect, ""
        driver = self.db_driver or driver
        drivername = f"{backend}+{driver}" if driver else backend
        url = url.set(drivername=drivername)
        if self.db_username is not None:
            url = url.set(username=self.db_username)
        if self.db_password is not None:
            url = url.set(password=self.db_password)
        return url


settings = Settings()

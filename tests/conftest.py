"""
Shared fixtures for the shop test suite.

Settings are read at import time, so the signing key is placed in the
environment before anything from shopapp is imported. Every test gets a
fresh in-memory SQLite database shared through a StaticPool.
"""

import base64
import os
from decimal import Decimal
from functools import partial

os.environ.setdefault("JWT_SECRET", base64.b64encode(b"k" * 32).decode("ascii"))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from shopapp.application.shop.dtos import AddProductCommand, RegisterUserCommand
from shopapp.application.shop.manage_catalog import AddProductUseCase
from shopapp.application.shop.register_user import RegisterUserUseCase
from shopapp.domain.shop.entities import Principal
from shopapp.infrastructure.shop.database import create_schema
from shopapp.infrastructure.shop.password_hasher import PasslibPasswordHasher
from shopapp.infrastructure.shop.unit_of_work import SqlAlchemyUnitOfWork
from shopapp.interfaces.shop.dependencies import get_engine
from shopapp.main import app
from shopapp.shared.security.rate_limiting import limiter

limiter.enabled = False


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def uow_factory(engine):
    return partial(SqlAlchemyUnitOfWork, engine)


@pytest.fixture
def hasher():
    return PasslibPasswordHasher()


@pytest.fixture
def make_user(uow_factory, hasher):
    """Register a user directly through the use case; returns its principal."""

    def _make(username: str, is_admin: bool = False, password: str = "secret") -> Principal:
        user = RegisterUserUseCase(uow_factory, hasher).execute(
            RegisterUserCommand(
                username=username, email=f"{username}@example.com", password=password
            ),
            is_admin=is_admin,
        )
        return Principal.for_user(user)

    return _make


@pytest.fixture
def make_product(uow_factory):
    def _make(
        name: str = "Widget",
        wholesale: str = "4.00",
        retail: str = "10.00",
        quantity: int = 5,
    ):
        return AddProductUseCase(uow_factory).execute(
            AddProductCommand(
                name=name,
                wholesale_price=Decimal(wholesale),
                retail_price=Decimal(retail),
                quantity=quantity,
            )
        )

    return _make


@pytest.fixture
def client(engine):
    app.dependency_overrides[get_engine] = lambda: engine
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def login(client):
    """Log in over HTTP and return ready-to-use Authorization headers."""

    def _login(username: str, password: str = "secret") -> dict[str, str]:
        response = client.post("/login", json={"username": username, "password": password})
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['accessToken']}"}

    return _login

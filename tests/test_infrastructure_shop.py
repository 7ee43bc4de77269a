"""
Tests for the shop infrastructure adapters.

Repositories run against in-memory SQLite through the unit of work.
Hashing and token adapters are exercised directly.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from shopapp.core.config import Settings
from shopapp.domain.shop.entities import Order, OrderItem, OrderStatus, Product, User
from shopapp.domain.shop.errors import AuthenticationError, UniqueViolationError
from shopapp.infrastructure.shop.token_provider import JoseTokenProvider

KEY = b"0123456789abcdef0123456789abcdef"
T0 = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


def _new_product(quantity: int = 5) -> Product:
    return Product(
        id=None,
        name="Widget",
        description="A widget",
        wholesale_price=Decimal("4.00"),
        retail_price=Decimal("10.00"),
        quantity=quantity,
    )


def _new_user(name: str) -> User:
    return User(id=None, username=name, email=f"{name}@x", password_hash="h")


def _place(uow, user_id: int, product: Product, quantity: int, placed_at=T0) -> Order:
    return uow.orders.add(
        Order(id=None, user_id=user_id, placed_at=placed_at, status=OrderStatus.PROCESSING),
        [
            OrderItem(
                id=None,
                order_id=None,
                product_id=product.id,
                quantity=quantity,
                retail_price_at_order=product.retail_price,
                wholesale_price_at_order=product.wholesale_price,
            )
        ],
    )


class TestUnitOfWork:
    """Tests for commit and rollback of a scope."""

    def test_clean_exit_commits(self, uow_factory) -> None:
        with uow_factory() as uow:
            product = uow.products.add(_new_product())
        with uow_factory() as uow:
            assert uow.products.get(product.id) == product

    def test_exception_rolls_back(self, uow_factory) -> None:
        """Nothing written inside a failed scope is visible afterwards."""
        with pytest.raises(RuntimeError):
            with uow_factory() as uow:
                uow.products.add(_new_product())
                raise RuntimeError("boom")
        with uow_factory() as uow:
            assert uow.products.list_all() == []


class TestUserRepository:
    """Tests for the user adapter."""

    def test_lookup_by_username_and_email(self, uow_factory) -> None:
        with uow_factory() as uow:
            user = uow.users.add(_new_user("alice"))
        with uow_factory() as uow:
            assert uow.users.get_by_username("alice").id == user.id
            assert uow.users.get_by_email("alice@x").id == user.id
            assert uow.users.get_by_id(user.id + 100) is None

    def test_duplicate_username_raises_unique_violation(self, uow_factory) -> None:
        with uow_factory() as uow:
            uow.users.add(_new_user("alice"))
        with pytest.raises(UniqueViolationError):
            with uow_factory() as uow:
                uow.users.add(
                    User(id=None, username="alice", email="other@x", password_hash="h")
                )


class TestProductRepository:
    """Tests for the product adapter and its stock statements."""

    def test_public_reads_hide_out_of_stock(self, uow_factory) -> None:
        with uow_factory() as uow:
            empty = uow.products.add(_new_product(quantity=1).with_changes(name="Empty"))
            full = uow.products.add(_new_product())
            uow.products.save(empty.with_changes(quantity=0))
        with uow_factory() as uow:
            assert uow.products.get(empty.id, for_admin=False) is None
            assert uow.products.get(empty.id, for_admin=True).quantity == 0
            assert [p.id for p in uow.products.list_all(for_admin=False)] == [full.id]
            assert len(uow.products.list_all(for_admin=True)) == 2

    def test_conditional_decrement(self, uow_factory) -> None:
        """Decrement succeeds only while enough stock remains."""
        with uow_factory() as uow:
            product = uow.products.add(_new_product(quantity=3))
            assert uow.products.decrement_stock(product.id, 2)
            assert not uow.products.decrement_stock(product.id, 2)
            uow.products.increment_stock(product.id, 4)
        with uow_factory() as uow:
            assert uow.products.get(product.id).quantity == 5


class TestOrderRepository:
    """Tests for the order adapter."""

    def test_detail_carries_snapshot_prices_and_names(self, uow_factory) -> None:
        with uow_factory() as uow:
            user = uow.users.add(_new_user("alice"))
            product = uow.products.add(_new_product())
            order = _place(uow, user.id, product, 3)
            uow.products.save(product.with_changes(retail_price=Decimal("20.00")))
        with uow_factory() as uow:
            detail = uow.orders.get_with_items(order.id)
        assert detail.placed_by == "alice"
        assert detail.status is OrderStatus.PROCESSING
        [item] = detail.items
        assert item.product_name == "Widget"
        assert item.quantity == 3
        assert item.retail_price_at_order == Decimal("10.00")
        assert item.wholesale_price_at_order == Decimal("4.00")

    def test_listing_is_newest_first_and_scoped(self, uow_factory) -> None:
        with uow_factory() as uow:
            alice = uow.users.add(_new_user("alice"))
            bob = uow.users.add(_new_user("bob"))
            product = uow.products.add(_new_product())
            older = _place(uow, alice.id, product, 1, placed_at=T0)
            newer = _place(uow, alice.id, product, 1, placed_at=T0 + timedelta(hours=1))
            bobs = _place(uow, bob.id, product, 1)
        with uow_factory() as uow:
            mine = uow.orders.list_with_items(user_id=alice.id)
            everyone = uow.orders.list_with_items()
        assert [o.id for o in mine] == [newer.id, older.id]
        assert {o.id for o in everyone} == {older.id, newer.id, bobs.id}

    def test_placed_at_reads_back_in_utc(self, uow_factory) -> None:
        """Timestamps come back zoned in UTC, whatever zone they were written in."""
        paris = timezone(timedelta(hours=2))
        with uow_factory() as uow:
            user = uow.users.add(_new_user("alice"))
            product = uow.products.add(_new_product())
            order = _place(uow, user.id, product, 1, placed_at=T0.astimezone(paris))
        with uow_factory() as uow:
            header = uow.orders.get(order.id)
            [detail] = uow.orders.list_with_items(user_id=user.id)
            [recent] = uow.reports.most_recent_for_user(
                user.id, 10, OrderStatus.CANCELED
            )
        for value in (header.placed_at, detail.placed_at, recent.last_purchased_at):
            assert value == T0
            assert value.utcoffset() == timedelta(0)

    def test_status_update_is_conditional(self, uow_factory) -> None:
        """The second transition from PROCESSING finds nothing to update."""
        with uow_factory() as uow:
            user = uow.users.add(_new_user("alice"))
            order = _place(uow, user.id, uow.products.add(_new_product()), 1)
            assert uow.orders.update_status(
                order.id, OrderStatus.PROCESSING, OrderStatus.CANCELED
            )
            assert not uow.orders.update_status(
                order.id, OrderStatus.PROCESSING, OrderStatus.COMPLETED
            )
            assert uow.orders.get(order.id).status is OrderStatus.CANCELED


class TestWatchlistRepository:
    """Tests for the watchlist adapter."""

    def test_add_list_remove(self, uow_factory) -> None:
        with uow_factory() as uow:
            user = uow.users.add(_new_user("alice"))
            product = uow.products.add(_new_product())
            uow.watchlist.add(user.id, product.id)
            assert uow.watchlist.exists(user.id, product.id)
            assert [p.id for p in uow.watchlist.list_in_stock_products(user.id)] == [
                product.id
            ]
            assert uow.watchlist.remove(user.id, product.id) == 1
            assert uow.watchlist.remove(user.id, product.id) == 0
            assert uow.watchlist.list_in_stock_products(user.id) == []

    def test_duplicate_add_keeps_one_entry(self, uow_factory) -> None:
        """A second insert of the same pair is discarded, not raised."""
        with uow_factory() as uow:
            user = uow.users.add(_new_user("alice"))
            product = uow.products.add(_new_product())
            assert uow.watchlist.add(user.id, product.id) is True
            assert uow.watchlist.add(user.id, product.id) is False
        with uow_factory() as uow:
            assert uow.watchlist.remove(user.id, product.id) == 1


class TestReportRepository:
    """Tests for aggregation queries."""

    def test_canceled_orders_are_excluded(self, uow_factory) -> None:
        with uow_factory() as uow:
            user = uow.users.add(_new_user("alice"))
            product = uow.products.add(_new_product(quantity=10))
            _place(uow, user.id, product, 2)
            canceled = _place(uow, user.id, product, 5)
            uow.orders.update_status(
                canceled.id, OrderStatus.PROCESSING, OrderStatus.CANCELED
            )
        with uow_factory() as uow:
            assert uow.reports.total_sold(OrderStatus.CANCELED) == 2
            [row] = uow.reports.most_popular(10, OrderStatus.CANCELED)
            assert row.quantity == 2
            [profit] = uow.reports.most_profitable(10, OrderStatus.CANCELED)
            assert profit.profit == Decimal("12")

    def test_ties_break_by_product_id(self, uow_factory) -> None:
        with uow_factory() as uow:
            user = uow.users.add(_new_user("alice"))
            first = uow.products.add(_new_product())
            second = uow.products.add(_new_product())
            _place(uow, user.id, second, 2)
            _place(uow, user.id, first, 2)
        with uow_factory() as uow:
            rows = uow.reports.most_frequent_for_user(user.id, 10, OrderStatus.CANCELED)
        assert [r.product.id for r in rows] == [first.id, second.id]

    def test_total_sold_is_zero_without_orders(self, uow_factory) -> None:
        with uow_factory() as uow:
            assert uow.reports.total_sold(OrderStatus.CANCELED) == 0


class TestPasslibPasswordHasher:
    """Tests for salted hashing."""

    def test_hash_is_salted_and_verifiable(self, hasher) -> None:
        first = hasher.hash("p")
        second = hasher.hash("p")
        assert first != second
        assert first != "p"
        assert hasher.verify("p", first)
        assert not hasher.verify("wrong", first)

    def test_unknown_hash_format_does_not_verify(self, hasher) -> None:
        assert not hasher.verify("p", "plain-text")


class TestJoseTokenProvider:
    """Tests for JWT issue and verification."""

    def test_round_trip_subject(self) -> None:
        tokens = JoseTokenProvider(KEY, expiration_minutes=5)
        token = tokens.issue("alice")
        assert token.count(".") == 2
        assert tokens.subject_of(token) == "alice"

    def test_expired_token_rejected(self) -> None:
        tokens = JoseTokenProvider(KEY, expiration_minutes=5)
        token = tokens.issue("alice", now=datetime.now(timezone.utc) - timedelta(hours=1))
        with pytest.raises(AuthenticationError):
            tokens.subject_of(token)

    def test_foreign_signature_rejected(self) -> None:
        token = JoseTokenProvider(b"x" * 32, expiration_minutes=5).issue("alice")
        with pytest.raises(AuthenticationError):
            JoseTokenProvider(KEY, expiration_minutes=5).subject_of(token)

    def test_garbage_rejected(self) -> None:
        with pytest.raises(AuthenticationError):
            JoseTokenProvider(KEY, expiration_minutes=5).subject_of("not-a-token")


class TestSettings:
    """Tests for configuration parsing."""

    SECRET = "a2tra2tra2tra2tra2tra2tra2tra2tra2tra2tra2s="

    def test_short_secret_rejected(self) -> None:
        with pytest.raises(ValueError):
            Settings(jwt_secret="c2hvcnQ=")

    def test_database_url_overrides(self) -> None:
        settings = Settings(
            jwt_secret=self.SECRET,
            db_url="postgresql+psycopg2://localhost:5432/shop",
            db_username="shop",
            db_password="pw",
        )
        url = settings.get_database_url()
        assert url.drivername == "postgresql+psycopg2"
        assert url.username == "shop"
        assert url.password == "pw"

    def test_dialect_override_drops_foreign_driver(self) -> None:
        settings = Settings(
            jwt_secret=self.SECRET,
            db_url="postgresql+psycopg2://localhost/shop",
            db_dialect="sqlite",
        )
        assert settings.get_database_url().drivername == "sqlite"

"""
Port interfaces (ABCs) for the shop bounded context.

Ports define the contracts that the domain requires from the outside world.
Infrastructure adapters implement these interfaces.
The domain layer never depends on concrete implementations.

Repositories are always obtained from a UnitOfWork, so every call they
make runs inside that unit's transactional scope.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from types import TracebackType
from typing import Optional

from shopapp.domain.shop.entities import (
    Order,
    OrderItem,
    OrderStatus,
    Product,
    ProductLastPurchase,
    ProductProfit,
    ProductQuantity,
    User,
)


class UserRepository(ABC):
    """Port for reading and creating user accounts."""

    @abstractmethod
    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    @abstractmethod
    def get_by_username(self, username: str) -> Optional[User]:
        raise NotImplementedError

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    @abstractmethod
    def add(self, user: User) -> User:
        """Insert a user and return it with its assigned id.

        Raises:
            UniqueViolationError: If username or email is already stored.
        """
        raise NotImplementedError


class ProductRepository(ABC):
    """Port for catalog reads and stock mutation."""

    @abstractmethod
    def get(self, product_id: int, for_admin: bool = True) -> Optional[Product]:
        """Return a product by id.

        The non-admin variant hides products whose quantity is 0.
        """
        raise NotImplementedError

    @abstractmethod
    def get_for_update(self, product_id: int) -> Optional[Product]:
        """Return a product and hold a row lock on it until the scope ends."""
        raise NotImplementedError

    @abstractmethod
    def list_all(self, for_admin: bool = True) -> list[Product]:
        """Return all products (admin) or only in-stock products, by id."""
        raise NotImplementedError

    @abstractmethod
    def add(self, product: Product) -> Product:
        raise NotImplementedError

    @abstractmethod
    def save(self, product: Product) -> Product:
        """Write every mutable field of an existing product."""
        raise NotImplementedError

    @abstractmethod
    def decrement_stock(self, product_id: int, quantity: int) -> bool:
        """Remove ``quantity`` units if at least that many are on hand.

        Returns:
            False when the conditional update matched no row.
        """
        raise NotImplementedError

    @abstractmethod
    def increment_stock(self, product_id: int, quantity: int) -> None:
        raise NotImplementedError


class OrderRepository(ABC):
    """Port for order headers and their lines."""

    @abstractmethod
    def get(self, order_id: int) -> Optional[Order]:
        """Return the order header without lines."""
        raise NotImplementedError

    @abstractmethod
    def get_for_update(self, order_id: int) -> Optional[Order]:
        """Return the order header and hold a row lock on it."""
        raise NotImplementedError

    @abstractmethod
    def get_with_items(self, order_id: int) -> Optional[Order]:
        """Return the order with its lines attached, loaded in one query."""
        raise NotImplementedError

    @abstractmethod
    def list_with_items(self, user_id: Optional[int] = None) -> list[Order]:
        """Return orders with lines, newest first; all users when ``user_id`` is None."""
        raise NotImplementedError

    @abstractmethod
    def add(self, order: Order, items: list[OrderItem]) -> Order:
        """Insert the order header and all its lines."""
        raise NotImplementedError

    @abstractmethod
    def update_status(
        self, order_id: int, expected: OrderStatus, target: OrderStatus
    ) -> bool:
        """Move an order from ``expected`` to ``target``.

        Returns:
            False if the order was no longer in ``expected``.
        """
        raise NotImplementedError


class WatchlistRepository(ABC):
    """Port for per-user watchlists."""

    @abstractmethod
    def exists(self, user_id: int, product_id: int) -> bool:
        raise NotImplementedError

    @abstractmethod
    def add(self, user_id: int, product_id: int) -> bool:
        """Insert an entry if absent; return True when a row was added."""
        raise NotImplementedError

    @abstractmethod
    def remove(self, user_id: int, product_id: int) -> int:
        """Delete matching entries and return how many were removed."""
        raise NotImplementedError

    @abstractmethod
    def list_in_stock_products(self, user_id: int) -> list[Product]:
        """Return the distinct watched products that have stock, by id."""
        raise NotImplementedError


class ReportRepository(ABC):
    """Port for sales aggregations.

    Every query excludes lines whose order is in ``excluded_status``.
    """

    @abstractmethod
    def most_frequent_for_user(
        self, user_id: int, limit: int, excluded_status: OrderStatus
    ) -> list[ProductQuantity]:
        raise NotImplementedError

    @abstractmethod
    def most_recent_for_user(
        self, user_id: int, limit: int, excluded_status: OrderStatus
    ) -> list[ProductLastPurchase]:
        raise NotImplementedError

    @abstractmethod
    def most_popular(
        self, limit: int, excluded_status: OrderStatus
    ) -> list[ProductQuantity]:
        raise NotImplementedError

    @abstractmethod
    def most_profitable(
        self, limit: int, excluded_status: OrderStatus
    ) -> list[ProductProfit]:
        raise NotImplementedError

    @abstractmethod
    def total_sold(self, excluded_status: OrderStatus) -> int:
        raise NotImplementedError


class UnitOfWork(ABC):
    """A transactional scope.

    Used as a context manager: on a clean exit every mutation commits,
    on an exception none of them do.
    """

    users: UserRepository
    products: ProductRepository
    orders: OrderRepository
    watchlist: WatchlistRepository
    reports: ReportRepository

    @abstractmethod
    def __enter__(self) -> "UnitOfWork":
        raise NotImplementedError

    @abstractmethod
    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        raise NotImplementedError


class PasswordHasher(ABC):
    """Port for a salted one-way password hash."""

    @abstractmethod
    def hash(self, password: str) -> str:
        raise NotImplementedError

    @abstractmethod
    def verify(self, password: str, password_hash: str) -> bool:
        raise NotImplementedError


class TokenProvider(ABC):
    """Port for issuing and verifying signed bearer tokens."""

    @abstractmethod
    def issue(self, subject: str, now: Optional[datetime] = None) -> str:
        raise NotImplementedError

    @abstractmethod
    def subject_of(self, token: str) -> str:
        """Return the verified subject of ``token``.

        Raises:
            AuthenticationError: If the token is malformed, forged or expired.
        """
        raise NotImplementedError

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Protocol

from ..models import AccountToken, Product, TokenPurpose, User


class UserRepository(Protocol):
    """Storage for user accounts. Lookups raise ``NotFoundError`` instead of returning None."""

    def find_user_by_id(self, user_id: int) -> User:
        ...

    def find_user_by_username(self, username: str) -> User:
        ...

    def find_user_by_email(self, email: str) -> User:
        ...

    def insert_user(self, username: str, email: str, password_hash: str) -> User:
        """Raises ``ConflictError`` when the username or email is taken."""
        ...

    def update_user(
        self,
        user_id: int,
        *,
        password_hash: Optional[str] = None,
        is_verified: Optional[bool] = None,
    ) -> User:
        ...

    def list_users(self) -> List[User]:
        ...


class TokenRepository(Protocol):
    """Storage for one-time verification and reset tokens."""

    def insert_token(
        self,
        value: str,
        purpose: TokenPurpose,
        user_id: int,
        expires_at: datetime,
    ) -> AccountToken:
        ...

    def find_token(self, value: str, purpose: TokenPurpose) -> AccountToken:
        ...

    def consume_token(self, value: str, purpose: TokenPurpose) -> AccountToken:
        """Atomically fetch and delete a token. Only one concurrent caller gets it."""
        ...

    def delete_tokens(self, user_id: int, purpose: TokenPurpose) -> int:
        ...


class ProductRepository(Protocol):
    """Storage for catalogue products."""

    def insert_product(
        self,
        name: str,
        description: str,
        price: float,
        image: Optional[str],
    ) -> Product:
        ...

    def find_product(self, product_id: int) -> Product:
        ...

    def list_products(self) -> List[Product]:
        ...

    def update_product(
        self,
        product_id: int,
        *,
        name: Optional[str] = None,
        description: Optional[str] = None,
        price: Optional[float] = None,
        image: Optional[str] = None,
    ) -> Product:
        ...

    def delete_product(self, product_id: int) -> None:
        ...


class ImageStorage(Protocol):
    """Blob storage for product images."""

    def save(self, filename: str, data: bytes) -> str:
        """Store ``data`` and return the generated image name."""
        ...

    def delete(self, name: str) -> None:
        ...


class Notifier(Protocol):
    """Out-of-band delivery of account tokens to their owner."""

    def send_verification_email(self, to_email: str, username: str, verification_token: str) -> bool:
        ...

    def send_password_reset_email(self, to_email: str, username: str, reset_token: str) -> bool:
        ...


class PersistenceGateway(
    UserRepository,
    TokenRepository,
    ProductRepository,
    Protocol,
):
    """Composite gateway combining every persistence concern used by the app."""

    pass

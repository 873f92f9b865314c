"""User domain model for account registration and authentication."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(slots=True)
class User:
    """
    A registered account.

    Attributes:
        id: Unique identifier assigned by the store
        username: Unique login name (case-insensitive)
        email: Unique email address, stored lower-cased
        password_hash: bcrypt hash of the current password
        is_verified: Whether the email address has been confirmed
        created_at: Account creation timestamp (UTC)
        updated_at: Last update timestamp (UTC)
    """

    id: int
    username: str
    email: str
    password_hash: str
    is_verified: bool
    created_at: datetime
    updated_at: datetime

    def __repr__(self) -> str:
        return f"<User id={self.id} username={self.username} verified={self.is_verified}>"

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class TokenPurpose(str, Enum):
    VERIFY = "verify"
    RESET = "reset"
    SESSION = "session"


@dataclass(slots=True)
class AccountToken:
    """One-time token bound to a single user and purpose."""

    value: str
    purpose: TokenPurpose
    user_id: int
    expires_at: datetime
    created_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now

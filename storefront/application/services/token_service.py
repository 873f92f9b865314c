from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import jwt

from ...domain.errors import AuthError, ExpiredError
from ...domain.models import AccountToken, TokenPurpose
from ...domain.ports.persistence import TokenRepository

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class TokenService:
    """Issues and checks one-time account tokens and signed session tokens."""

    def __init__(
        self,
        tokens: TokenRepository,
        secret_key: str,
        session_exp_minutes: int = 1440,
        algorithm: str = "HS256",
        clock: Clock = _utcnow,
    ) -> None:
        if not secret_key:
            raise RuntimeError("SESSION_TOKEN_SECRET is not configured.")
        if secret_key == "change-me":
            logger.warning(
                "SESSION_TOKEN_SECRET is using the default value. Configure a strong secret in production."
            )
        self._tokens = tokens
        self._secret_key = secret_key
        self._session_exp_minutes = session_exp_minutes
        self._algorithm = algorithm
        self._clock = clock

    # One-time tokens --------------------------------------------------
    def issue(self, purpose: TokenPurpose, user_id: int, ttl: timedelta) -> AccountToken:
        if purpose is TokenPurpose.SESSION:
            raise ValueError("Session tokens are signed, use issue_session().")
        value = secrets.token_urlsafe(32)
        return self._tokens.insert_token(value, purpose, user_id, self._clock() + ttl)

    def verify(self, value: str, purpose: TokenPurpose) -> int:
        """Return the owner of a live token without consuming it."""
        token = self._tokens.find_token(value, purpose)
        if token.is_expired(self._clock()):
            self._tokens.consume_token(value, purpose)
            raise ExpiredError("Token has expired")
        return token.user_id

    def consume(self, value: str, purpose: TokenPurpose) -> int:
        """
        Atomically invalidate a token and return its owner.

        The token is removed even when it turns out to be expired, so a second
        call always fails with ``NotFoundError``.
        """
        token = self._tokens.consume_token(value, purpose)
        if token.is_expired(self._clock()):
            logger.info("Rejected expired %s token for user %s", purpose.value, token.user_id)
            raise ExpiredError("Token has expired")
        return token.user_id

    def revoke(self, user_id: int, purpose: TokenPurpose) -> int:
        return self._tokens.delete_tokens(user_id, purpose)

    # Session tokens ---------------------------------------------------
    def issue_session(self, user_id: int, ttl: Optional[timedelta] = None) -> str:
        now = self._clock()
        expire = now + (ttl if ttl is not None else timedelta(minutes=self._session_exp_minutes))
        payload = {
            "sub": str(user_id),
            "purpose": TokenPurpose.SESSION.value,
            "iat": now,
            "exp": expire,
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def authenticate(self, value: Optional[str]) -> int:
        if not value:
            raise AuthError("Authentication token is missing")
        try:
            payload = jwt.decode(value, self._secret_key, algorithms=[self._algorithm])
        except jwt.ExpiredSignatureError as exc:
            raise AuthError("Session has expired, please log in again") from exc
        except jwt.InvalidTokenError as exc:
            raise AuthError("Invalid authentication token") from exc
        if payload.get("purpose") != TokenPurpose.SESSION.value:
            raise AuthError("Invalid authentication token")
        try:
            return int(payload["sub"])
        except (KeyError, TypeError, ValueError) as exc:
            raise AuthError("Invalid authentication token") from exc

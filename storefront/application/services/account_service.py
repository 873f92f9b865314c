"""Account lifecycle: registration, verification, login and password management."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import List, Optional

from ...domain.errors import AuthError, NotFoundError, UnverifiedError, ValidationError
from ...domain.models import TokenPurpose, User
from ...domain.ports.persistence import Notifier, UserRepository
from ...services.password_hasher import PasswordHasher
from ..validation import (
    validate_email_address,
    validate_login,
    validate_password_change,
    validate_password_reset,
    validate_registration,
)
from .token_service import TokenService

logger = logging.getLogger(__name__)


class AccountService:
    """Coordinates the user store, token service, hasher and notifier for every account flow."""

    def __init__(
        self,
        users: UserRepository,
        tokens: TokenService,
        hasher: PasswordHasher,
        notifier: Notifier,
        verification_ttl: timedelta = timedelta(hours=24),
        reset_ttl: timedelta = timedelta(minutes=60),
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._hasher = hasher
        self._notifier = notifier
        self._verification_ttl = verification_ttl
        self._reset_ttl = reset_ttl

    def register(
        self,
        username: Optional[str],
        email: Optional[str],
        password: Optional[str],
        confirm_password: Optional[str],
    ) -> User:
        """
        Register a new, unverified user and email them a verification link.

        Raises:
            ValidationError: If the input is malformed or the passwords differ
            ConflictError: If the username or email is already registered
        """
        data = validate_registration(username, email, password, confirm_password)
        password_hash = self._hasher.hash(data.password)
        user = self._users.insert_user(data.username, data.email, password_hash)

        token = self._tokens.issue(TokenPurpose.VERIFY, user.id, self._verification_ttl)
        if not self._notifier.send_verification_email(user.email, user.username, token.value):
            logger.warning("Verification email for user %s could not be delivered", user.id)

        logger.info("Registered user %s (%s)", user.id, user.username)
        return user

    def verify(self, token: str) -> User:
        """
        Mark the owner of a verification token as verified.

        Raises:
            NotFoundError: If the token is unknown or already used
            ExpiredError: If the token has expired
        """
        user_id = self._tokens.consume(token, TokenPurpose.VERIFY)
        user = self._users.update_user(user_id, is_verified=True)
        self._tokens.revoke(user_id, TokenPurpose.VERIFY)
        logger.info("Verified user %s", user_id)
        return user

    def resend_verification(self, email: Optional[str]) -> None:
        """
        Replace any outstanding verification token with a fresh one and email it.

        Raises:
            ValidationError: If the email is malformed or already verified
            NotFoundError: If no user has that email
        """
        email_clean = validate_email_address(email)
        user = self._users.find_user_by_email(email_clean)
        if user.is_verified:
            raise ValidationError("Email already verified")

        self._tokens.revoke(user.id, TokenPurpose.VERIFY)
        token = self._tokens.issue(TokenPurpose.VERIFY, user.id, self._verification_ttl)
        if not self._notifier.send_verification_email(user.email, user.username, token.value):
            logger.warning("Verification email for user %s could not be delivered", user.id)
        logger.info("Reissued verification token for user %s", user.id)

    def login(self, username: Optional[str], password: Optional[str]) -> str:
        """
        Check credentials and return a session token.

        Only verified users may log in; the password is checked first so an
        unverified account never reveals anything to a wrong password.

        Raises:
            NotFoundError: If the username is unknown
            AuthError: If the password is wrong
            UnverifiedError: If the account has not been verified
        """
        data = validate_login(username, password)
        user = self._users.find_user_by_username(data.username)
        if not self._hasher.verify(data.password, user.password_hash):
            logger.warning("Failed login attempt for user %s", user.id)
            raise AuthError("Incorrect password")
        if not user.is_verified:
            raise UnverifiedError()
        return self._tokens.issue_session(user.id)

    def get_user(self, session_token: Optional[str]) -> User:
        user_id = self._tokens.authenticate(session_token)
        return self._users.find_user_by_id(user_id)

    def get_users(self) -> List[User]:
        users = self._users.list_users()
        if not users:
            raise NotFoundError("No users found")
        return users

    def forgot_password(self, email: Optional[str]) -> None:
        """Issue a fresh reset token, replacing any outstanding one, and email it."""
        email_clean = validate_email_address(email)
        user = self._users.find_user_by_email(email_clean)

        self._tokens.revoke(user.id, TokenPurpose.RESET)
        token = self._tokens.issue(TokenPurpose.RESET, user.id, self._reset_ttl)
        if not self._notifier.send_password_reset_email(user.email, user.username, token.value):
            logger.warning("Password reset email for user %s could not be delivered", user.id)
        logger.info("Issued password reset token for user %s", user.id)

    def reset_password(
        self,
        token: str,
        new_password: Optional[str],
        confirm_password: Optional[str],
    ) -> None:
        data = validate_password_reset(new_password, confirm_password)
        user_id = self._tokens.consume(token, TokenPurpose.RESET)
        self._users.update_user(user_id, password_hash=self._hasher.hash(data.new_password))
        self._tokens.revoke(user_id, TokenPurpose.RESET)
        logger.info("Password reset for user %s", user_id)

    def change_password(
        self,
        session_token: Optional[str],
        current_password: Optional[str],
        new_password: Optional[str],
        confirm_password: Optional[str],
    ) -> None:
        user_id = self._tokens.authenticate(session_token)
        data = validate_password_change(current_password, new_password, confirm_password)
        user = self._users.find_user_by_id(user_id)
        if not self._hasher.verify(data.current_password, user.password_hash):
            logger.warning("Rejected password change for user %s: wrong current password", user.id)
            raise AuthError("Incorrect password")
        self._users.update_user(user.id, password_hash=self._hasher.hash(data.new_password))
        self._tokens.revoke(user.id, TokenPurpose.RESET)
        logger.info("Password changed for user %s", user.id)

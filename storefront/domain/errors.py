"""Typed failures raised by the services and mapped to HTTP statuses by the API layer."""

from __future__ import annotations


class StorefrontError(Exception):
    """Base class for every expected failure of a storefront operation."""

    status_code = 500
    default_message = "Unexpected error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(StorefrontError):
    status_code = 400
    default_message = "Invalid input"


class ConflictError(StorefrontError):
    status_code = 400
    default_message = "Resource already exists"


class NotFoundError(StorefrontError):
    status_code = 404
    default_message = "Not found"


class ExpiredError(StorefrontError):
    status_code = 400
    default_message = "Token has expired"


class AuthError(StorefrontError):
    status_code = 400
    default_message = "Invalid credentials"


class UnverifiedError(StorefrontError):
    status_code = 403
    default_message = "Account not verified. Please verify your email first."


class UnexpectedError(StorefrontError):
    """Storage or infrastructure failure; the message is never sent to clients."""

    status_code = 500
    default_message = "Unexpected error"

"""Domain models for the Storefront application."""

from .product import Product, UploadedImage
from .token import AccountToken, TokenPurpose
from .user import User

__all__ = [
    "AccountToken",
    "Product",
    "TokenPurpose",
    "UploadedImage",
    "User",
]

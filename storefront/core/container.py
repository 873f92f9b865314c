from dataclasses import dataclass

from ..application.services.account_service import AccountService
from ..application.services.product_service import ProductService
from ..application.services.token_service import TokenService
from ..domain.ports.persistence import ImageStorage, Notifier, PersistenceGateway
from ..services.password_hasher import PasswordHasher
from .config import Settings


@dataclass(slots=True)
class ApplicationContainer:
    """Dependency registry shared across the FastAPI application lifecycle."""

    settings: Settings
    persistence: PersistenceGateway
    image_storage: ImageStorage
    password_hasher: PasswordHasher
    notifier: Notifier
    token_service: TokenService
    account_service: AccountService
    product_service: ProductService

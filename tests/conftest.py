from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from storefront.application.services.account_service import AccountService
from storefront.application.services.product_service import ProductService
from storefront.application.services.token_service import TokenService
from storefront.core.app_factory import create_application
from storefront.core.config import Settings
from storefront.infrastructure.persistence.sqlite import SQLitePersistence
from storefront.infrastructure.storage.local import LocalImageStorage
from storefront.services.password_hasher import PasswordHasher

TEST_SECRET = "test-secret-key-with-enough-entropy-0123456789"


class RecordingNotifier:
    """Captures the tokens that would have been emailed."""

    def __init__(self):
        self.verifications = []
        self.resets = []

    def send_verification_email(self, to_email, username, verification_token):
        self.verifications.append((to_email, username, verification_token))
        return True

    def send_password_reset_email(self, to_email, username, reset_token):
        self.resets.append((to_email, username, reset_token))
        return True

    @property
    def last_verification_token(self):
        return self.verifications[-1][2]

    @property
    def last_reset_token(self):
        return self.resets[-1][2]


class FakeClock:
    def __init__(self):
        self.now = datetime.now(timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def persistence(tmp_path):
    store = SQLitePersistence(tmp_path / "test.db")
    yield store
    store.close()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def token_service(persistence, clock):
    return TokenService(persistence, secret_key=TEST_SECRET, session_exp_minutes=30, clock=clock)


@pytest.fixture
def hasher():
    return PasswordHasher(rounds=4)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def account_service(persistence, token_service, hasher, notifier):
    return AccountService(
        users=persistence,
        tokens=token_service,
        hasher=hasher,
        notifier=notifier,
        verification_ttl=timedelta(hours=24),
        reset_ttl=timedelta(minutes=60),
    )


@pytest.fixture
def image_storage(tmp_path):
    return LocalImageStorage(tmp_path / "uploads")


@pytest.fixture
def product_service(persistence, image_storage):
    return ProductService(persistence, image_storage)


@pytest.fixture
def settings(tmp_path, monkeypatch):
    monkeypatch.setenv("DATABASE_PATH", str(tmp_path / "api.db"))
    monkeypatch.setenv("UPLOAD_DIR", str(tmp_path / "api-uploads"))
    monkeypatch.setenv("SESSION_TOKEN_SECRET", TEST_SECRET)
    monkeypatch.setenv("BCRYPT_ROUNDS", "4")
    monkeypatch.delenv("SMTP_HOST", raising=False)
    return Settings()


@pytest.fixture
def client(settings, notifier):
    app = create_application(settings, notifier=notifier)
    with TestClient(app) as test_client:
        yield test_client

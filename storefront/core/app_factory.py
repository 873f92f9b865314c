from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import AsyncIterator, Dict, Any, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Settings
from .container import ApplicationContainer
from .logging import configure_logging
from ..application.services.account_service import AccountService
from ..application.services.product_service import ProductService
from ..application.services.token_service import TokenService
from ..domain.errors import StorefrontError, UnexpectedError
from ..domain.ports.persistence import Notifier
from ..infrastructure.persistence.sqlite import SQLitePersistence
from ..infrastructure.storage.local import LocalImageStorage
from ..presentation.api.routers import products as products_router
from ..presentation.api.routers import users as users_router
from ..services.email_service import EmailService
from ..services.password_hasher import PasswordHasher

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


def create_application(
    settings: Optional[Settings] = None,
    notifier: Optional[Notifier] = None,
) -> FastAPI:
    settings = settings or Settings()

    app = FastAPI(title="Storefront API", version="1.0.0", lifespan=_create_lifespan(settings, notifier))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(users_router.router, prefix=API_PREFIX)
    app.include_router(products_router.router, prefix=API_PREFIX)
    _register_exception_handlers(app)

    @app.get("/health")
    async def health() -> Dict[str, Any]:
        return {"ok": True}

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StorefrontError)
    async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
        if isinstance(exc, UnexpectedError):
            logger.error("Unexpected failure on %s %s: %s", request.method, request.url.path, exc.message)
            return JSONResponse(status_code=exc.status_code, content={"message": "Internal server error"})
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"message": "Invalid request", "errors": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"message": "Internal server error"})


def _create_lifespan(settings: Settings, notifier: Optional[Notifier]):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging()
        persistence = SQLitePersistence(settings.database_path)
        image_storage = LocalImageStorage(settings.upload_dir)
        password_hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
        if notifier is None:
            email_service: Notifier = EmailService(
                public_base_url=settings.public_base_url,
                frontend_base_url=settings.frontend_base_url,
                smtp_host=settings.smtp_host,
                smtp_port=settings.smtp_port,
                smtp_username=settings.smtp_username,
                smtp_password=settings.smtp_password,
                from_email=settings.smtp_from_email,
                verification_hours=settings.verification_token_hours,
                reset_minutes=settings.reset_token_minutes,
            )
        else:
            email_service = notifier
        token_service = TokenService(
            tokens=persistence,
            secret_key=settings.session_token_secret,
            session_exp_minutes=settings.session_token_exp_minutes,
            algorithm=settings.session_token_algorithm,
        )
        account_service = AccountService(
            users=persistence,
            tokens=token_service,
            hasher=password_hasher,
            notifier=email_service,
            verification_ttl=timedelta(hours=settings.verification_token_hours),
            reset_ttl=timedelta(minutes=settings.reset_token_minutes),
        )
        product_service = ProductService(persistence, image_storage)

        container = ApplicationContainer(
            settings=settings,
            persistence=persistence,
            image_storage=image_storage,
            password_hasher=password_hasher,
            notifier=email_service,
            token_service=token_service,
            account_service=account_service,
            product_service=product_service,
        )

        app.state.container = container  # type: ignore[attr-defined]
        logger.info("Storefront API started with database %s", settings.database_path)

        try:
            yield
        finally:
            persistence.close()

    return lifespan

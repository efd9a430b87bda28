"""FastAPI application."""

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator

from dishka import AsyncContainer
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from socialauth.config import Settings
from socialauth.domain.error import DataIntegrityError, SocialAuthError
from socialauth.domain.service import OAuthStateService
from socialauth.interface.api.routes import auth, health, social_auth
from socialauth.interface.error import (
    AuthenticationRequiredError,
    failure_body,
    status_for,
)
from socialauth.util.di.container import create_container, setup_di
from socialauth.util.observability import (
    instrument_fastapi,
    instrument_httpx,
)

logger = logging.getLogger(__name__)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run the expired-state sweeper for the lifetime of the app."""
    container: AsyncContainer = app.state.dishka_container
    state_service = await container.get(OAuthStateService)
    sweeper = asyncio.create_task(state_service.run_sweeper())
    try:
        yield
    finally:
        sweeper.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await sweeper
        await container.close()


def register_error_handlers(app_instance: FastAPI) -> None:
    """Map domain and interface errors to JSON responses."""

    @app_instance.exception_handler(SocialAuthError)
    async def handle_social_auth_error(
        request: Request, exc: SocialAuthError
    ) -> JSONResponse:
        logger.info(f"Social auth failure on {request.url.path}: {exc.code.value}")
        return JSONResponse(
            status_code=status_for(exc.code), content=failure_body(exc.failure)
        )

    @app_instance.exception_handler(AuthenticationRequiredError)
    async def handle_authentication_required(
        request: Request, exc: AuthenticationRequiredError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"error": "UNAUTHENTICATED", "message": str(exc)},
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app_instance.exception_handler(DataIntegrityError)
    async def handle_data_integrity_error(
        request: Request, exc: DataIntegrityError
    ) -> JSONResponse:
        logger.error(f"Data integrity error on {request.url.path}", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "INTERNAL_ERROR", "message": "Internal server error"},
        )

    @app_instance.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.error(f"Unexpected error on {request.url.path}", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "INTERNAL_ERROR", "message": "Internal server error"},
        )


def create_app(container: AsyncContainer | None = None) -> FastAPI:
    """Create FastAPI application.

    Note: Logfire should be configured before calling this function.
    In production, start_app.py handles this.

    Args:
        container: DI container to use (production container if None)
    """
    settings = Settings()

    # Instrument httpx for outbound provider requests
    instrument_httpx()

    app_instance = FastAPI(
        title="Social Auth API",
        description="Social login, account resolution and provider linking",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Instrument FastAPI for automatic tracing of HTTP requests
    instrument_fastapi(app_instance)

    app_instance.add_middleware(
        CORSMiddleware,
        allow_origins=[
            settings.api.frontend_url,
            "http://localhost:3000",  # Local development
            "http://localhost:5173",  # Vite default
        ],
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=[
            "Authorization",
            "Content-Type",
            "Accept",
            "Origin",
            "User-Agent",
            "X-Requested-With",
        ],
        expose_headers=["Content-Length", "Content-Type"],
        max_age=600,  # Cache preflight requests for 10 minutes
    )

    # Settings are loaded from environment automatically
    setup_di(app_instance, container or create_container())

    register_error_handlers(app_instance)

    app_instance.include_router(health.router)
    app_instance.include_router(auth.router)
    app_instance.include_router(social_auth.router)

    return app_instance


# Create app instance for uvicorn
# Note: Logfire must be configured before this module is imported
# In production: start_app.py handles this
app = create_app()

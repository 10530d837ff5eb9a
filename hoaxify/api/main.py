"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures exception handlers, and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from psycopg_pool import AsyncConnectionPool

from hoaxify import __version__
from hoaxify.adapters.repository import (
    InMemoryAccountRepository,
    PostgresAccountRepository,
    run_migrations,
)
from hoaxify.adapters.smtp import ConsoleEmailSender, SmtpEmailSender
from hoaxify.api.errors import register_error_handlers
from hoaxify.api.v1 import router as v1_router
from hoaxify.config.logging import configure_logging
from hoaxify.config.settings import Settings, get_settings
from hoaxify.domain.ports import AccountRepository, EmailSender
from hoaxify.i18n import Translator

logger = logging.getLogger(__name__)

API_PREFIX = "/api/1.0"

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "v1",
        "description": "User registration and email activation",
    },
]


def build_email_sender(settings: Settings) -> EmailSender:
    if settings.email_backend == "console":
        return ConsoleEmailSender(activation_url=settings.activation_url)
    return SmtpEmailSender(
        host=settings.smtp_host,
        port=settings.smtp_port,
        username=settings.smtp_username,
        password=settings.smtp_password,
        use_tls=settings.smtp_use_tls,
        timeout=settings.smtp_timeout_seconds,
        from_email=settings.mail_from,
        from_name=settings.mail_from_name,
        activation_url=settings.activation_url,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Creates the account store (connection pool + migrations for postgres)
    - Creates the email sender
    - Closes the connection pool on shutdown

    Adapters already placed on app.state by create_app() are kept.
    """
    settings: Settings = app.state.settings
    configure_logging(settings.log_level)

    logger.info("Starting application...")

    pool: AsyncConnectionPool | None = None
    if app.state.repository is None:
        if settings.storage_backend == "memory":
            logger.warning("Using in-memory account store; data is lost on restart")
            app.state.repository = InMemoryAccountRepository()
        else:
            logger.info("Connecting to database...")
            pool = AsyncConnectionPool(
                conninfo=settings.database_url,
                min_size=settings.pool_min_size,
                max_size=settings.pool_max_size,
                open=False,
            )
            await pool.open(wait=True)

            logger.info("Running database migrations...")
            await run_migrations(pool)
            app.state.repository = PostgresAccountRepository(pool)

    app.state.pool = pool

    if app.state.email_sender is None:
        app.state.email_sender = build_email_sender(settings)

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    if pool is not None:
        await pool.close()
        logger.info("Database connection pool closed")


def create_app(
    settings: Settings | None = None,
    *,
    repository: AccountRepository | None = None,
    email_sender: EmailSender | None = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Configuration, defaults to environment settings
        repository: Account store to use instead of the configured one
        email_sender: Email sender to use instead of the configured one
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="hoaxify",
        description="User registration with email activation",
        version=__version__,
        openapi_tags=tags_metadata,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.translator = Translator.from_directory(default_locale=settings.default_locale)
    app.state.repository = repository
    app.state.email_sender = email_sender
    app.state.pool = None

    register_error_handlers(app)
    app.include_router(v1_router, prefix=API_PREFIX)

    @app.get("/health")
    async def health_check(request: Request) -> dict[str, str]:
        """
        Health check endpoint with database validation.

        Returns 200 OK if application and database are healthy.
        Raises exception if database connection fails.
        """
        pool = request.app.state.pool
        if pool is not None:
            async with pool.connection() as conn:
                await conn.execute("SELECT 1")

        return {"status": "healthy"}

    return app


app = create_app()

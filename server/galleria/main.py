"""FastAPI application."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from galleria import __version__
from galleria.auth.routes import router as auth_router
from galleria.config import settings
from galleria.error_handlers import register_error_handlers
from galleria.logging_config import setup_dev_logging, setup_production_logging
from galleria.routes import create_api_router
from galleria.store import DocumentStore

logger = logging.getLogger(__name__)


def configure_app_logging() -> None:
    if settings.dev_mode:
        setup_dev_logging(json_format=settings.log_json)
    else:
        setup_production_logging(Path(settings.document_path).parent / "logs")


async def bootstrap_admin(store: DocumentStore) -> None:
    """Ensure the configured admin account exists and holds the admin role."""
    async with store.session() as session:
        await session.credentials.ensure_admin(
            settings.bootstrap_admin_username, settings.bootstrap_admin_password
        )


def create_app(
    document_path: Path | str | None = None, *, configure_logging: bool = True
) -> FastAPI:
    """Build the API application.

    Args:
        document_path: JSON document to serve (default: settings.document_path)
        configure_logging: Install the application's log handlers at startup
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if configure_logging:
            configure_app_logging()
        logger.info("=== Server startup initiated ===")

        # Validate required settings
        if not settings.jwt_secret:
            raise RuntimeError("GALLERIA_JWT_SECRET environment variable must be set")
        if len(settings.jwt_secret) < 32:
            raise RuntimeError("GALLERIA_JWT_SECRET must be at least 32 characters")

        store = await DocumentStore.open(document_path or settings.document_path)
        await bootstrap_admin(store)
        app.state.store = store

        logger.info(f"=== Server startup completed ({len(store.document.users)} users) ===")
        yield
        logger.info("Server shutdown")

    app = FastAPI(
        title="galleria",
        description="Shared galleries with posts, comments and a trash",
        version=__version__,
        lifespan=lifespan,
    )

    # JWT bearer tokens, no cookies: credentials are not needed for CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    app.include_router(auth_router)
    app.include_router(create_api_router())
    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "galleria.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.dev_mode,
        reload_excludes=["data/*"],
    )

"""FastAPI application setup."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from ..app import Application
from .routes import dialogs, updates


# Global application instance
_app: Application | None = None


def get_app() -> Application:
    """Get the global application instance."""
    global _app
    if not _app:
        _app = Application()
    return _app


def set_app(application: Application) -> None:
    """Replace the global application instance (before the server starts)."""
    global _app
    _app = application


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan."""
    application = get_app()
    await application.start()
    yield
    await application.stop()


def create_fastapi_app(application: Application | None = None) -> FastAPI:
    """Create and configure FastAPI application."""
    if application is not None:
        set_app(application)

    fastapi_app = FastAPI(
        title="dialogkit",
        description="Webhook and dialog inspection API",
        version="0.1.0",
        lifespan=lifespan,
    )

    application = get_app()
    fastapi_app.include_router(updates.create_updates_router(application))
    fastapi_app.include_router(dialogs.create_dialogs_router(application))

    return fastapi_app

"""Decor API - application factory for versioned entity routes."""

import logging
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI

from decor import __version__
from decor.config import configure_logging
from decor.versions.registry import registered_types, registry_for

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    for owner in registered_types():
        logger.info(f"{owner.__name__}: {registry_for(owner).count()} versions")
    yield


def create_app(*routers: APIRouter, title: str = "Decor API") -> FastAPI:
    """Create the FastAPI app with the given versioned routers included."""
    configure_logging()

    app = FastAPI(title=title, version=__version__, lifespan=lifespan)
    for router in routers:
        app.include_router(router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Health check."""
        return {"status": "ok"}

    return app

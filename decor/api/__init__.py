"""HTTP endpoints serving every version of an entity from one route."""

from decor.api.main import create_app
from decor.api.routes import create_versioned_router

__all__ = [
    "create_app",
    "create_versioned_router",
]

"""Versioned entity routes.

One route serves every version of an entity:

    GET /{name}/{version}/{item_id}

The entity is loaded, presented as the requested version, and the version's
serializer operation (``as_json`` by default) produces the response body.
"""

import logging
from typing import Any, Callable, Optional

from fastapi import APIRouter, HTTPException

from decor.config import get_settings
from decor.errors import UnknownVersionError
from decor.versions.registry import registry_for
from decor.versions.schemas import VersionSummary
from decor.views.view import present

logger = logging.getLogger(__name__)


def create_versioned_router(
    name: str,
    entity_type: type,
    loader: Callable[[str], Optional[Any]],
    operation: Optional[str] = None,
) -> APIRouter:
    """Build a router serving ``entity_type`` in all of its versions.

    Args:
        name: Path prefix and tag for the routes (e.g. 'companies')
        entity_type: Type whose version registry the routes use
        loader: Returns the entity for an id, or None when it does not exist
        operation: View operation producing the body; defaults to the
            ``serializer_operation`` setting

    Returns:
        APIRouter to include in an application
    """
    router = APIRouter(prefix=f"/{name}", tags=[name])

    @router.get("/versions", response_model=list[VersionSummary])
    async def list_versions() -> list[VersionSummary]:
        """List the versions this entity can be presented as."""
        return registry_for(entity_type).list_summaries()

    @router.get("/{version}/{item_id}")
    def get_versioned(version: str, item_id: str) -> Any:
        """Get one entity rendered by the requested version.

        Declared sync so FastAPI runs the loader in its threadpool.
        """
        entity = loader(item_id)
        if entity is None:
            raise HTTPException(
                status_code=404,
                detail=f"{entity_type.__name__} not found: {item_id}",
            )

        try:
            view = present(entity, version)
        except UnknownVersionError as e:
            raise HTTPException(status_code=404, detail=str(e))

        op = operation or get_settings().serializer_operation
        if not view.supports(op):
            logger.warning(f"Version {version!r} of {entity_type.__name__} cannot {op}")
            raise HTTPException(
                status_code=501,
                detail=f"Version {version!r} does not support {op!r}",
            )

        rendered = getattr(view, op)
        return rendered() if callable(rendered) else rendered

    return router

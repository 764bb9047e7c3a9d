"""Subscriber management routes.

GET    /endpoints          list registered endpoint URLs
POST   /endpoints?url=...  register an endpoint (api_key required)
DELETE /endpoints?url=...  deregister an endpoint (api_key required)
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from hookrelay.api.deps import get_registry, require_api_key
from hookrelay.registry.manager import RegistryManager

router = APIRouter(prefix="/endpoints", tags=["endpoints"])


@router.get("", summary="List registered endpoints")
def list_endpoints(registry: RegistryManager = Depends(get_registry)) -> list[str]:
    return registry.list()


@router.post("", summary="Register an endpoint", dependencies=[Depends(require_api_key)])
def register_endpoint(
    url: str | None = Query(default=None),
    registry: RegistryManager = Depends(get_registry),
) -> dict[str, str]:
    return {"id": registry.register(url)}


@router.delete("", summary="Deregister an endpoint", dependencies=[Depends(require_api_key)])
def deregister_endpoint(
    url: str | None = Query(default=None),
    registry: RegistryManager = Depends(get_registry),
) -> None:
    registry.deregister(url)

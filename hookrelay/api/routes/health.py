"""GET /health and GET /ping: liveness checks.

``/ping`` answers without touching storage.  ``/health`` also reports how
many endpoints a broadcast would currently reach.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends

from hookrelay.api.deps import get_app_settings, get_registry
from hookrelay.core.settings import Settings
from hookrelay.fanout.providers import PROVIDERS
from hookrelay.registry.manager import RegistryManager

router = APIRouter(tags=["health"])


@router.get("/health", summary="Relay health and registry size")
def health_check(
    settings: Settings = Depends(get_app_settings),
    registry: RegistryManager = Depends(get_registry),
) -> dict[str, object]:
    return {
        "status": "ok",
        "service": settings.app_name,
        "version": settings.app_version,
        "environment": settings.app_env,
        "endpoints": len(registry.list()),
        "providers": sorted(name.value for name in PROVIDERS),
    }


@router.get("/ping", summary="Ping")
def ping() -> str:
    return "Pong!"

"""FastAPI dependency injection: settings, database sessions and services.

Everything is read from ``app.state``, populated by the application factory,
so each app instance carries its own explicitly constructed configuration.
"""
from __future__ import annotations

from collections.abc import Generator

from fastapi import Depends, Query, Request
from sqlalchemy.orm import Session

from hookrelay.core.security import ApiKeyGuard
from hookrelay.core.settings import Settings
from hookrelay.db.repositories import EndpointRepository
from hookrelay.fanout.dispatcher import FanoutDispatcher
from hookrelay.registry.manager import RegistryManager


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_db(request: Request) -> Generator[Session, None, None]:
    """Yield a SQLAlchemy session; commit on success, rollback on error."""
    db = request.app.state.session_factory()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def get_registry(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> RegistryManager:
    """Return a RegistryManager bound to the current DB session."""
    return RegistryManager(EndpointRepository(db), require_tld=settings.require_tld)


def get_dispatcher(request: Request) -> FanoutDispatcher:
    """Return the dispatcher that owns the shared outbound HTTP client."""
    return request.app.state.dispatcher


def require_api_key(
    api_key: str | None = Query(default=None),
    settings: Settings = Depends(get_app_settings),
) -> None:
    ApiKeyGuard(settings.api_key).check(api_key)

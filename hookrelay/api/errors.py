"""Exception handlers mapping every handler failure onto ``{"error": message}`` bodies.

User input problems and any other handler failure answer 400, a bad API key
answers 401.
"""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.routing import Match

from hookrelay.errors import RelayError, UnauthorizedError

logger = logging.getLogger(__name__)


def _allowed_methods(request: Request) -> list[str]:
    methods: set[str] = set()
    for route in request.app.router.routes:
        route_methods = getattr(route, "methods", None)
        if not route_methods:
            continue
        match, _ = route.matches(request.scope)
        if match != Match.NONE:
            methods |= route_methods
    methods.discard("HEAD")
    return sorted(methods)


async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": str(exc)})


async def unauthorized_handler(request: Request, exc: UnauthorizedError) -> JSONResponse:
    logger.info("Rejected %s %s: api_key is not valid", request.method, request.url.path)
    return JSONResponse(status_code=401, content={"error": "api_key is not valid"})


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        messages.append(f"{location}: {error.get('msg')}")
    return JSONResponse(status_code=400, content={"error": "; ".join(messages)})


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 405:
        allowed = ", ".join(_allowed_methods(request))
        return JSONResponse(
            status_code=400,
            content={"error": f"Not a valid method for this endpoint: [{allowed}]"},
        )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=400, content={"error": str(exc)})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(Exception, unhandled_error_handler)
    app.add_exception_handler(RelayError, relay_error_handler)
    app.add_exception_handler(UnauthorizedError, unauthorized_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)

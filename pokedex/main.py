# pokedex/main.py
"""
Application factory.

``create_app()`` builds the catalogue source, the credential store and
the session gate once per process, stores them on ``app.state`` and
mounts the routers. Run it with::

    uvicorn pokedex.main:create_app --factory
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from . import __version__
from .auth.credentials import InMemoryCredentialStore
from .auth.router import LOGIN_PATH, login_failure
from .auth.router import router as auth_router
from .auth.schemas import LoginFailure
from .auth.session import SessionGate
from .catalog.cache import TTLCache
from .catalog.pokeapi_service import CatalogSource, PokeApiSource
from .catalog.router import router as catalog_router
from .config import Settings, get_settings
from .errors import InvalidInput, PokedexError

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger(__name__)


def configure_logging(level_name: str) -> None:
    level = logging.getLevelName(level_name.upper())
    # ``force=True`` replaces uvicorn's default handlers.
    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).setLevel(level)


def build_source(settings: Settings) -> PokeApiSource:
    cache = None
    if settings.cache_ttl_seconds > 0:
        cache = TTLCache(settings.cache_ttl_seconds, settings.cache_max_entries)
    return PokeApiSource(
        base_url=settings.pokeapi_base_url,
        timeout=settings.http_timeout_seconds,
        batch_size=settings.index_batch_size,
        user_agent=settings.user_agent,
        cache=cache,
    )


def build_gate(settings: Settings) -> SessionGate:
    store = InMemoryCredentialStore(settings.auth_username, settings.auth_password)
    return SessionGate(
        store,
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        ttl=timedelta(seconds=settings.session_ttl_seconds),
    )


def _error_body(reason: str, message: str) -> dict:
    return {"success": False, "reason": reason, "message": message}


async def handle_pokedex_error(request: Request, exc: PokedexError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.reason, exc.message),
        headers=exc.headers,
    )


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    if request.url.path == LOGIN_PATH:
        # The login form answers in its own envelope.
        return login_failure(400, LoginFailure.INVALID_INPUT, message)
    return JSONResponse(status_code=400, content=_error_body(InvalidInput.reason, message))


def create_app(
    settings: Optional[Settings] = None,
    source: Optional[CatalogSource] = None,
    gate: Optional[SessionGate] = None,
) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Pokedex",
        description="Searchable, paginated Pokemon catalogue behind a login.",
        version=__version__,
    )
    app.state.settings = settings
    app.state.source = source or build_source(settings)
    app.state.gate = gate or build_gate(settings)

    app.add_exception_handler(PokedexError, handle_pokedex_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    app.include_router(auth_router)
    app.include_router(catalog_router)

    logger.info("Pokedex ready (upstream %s)", settings.pokeapi_base_url)
    return app


def run() -> None:
    import uvicorn

    uvicorn.run("pokedex.main:create_app", factory=True, host="127.0.0.1", port=8000)

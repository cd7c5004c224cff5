"""
FastAPI application: REST adapter for the regulations assistant.

Usage:
    python run_api.py

Or directly:
    uvicorn regassist.adapters.rest.app:app --host 0.0.0.0 --port 3001 --reload

Errors are returned as {"error": message}: 400 for invalid requests,
429 when Regulations.gov rate-limits a direct listing, 500 otherwise.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from regassist import __version__
from regassist.adapters.rest.dependencies import set_factory
from regassist.adapters.rest.routers import analysis, briefing, chat, status
from regassist.domain.exceptions import (
    DomainError,
    InvalidRequestError,
    UpstreamRateLimitedError,
)
from regassist.factory import ServiceFactory
from regassist.infrastructure.config import Settings
from regassist.infrastructure.logging_cfg import setup_logging

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    factory: Optional[ServiceFactory] = None,
) -> FastAPI:
    """Build the app. A prebuilt factory (tests) skips credential checks."""
    settings = settings or (factory.config if factory else Settings.from_env())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Build the ServiceFactory on startup, release it on shutdown."""
        setup_logging(settings.log_level)
        active = factory
        if active is None:
            settings.validate()
            active = ServiceFactory(settings)
        set_factory(active)
        yield
        set_factory(None)
        if factory is None:
            active.close()

    app = FastAPI(
        title="Regulations.gov Assistant",
        version=__version__,
        description="Conversational search, briefings and analysis over Regulations.gov.",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, _validation_error)
    app.add_exception_handler(DomainError, _domain_error)

    # Register routers
    app.include_router(chat.router)
    app.include_router(briefing.router)
    app.include_router(analysis.router)
    app.include_router(status.router)

    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "ok", "version": __version__}

    return app


async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}"
        for err in exc.errors()
    )
    return JSONResponse(status_code=400, content={"error": details or "Invalid request"})


async def _domain_error(request: Request, exc: DomainError) -> JSONResponse:
    if isinstance(exc, InvalidRequestError):
        code = 400
    elif isinstance(exc, UpstreamRateLimitedError):
        code = 429
    else:
        code = 500
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=code, content={"error": str(exc)})


app = create_app()

"""API composition root."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cherry_bridge import deploy_from_settings
from cherry_core import CherrySettings, load_settings, setup_logging

from . import dependencies
from .middleware import RequestContextMiddleware, register_exception_handlers
from .routers import bridge as bridge_router
from .routers import escrow as escrow_router
from .routers import events as events_router

API_VERSION = "0.1.0"

logger = logging.getLogger("cherry.api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting Cherry API...")
    yield
    logger.info("Shutting down Cherry API...")


def create_app(settings: CherrySettings | None = None) -> FastAPI:
    settings = settings or load_settings()
    setup_logging(level=settings.log_level, json_format=settings.json_logs)

    app = FastAPI(
        title="Cherry Escrow Bridge API",
        version=API_VERSION,
        openapi_url="/api/v1/openapi.json",
        docs_url="/api/v1/docs",
        lifespan=lifespan,
    )

    app.add_middleware(
        RequestContextMiddleware,
        exclude_paths=["/health", "/api/v1/docs", "/api/v1/openapi.json"],
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "X-Request-ID", "X-API-Key"],
    )
    register_exception_handlers(app)

    host, ledger, gateway = deploy_from_settings(settings)
    deps = dependencies.Dependencies(settings=settings, host=host, ledger=ledger, gateway=gateway)
    app.state.deps = deps
    app.dependency_overrides[dependencies.get_deps] = lambda: deps

    app.include_router(escrow_router.router, prefix="/api/v1/escrow")
    app.include_router(bridge_router.router, prefix="/api/v1/bridge")
    app.include_router(events_router.router, prefix="/api/v1/events")

    @app.get("/health", tags=["health"])
    def health():
        return {
            "status": "healthy",
            "version": API_VERSION,
            "environment": settings.environment,
            "contracts": host.contracts(),
        }

    logger.info(
        f"API initialized: escrow={settings.escrow_address} gateway={settings.gateway_address} "
        f"tokens={ledger.tokens()}"
    )
    return app

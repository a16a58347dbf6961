"""
apim_orchestrator.api.app

FastAPI app factory for the APIM orchestrator service.

Responsibilities:
- Build the FastAPI application and register routers/middleware.
- Create and dispose shared infrastructure (ARM HTTP client, token provider).
- Map ARM/gateway faults to HTTP responses.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.status import HTTP_404_NOT_FOUND, HTTP_502_BAD_GATEWAY

from apim_orchestrator.api.routers.apim import router as apim_router
from apim_orchestrator.api.routers.dev_auth import router as dev_auth_router
from apim_orchestrator.api.routers.health import router as health_router
from apim_orchestrator.azure_clients.arm import AzureIdentityTokenProvider, TokenProvider
from apim_orchestrator.errors import ArmError, GatewayNotFoundError, ResourceNotFoundError
from apim_orchestrator.observability.logging import configure_logging, get_logger
from apim_orchestrator.observability.middleware import RequestContextMiddleware
from apim_orchestrator.services.factory import create_arm_http
from apim_orchestrator.settings import Settings

log = get_logger(__name__)


def create_app(*, settings: Settings, tokens: TokenProvider | None = None) -> FastAPI:
    configure_logging(app_name=settings.app_name, level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        # One ARM client per process; request handlers reach it through `api.deps`.
        app.state.arm_http = create_arm_http(settings)
        app.state.tokens = tokens or AzureIdentityTokenProvider()
        try:
            yield
        finally:
            await app.state.arm_http.aclose()
            close = getattr(app.state.tokens, "close", None)
            if close is not None:
                await close()
            log.info("shutdown")

    app = FastAPI(
        title="API Management Orchestrator",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        openapi_url="/openapi.json",
    )

    app.add_middleware(RequestContextMiddleware)
    app.include_router(health_router, tags=["health"])
    app.include_router(dev_auth_router)
    app.include_router(apim_router)

    @app.exception_handler(ArmError)
    async def _arm_error(_: Request, exc: ArmError) -> JSONResponse:
        status = HTTP_404_NOT_FOUND if isinstance(exc, ResourceNotFoundError) else HTTP_502_BAD_GATEWAY
        log.warning("arm.error", status_code=exc.status_code, code=exc.code, message=exc.message)
        return JSONResponse(
            status_code=status,
            content={"error": exc.code, "message": exc.message, "upstream_status": exc.status_code},
        )

    @app.exception_handler(GatewayNotFoundError)
    async def _gateway_missing(_: Request, exc: GatewayNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=HTTP_404_NOT_FOUND, content={"error": "GatewayNotFound", "message": str(exc)})

    return app


# --- Module Notes -----------------------------------------------------------
# App composition stays here; deployment logic stays in the services layer.

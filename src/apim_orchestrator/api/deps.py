"""
apim_orchestrator.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide dependency functions for settings and the shared ARM transport.
- Build a request-scoped orchestrator / deploy service from settings.
"""

from __future__ import annotations

import httpx
from fastapi import Depends, HTTPException, Request
from pydantic import ValidationError
from starlette.status import HTTP_503_SERVICE_UNAVAILABLE

from apim_orchestrator.azure_clients.arm import TokenProvider
from apim_orchestrator.observability.logging import get_logger
from apim_orchestrator.services.apim_service import ApiManagementOrchestrator
from apim_orchestrator.services.deploy_service import ApimDeployService
from apim_orchestrator.services.factory import build_deploy_service, build_orchestrator
from apim_orchestrator.settings import Settings, get_settings

log = get_logger(__name__)


def settings_dep() -> Settings:
    return get_settings()


def arm_http_from_app(request: Request) -> httpx.AsyncClient:
    # Created on app startup in `apim_orchestrator.api.app.create_app`.
    return request.app.state.arm_http  # type: ignore[attr-defined]


def tokens_from_app(request: Request) -> TokenProvider:
    return request.app.state.tokens  # type: ignore[attr-defined]


def orchestrator_dep(
    settings: Settings = Depends(settings_dep),
    http: httpx.AsyncClient = Depends(arm_http_from_app),
    tokens: TokenProvider = Depends(tokens_from_app),
) -> ApiManagementOrchestrator | None:
    try:
        config = settings.deployment_config()
    except ValidationError as exc:
        # A gateway is named but the rest of the target is incomplete.
        log.warning("apim.config.invalid", errors=exc.error_count())
        raise HTTPException(
            status_code=HTTP_503_SERVICE_UNAVAILABLE, detail="Invalid deployment configuration"
        ) from exc
    if config is None:
        return None
    return build_orchestrator(settings=settings, config=config, http=http, tokens=tokens)


def deploy_service_dep(
    settings: Settings = Depends(settings_dep),
    orchestrator: ApiManagementOrchestrator | None = Depends(orchestrator_dep),
) -> ApimDeployService:
    return build_deploy_service(settings=settings, orchestrator=orchestrator)


# --- Module Notes -----------------------------------------------------------
# Tests replace `orchestrator_dep` through `app.dependency_overrides` to inject fakes.

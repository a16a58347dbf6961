"""
apim_orchestrator.services.factory

Composition helpers for the orchestrator and its ARM-backed collaborators.

Responsibilities:
- Build the shared `httpx.AsyncClient` pointed at Azure Resource Manager.
- Wire concrete clients into `ApiManagementOrchestrator` / `ApimDeployService`.
"""

from __future__ import annotations

import httpx

from apim_orchestrator.azure_clients.apim import (
    ApiClient,
    ApiManagementServiceClient,
    BackendClient,
    PropertyClient,
)
from apim_orchestrator.azure_clients.arm import ArmHttpClient, TokenProvider
from apim_orchestrator.azure_clients.function_app import FunctionAppClient
from apim_orchestrator.domain.models import DeploymentConfig
from apim_orchestrator.services.apim_service import ApiManagementOrchestrator
from apim_orchestrator.services.deploy_service import ApimDeployService
from apim_orchestrator.settings import Settings


def create_arm_http(settings: Settings, **kwargs) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url=settings.arm_base_url,
        timeout=settings.http_timeout_seconds,
        **kwargs,
    )


def build_orchestrator(
    *,
    settings: Settings,
    config: DeploymentConfig,
    http: httpx.AsyncClient,
    tokens: TokenProvider,
) -> ApiManagementOrchestrator:
    arm = ArmHttpClient(http=http, tokens=tokens, subscription_id=settings.subscription_id)
    return ApiManagementOrchestrator(
        config=config,
        resolver=FunctionAppClient(
            arm=arm,
            resource_group=config.resource_group,
            app_name=config.function_app_name or config.service_name,
            api_version=settings.web_api_version,
        ),
        service_client=ApiManagementServiceClient(arm=arm, api_version=settings.apim_api_version),
        api_client=ApiClient(arm=arm, api_version=settings.apim_api_version),
        backend_client=BackendClient(arm=arm, api_version=settings.apim_api_version),
        property_client=PropertyClient(arm=arm, api_version=settings.apim_api_version),
    )


def build_deploy_service(
    *,
    settings: Settings,
    orchestrator: ApiManagementOrchestrator | None,
) -> ApimDeployService:
    return ApimDeployService(
        orchestrator=orchestrator,
        max_retries=settings.deploy_max_retries,
        retry_wait_seconds=settings.deploy_retry_wait_seconds,
    )


# --- Module Notes -----------------------------------------------------------
# Clients are orchestrator-owned dependencies; nothing here is a module-level singleton.

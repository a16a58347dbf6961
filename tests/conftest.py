"""
tests.conftest

Shared fixtures and fakes.

Responsibilities:
- Provide a deployment configuration mirroring a typical single-API setup.
- Provide substitutable fakes for the Function App resolver and APIM resource clients.
"""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from apim_orchestrator.domain.models import (
    ApiContract,
    ApiManagementService,
    ApiSpec,
    ComputeApp,
    DeploymentConfig,
)
from apim_orchestrator.services.apim_service import ApiManagementOrchestrator


class StaticTokens:
    async def get_token(self) -> str:
        return "test-token"


class FakeResolver:
    def __init__(
        self,
        *,
        app: ComputeApp | None = None,
        master_key: str = "ABC123",
        app_error: Exception | None = None,
        key_error: Exception | None = None,
        app_blocks: bool = False,
    ) -> None:
        self.app = app
        self.master_key = master_key
        self.app_error = app_error
        self.key_error = key_error
        self.app_blocks = app_blocks
        self.app_cancelled = False

    async def resolve_app(self) -> ComputeApp:
        if self.app_blocks:
            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                self.app_cancelled = True
                raise
        if self.app_error is not None:
            raise self.app_error
        assert self.app is not None
        return self.app

    async def resolve_master_key(self) -> str:
        if self.key_error is not None:
            raise self.key_error
        return self.master_key


class FakeServiceReader:
    def __init__(self, *, result: ApiManagementService | None = None, error: Exception | None = None) -> None:
        self.result = result
        self.error = error
        self.calls: list[tuple[str, str]] = []

    async def get(self, resource_group: str, service_name: str) -> ApiManagementService:
        self.calls.append((resource_group, service_name))
        if self.error is not None:
            raise self.error
        assert self.result is not None
        return self.result


class FakeResourceClient:
    """
    Records calls; `create_or_update` returns `result` (or echoes the descriptor).
    """

    def __init__(
        self,
        kind: str,
        journal: list[str],
        *,
        result: Any = None,
        error: Exception | None = None,
        get_result: Any = None,
        get_error: Exception | None = None,
    ) -> None:
        self.kind = kind
        self.journal = journal
        self.result = result
        self.error = error
        self.get_result = get_result
        self.get_error = get_error
        self.calls: list[tuple[str, str, str, Any]] = []
        self.get_calls: list[tuple[str, str, str]] = []

    async def get(self, resource_group: str, service_name: str, resource_id: str) -> Any:
        self.get_calls.append((resource_group, service_name, resource_id))
        if self.get_error is not None:
            raise self.get_error
        return self.get_result

    async def create_or_update(
        self, resource_group: str, service_name: str, resource_id: str, descriptor: Any
    ) -> Any:
        self.journal.append(self.kind)
        self.calls.append((resource_group, service_name, resource_id, descriptor))
        if self.error is not None:
            raise self.error
        return self.result if self.result is not None else descriptor


class Fakes:
    def __init__(self, config: DeploymentConfig) -> None:
        self.config = config
        self.journal: list[str] = []
        self.resolver = FakeResolver(
            app=ComputeApp(
                id="/testapp1",
                name="Test Site",
                location="West US",
                default_host_name="testsite.azurewebsites.net",
            )
        )
        self.service = FakeServiceReader(
            result=ApiManagementService(
                id="/subscriptions/ABC123/resourceGroups/test-sls-rg/providers/Microsoft.ApiManagement/service/test-apim-resource",
                name="test-apim-resource",
                location="West US",
            )
        )
        self.apis = FakeResourceClient("api", self.journal)
        self.backends = FakeResourceClient("backend", self.journal)
        self.properties = FakeResourceClient("property", self.journal)

    def orchestrator(self) -> ApiManagementOrchestrator:
        return ApiManagementOrchestrator(
            config=self.config,
            resolver=self.resolver,
            service_client=self.service,
            api_client=self.apis,
            backend_client=self.backends,
            property_client=self.properties,
        )


@pytest.fixture
def deployment_config() -> DeploymentConfig:
    return DeploymentConfig(
        service_name="test-sls",
        resource_group="test-sls-rg",
        location="West US",
        gateway_service_name="test-apim-resource",
        api=ApiSpec(
            name="test-apim-api1",
            subscription_required=False,
            display_name="API 1",
            description="description of api 1",
            protocols=["https"],
            path="test-api1",
        ),
    )


@pytest.fixture
def fakes(deployment_config: DeploymentConfig) -> Fakes:
    return Fakes(deployment_config)


@pytest.fixture
def api_result(deployment_config: DeploymentConfig) -> ApiContract:
    api = deployment_config.api
    return ApiContract(
        id=api.name,
        name=api.name,
        is_current=True,
        subscription_required=api.subscription_required,
        display_name=api.display_name,
        description=api.description,
        path=api.path,
        protocols=list(api.protocols),
    )

"""
apim_orchestrator.azure_clients.apim

ARM-backed clients for API Management resources.

Responsibilities:
- Read the API Management service instance.
- Get / create-or-update APIs, Backends and named values (Properties).
"""

from __future__ import annotations

from typing import Any, ClassVar, Generic, TypeVar

from apim_orchestrator.azure_clients.arm import ArmHttpClient
from apim_orchestrator.domain.models import (
    ApiContract,
    ApiManagementService,
    BackendContract,
    PropertyContract,
)

C = TypeVar("C", ApiContract, BackendContract, PropertyContract)

APIM_PROVIDER = "providers/Microsoft.ApiManagement/service"


class ApiManagementServiceClient:
    def __init__(self, *, arm: ArmHttpClient, api_version: str) -> None:
        self._arm = arm
        self._api_version = api_version

    async def get(self, resource_group: str, service_name: str) -> ApiManagementService:
        path = f"{self._arm.resource_group_path(resource_group)}/{APIM_PROVIDER}/{service_name}"
        js = await self._arm.get(path, api_version=self._api_version)
        return ApiManagementService.from_arm(js)


class _ChildResourceClient(Generic[C]):
    # Collection segment under the service, e.g. "apis" or "backends".
    collection: ClassVar[str]

    def __init__(self, *, arm: ArmHttpClient, api_version: str) -> None:
        self._arm = arm
        self._api_version = api_version

    def _path(self, resource_group: str, service_name: str, resource_id: str) -> str:
        return (
            f"{self._arm.resource_group_path(resource_group)}/{APIM_PROVIDER}/{service_name}"
            f"/{self.collection}/{resource_id}"
        )

    def _parse(self, js: dict[str, Any]) -> C:
        raise NotImplementedError

    async def get(self, resource_group: str, service_name: str, resource_id: str) -> C:
        js = await self._arm.get(
            self._path(resource_group, service_name, resource_id), api_version=self._api_version
        )
        return self._parse(js)

    async def create_or_update(
        self, resource_group: str, service_name: str, resource_id: str, descriptor: C
    ) -> C:
        js = await self._arm.put(
            self._path(resource_group, service_name, resource_id),
            api_version=self._api_version,
            body=descriptor.to_arm(),
        )
        return self._parse(js)


class ApiClient(_ChildResourceClient[ApiContract]):
    collection = "apis"

    def _parse(self, js: dict[str, Any]) -> ApiContract:
        return ApiContract.from_arm(js)


class BackendClient(_ChildResourceClient[BackendContract]):
    collection = "backends"

    def _parse(self, js: dict[str, Any]) -> BackendContract:
        return BackendContract.from_arm(js)


class PropertyClient(_ChildResourceClient[PropertyContract]):
    # Named values were exposed as "properties" in the 2019-01-01 API version.
    collection = "properties"

    def _parse(self, js: dict[str, Any]) -> PropertyContract:
        return PropertyContract.from_arm(js)


# --- Module Notes -----------------------------------------------------------
# All calls are idempotent PUT/GET operations; repeating a deployment is safe.

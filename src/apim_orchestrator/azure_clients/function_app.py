"""
apim_orchestrator.azure_clients.function_app

Function App lookups used while wiring a backend.

Responsibilities:
- Resolve the Function App descriptor (id, name, location, default host name).
- Resolve the Function App host master key.
"""

from __future__ import annotations

from apim_orchestrator.azure_clients.arm import ArmHttpClient
from apim_orchestrator.domain.models import ComputeApp
from apim_orchestrator.errors import MasterKeyMissingError

WEB_PROVIDER = "providers/Microsoft.Web/sites"


class FunctionAppClient:
    """
    `ComputeAppResolver` backed by the Microsoft.Web resource provider.
    """

    def __init__(
        self,
        *,
        arm: ArmHttpClient,
        resource_group: str,
        app_name: str,
        api_version: str,
    ) -> None:
        self._arm = arm
        self._resource_group = resource_group
        self._app_name = app_name
        self._api_version = api_version

    def _site_path(self) -> str:
        return f"{self._arm.resource_group_path(self._resource_group)}/{WEB_PROVIDER}/{self._app_name}"

    async def resolve_app(self) -> ComputeApp:
        js = await self._arm.get(self._site_path(), api_version=self._api_version)
        return ComputeApp.from_arm(js)

    async def resolve_master_key(self) -> str:
        js = await self._arm.post(
            f"{self._site_path()}/host/default/listkeys", api_version=self._api_version
        )
        key = js.get("masterKey")
        if not key:
            raise MasterKeyMissingError(self._app_name)
        return str(key)


# --- Module Notes -----------------------------------------------------------
# The master key is returned to the caller only; it is never logged or cached here.

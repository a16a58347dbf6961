"""
apim_orchestrator.azure_clients.arm

Thin async client for the Azure Resource Manager REST API.

Responsibilities:
- Attach an AAD bearer token and the `api-version` query parameter to every call.
- Map HTTP status faults into the `apim_orchestrator.errors` hierarchy.
- Return decoded JSON bodies; no retries (callers decide via `run_with_retry`).
"""

from __future__ import annotations

from typing import Any, Protocol

import httpx
from azure.identity.aio import DefaultAzureCredential

from apim_orchestrator.errors import ArmRequestError, ResourceNotFoundError
from apim_orchestrator.observability.middleware import current_request_id

ARM_SCOPE = "https://management.azure.com/.default"


class TokenProvider(Protocol):
    async def get_token(self) -> str: ...


class AzureIdentityTokenProvider:
    """
    Acquires ARM tokens via `azure-identity` (env vars, managed identity, Azure CLI, ...).
    """

    def __init__(self, credential: DefaultAzureCredential | None = None) -> None:
        self._credential = credential or DefaultAzureCredential()

    async def get_token(self) -> str:
        # azure-identity caches tokens internally and refreshes them before expiry.
        access = await self._credential.get_token(ARM_SCOPE)
        return access.token

    async def close(self) -> None:
        await self._credential.close()


class ArmHttpClient:
    def __init__(
        self,
        *,
        http: httpx.AsyncClient,
        tokens: TokenProvider,
        subscription_id: str,
    ) -> None:
        self._http = http
        self._tokens = tokens
        self._subscription_id = subscription_id

    def resource_group_path(self, resource_group: str) -> str:
        return f"/subscriptions/{self._subscription_id}/resourceGroups/{resource_group}"

    async def get(self, path: str, *, api_version: str) -> dict[str, Any]:
        return await self._send("GET", path, api_version=api_version)

    async def put(self, path: str, *, api_version: str, body: dict[str, Any]) -> dict[str, Any]:
        return await self._send("PUT", path, api_version=api_version, body=body)

    async def post(
        self, path: str, *, api_version: str, body: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        return await self._send("POST", path, api_version=api_version, body=body)

    async def _send(
        self,
        method: str,
        path: str,
        *,
        api_version: str,
        body: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        token = await self._tokens.get_token()
        headers = {"Authorization": f"Bearer {token}", "Accept": "application/json"}
        request_id = current_request_id()
        if request_id:
            headers["x-ms-client-request-id"] = request_id
        r = await self._http.request(
            method,
            path,
            params={"api-version": api_version},
            headers=headers,
            json=body,
        )
        if r.status_code == 404:
            raise _arm_error(ResourceNotFoundError, r)
        if not r.is_success:
            raise _arm_error(ArmRequestError, r)
        if not r.content:
            return {}
        return r.json()


def _arm_error(
    error_cls: type[ResourceNotFoundError] | type[ArmRequestError], r: httpx.Response
) -> ResourceNotFoundError | ArmRequestError:
    # ARM error envelope: {"error": {"code": "...", "message": "...", "details": [...]}}
    code: str | None = None
    message = f"ARM request failed with status {r.status_code}"
    details: dict[str, Any] = {"method": r.request.method, "path": r.request.url.path}
    try:
        payload = r.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict) and isinstance(payload.get("error"), dict):
        err = payload["error"]
        code = err.get("code")
        message = str(err.get("message") or message)
        if err.get("details"):
            details["details"] = err["details"]
    return error_cls(message, status_code=r.status_code, code=code, details=details)


# --- Module Notes -----------------------------------------------------------
# Timeouts are owned by the injected `httpx.AsyncClient`; this client never imposes its own.

"""
apim_orchestrator.azure_clients.protocols

Capability interfaces consumed by the orchestrator.

Responsibilities:
- Describe the Function App resolver and the per-resource-kind APIM clients.
- Let tests (and alternative transports) substitute fakes without monkey-patching.
"""

from __future__ import annotations

from typing import Protocol, TypeVar

from apim_orchestrator.domain.models import ApiManagementService, ComputeApp

R = TypeVar("R")


class ComputeAppResolver(Protocol):
    async def resolve_app(self) -> ComputeApp: ...

    async def resolve_master_key(self) -> str: ...


class ServiceReader(Protocol):
    async def get(self, resource_group: str, service_name: str) -> ApiManagementService: ...


class ResourceClient(Protocol[R]):
    """
    One instance per APIM child resource kind (API, Backend, Property).

    `get` raises `ResourceNotFoundError` when the resource does not exist.
    """

    async def get(self, resource_group: str, service_name: str, resource_id: str) -> R: ...

    async def create_or_update(
        self, resource_group: str, service_name: str, resource_id: str, descriptor: R
    ) -> R: ...


# --- Module Notes -----------------------------------------------------------
# Concrete ARM-backed implementations live in `azure_clients.apim` and
# `azure_clients.function_app`.

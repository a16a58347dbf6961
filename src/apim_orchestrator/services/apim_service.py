"""
apim_orchestrator.services.apim_service

API Management deployment orchestrator.

Responsibilities:
- Read the gateway (APIM service) and the configured API, mapping "not found" to None.
- Resolve the Function App and its master key, then upsert API -> Backend -> Property.
- Stop at the first failure and propagate it unchanged (no rollback, no retries).
"""

from __future__ import annotations

import asyncio

from apim_orchestrator.azure_clients.protocols import ComputeAppResolver, ResourceClient, ServiceReader
from apim_orchestrator.domain.models import (
    ApiContract,
    ApiManagementService,
    BackendContract,
    ComputeApp,
    DeploymentConfig,
    PropertyContract,
)
from apim_orchestrator.errors import ResourceNotFoundError
from apim_orchestrator.observability.logging import get_logger

log = get_logger(__name__)


class ApiManagementOrchestrator:
    """
    Stateless between calls: every deployment rebuilds its descriptors from
    `DeploymentConfig` plus freshly resolved Function App metadata.
    """

    def __init__(
        self,
        *,
        config: DeploymentConfig,
        resolver: ComputeAppResolver,
        service_client: ServiceReader,
        api_client: ResourceClient[ApiContract],
        backend_client: ResourceClient[BackendContract],
        property_client: ResourceClient[PropertyContract],
    ) -> None:
        self._config = config
        self._resolver = resolver
        self._service_client = service_client
        self._api_client = api_client
        self._backend_client = backend_client
        self._property_client = property_client
        self._log = log.bind(
            resource_group=config.resource_group,
            gateway=config.gateway_service_name,
        )

    @property
    def config(self) -> DeploymentConfig:
        return self._config

    async def get(self) -> ApiManagementService | None:
        try:
            return await self._service_client.get(
                self._config.resource_group, self._config.gateway_service_name
            )
        except ResourceNotFoundError:
            self._log.info("apim.service.not_found")
            return None

    async def get_api(self) -> ApiContract | None:
        try:
            return await self._api_client.get(
                self._config.resource_group,
                self._config.gateway_service_name,
                self._config.api.name,
            )
        except ResourceNotFoundError:
            self._log.info("apim.api.not_found", api=self._config.api.name)
            return None

    async def deploy_api(self) -> ApiContract:
        cfg = self._config
        self._log.info("apim.deploy.start", api=cfg.api.name, backend=cfg.backend_name)

        app, master_key = await self._resolve_function_app()

        api = ApiContract.from_spec(cfg.api)
        backend = BackendContract.for_function_app(
            service_name=cfg.service_name, spec=cfg.backend, app=app
        )
        prop = PropertyContract.for_master_key(service_name=cfg.service_name, master_key=master_key)

        # Fixed order; each step only runs once the previous upsert has succeeded.
        result = await self._api_client.create_or_update(
            cfg.resource_group, cfg.gateway_service_name, cfg.api.name, api
        )
        self._log.info("apim.api.upserted", api=cfg.api.name, path=api.path)

        await self._backend_client.create_or_update(
            cfg.resource_group, cfg.gateway_service_name, cfg.backend_name, backend
        )
        self._log.info("apim.backend.upserted", backend=cfg.backend_name, url=backend.url)

        await self._property_client.create_or_update(
            cfg.resource_group, cfg.gateway_service_name, prop.display_name, prop
        )
        self._log.info("apim.property.upserted", property=prop.display_name)

        self._log.info("apim.deploy.done", api=cfg.api.name)
        return result

    async def _resolve_function_app(self) -> tuple[ComputeApp, str]:
        # Independent lookups: run concurrently, fail on the first fault without
        # waiting for the other side. If both have failed, the app fault is raised.
        app_task = asyncio.create_task(self._resolver.resolve_app())
        key_task = asyncio.create_task(self._resolver.resolve_master_key())
        tasks = (app_task, key_task)
        try:
            done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
            errors = [t.exception() for t in tasks if t in done]
            for err in errors:
                if err is not None:
                    self._log.warning("apim.resolve.failed", error_type=type(err).__name__)
                    raise err
        finally:
            pending = [t for t in tasks if not t.done()]
            for t in pending:
                t.cancel()
            # Nothing keeps running once the outcome is decided.
            await asyncio.gather(*pending, return_exceptions=True)
        app = app_task.result()
        self._log.info("apim.resolve.done", app=app.name, host=app.default_host_name)
        return app, key_task.result()


# --- Module Notes -----------------------------------------------------------
# Retrying is the caller's decision: wrap `deploy_api` (or single calls) with
# `apim_orchestrator.retry.run_with_retry`; upserts are idempotent so a rerun is safe.

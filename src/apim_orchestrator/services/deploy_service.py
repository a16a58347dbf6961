"""
apim_orchestrator.services.deploy_service

End-to-end APIM deployment flow.

Responsibilities:
- Skip cleanly when no API Management target is configured.
- Require the gateway instance to exist (this service never creates gateways).
- Run the API/Backend/Property deployment under the configured retry policy.
"""

from __future__ import annotations

from apim_orchestrator.domain.models import ApiContract
from apim_orchestrator.errors import GatewayNotFoundError
from apim_orchestrator.observability.logging import get_logger
from apim_orchestrator.retry import run_with_retry
from apim_orchestrator.services.apim_service import ApiManagementOrchestrator

log = get_logger(__name__)


class ApimDeployService:
    def __init__(
        self,
        *,
        orchestrator: ApiManagementOrchestrator | None,
        max_retries: int,
        retry_wait_seconds: float,
    ) -> None:
        self._orchestrator = orchestrator
        self._max_retries = max_retries
        self._retry_wait_seconds = retry_wait_seconds

    async def deploy(self) -> ApiContract | None:
        orch = self._orchestrator
        if orch is None:
            log.info("apim.skipped", reason="no API Management service configured")
            return None

        cfg = orch.config
        service = await orch.get()
        if service is None:
            raise GatewayNotFoundError(
                resource_group=cfg.resource_group,
                gateway_service_name=cfg.gateway_service_name,
            )
        log.info("apim.service.found", gateway=service.name, location=service.location)

        async def _attempt(attempt: int) -> ApiContract:
            if attempt > 1:
                log.warning("apim.deploy.retry", attempt=attempt, max_retries=self._max_retries)
            return await orch.deploy_api()

        return await run_with_retry(
            _attempt,
            max_retries=self._max_retries,
            retry_wait=self._retry_wait_seconds,
        )


# --- Module Notes -----------------------------------------------------------
# The whole `deploy_api` call is retried; already-upserted resources are simply updated
# again on the next attempt.

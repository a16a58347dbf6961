"""
apim_orchestrator.api.routers.apim

API Management endpoints.

Responsibilities:
- Read the configured gateway instance and API.
- Trigger an API/Backend/Property deployment.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from starlette.status import HTTP_404_NOT_FOUND

from apim_orchestrator.api.deps import deploy_service_dep, orchestrator_dep
from apim_orchestrator.auth.deps import get_principal, require_roles
from apim_orchestrator.auth.models import ROLE_DEPLOYER, ROLE_READER, Principal
from apim_orchestrator.domain.models import ApiContract
from apim_orchestrator.observability.logging import get_logger
from apim_orchestrator.services.apim_service import ApiManagementOrchestrator
from apim_orchestrator.services.deploy_service import ApimDeployService

router = APIRouter(prefix="/v1/apim", tags=["apim"])
log = get_logger(__name__)


class ServiceResponse(BaseModel):
    id: str
    name: str
    location: str
    sku_name: str | None = None
    gateway_url: str | None = None


class ApiResponse(BaseModel):
    id: str | None = None
    name: str | None = None
    is_current: bool
    subscription_required: bool
    display_name: str
    description: str
    path: str
    protocols: list[str]

    @classmethod
    def from_contract(cls, api: ApiContract) -> ApiResponse:
        return cls(
            id=api.id,
            name=api.name,
            is_current=api.is_current,
            subscription_required=api.subscription_required,
            display_name=api.display_name,
            description=api.description,
            path=api.path,
            protocols=list(api.protocols),
        )


class DeployResponse(BaseModel):
    status: str
    api: ApiResponse | None = None


def _require_orchestrator(orch: ApiManagementOrchestrator | None) -> ApiManagementOrchestrator:
    if orch is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="API Management is not configured")
    return orch


@router.get(
    "/service",
    response_model=ServiceResponse,
    dependencies=[Depends(require_roles(ROLE_READER))],
)
async def get_service(
    orch: ApiManagementOrchestrator | None = Depends(orchestrator_dep),
) -> ServiceResponse:
    service = await _require_orchestrator(orch).get()
    if service is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="API Management service not found")
    return ServiceResponse(
        id=service.id,
        name=service.name,
        location=service.location,
        sku_name=service.sku_name,
        gateway_url=service.gateway_url,
    )


@router.get(
    "/api",
    response_model=ApiResponse,
    dependencies=[Depends(require_roles(ROLE_READER))],
)
async def get_api(
    orch: ApiManagementOrchestrator | None = Depends(orchestrator_dep),
) -> ApiResponse:
    api = await _require_orchestrator(orch).get_api()
    if api is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="API not found")
    return ApiResponse.from_contract(api)


@router.post(
    "/deploy",
    response_model=DeployResponse,
    dependencies=[Depends(require_roles(ROLE_DEPLOYER))],
)
async def deploy(
    principal: Principal = Depends(get_principal),
    svc: ApimDeployService = Depends(deploy_service_dep),
) -> DeployResponse:
    log.info("apim.deploy.requested", actor=principal.subject)
    api = await svc.deploy()
    if api is None:
        return DeployResponse(status="SKIPPED")
    return DeployResponse(status="DEPLOYED", api=ApiResponse.from_contract(api))

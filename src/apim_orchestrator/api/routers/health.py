"""
apim_orchestrator.api.routers.health

Health and readiness endpoints.

Responsibilities:
- Provide liveness probe (`/healthz`).
- Provide readiness probe (`/readyz`): a deployment target and subscription are configured.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError
from starlette.status import HTTP_503_SERVICE_UNAVAILABLE

from apim_orchestrator.api.deps import settings_dep
from apim_orchestrator.settings import Settings

router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(settings: Settings = Depends(settings_dep)) -> dict[str, str]:
    try:
        config = settings.deployment_config()
    except ValidationError:
        raise HTTPException(status_code=HTTP_503_SERVICE_UNAVAILABLE, detail="Invalid deployment configuration") from None
    if not settings.subscription_id or config is None:
        raise HTTPException(status_code=HTTP_503_SERVICE_UNAVAILABLE, detail="Not configured")
    return {"status": "ready"}

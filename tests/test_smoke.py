"""
tests.test_smoke

Smoke tests for the FastAPI surface.

Responsibilities:
- Ensure the app boots and serves health endpoints.
- Exercise auth and the APIM endpoints against an orchestrator built from fakes.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
import pytest
import pytest_asyncio
from conftest import Fakes, StaticTokens
from fastapi import FastAPI

from apim_orchestrator.api.app import create_app
from apim_orchestrator.api.deps import orchestrator_dep, settings_dep
from apim_orchestrator.auth.deps import jwt_config
from apim_orchestrator.auth.jwt import issue_token
from apim_orchestrator.auth.models import ROLE_DEPLOYER, ROLE_READER
from apim_orchestrator.domain.models import ApiContract
from apim_orchestrator.errors import ArmRequestError, ResourceNotFoundError
from apim_orchestrator.observability.logging import REDACTED, redact_secrets
from apim_orchestrator.settings import Settings, get_settings

SETTINGS = Settings(env="test")


def _auth(*roles: str) -> dict[str, str]:
    token = issue_token(cfg=jwt_config(SETTINGS), subject="alice", roles=list(roles))
    return {"Authorization": f"Bearer {token}"}


@asynccontextmanager
async def _serve(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    # httpx ASGITransport does not run the lifespan; drive it explicitly.
    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
            yield c


@pytest_asyncio.fixture
async def client(fakes: Fakes) -> AsyncIterator[httpx.AsyncClient]:
    app = create_app(settings=SETTINGS, tokens=StaticTokens())
    app.dependency_overrides[get_settings] = lambda: SETTINGS
    app.dependency_overrides[settings_dep] = lambda: SETTINGS
    app.dependency_overrides[orchestrator_dep] = fakes.orchestrator

    async with _serve(app) as c:
        yield c


@pytest.mark.asyncio
async def test_health_endpoints(client: httpx.AsyncClient) -> None:
    r = await client.get("/healthz")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"
    assert r.headers["x-request-id"]

    # No subscription/gateway configured in test settings.
    r = await client.get("/readyz")
    assert r.status_code == 503


@pytest.mark.asyncio
async def test_reads_require_a_token(client: httpx.AsyncClient) -> None:
    r = await client.get("/v1/apim/service")
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_deploy_requires_deployer_role(client: httpx.AsyncClient) -> None:
    r = await client.post("/v1/apim/deploy", headers=_auth(ROLE_READER))
    assert r.status_code == 403


@pytest.mark.asyncio
async def test_get_service(client: httpx.AsyncClient) -> None:
    r = await client.get("/v1/apim/service", headers=_auth(ROLE_READER))
    assert r.status_code == 200
    assert r.json()["name"] == "test-apim-resource"
    assert r.json()["location"] == "West US"


@pytest.mark.asyncio
async def test_get_api_not_found(client: httpx.AsyncClient, fakes: Fakes) -> None:
    fakes.apis.get_error = ResourceNotFoundError("missing", status_code=404)
    r = await client.get("/v1/apim/api", headers=_auth(ROLE_READER))
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_deploy(client: httpx.AsyncClient, fakes: Fakes, api_result: ApiContract) -> None:
    fakes.apis.result = api_result
    r = await client.post("/v1/apim/deploy", headers=_auth(ROLE_DEPLOYER))

    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "DEPLOYED"
    assert body["api"]["name"] == "test-apim-api1"
    assert body["api"]["is_current"] is True
    assert fakes.journal == ["api", "backend", "property"]


@pytest.mark.asyncio
async def test_arm_faults_map_to_bad_gateway(client: httpx.AsyncClient, fakes: Fakes) -> None:
    fakes.service.error = ArmRequestError("Something broke", status_code=500, code="InternalServerError")
    r = await client.get("/v1/apim/service", headers=_auth("admin"))

    assert r.status_code == 502
    assert r.json()["error"] == "InternalServerError"
    assert r.json()["upstream_status"] == 500


@pytest.mark.asyncio
async def test_dev_token_rejects_unknown_roles(client: httpx.AsyncClient) -> None:
    r = await client.post("/v1/dev/token", json={"subject": "bob", "roles": ["superuser"]})
    assert r.status_code == 422


def test_secret_fields_are_redacted() -> None:
    event = redact_secrets(None, "info", {"event": "x", "master_key": "ABC123", "api": "a"})
    assert event["master_key"] == REDACTED
    assert event["api"] == "a"


@pytest.mark.asyncio
async def test_incomplete_deployment_target_is_not_ready() -> None:
    # Gateway named, but no service or resource group.
    partial = Settings(env="test", subscription_id="sub", apim_name="gw")
    app = create_app(settings=partial, tokens=StaticTokens())
    app.dependency_overrides[get_settings] = lambda: partial
    app.dependency_overrides[settings_dep] = lambda: partial

    async with _serve(app) as c:
        r = await c.get("/readyz")
        assert r.status_code == 503

        r = await c.get("/v1/apim/service", headers=_auth(ROLE_READER))
        assert r.status_code == 503
        assert r.json()["detail"] == "Invalid deployment configuration"

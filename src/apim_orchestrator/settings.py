"""
apim_orchestrator.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (e.g., JWT secret).
- Build the read-only `DeploymentConfig` consumed by the orchestrator.
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from apim_orchestrator.domain.models import ApiSpec, BackendSpec, DeploymentConfig


class Settings(BaseSettings):
    """
    Env-driven configuration:
    - Service/runtime knobs (logging, HTTP, auth)
    - Azure Resource Manager access
    - The APIM deployment target (gateway, API and backend overrides)
    """

    model_config = SettingsConfigDict(env_prefix="APIM_", case_sensitive=False)

    env: Literal["dev", "test", "prod"] = "dev"
    app_name: str = "apim-orchestrator"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Auth
    jwt_alg: str = "HS256"
    jwt_issuer: str = "apim-orchestrator"
    jwt_audience: str = "apim-api"
    jwt_secret: str = Field(default="dev-secret-change-me", repr=False)

    # Azure Resource Manager
    subscription_id: str = ""
    arm_base_url: str = "https://management.azure.com"
    apim_api_version: str = "2019-01-01"
    web_api_version: str = "2018-11-01"
    http_timeout_seconds: float = Field(default=60.0, gt=0)

    # Retry policy applied around a whole deployment
    deploy_max_retries: int = Field(default=3, ge=1, le=10)
    deploy_retry_wait_seconds: float = Field(default=2.0, ge=0)

    # Deployment target
    service: str = ""
    resource_group: str = ""
    location: str = ""
    function_app_name: str | None = None
    apim_name: str | None = None

    api_name: str = ""
    api_display_name: str = ""
    api_description: str = ""
    api_path: str = ""
    api_protocols: list[str] = Field(default_factory=lambda: ["https"])
    api_subscription_required: bool = False

    backend_name: str | None = None
    backend_title: str | None = None
    backend_description: str | None = None
    backend_protocol: str | None = None

    def deployment_config(self) -> DeploymentConfig | None:
        # No gateway configured means there is nothing to deploy.
        if not self.apim_name:
            return None
        return DeploymentConfig(
            service_name=self.service,
            resource_group=self.resource_group,
            location=self.location,
            gateway_service_name=self.apim_name,
            function_app_name=self.function_app_name,
            api=ApiSpec(
                name=self.api_name or self.service,
                subscription_required=self.api_subscription_required,
                display_name=self.api_display_name or self.service,
                description=self.api_description,
                protocols=self.api_protocols,
                path=self.api_path or self.service,
            ),
            backend=BackendSpec(
                name=self.backend_name,
                title=self.backend_title,
                description=self.backend_description,
                protocol=self.backend_protocol,
            ),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Backend `tls`/`proxy` overrides are nested objects and are only settable through
# `DeploymentConfig` directly, not through flat environment variables.

"""
apim_orchestrator.domain.models

Deployment configuration and Azure resource contracts.

Responsibilities:
- Define the read-only deployment configuration (API + backend overrides).
- Define the resource contracts exchanged with Azure Resource Manager.
- Build the API/Backend/Property descriptors from configuration plus the resolved Function App.
- Convert contracts to/from the ARM wire shape (`{"properties": {...}}`).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

MANAGEMENT_ENDPOINT = "https://management.azure.com"
FUNCTIONS_KEY_HEADER = "x-functions-key"
DEFAULT_BACKEND_PROTOCOL = "http"


def master_key_property_name(service_name: str) -> str:
    return f"{service_name}-key"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class BackendTls(_Frozen):
    validate_certificate_chain: bool | None = Field(default=None, alias="validateCertificateChain")
    validate_certificate_name: bool | None = Field(default=None, alias="validateCertificateName")


class BackendProxy(_Frozen):
    url: str
    username: str | None = None
    password: str | None = Field(default=None, repr=False)


class ApiSpec(_Frozen):
    name: str = Field(min_length=1)
    subscription_required: bool = False
    display_name: str = Field(min_length=1)
    description: str = ""
    protocols: list[str] = Field(default_factory=lambda: ["https"])
    path: str = Field(min_length=1)

    @field_validator("protocols")
    @classmethod
    def _dedupe_protocols(cls, v: list[str]) -> list[str]:
        # Set semantics, first-seen order.
        return list(dict.fromkeys(v))


class BackendSpec(_Frozen):
    """
    Optional backend overrides.

    `name` and `protocol` are defaulted when the owning `DeploymentConfig` is built;
    `title` depends on the resolved Function App and is defaulted by `with_app_defaults`.
    """

    name: str | None = None
    title: str | None = None
    tls: BackendTls | None = None
    proxy: BackendProxy | None = None
    description: str | None = None
    protocol: str | None = None

    def with_app_defaults(self, app: ComputeApp) -> BackendSpec:
        if self.title:
            return self
        return self.model_copy(update={"title": app.name})


class DeploymentConfig(_Frozen):
    service_name: str = Field(min_length=1)
    resource_group: str = Field(min_length=1)
    location: str = ""
    gateway_service_name: str = Field(min_length=1)
    api: ApiSpec
    backend: BackendSpec = Field(default_factory=BackendSpec)
    # The Function App is named after the service unless stated otherwise.
    function_app_name: str | None = None

    @model_validator(mode="after")
    def _apply_defaults(self) -> DeploymentConfig:
        backend = self.backend.model_copy(
            update={
                "name": self.backend.name or self.service_name,
                "protocol": self.backend.protocol or DEFAULT_BACKEND_PROTOCOL,
            }
        )
        # Frozen model: bypass __setattr__ for post-validation defaults.
        object.__setattr__(self, "backend", backend)
        if not self.function_app_name:
            object.__setattr__(self, "function_app_name", self.service_name)
        return self

    @property
    def backend_name(self) -> str:
        return self.backend.name or self.service_name

    @property
    def property_name(self) -> str:
        return master_key_property_name(self.service_name)


@dataclass(frozen=True, slots=True)
class ComputeApp:
    """Function App descriptor resolved from ARM (not owned by the orchestrator)."""

    id: str
    name: str
    location: str
    default_host_name: str

    @classmethod
    def from_arm(cls, js: dict[str, Any]) -> ComputeApp:
        props = js.get("properties") or {}
        return cls(
            id=str(js.get("id", "")),
            name=str(js.get("name", "")),
            location=str(js.get("location", "")),
            default_host_name=str(props.get("defaultHostName", "")),
        )


@dataclass(frozen=True, slots=True)
class ApiManagementService:
    id: str
    name: str
    location: str
    sku_name: str | None = None
    gateway_url: str | None = None

    @classmethod
    def from_arm(cls, js: dict[str, Any]) -> ApiManagementService:
        props = js.get("properties") or {}
        sku = js.get("sku") or {}
        return cls(
            id=str(js.get("id", "")),
            name=str(js.get("name", "")),
            location=str(js.get("location", "")),
            sku_name=sku.get("name"),
            gateway_url=props.get("gatewayUrl"),
        )


@dataclass(frozen=True, slots=True)
class ApiContract:
    display_name: str
    path: str
    protocols: list[str]
    description: str = ""
    subscription_required: bool = False
    # This service never creates non-current API revisions.
    is_current: bool = True
    id: str | None = None
    name: str | None = None

    @classmethod
    def from_spec(cls, spec: ApiSpec) -> ApiContract:
        return cls(
            display_name=spec.display_name,
            path=spec.path,
            protocols=list(spec.protocols),
            description=spec.description,
            subscription_required=spec.subscription_required,
            is_current=True,
        )

    def to_arm(self) -> dict[str, Any]:
        return {
            "properties": _compact(
                {
                    "isCurrent": self.is_current,
                    "subscriptionRequired": self.subscription_required,
                    "displayName": self.display_name,
                    "description": self.description,
                    "path": self.path,
                    "protocols": list(self.protocols),
                }
            )
        }

    @classmethod
    def from_arm(cls, js: dict[str, Any]) -> ApiContract:
        props = js.get("properties") or {}
        return cls(
            id=js.get("id"),
            name=js.get("name"),
            is_current=bool(props.get("isCurrent", True)),
            subscription_required=bool(props.get("subscriptionRequired", False)),
            display_name=str(props.get("displayName", "")),
            description=str(props.get("description") or ""),
            path=str(props.get("path", "")),
            protocols=list(props.get("protocols") or []),
        )


@dataclass(frozen=True, slots=True)
class BackendCredentials:
    header: dict[str, list[str]] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class BackendContract:
    credentials: BackendCredentials
    title: str
    protocol: str
    resource_id: str
    url: str
    tls: BackendTls | None = None
    proxy: BackendProxy | None = None
    description: str | None = None

    @classmethod
    def for_function_app(
        cls, *, service_name: str, spec: BackendSpec, app: ComputeApp
    ) -> BackendContract:
        spec = spec.with_app_defaults(app)
        secret_ref = "{{" + master_key_property_name(service_name) + "}}"
        return cls(
            credentials=BackendCredentials(header={FUNCTIONS_KEY_HEADER: [secret_ref]}),
            title=spec.title or app.name,
            tls=spec.tls,
            proxy=spec.proxy,
            description=spec.description,
            protocol=spec.protocol or DEFAULT_BACKEND_PROTOCOL,
            resource_id=f"{MANAGEMENT_ENDPOINT}{app.id}",
            url=f"https://{app.default_host_name}/api",
        )

    def to_arm(self) -> dict[str, Any]:
        return {
            "properties": _compact(
                {
                    "credentials": {"header": {k: list(v) for k, v in self.credentials.header.items()}},
                    "title": self.title,
                    "tls": self.tls.model_dump(by_alias=True, exclude_none=True) if self.tls else None,
                    "proxy": self.proxy.model_dump(exclude_none=True) if self.proxy else None,
                    "description": self.description,
                    "protocol": self.protocol,
                    "resourceId": self.resource_id,
                    "url": self.url,
                }
            )
        }

    @classmethod
    def from_arm(cls, js: dict[str, Any]) -> BackendContract:
        props = js.get("properties") or {}
        creds = props.get("credentials") or {}
        tls = props.get("tls")
        proxy = props.get("proxy")
        return cls(
            credentials=BackendCredentials(
                header={str(k): list(v) for k, v in (creds.get("header") or {}).items()}
            ),
            title=str(props.get("title") or ""),
            tls=BackendTls.model_validate(tls) if tls else None,
            proxy=BackendProxy.model_validate(proxy) if proxy else None,
            description=props.get("description"),
            protocol=str(props.get("protocol") or DEFAULT_BACKEND_PROTOCOL),
            resource_id=str(props.get("resourceId") or ""),
            url=str(props.get("url", "")),
        )


@dataclass(frozen=True, slots=True)
class PropertyContract:
    display_name: str
    value: str = field(repr=False)
    # Master keys are always stored as secret named values.
    secret: bool = True

    @classmethod
    def for_master_key(cls, *, service_name: str, master_key: str) -> PropertyContract:
        return cls(
            display_name=master_key_property_name(service_name),
            secret=True,
            value=master_key,
        )

    def to_arm(self) -> dict[str, Any]:
        return {
            "properties": {
                "displayName": self.display_name,
                "secret": self.secret,
                "value": self.value,
            }
        }

    @classmethod
    def from_arm(cls, js: dict[str, Any]) -> PropertyContract:
        props = js.get("properties") or {}
        # ARM does not echo secret values back; keep what the response carries.
        return cls(
            display_name=str(props.get("displayName", "")),
            secret=bool(props.get("secret", True)),
            value=str(props.get("value") or ""),
        )


def _compact(d: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in d.items() if v is not None}


# --- Module Notes -----------------------------------------------------------
# Contracts are rebuilt from configuration on every deployment; nothing here is cached.

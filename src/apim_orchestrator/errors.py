"""
apim_orchestrator.errors

Exceptions raised at the Azure Resource Manager boundary.

Responsibilities:
- Distinguish "resource does not exist" from every other remote fault.
- Carry the ARM error envelope (code/message) without re-wrapping it upstream.
"""

from __future__ import annotations

from typing import Any


class ArmError(Exception):
    """
    Base class for faults reported by Azure Resource Manager.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code or self.__class__.__name__
        self.details = details or {}


class ResourceNotFoundError(ArmError):
    """Raised when a read targets a resource that does not exist (HTTP 404)."""


class ArmRequestError(ArmError):
    """Raised for any other non-success ARM response."""


class MasterKeyMissingError(ArmError):
    """
    Raised when `listkeys` succeeds but carries no master key.

    `status_code` is the status of that (successful) listkeys response.
    """

    def __init__(self, app_name: str, *, status_code: int = 200) -> None:
        super().__init__(
            f"Function App '{app_name}' returned no master key",
            status_code=status_code,
            code="MasterKeyMissing",
        )
        self.app_name = app_name


class GatewayNotFoundError(Exception):
    """Raised when the configured API Management instance does not exist."""

    def __init__(self, *, resource_group: str, gateway_service_name: str) -> None:
        super().__init__(
            f"API Management service '{gateway_service_name}' not found "
            f"in resource group '{resource_group}'"
        )
        self.resource_group = resource_group
        self.gateway_service_name = gateway_service_name


# --- Module Notes -----------------------------------------------------------
# Transport failures (timeouts, connection errors) surface as `httpx` exceptions and
# are propagated as-is; only HTTP status faults are mapped into this hierarchy.

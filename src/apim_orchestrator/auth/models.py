"""
apim_orchestrator.auth.models

Auth domain models.

Responsibilities:
- Define the authenticated identity type (`Principal`) injected into endpoints.
- Name the roles understood by the deployment API.
"""

from __future__ import annotations

from dataclasses import dataclass

ROLE_ADMIN = "admin"
ROLE_READER = "apim_reader"
ROLE_DEPLOYER = "apim_deployer"

KNOWN_ROLES = frozenset({ROLE_ADMIN, ROLE_READER, ROLE_DEPLOYER})


@dataclass(frozen=True, slots=True)
class Principal:
    subject: str
    roles: frozenset[str]

    @property
    def is_admin(self) -> bool:
        return ROLE_ADMIN in self.roles

    def has_all(self, required: frozenset[str]) -> bool:
        return self.is_admin or required.issubset(self.roles)

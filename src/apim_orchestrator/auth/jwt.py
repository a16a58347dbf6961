"""
apim_orchestrator.auth.jwt

JWT issuing and validation helpers.

Responsibilities:
- Issue short-lived JWTs for local/dev callers.
- Decode a bearer token into a `Principal` with strict claim requirements (iss/aud/exp/iat/sub).
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from jwt import InvalidTokenError

from apim_orchestrator.auth.models import KNOWN_ROLES, Principal


@dataclass(frozen=True, slots=True)
class JwtConfig:
    alg: str
    issuer: str
    audience: str
    secret: str


class JwtValidationError(Exception):
    pass


def issue_token(
    *,
    cfg: JwtConfig,
    subject: str,
    roles: Iterable[str],
    ttl: timedelta = timedelta(hours=1),
) -> str:
    role_list = sorted(set(roles))
    unknown = set(role_list) - KNOWN_ROLES
    if unknown:
        raise ValueError(f"unknown roles: {sorted(unknown)}")

    now = datetime.now(tz=UTC)
    payload: dict[str, Any] = {
        "iss": cfg.issuer,
        "aud": cfg.audience,
        "sub": subject,
        "roles": role_list,
        "iat": int(now.timestamp()),
        "exp": int((now + ttl).timestamp()),
    }
    return jwt.encode(payload, cfg.secret, algorithm=cfg.alg)


def decode_principal(*, cfg: JwtConfig, token: str) -> Principal:
    try:
        payload = jwt.decode(
            token,
            cfg.secret,
            algorithms=[cfg.alg],
            issuer=cfg.issuer,
            audience=cfg.audience,
            options={"require": ["exp", "iat", "iss", "aud", "sub"]},
        )
    except InvalidTokenError as e:
        raise JwtValidationError(str(e)) from e

    subject = str(payload.get("sub", ""))
    roles = payload.get("roles", [])
    if not subject:
        raise JwtValidationError("empty subject")
    if not isinstance(roles, list):
        raise JwtValidationError("roles claim must be a list")
    return Principal(subject=subject, roles=frozenset(str(r) for r in roles))


# --- Module Notes -----------------------------------------------------------
# HS256 with a shared secret keeps local setups simple; swap to RS256 + JWKS behind
# the same two functions when fronted by an identity provider.

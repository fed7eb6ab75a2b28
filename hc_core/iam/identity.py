# hc_core/iam/identity.py
"""
Caller identity built once from the verified access token.

Services never look at `request`; views build a CallerIdentity and pass it
down explicitly.
"""
from __future__ import annotations

import ipaddress
from dataclasses import dataclass, field
from uuid import UUID

from django.conf import settings


@dataclass(frozen=True)
class CallerIdentity:
    user_id: str | None
    tenant_id: UUID | None
    roles: frozenset[str] = field(default_factory=frozenset)
    origin: str | None = None

    @property
    def is_complete(self) -> bool:
        return bool(self.user_id) and self.tenant_id is not None


def _parse_uuid(value) -> UUID | None:
    if not value:
        return None
    try:
        return UUID(str(value))
    except ValueError:
        return None


def _parse_roles(value) -> frozenset[str]:
    if not value:
        return frozenset()
    if isinstance(value, str):
        value = value.split(",")
    return frozenset(str(v).strip().upper() for v in value if str(v).strip())


def _ip_or_none(value) -> str | None:
    value = (value or "").strip()
    try:
        return str(ipaddress.ip_address(value))
    except ValueError:
        return None


def request_origin(request) -> str | None:
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR")
    if forwarded:
        origin = _ip_or_none(forwarded.split(",")[0])
        if origin:
            return origin
    return _ip_or_none(request.META.get("REMOTE_ADDR"))


def from_claims(claims, *, origin: str | None = None) -> CallerIdentity:
    claims = claims or {}
    user_claim = settings.SIMPLE_JWT.get("USER_ID_CLAIM", "sub")
    user_id = claims.get(user_claim)
    return CallerIdentity(
        user_id=str(user_id) if user_id else None,
        tenant_id=_parse_uuid(claims.get(settings.HC_TENANT_CLAIM)),
        roles=_parse_roles(claims.get(settings.HC_ROLES_CLAIM)),
        origin=origin,
    )


def from_request(request) -> CallerIdentity:
    return from_claims(getattr(request, "auth", None), origin=request_origin(request))

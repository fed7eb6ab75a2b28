# hc_core/iam/guard.py
"""
Authorization guard for the visit workflow.

Stateless: callers hand in everything the decision needs (the caller,
the target's tenant, who is assigned to it, and the role resolved from the
staff directory where the action needs one). No queries happen here.

Checks run in a fixed order: identity, tenant, then role/assignment. The
first failing check is the reason reported.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterable
from uuid import UUID

from hc_core.common.exceptions import Unauthorized
from hc_core.iam.identity import CallerIdentity
from hc_core.iam.models import NurseRole


class GuardAction(str, enum.Enum):
    CREATE_VISIT = "create_visit"
    EDIT_VISIT = "edit_visit"
    SUBMIT_VISIT = "submit_visit"
    REVIEW_VISIT = "review_visit"
    READ_VISIT = "read_visit"
    READ_FAMILY_SUMMARY = "read_family_summary"
    READ_AUDIT_LOG = "read_audit_log"


class DenyReason(str, enum.Enum):
    MISSING_IDENTITY = "missing_identity"
    TENANT_MISMATCH = "tenant_mismatch"
    ROLE_MISMATCH = "role_mismatch"
    NOT_ASSIGNED_ACTOR = "not_assigned_actor"


DENY_MESSAGES = {
    DenyReason.MISSING_IDENTITY: "Unauthorized: missing user identity",
    DenyReason.TENANT_MISMATCH: "Unauthorized: tenant mismatch",
    DenyReason.ROLE_MISMATCH: "Unauthorized: role not permitted for this action",
    DenyReason.NOT_ASSIGNED_ACTOR: "Unauthorized: caller is not the assigned actor",
}


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: DenyReason | None = None

    @property
    def message(self) -> str:
        return DENY_MESSAGES[self.reason] if self.reason else "Allowed"


ALLOW = Decision(allowed=True)


@dataclass(frozen=True)
class _Rule:
    # roles that pass on their own
    roles: frozenset[str] = frozenset()
    # assigned actors pass regardless of role
    assignee: bool = False


_POLICY: dict[GuardAction, _Rule] = {
    GuardAction.CREATE_VISIT: _Rule(assignee=True),
    GuardAction.EDIT_VISIT: _Rule(assignee=True),
    GuardAction.SUBMIT_VISIT: _Rule(assignee=True),
    GuardAction.REVIEW_VISIT: _Rule(roles=frozenset({NurseRole.ADMIN.value})),
    GuardAction.READ_VISIT: _Rule(
        roles=frozenset({NurseRole.ADMIN.value, NurseRole.COORDINATOR.value}),
        assignee=True,
    ),
    GuardAction.READ_FAMILY_SUMMARY: _Rule(assignee=True),
    GuardAction.READ_AUDIT_LOG: _Rule(roles=frozenset({NurseRole.ADMIN.value})),
}


def authorize(
    identity: CallerIdentity | None,
    action: GuardAction,
    *,
    tenant_id: UUID | None,
    assigned_user_ids: Iterable[str] = (),
    resolved_role: str | None = None,
) -> Decision:
    """
    Decide whether `identity` may perform `action` on a target in `tenant_id`.

    `resolved_role` is the role looked up from the staff directory; when given
    it replaces the token's role claims. Pass an empty string when the
    lookup found no active staff record.
    """
    if identity is None or not identity.is_complete:
        return Decision(allowed=False, reason=DenyReason.MISSING_IDENTITY)

    if tenant_id is None or str(identity.tenant_id) != str(tenant_id):
        return Decision(allowed=False, reason=DenyReason.TENANT_MISMATCH)

    rule = _POLICY[action]
    roles = set(identity.roles) if resolved_role is None else {resolved_role}

    if rule.roles and roles & rule.roles:
        return ALLOW

    if rule.assignee:
        if identity.user_id in {str(u) for u in assigned_user_ids if u}:
            return ALLOW
        if not rule.roles:
            return Decision(allowed=False, reason=DenyReason.NOT_ASSIGNED_ACTOR)

    return Decision(allowed=False, reason=DenyReason.ROLE_MISMATCH)


def require(
    identity: CallerIdentity | None,
    action: GuardAction,
    *,
    tenant_id: UUID | None,
    assigned_user_ids: Iterable[str] = (),
    resolved_role: str | None = None,
) -> None:
    decision = authorize(
        identity,
        action,
        tenant_id=tenant_id,
        assigned_user_ids=assigned_user_ids,
        resolved_role=resolved_role,
    )
    if not decision.allowed:
        raise Unauthorized(decision.message, details={"reason": decision.reason.value})


def require_identity(identity: CallerIdentity | None) -> CallerIdentity:
    if identity is None or not identity.is_complete:
        raise Unauthorized(
            DENY_MESSAGES[DenyReason.MISSING_IDENTITY],
            details={"reason": DenyReason.MISSING_IDENTITY.value},
        )
    return identity

import uuid

import pytest

from hc_core.common.exceptions import Unauthorized
from hc_core.iam.guard import DenyReason, GuardAction, authorize, require, require_identity
from hc_core.iam.identity import CallerIdentity

T1 = uuid.uuid4()
T2 = uuid.uuid4()


def ident(user_id="n1", tenant_id=T1, *roles):
    return CallerIdentity(user_id=user_id, tenant_id=tenant_id, roles=frozenset(roles))


@pytest.mark.parametrize(
    "identity",
    [None, CallerIdentity(user_id=None, tenant_id=T1), CallerIdentity(user_id="n1", tenant_id=None)],
)
def test_missing_identity_is_reported_first(identity):
    decision = authorize(identity, GuardAction.SUBMIT_VISIT, tenant_id=T2, assigned_user_ids=["other"])
    assert decision.allowed is False
    assert decision.reason == DenyReason.MISSING_IDENTITY


def test_tenant_is_checked_before_assignment():
    decision = authorize(ident(), GuardAction.SUBMIT_VISIT, tenant_id=T2, assigned_user_ids=["other"])
    assert decision.reason == DenyReason.TENANT_MISMATCH


@pytest.mark.parametrize("action", [GuardAction.CREATE_VISIT, GuardAction.EDIT_VISIT, GuardAction.SUBMIT_VISIT])
def test_nurse_actions_need_the_assigned_actor(action):
    assert authorize(ident(), action, tenant_id=T1, assigned_user_ids=["n1"]).allowed
    denied = authorize(ident("n2", T1, "ADMIN"), action, tenant_id=T1, assigned_user_ids=["n1"])
    assert denied.reason == DenyReason.NOT_ASSIGNED_ACTOR


def test_review_needs_admin_role():
    assert authorize(ident("a1", T1, "ADMIN"), GuardAction.REVIEW_VISIT, tenant_id=T1).allowed
    denied = authorize(ident("n1", T1, "NURSE"), GuardAction.REVIEW_VISIT, tenant_id=T1)
    assert denied.reason == DenyReason.ROLE_MISMATCH


def test_resolved_role_overrides_token_claims():
    # token says ADMIN, staff directory says NURSE
    denied = authorize(ident("n1", T1, "ADMIN"), GuardAction.REVIEW_VISIT, tenant_id=T1, resolved_role="NURSE")
    assert denied.reason == DenyReason.ROLE_MISMATCH

    # no staff record at all
    denied = authorize(ident("n1", T1, "ADMIN"), GuardAction.REVIEW_VISIT, tenant_id=T1, resolved_role="")
    assert not denied.allowed

    assert authorize(ident("a1", T1), GuardAction.REVIEW_VISIT, tenant_id=T1, resolved_role="ADMIN").allowed


def test_read_visit_allows_staff_roles_or_assignee():
    assert authorize(ident("c1", T1), GuardAction.READ_VISIT, tenant_id=T1, resolved_role="COORDINATOR").allowed
    assert authorize(ident("n1", T1), GuardAction.READ_VISIT, tenant_id=T1, assigned_user_ids=["n1"]).allowed
    denied = authorize(ident("n2", T1), GuardAction.READ_VISIT, tenant_id=T1, assigned_user_ids=["n1"])
    assert denied.reason == DenyReason.ROLE_MISMATCH


def test_family_summary_needs_listed_member():
    assert authorize(ident("f1"), GuardAction.READ_FAMILY_SUMMARY, tenant_id=T1, assigned_user_ids=["f1", "f2"]).allowed
    denied = authorize(ident("f3"), GuardAction.READ_FAMILY_SUMMARY, tenant_id=T1, assigned_user_ids=["f1", "f2"])
    assert denied.reason == DenyReason.NOT_ASSIGNED_ACTOR


def test_require_raises_with_reason():
    with pytest.raises(Unauthorized) as exc:
        require(ident(), GuardAction.READ_AUDIT_LOG, tenant_id=T1, resolved_role="NURSE")
    assert exc.value.details == {"reason": "role_mismatch"}
    assert exc.value.code == "unauthorized"


def test_require_identity():
    assert require_identity(ident()).user_id == "n1"
    with pytest.raises(Unauthorized):
        require_identity(CallerIdentity(user_id="", tenant_id=T1))

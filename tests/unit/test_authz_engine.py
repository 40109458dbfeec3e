"""Unit tests for the authorization engine - pure decisions, no stores."""

import uuid

import pytest

from backend.app.authz.engine import (
    DEFAULT_RULES,
    MEMBER_UPDATABLE_FIELDS,
    TARGETED_OPERATIONS,
    Allow,
    AssigneeLookup,
    AuthzRequest,
    Deny,
    DenyReason,
    Operation,
    TaskSnapshot,
    decide,
    deny_member_delete,
    list_filter,
)
from backend.app.db.context import RequestContext
from backend.app.models.common import Role
from backend.app.models.tasks import UPDATABLE_FIELDS

ORG = uuid.uuid4()
OTHER_ORG = uuid.uuid4()


def actor(role: Role, org_id: uuid.UUID = ORG) -> RequestContext:
    return RequestContext(org_id=org_id, user_id=uuid.uuid4(), role=role)


def snapshot(
    created_by: uuid.UUID | None = None,
    assigned_to: uuid.UUID | None = None,
    org_id: uuid.UUID = ORG,
) -> TaskSnapshot:
    return TaskSnapshot(
        organization_id=org_id,
        created_by_id=created_by or uuid.uuid4(),
        assigned_to_id=assigned_to,
    )


class TestCreate:
    """Creation rules."""

    @pytest.mark.parametrize("role", list(Role))
    def test_every_role_may_create(self, role: Role) -> None:
        ctx = actor(role)
        decision = decide(AuthzRequest(actor=ctx, operation=Operation.create))

        assert isinstance(decision, Allow)
        assert decision.organization_id == ctx.org_id
        assert decision.mutable_fields == UPDATABLE_FIELDS

    def test_assignee_in_same_org_allowed(self) -> None:
        ctx = actor(Role.member)
        lookup = AssigneeLookup(assignee_id=uuid.uuid4(), organization_id=ORG)

        decision = decide(AuthzRequest(actor=ctx, operation=Operation.create, assignee=lookup))

        assert decision.allowed

    def test_assignee_in_other_org_denied(self) -> None:
        ctx = actor(Role.owner)
        lookup = AssigneeLookup(assignee_id=uuid.uuid4(), organization_id=OTHER_ORG)

        decision = decide(AuthzRequest(actor=ctx, operation=Operation.create, assignee=lookup))

        assert isinstance(decision, Deny)
        assert decision.reason == DenyReason.invalid_assignee
        assert decision.message == "Cannot assign task to user from different organization"

    def test_unknown_assignee_denied(self) -> None:
        ctx = actor(Role.org_admin)
        lookup = AssigneeLookup(assignee_id=uuid.uuid4(), organization_id=None)

        decision = decide(AuthzRequest(actor=ctx, operation=Operation.create, assignee=lookup))

        assert isinstance(decision, Deny)
        assert decision.reason == DenyReason.invalid_assignee
        assert not lookup.found


class TestRead:
    """Read rules."""

    @pytest.mark.parametrize("role", [Role.owner, Role.org_admin])
    def test_admins_read_any_task_in_org(self, role: Role) -> None:
        decision = decide(
            AuthzRequest(actor=actor(role), operation=Operation.read_one, target=snapshot())
        )
        assert decision.allowed

    @pytest.mark.parametrize("role", list(Role))
    def test_cross_org_read_denied_for_every_role(self, role: Role) -> None:
        ctx = actor(role)
        target = snapshot(created_by=ctx.user_id, assigned_to=ctx.user_id, org_id=OTHER_ORG)

        decision = decide(AuthzRequest(actor=ctx, operation=Operation.read_one, target=target))

        assert isinstance(decision, Deny)
        assert decision.reason == DenyReason.cross_organization
        assert decision.message == "Access denied"

    def test_member_reads_own_creation(self) -> None:
        ctx = actor(Role.member)
        decision = decide(
            AuthzRequest(
                actor=ctx, operation=Operation.read_one, target=snapshot(created_by=ctx.user_id)
            )
        )
        assert decision.allowed

    def test_member_reads_assigned_task(self) -> None:
        ctx = actor(Role.member)
        decision = decide(
            AuthzRequest(
                actor=ctx, operation=Operation.read_one, target=snapshot(assigned_to=ctx.user_id)
            )
        )
        assert decision.allowed

    def test_member_non_participant_denied(self) -> None:
        decision = decide(
            AuthzRequest(actor=actor(Role.member), operation=Operation.read_one, target=snapshot())
        )

        assert isinstance(decision, Deny)
        assert decision.reason == DenyReason.not_participant

    def test_read_list_without_target_allowed(self) -> None:
        decision = decide(AuthzRequest(actor=actor(Role.member), operation=Operation.read_list))
        assert decision.allowed

    def test_list_is_not_a_targeted_operation(self) -> None:
        assert Operation.read_list not in TARGETED_OPERATIONS
        assert Operation.create not in TARGETED_OPERATIONS


class TestUpdate:
    """Update rules."""

    @pytest.mark.parametrize("role", [Role.owner, Role.org_admin])
    def test_admin_may_update_any_field(self, role: Role) -> None:
        decision = decide(
            AuthzRequest(
                actor=actor(role),
                operation=Operation.update,
                target=snapshot(),
                fields=UPDATABLE_FIELDS,
            )
        )

        assert isinstance(decision, Allow)
        assert decision.mutable_fields == UPDATABLE_FIELDS

    def test_member_assignee_may_update_status(self) -> None:
        ctx = actor(Role.member)
        decision = decide(
            AuthzRequest(
                actor=ctx,
                operation=Operation.update,
                target=snapshot(assigned_to=ctx.user_id),
                fields=frozenset({"status"}),
            )
        )

        assert isinstance(decision, Allow)
        assert decision.mutable_fields == MEMBER_UPDATABLE_FIELDS

    def test_member_creator_but_not_assignee_denied(self) -> None:
        ctx = actor(Role.member)
        decision = decide(
            AuthzRequest(
                actor=ctx,
                operation=Operation.update,
                target=snapshot(created_by=ctx.user_id, assigned_to=uuid.uuid4()),
                fields=frozenset({"status"}),
            )
        )

        assert isinstance(decision, Deny)
        assert decision.reason == DenyReason.not_assignee
        assert decision.message == "You can only update your assigned tasks"

    def test_member_unassigned_own_task_denied(self) -> None:
        ctx = actor(Role.member)
        decision = decide(
            AuthzRequest(
                actor=ctx,
                operation=Operation.update,
                target=snapshot(created_by=ctx.user_id),
                fields=frozenset({"status"}),
            )
        )

        assert isinstance(decision, Deny)
        assert decision.reason == DenyReason.not_assignee

    @pytest.mark.parametrize("extra", ["title", "description", "priority", "assigned_to_id"])
    def test_member_payload_with_other_field_denied_whole(self, extra: str) -> None:
        ctx = actor(Role.member)
        decision = decide(
            AuthzRequest(
                actor=ctx,
                operation=Operation.update,
                target=snapshot(assigned_to=ctx.user_id),
                fields=frozenset({"status", extra}),
            )
        )

        assert isinstance(decision, Deny)
        assert decision.reason == DenyReason.field_not_permitted
        assert decision.message == "You can only update task status"

    def test_member_non_participant_update_denied_as_not_participant(self) -> None:
        """Visibility is checked before the update rules."""
        decision = decide(
            AuthzRequest(
                actor=actor(Role.member),
                operation=Operation.update,
                target=snapshot(),
                fields=frozenset({"status"}),
            )
        )

        assert isinstance(decision, Deny)
        assert decision.reason == DenyReason.not_participant

    def test_admin_reassign_to_other_org_denied(self) -> None:
        lookup = AssigneeLookup(assignee_id=uuid.uuid4(), organization_id=OTHER_ORG)
        decision = decide(
            AuthzRequest(
                actor=actor(Role.org_admin),
                operation=Operation.update,
                target=snapshot(),
                fields=frozenset({"assigned_to_id"}),
                assignee=lookup,
            )
        )

        assert isinstance(decision, Deny)
        assert decision.reason == DenyReason.invalid_assignee


class TestDelete:
    """Delete rules."""

    @pytest.mark.parametrize("role", [Role.owner, Role.org_admin])
    def test_admins_may_delete(self, role: Role) -> None:
        decision = decide(
            AuthzRequest(actor=actor(role), operation=Operation.delete, target=snapshot())
        )
        assert decision.allowed

    def test_member_creator_and_assignee_still_denied(self) -> None:
        ctx = actor(Role.member)
        target = snapshot(created_by=ctx.user_id, assigned_to=ctx.user_id)

        decision = decide(AuthzRequest(actor=ctx, operation=Operation.delete, target=target))

        assert isinstance(decision, Deny)
        assert decision.reason == DenyReason.delete_not_permitted
        assert decision.message == "You do not have permission to delete tasks"

    def test_cross_org_delete_reports_isolation_first(self) -> None:
        decision = decide(
            AuthzRequest(
                actor=actor(Role.member),
                operation=Operation.delete,
                target=snapshot(org_id=OTHER_ORG),
            )
        )

        assert isinstance(decision, Deny)
        assert decision.reason == DenyReason.cross_organization


class TestRuleOrdering:
    """First denial wins."""

    def test_custom_rule_set_is_respected(self) -> None:
        request = AuthzRequest(actor=actor(Role.member), operation=Operation.delete)

        assert decide(request, rules=()).allowed
        denied = decide(request, rules=(deny_member_delete,))
        assert isinstance(denied, Deny)

    def test_default_rules_order(self) -> None:
        names = [rule.__name__ for rule in DEFAULT_RULES]
        assert names == [
            "deny_cross_organization",
            "deny_member_non_participant",
            "deny_member_update",
            "deny_member_delete",
            "deny_invalid_assignee",
        ]


def test_list_filter_restricts_members_only() -> None:
    member = actor(Role.member)

    assert list_filter(member).participant_id == member.user_id
    assert list_filter(actor(Role.owner)).participant_id is None
    assert list_filter(actor(Role.org_admin)).participant_id is None

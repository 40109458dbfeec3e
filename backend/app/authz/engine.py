"""Authorization engine for task operations.

Pure decision logic: an immutable AuthzRequest goes in, a tagged decision
(Allow or Deny) comes out. No I/O and no side effects, so decisions can be
tested without any store.

Rules are evaluated in order and the first one returning a decision wins:

1. cross-organization isolation
2. member read restriction (creator or assignee only)
3. member update restriction (assignee only, status field only)
4. delete restriction (members never delete)
5. assignee membership (assignee must exist in the actor's organization)

A request that no rule denies is allowed. Creation is allowed for every
authenticated actor, and the Allow for a create pins the new task to the
actor's organization regardless of the payload.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from uuid import UUID

from backend.app.db.context import RequestContext
from backend.app.db.repositories import TaskFilter, TaskRecord
from backend.app.models.tasks import UPDATABLE_FIELDS

MEMBER_UPDATABLE_FIELDS = frozenset({"status"})


class Operation(str, Enum):
    """Operation requested on a task."""

    create = "create"
    read_list = "read_list"
    read_one = "read_one"
    update = "update"
    delete = "delete"


class DenyReason(str, Enum):
    """Why a request was denied."""

    cross_organization = "cross_organization"
    not_participant = "not_participant"
    not_assignee = "not_assignee"
    field_not_permitted = "field_not_permitted"
    delete_not_permitted = "delete_not_permitted"
    invalid_assignee = "invalid_assignee"


@dataclass(frozen=True)
class TaskSnapshot:
    """The parts of a task that authorization depends on."""

    organization_id: UUID
    created_by_id: UUID
    assigned_to_id: UUID | None

    @classmethod
    def of(cls, task: TaskRecord) -> "TaskSnapshot":
        return cls(
            organization_id=task.organization_id,
            created_by_id=task.created_by_id,
            assigned_to_id=task.assigned_to_id,
        )


@dataclass(frozen=True)
class AssigneeLookup:
    """Result of resolving a requested assignee.

    organization_id is None when no such user exists.
    """

    assignee_id: UUID
    organization_id: UUID | None

    @property
    def found(self) -> bool:
        return self.organization_id is not None


@dataclass(frozen=True)
class AuthzRequest:
    """Immutable input to a single authorization decision."""

    actor: RequestContext
    operation: Operation
    target: TaskSnapshot | None = None
    fields: frozenset[str] = field(default_factory=frozenset)
    assignee: AssigneeLookup | None = None


@dataclass(frozen=True)
class Allow:
    """Request is permitted.

    mutable_fields lists the task fields the actor may write; organization_id
    is set for create and is the only organization the new task may belong to.
    """

    mutable_fields: frozenset[str] = field(default_factory=frozenset)
    organization_id: UUID | None = None

    @property
    def allowed(self) -> bool:
        return True


@dataclass(frozen=True)
class Deny:
    """Request is refused as a whole."""

    reason: DenyReason
    message: str

    @property
    def allowed(self) -> bool:
        return False


Decision = Allow | Deny
Rule = Callable[[AuthzRequest], Deny | None]

# Operations that address one existing task; list and create have no target
TARGETED_OPERATIONS = frozenset(
    {Operation.read_one, Operation.update, Operation.delete}
)


def deny_cross_organization(request: AuthzRequest) -> Deny | None:
    """Tasks of another organization are invisible to the actor."""
    if request.target is None or request.operation not in TARGETED_OPERATIONS:
        return None
    if request.target.organization_id != request.actor.org_id:
        return Deny(DenyReason.cross_organization, "Access denied")
    return None


def deny_member_non_participant(request: AuthzRequest) -> Deny | None:
    """Members only see tasks they created or are assigned to."""
    if request.target is None or request.operation not in TARGETED_OPERATIONS:
        return None
    if not request.actor.is_member:
        return None
    participants = {request.target.created_by_id, request.target.assigned_to_id}
    if request.actor.user_id not in participants:
        return Deny(DenyReason.not_participant, "Access denied")
    return None


def deny_member_update(request: AuthzRequest) -> Deny | None:
    """Members may only change the status of tasks assigned to them."""
    if request.operation != Operation.update or not request.actor.is_member:
        return None
    if request.target is None or request.target.assigned_to_id != request.actor.user_id:
        return Deny(DenyReason.not_assignee, "You can only update your assigned tasks")
    if request.fields - MEMBER_UPDATABLE_FIELDS:
        return Deny(DenyReason.field_not_permitted, "You can only update task status")
    return None


def deny_member_delete(request: AuthzRequest) -> Deny | None:
    """Members never delete, regardless of ownership."""
    if request.operation == Operation.delete and request.actor.is_member:
        return Deny(
            DenyReason.delete_not_permitted, "You do not have permission to delete tasks"
        )
    return None


def deny_invalid_assignee(request: AuthzRequest) -> Deny | None:
    """An assignee must exist and belong to the actor's organization."""
    if request.operation not in (Operation.create, Operation.update):
        return None
    lookup = request.assignee
    if lookup is None:
        return None
    if not lookup.found or lookup.organization_id != request.actor.org_id:
        return Deny(
            DenyReason.invalid_assignee,
            "Cannot assign task to user from different organization",
        )
    return None


DEFAULT_RULES: tuple[Rule, ...] = (
    deny_cross_organization,
    deny_member_non_participant,
    deny_member_update,
    deny_member_delete,
    deny_invalid_assignee,
)


def _allow(request: AuthzRequest) -> Allow:
    if request.operation == Operation.create:
        return Allow(mutable_fields=UPDATABLE_FIELDS, organization_id=request.actor.org_id)
    if request.operation == Operation.update:
        if request.actor.is_member:
            return Allow(mutable_fields=MEMBER_UPDATABLE_FIELDS)
        return Allow(mutable_fields=UPDATABLE_FIELDS)
    return Allow()


def decide(request: AuthzRequest, rules: Sequence[Rule] = DEFAULT_RULES) -> Decision:
    """Evaluate rules in order; the first denial wins, otherwise allow.

    Args:
        request: Authorization request
        rules: Ordered deny rules

    Returns:
        Allow or Deny
    """
    for rule in rules:
        denial = rule(request)
        if denial is not None:
            return denial
    return _allow(request)


def list_filter(actor: RequestContext) -> TaskFilter:
    """Query predicate equivalent to the read rules for list operations.

    Organization scoping is applied by the store itself; members are further
    restricted to tasks they created or are assigned to.
    """
    if actor.is_member:
        return TaskFilter(participant_id=actor.user_id)
    return TaskFilter()

"""Access policy: who may do what to which resource, in which state.

The table is keyed by (role, relationship to the resource, resource state).
A grant without states applies in every state. Resource state is an
EventStatus for event-scoped operations and a PaymentStatus for movement
writes. Anything not granted is denied.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from bookings.domain.errors import UnauthorizedError
from bookings.domain.lifecycle import BUDGET_VISIBLE
from bookings.domain.models import (
    Actor,
    CrewAssignment,
    Event,
    EventStatus,
    PaymentStatus,
    Role,
)

logger = logging.getLogger(__name__)


class Operation(Enum):
    READ_EVENT = "read_event"
    CREATE_EVENT = "create_event"
    EDIT_EVENT = "edit_event"
    READ_BUDGET = "read_budget"
    READ_FINANCE = "read_finance"
    WRITE_MANUAL_COSTS = "write_manual_costs"
    WRITE_MOVEMENT = "write_movement"
    READ_ALLOCATIONS = "read_allocations"
    SAVE_ALLOCATIONS = "save_allocations"
    READ_ASSIGNMENT = "read_assignment"
    TOGGLE_CONFIRMATION = "toggle_confirmation"
    TOGGLE_PAYMENT_FLAG = "toggle_payment_flag"
    SIGN_CONTRACT = "sign_contract"
    RECORD_CONTRACT = "record_contract"
    READ_PORTFOLIO = "read_portfolio"


class Relationship(Enum):
    OWNER = "owner"
    ASSIGNED = "assigned"
    NONE = "none"


ResourceState = EventStatus | PaymentStatus


@dataclass(frozen=True)
class Grant:
    role: Role
    relationships: frozenset[Relationship]
    operations: frozenset[Operation]
    states: frozenset[ResourceState] | None = None

    def covers(
        self, role: Role, relationship: Relationship, state: ResourceState | None
    ) -> bool:
        if role is not self.role or relationship not in self.relationships:
            return False
        if self.states is None:
            return True
        return state in self.states


ANY = frozenset(Relationship)

ADMIN_OPERATIONS = frozenset(Operation) - {Operation.SIGN_CONTRACT}

GRANTS: tuple[Grant, ...] = (
    Grant(Role.ADMIN, ANY, ADMIN_OPERATIONS),
    Grant(Role.CLIENT, ANY, frozenset({Operation.CREATE_EVENT, Operation.READ_PORTFOLIO})),
    Grant(
        Role.CLIENT,
        frozenset({Relationship.OWNER}),
        frozenset({Operation.READ_EVENT, Operation.READ_FINANCE}),
    ),
    Grant(
        Role.CLIENT,
        frozenset({Relationship.OWNER}),
        frozenset({Operation.EDIT_EVENT}),
        states=frozenset({EventStatus.REQUESTED}),
    ),
    Grant(
        Role.CLIENT,
        frozenset({Relationship.OWNER}),
        frozenset({Operation.READ_BUDGET}),
        states=BUDGET_VISIBLE,
    ),
    Grant(
        Role.CLIENT,
        frozenset({Relationship.OWNER}),
        frozenset({Operation.WRITE_MOVEMENT}),
        states=frozenset({PaymentStatus.OPEN}),
    ),
    Grant(
        Role.CLIENT,
        frozenset({Relationship.OWNER}),
        frozenset({Operation.SIGN_CONTRACT}),
        states=frozenset({EventStatus.ACCEPTED}),
    ),
    Grant(
        Role.MEMBER,
        frozenset({Relationship.ASSIGNED}),
        frozenset({Operation.READ_EVENT}),
    ),
    Grant(
        Role.MEMBER,
        frozenset({Relationship.OWNER}),
        frozenset(
            {
                Operation.READ_ASSIGNMENT,
                Operation.TOGGLE_CONFIRMATION,
                Operation.TOGGLE_PAYMENT_FLAG,
            }
        ),
    ),
)


@dataclass(frozen=True)
class TransitionGrant:
    role: Role
    relationships: frozenset[Relationship]
    targets: frozenset[EventStatus]
    states: frozenset[EventStatus] | None = None


TRANSITION_GRANTS: tuple[TransitionGrant, ...] = (
    TransitionGrant(Role.ADMIN, ANY, frozenset(EventStatus)),
    TransitionGrant(
        Role.CLIENT,
        frozenset({Relationship.OWNER}),
        frozenset({EventStatus.ACCEPTED, EventStatus.DECLINED}),
        states=frozenset({EventStatus.BUDGET_ISSUED}),
    ),
)


def relationship_to_event(actor: Actor, event: Event) -> Relationship:
    """How an actor relates to an event."""
    if actor.role is Role.CLIENT and event.client_id == actor.id:
        return Relationship.OWNER
    if actor.role is Role.MEMBER and actor.id in event.crew_ids:
        return Relationship.ASSIGNED
    return Relationship.NONE


def relationship_to_assignment(actor: Actor, assignment: CrewAssignment) -> Relationship:
    if assignment.member_id == actor.id:
        return Relationship.OWNER
    return Relationship.NONE


def permitted_operations(
    role: Role, relationship: Relationship, state: ResourceState | None = None
) -> frozenset[Operation]:
    granted: set[Operation] = set()
    for grant in GRANTS:
        if grant.covers(role, relationship, state):
            granted |= grant.operations
    return frozenset(granted)


def is_allowed(
    actor: Actor,
    operation: Operation,
    relationship: Relationship,
    state: ResourceState | None = None,
) -> bool:
    return operation in permitted_operations(actor.role, relationship, state)


def authorize(
    actor: Actor,
    operation: Operation,
    relationship: Relationship,
    state: ResourceState | None = None,
) -> None:
    """Raise UnauthorizedError unless the table grants ``operation``."""
    if not is_allowed(actor, operation, relationship, state):
        logger.warning(
            "Denied %s to %s (%s, %s, %s)",
            operation.value,
            actor.id,
            actor.role.value,
            relationship.value,
            state.value if state is not None else "-",
        )
        raise UnauthorizedError(operation.value)


def permitted_transitions(
    role: Role, relationship: Relationship, current: EventStatus
) -> frozenset[EventStatus]:
    """Targets the actor may request from ``current``; graph reachability is checked separately."""
    targets: set[EventStatus] = set()
    for grant in TRANSITION_GRANTS:
        if grant.role is not role or relationship not in grant.relationships:
            continue
        if grant.states is not None and current not in grant.states:
            continue
        targets |= grant.targets
    return frozenset(targets)


def authorize_transition(
    actor: Actor, relationship: Relationship, current: EventStatus, target: EventStatus
) -> None:
    if target not in permitted_transitions(actor.role, relationship, current):
        logger.warning(
            "Denied transition %s -> %s to %s (%s)",
            current.value,
            target.value,
            actor.id,
            actor.role.value,
        )
        raise UnauthorizedError(f"transition:{target.value}")

"""Unit tests for the access policy table.

Run with: pytest tests/test_policy.py -v
"""

import pytest

from bookings.domain import Actor, ActorId, EventStatus, PaymentStatus, Role
from bookings.domain.errors import UnauthorizedError
from bookings.domain.policy import (
    Operation,
    Relationship,
    authorize,
    authorize_transition,
    is_allowed,
    permitted_transitions,
    relationship_to_event,
)

ADMIN = Actor(id=ActorId("admin-1"), role=Role.ADMIN)
CLIENT = Actor(id=ActorId("client-1"), role=Role.CLIENT)
MEMBER = Actor(id=ActorId("member-1"), role=Role.MEMBER)


class TestGrants:
    """Tests for operation grants."""

    def test_admin_may_do_everything_but_sign(self):
        """Admin is granted every operation except signing a contract."""
        for operation in Operation:
            expected = operation is not Operation.SIGN_CONTRACT
            assert is_allowed(ADMIN, operation, Relationship.NONE, EventStatus.CONFIRMED) is expected

    def test_client_edits_own_event_only_while_requested(self):
        """Client EDIT_EVENT is limited to Requested."""
        assert is_allowed(CLIENT, Operation.EDIT_EVENT, Relationship.OWNER, EventStatus.REQUESTED)
        assert not is_allowed(
            CLIENT, Operation.EDIT_EVENT, Relationship.OWNER, EventStatus.CONFIRMED
        )

    def test_client_cannot_touch_other_clients_event(self):
        """Without ownership a client gets nothing event-scoped."""
        assert not is_allowed(CLIENT, Operation.READ_EVENT, Relationship.NONE, EventStatus.REQUESTED)

    @pytest.mark.parametrize(
        "status, visible",
        [
            (EventStatus.REQUESTED, False),
            (EventStatus.UNDER_REVIEW, False),
            (EventStatus.BUDGET_ISSUED, True),
            (EventStatus.DECLINED, True),
            (EventStatus.COMPLETED, True),
            (EventStatus.CANCELLED, False),
        ],
    )
    def test_budget_visibility(self, status, visible):
        """The owning client sees the budget once it is issued."""
        assert is_allowed(CLIENT, Operation.READ_BUDGET, Relationship.OWNER, status) is visible

    def test_client_movement_writes_only_while_open(self):
        """Client movement CRUD is closed once settled."""
        assert is_allowed(CLIENT, Operation.WRITE_MOVEMENT, Relationship.OWNER, PaymentStatus.OPEN)
        assert not is_allowed(
            CLIENT, Operation.WRITE_MOVEMENT, Relationship.OWNER, PaymentStatus.SETTLED
        )

    def test_member_reads_only_assigned_events(self):
        """A member reads events they are scaled to."""
        assert is_allowed(MEMBER, Operation.READ_EVENT, Relationship.ASSIGNED)
        assert not is_allowed(MEMBER, Operation.READ_EVENT, Relationship.NONE)
        assert not is_allowed(MEMBER, Operation.READ_FINANCE, Relationship.ASSIGNED)

    def test_authorize_raises_unauthorized(self):
        """Anything not granted raises UnauthorizedError."""
        with pytest.raises(UnauthorizedError):
            authorize(MEMBER, Operation.SAVE_ALLOCATIONS, Relationship.ASSIGNED)


class TestTransitionGrants:
    """Tests for who may move an event."""

    def test_client_accepts_or_declines_only_from_budget_issued(self):
        """Client transitions are Accepted or Declined from BudgetIssued."""
        assert permitted_transitions(
            Role.CLIENT, Relationship.OWNER, EventStatus.BUDGET_ISSUED
        ) == {EventStatus.ACCEPTED, EventStatus.DECLINED}
        assert not permitted_transitions(Role.CLIENT, Relationship.OWNER, EventStatus.ACCEPTED)

    def test_member_has_no_transitions(self):
        """Members cannot drive the lifecycle."""
        with pytest.raises(UnauthorizedError):
            authorize_transition(
                MEMBER, Relationship.ASSIGNED, EventStatus.ACCEPTED, EventStatus.CONFIRMED
            )

    def test_admin_may_request_any_target(self):
        """Admin transitions are limited only by the graph."""
        authorize_transition(ADMIN, Relationship.NONE, EventStatus.REQUESTED, EventStatus.CANCELLED)


class TestRelationships:
    """Tests for relationship derivation."""

    def test_owner_and_assigned(self, make_event):
        """Client owns their event; a scaled member is assigned."""
        event = make_event(crew_ids=(ActorId("member-1"),))
        assert relationship_to_event(CLIENT, event) is Relationship.OWNER
        assert relationship_to_event(MEMBER, event) is Relationship.ASSIGNED
        assert relationship_to_event(ADMIN, event) is Relationship.NONE

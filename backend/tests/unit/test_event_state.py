"""
Unit tests for the event publication state machine.
"""

import pytest

from backend.src.models import EventState, StateAction
from backend.src.services.event_state import Actor, allowed_actions, next_state
from backend.src.services.exceptions import ConflictError


class TestAdminTransitions:
    """Admin moderation starts from PENDING only."""

    def test_publish_pending(self):
        assert next_state(
            Actor.ADMIN, EventState.PENDING, StateAction.PUBLISH_EVENT
        ) == EventState.PUBLISHED

    @pytest.mark.parametrize("action", [
        StateAction.REJECT_EVENT,
        StateAction.CANCEL_REVIEW,
        StateAction.SEND_TO_REVIEW,
    ])
    def test_other_actions_reject_pending(self, action):
        assert next_state(Actor.ADMIN, EventState.PENDING, action) == EventState.CANCELED

    @pytest.mark.parametrize("state", [EventState.PUBLISHED, EventState.CANCELED])
    def test_publish_outside_pending_conflicts(self, state):
        with pytest.raises(ConflictError) as exc_info:
            next_state(Actor.ADMIN, state, StateAction.PUBLISH_EVENT)

        assert "not in the right state" in exc_info.value.message
        assert state.value in exc_info.value.message

    def test_reject_published_conflicts(self):
        with pytest.raises(ConflictError) as exc_info:
            next_state(Actor.ADMIN, EventState.PUBLISHED, StateAction.REJECT_EVENT)

        assert "not pending" in exc_info.value.message
        assert "no actions allowed" in exc_info.value.message


class TestInitiatorTransitions:

    @pytest.mark.parametrize("state", [EventState.PENDING, EventState.CANCELED])
    def test_send_to_review(self, state):
        assert next_state(
            Actor.INITIATOR, state, StateAction.SEND_TO_REVIEW
        ) == EventState.PENDING

    def test_cancel_review(self):
        assert next_state(
            Actor.INITIATOR, EventState.PENDING, StateAction.CANCEL_REVIEW
        ) == EventState.CANCELED

    def test_publish_from_canceled(self):
        assert next_state(
            Actor.INITIATOR, EventState.CANCELED, StateAction.PUBLISH_EVENT
        ) == EventState.PUBLISHED

    def test_published_is_terminal(self):
        with pytest.raises(ConflictError) as exc_info:
            next_state(Actor.INITIATOR, EventState.PUBLISHED, StateAction.SEND_TO_REVIEW)

        assert "no actions allowed" in exc_info.value.message


class TestAllowedActions:

    def test_admin_from_pending(self):
        actions = allowed_actions(Actor.ADMIN, EventState.PENDING)

        assert actions[StateAction.PUBLISH_EVENT] == EventState.PUBLISHED
        assert len(actions) == 4

    def test_admin_from_published_is_empty(self):
        assert allowed_actions(Actor.ADMIN, EventState.PUBLISHED) == {}

    def test_initiator_from_canceled(self):
        actions = allowed_actions(Actor.INITIATOR, EventState.CANCELED)

        assert actions[StateAction.SEND_TO_REVIEW] == EventState.PENDING
        assert actions[StateAction.CANCEL_REVIEW] == EventState.CANCELED

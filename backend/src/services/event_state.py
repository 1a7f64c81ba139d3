"""
Event publication state machine.

All legal state changes of an event are listed in one transition table keyed
by (actor, current state, requested action). Anything not in the table is a
ConflictError.

Admin moderation only ever starts from PENDING: PUBLISH_EVENT publishes, every
other action rejects (CANCELED). The initiator may publish, cancel or send the
event back to review while it is PENDING or CANCELED; the event service refuses
initiator updates of PUBLISHED events before the table is consulted.
"""

import enum
from typing import Dict, Tuple

from backend.src.models import EventState, StateAction
from backend.src.services.exceptions import ConflictError


class Actor(enum.Enum):
    """Who is asking for the state change."""
    ADMIN = "ADMIN"
    INITIATOR = "INITIATOR"


_TRANSITIONS: Dict[Tuple[Actor, EventState, StateAction], EventState] = {
    # Admin moderation
    (Actor.ADMIN, EventState.PENDING, StateAction.PUBLISH_EVENT): EventState.PUBLISHED,
    (Actor.ADMIN, EventState.PENDING, StateAction.REJECT_EVENT): EventState.CANCELED,
    (Actor.ADMIN, EventState.PENDING, StateAction.CANCEL_REVIEW): EventState.CANCELED,
    (Actor.ADMIN, EventState.PENDING, StateAction.SEND_TO_REVIEW): EventState.CANCELED,
}

for _state in (EventState.PENDING, EventState.CANCELED):
    _TRANSITIONS.update({
        (Actor.INITIATOR, _state, StateAction.PUBLISH_EVENT): EventState.PUBLISHED,
        (Actor.INITIATOR, _state, StateAction.REJECT_EVENT): EventState.CANCELED,
        (Actor.INITIATOR, _state, StateAction.CANCEL_REVIEW): EventState.CANCELED,
        (Actor.INITIATOR, _state, StateAction.SEND_TO_REVIEW): EventState.PENDING,
    })
del _state


def next_state(actor: Actor, current: EventState, action: StateAction) -> EventState:
    """
    Resolve the state an event moves to.

    Args:
        actor: ADMIN or INITIATOR
        current: Current event state
        action: Requested state action

    Returns:
        The new state

    Raises:
        ConflictError: If the transition is not allowed

    Examples:
        >>> next_state(Actor.ADMIN, EventState.PENDING, StateAction.PUBLISH_EVENT)
        <EventState.PUBLISHED: 'PUBLISHED'>
    """
    target = _TRANSITIONS.get((actor, current, action))
    if target is not None:
        return target

    valid = sorted(a.value for a in allowed_actions(actor, current))
    hint = f" (allowed: {', '.join(valid)})" if valid else " (no actions allowed)"

    if actor is Actor.ADMIN and action is StateAction.PUBLISH_EVENT:
        raise ConflictError(
            f"Cannot publish the event because it is not in the right state: {current.value}{hint}"
        )
    if actor is Actor.ADMIN:
        raise ConflictError(
            f"Cannot reject the event because it is not pending: {current.value}{hint}"
        )
    raise ConflictError(
        f"Action {action.value} is not allowed for an event in state {current.value}{hint}"
    )


def allowed_actions(actor: Actor, current: EventState) -> Dict[StateAction, EventState]:
    """All actions the actor may take from the current state, with their targets."""
    return {
        action: target
        for (who, state, action), target in _TRANSITIONS.items()
        if who is actor and state is current
    }

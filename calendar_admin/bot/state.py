"""Per-user pending-action state for the Telegram bot.

A menu command arms a pending action; the user's next text message is
consumed as that action's input and the state returns to IDLE.

Pending actions never expire: a user can answer a prompt at any later time.
"""
import threading
from enum import Enum
from typing import Dict, List


class PendingAction(str, Enum):
    """Discrete bot conversation states."""
    IDLE = "idle"
    AWAITING_BLOCK_INPUT = "awaiting_block_input"
    AWAITING_UNBLOCK_INPUT = "awaiting_unblock_input"


# State machine transition map
# Pattern: Current state → [allowed next states]
VALID_TRANSITIONS: Dict[PendingAction, List[PendingAction]] = {
    PendingAction.IDLE: [
        PendingAction.AWAITING_BLOCK_INPUT,
        PendingAction.AWAITING_UNBLOCK_INPUT,
    ],
    # A new menu command replaces the armed one
    PendingAction.AWAITING_BLOCK_INPUT: [
        PendingAction.IDLE,
        PendingAction.AWAITING_BLOCK_INPUT,
        PendingAction.AWAITING_UNBLOCK_INPUT,
    ],
    PendingAction.AWAITING_UNBLOCK_INPUT: [
        PendingAction.IDLE,
        PendingAction.AWAITING_BLOCK_INPUT,
        PendingAction.AWAITING_UNBLOCK_INPUT,
    ],
}


def validate_transition(current: PendingAction, next_state: PendingAction) -> bool:
    """Check whether current → next_state is allowed."""
    return next_state in VALID_TRANSITIONS.get(current, [])


class PendingActionStore:
    """Mapping of user id → PendingAction."""

    def __init__(self):
        self._states: Dict[int, PendingAction] = {}
        self._lock = threading.Lock()

    def current(self, user_id: int) -> PendingAction:
        with self._lock:
            return self._states.get(user_id, PendingAction.IDLE)

    def begin(self, user_id: int, action: PendingAction):
        """
        Arm a pending action for user.

        Raises:
            ValueError: If action is IDLE (use clear()) or the transition is invalid
        """
        if action is PendingAction.IDLE:
            raise ValueError("Use clear() to reset a pending action")

        with self._lock:
            current = self._states.get(user_id, PendingAction.IDLE)
            if not validate_transition(current, action):
                raise ValueError(f"Invalid transition {current.value} -> {action.value}")
            self._states[user_id] = action

    def consume(self, user_id: int) -> PendingAction:
        """Return the pending action for user and reset it to IDLE."""
        with self._lock:
            return self._states.pop(user_id, PendingAction.IDLE)

    def clear(self, user_id: int):
        with self._lock:
            self._states.pop(user_id, None)

"""Unit tests for the bot's pending-action state machine."""
import pytest
from calendar_admin.bot.state import (
    PendingAction,
    PendingActionStore,
    VALID_TRANSITIONS,
    validate_transition,
)


@pytest.fixture
def sessions():
    return PendingActionStore()


def test_all_states_have_transitions():
    for state in PendingAction:
        assert state in VALID_TRANSITIONS


def test_idle_can_arm_either_action():
    assert validate_transition(PendingAction.IDLE, PendingAction.AWAITING_BLOCK_INPUT)
    assert validate_transition(PendingAction.IDLE, PendingAction.AWAITING_UNBLOCK_INPUT)
    assert not validate_transition(PendingAction.IDLE, PendingAction.IDLE)


def test_unknown_user_is_idle(sessions):
    assert sessions.current(42) is PendingAction.IDLE


def test_consume_returns_action_and_resets(sessions):
    sessions.begin(42, PendingAction.AWAITING_BLOCK_INPUT)

    assert sessions.current(42) is PendingAction.AWAITING_BLOCK_INPUT
    assert sessions.consume(42) is PendingAction.AWAITING_BLOCK_INPUT
    assert sessions.current(42) is PendingAction.IDLE
    assert sessions.consume(42) is PendingAction.IDLE


def test_new_command_replaces_pending_action(sessions):
    sessions.begin(42, PendingAction.AWAITING_BLOCK_INPUT)
    sessions.begin(42, PendingAction.AWAITING_UNBLOCK_INPUT)

    assert sessions.consume(42) is PendingAction.AWAITING_UNBLOCK_INPUT


def test_state_is_per_user(sessions):
    sessions.begin(1, PendingAction.AWAITING_BLOCK_INPUT)

    assert sessions.current(2) is PendingAction.IDLE


def test_begin_idle_rejected(sessions):
    with pytest.raises(ValueError):
        sessions.begin(42, PendingAction.IDLE)


def test_clear(sessions):
    sessions.begin(42, PendingAction.AWAITING_BLOCK_INPUT)
    sessions.clear(42)

    assert sessions.current(42) is PendingAction.IDLE

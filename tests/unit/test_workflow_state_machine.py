"""Unit tests for the marker lifecycle state machine.

These tests assert that illegal transitions fail loudly.
"""

from __future__ import annotations

import pytest

from worktree_coordinator.coordinator.workflow.state_machine import (
    TERMINAL_STATES,
    IllegalTransitionError,
    MarkerState,
    transition,
)


def test_happy_path_reaches_consumed() -> None:
    state = MarkerState.ABSENT
    for to in (MarkerState.PRESENT, MarkerState.CLAIMED, MarkerState.CONSUMED):
        state = transition(current=state, to=to)
    assert state in TERMINAL_STATES


def test_stuck_marker_can_be_claimed_again() -> None:
    stuck = transition(current=MarkerState.CLAIMED, to=MarkerState.STUCK)
    assert transition(current=stuck, to=MarkerState.CLAIMED) == MarkerState.CLAIMED


@pytest.mark.parametrize(
    ("current", "to"),
    [
        (MarkerState.ABSENT, MarkerState.CLAIMED),
        (MarkerState.PRESENT, MarkerState.CONSUMED),
        (MarkerState.CONSUMED, MarkerState.CLAIMED),
        (MarkerState.STUCK, MarkerState.CONSUMED),
    ],
)
def test_transition_rejects_illegal_transitions(current: MarkerState, to: MarkerState) -> None:
    with pytest.raises(IllegalTransitionError):
        transition(current=current, to=to)

from __future__ import annotations

from enum import Enum


class MarkerState(str, Enum):
    ABSENT = "absent"
    PRESENT = "present"
    CLAIMED = "claimed"
    CONSUMED = "consumed"
    STUCK = "stuck"


# STUCK -> CLAIMED is the retry path taken by a later invocation.
ALLOWED_TRANSITIONS: dict[MarkerState, set[MarkerState]] = {
    MarkerState.ABSENT: {MarkerState.PRESENT},
    MarkerState.PRESENT: {MarkerState.CLAIMED},
    MarkerState.CLAIMED: {MarkerState.CONSUMED, MarkerState.STUCK},
    MarkerState.CONSUMED: {MarkerState.ABSENT},
    MarkerState.STUCK: {MarkerState.CLAIMED},
}

TERMINAL_STATES: frozenset[MarkerState] = frozenset({MarkerState.CONSUMED, MarkerState.STUCK})


class IllegalTransitionError(ValueError):
    pass


def transition(*, current: MarkerState, to: MarkerState) -> MarkerState:
    allowed = ALLOWED_TRANSITIONS.get(current, set())
    if to not in allowed:
        raise IllegalTransitionError(f"Illegal transition: {current.value} -> {to.value}")
    return to

"""Signal dispatch: one detected marker, one routine, one disposition.

A dispatch cycle processes at most one signal. Errors raised by a routine never
reach here (routines return outcomes); anything that does raise inside the
cycle is a dispatch failure, and its marker is left in place for a later
invocation.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from .events import EventKind
from .routines import (
    DOCS_WORKFLOW,
    TEST_WORKFLOW,
    VALIDATION_WORKFLOW,
    WorkflowContext,
    WorkflowOutcome,
    WorkflowRoutine,
)
from .signals import DetectedSignal, SignalAction, SignalWatcher
from .state_machine import MarkerState, transition

logger = logging.getLogger(__name__)

DEFAULT_ROUTINES: dict[SignalAction, WorkflowRoutine] = {
    SignalAction.TRIGGER_TESTS: TEST_WORKFLOW,
    SignalAction.TRIGGER_DOCS: DOCS_WORKFLOW,
    SignalAction.TRIGGER_VALIDATION: VALIDATION_WORKFLOW,
}

Notifier = Callable[[str], None]


class DispatchError(RuntimeError):
    """A failure outside a routine's own handling; the marker is kept."""


@dataclass(frozen=True, slots=True)
class DispatchResult:
    signal: DetectedSignal
    state: MarkerState
    outcome: WorkflowOutcome | None = None
    error: str | None = None


def _discard(_message: str) -> None:
    return None


class WorkflowDispatcher:
    """Run the routine bound to a detected signal and dispose of its marker.

    `delete_marker_on_failure=True` reproduces the long-standing behaviour: the
    marker goes away even when the routine failed, so a failed workflow is only
    visible in the event log. With False, a failed routine leaves its marker
    (STUCK) and the next invocation retries it.
    """

    def __init__(
        self,
        context: WorkflowContext,
        *,
        notify: Notifier | None = None,
        routines: dict[SignalAction, WorkflowRoutine] | None = None,
        delete_marker_on_failure: bool = True,
    ) -> None:
        self._context = context
        self._notify = notify or _discard
        self._routines = routines if routines is not None else DEFAULT_ROUTINES
        self._delete_marker_on_failure = delete_marker_on_failure

    def routine_for(self, action: SignalAction) -> WorkflowRoutine:
        routine = self._routines.get(action)
        if routine is None:
            raise DispatchError(f"No workflow bound to action {action.value!r}")
        return routine

    def dispatch(self, detected: DetectedSignal) -> DispatchResult:
        events = self._context.events
        markers = self._context.markers
        signal_name = detected.spec.relative_path
        state = transition(current=MarkerState.PRESENT, to=MarkerState.CLAIMED)
        outcome: WorkflowOutcome | None = None

        try:
            events.append(
                EventKind.SIGNAL_DETECTED,
                {"signal": signal_name, "action": detected.spec.action.value},
            )
            self._notify(f"🔄 {detected.spec.message}")

            outcome = self.routine_for(detected.spec.action).run(self._context)

            if not outcome.succeeded and not self._delete_marker_on_failure:
                logger.warning(
                    "Keeping marker after failed workflow",
                    extra={"signal": signal_name, "workflow": outcome.workflow},
                )
                events.append(
                    EventKind.SIGNAL_ERROR,
                    {"signal": signal_name, "error": outcome.error, "retained": True},
                )
                return DispatchResult(
                    signal=detected,
                    state=transition(current=state, to=MarkerState.STUCK),
                    outcome=outcome,
                    error=outcome.error,
                )

            try:
                markers.claim(detected.path)
            except OSError as e:
                raise DispatchError(f"Cannot remove marker {detected.path}: {e}") from e

            events.append(EventKind.SIGNAL_PROCESSED, {"signal": signal_name})
            return DispatchResult(
                signal=detected,
                state=transition(current=state, to=MarkerState.CONSUMED),
                outcome=outcome,
            )

        except Exception as e:
            logger.exception("Error processing signal", extra={"signal": signal_name})
            events.append(EventKind.SIGNAL_ERROR, {"signal": signal_name, "error": str(e)})
            return DispatchResult(
                signal=detected,
                state=transition(current=state, to=MarkerState.STUCK),
                outcome=outcome,
                error=str(e),
            )

    def run_cycle(self, watcher: SignalWatcher) -> DispatchResult | None:
        """Scan once and process the highest-priority signal, if any."""

        detected = watcher.scan()
        if detected is None:
            return None
        return self.dispatch(detected)

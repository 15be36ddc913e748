from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class EventKind(str, Enum):
    SIGNAL_DETECTED = "signal_detected"
    SIGNAL_PROCESSED = "signal_processed"
    SIGNAL_ERROR = "signal_error"
    WORKFLOW_STARTED = "workflow_started"
    WORKFLOW_COMPLETED = "workflow_completed"
    WORKFLOW_FAILED = "workflow_failed"


class EventRecord(BaseModel):
    """One line of the workflow event log.

    Records are append-only: written once, never rewritten.
    """

    timestamp: str
    event: EventKind
    details: dict[str, object] = Field(default_factory=dict)
    project: str

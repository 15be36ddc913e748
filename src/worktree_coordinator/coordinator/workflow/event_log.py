"""Append-only workflow event log.

One JSON object per line. The log is observability only: a failed write is
reported through diagnostic logging and otherwise ignored, so it can never
change the outcome of a dispatch cycle.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from pydantic import ValidationError

from .events import EventKind, EventRecord

logger = logging.getLogger(__name__)


def _utc_iso_now() -> str:
    return datetime.now(tz=UTC).isoformat()


@dataclass
class EventLogger:
    path: Path
    project: str

    def append(self, event: EventKind, details: dict[str, object] | None = None) -> None:
        record = EventRecord(
            timestamp=_utc_iso_now(),
            event=event,
            details=details or {},
            project=self.project,
        )
        line = json.dumps(record.model_dump(mode="json"), ensure_ascii=False, default=str)
        try:
            with self.path.open("a", encoding="utf-8") as fh:
                fh.write(line + "\n")
        except OSError as e:
            logger.warning(
                "Failed to log workflow event",
                extra={"path": str(self.path), "event": event.value, "error": str(e)},
            )

    def read(self) -> list[EventRecord]:
        """Return all parseable records in file order."""

        if not self.path.exists():
            return []
        records: list[EventRecord] = []
        for raw in self.path.read_text(encoding="utf-8").splitlines():
            if not raw.strip():
                continue
            try:
                records.append(EventRecord.model_validate_json(raw))
            except ValidationError:
                # Other tools may share the file; skip lines we do not understand.
                continue
        return records

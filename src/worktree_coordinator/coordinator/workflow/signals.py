"""Marker files as workflow signals.

A marker's presence is the whole signal; its content is advisory text at most.
Signals are detected by scanning a fixed catalogue in priority order.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class SignalAction(str, Enum):
    TRIGGER_TESTS = "trigger-tests"
    TRIGGER_DOCS = "trigger-docs"
    TRIGGER_VALIDATION = "trigger-validation"


@dataclass(frozen=True, slots=True)
class SignalSpec:
    relative_path: str
    action: SignalAction
    message: str


# Order is priority: when several markers coexist, the first one wins.
SIGNAL_CATALOGUE: tuple[SignalSpec, ...] = (
    SignalSpec(
        relative_path="feature/.claude-complete",
        action=SignalAction.TRIGGER_TESTS,
        message="Feature work completed, triggering test workflow",
    ),
    SignalSpec(
        relative_path="test/.tests-complete",
        action=SignalAction.TRIGGER_DOCS,
        message="Testing completed, triggering documentation workflow",
    ),
    SignalSpec(
        relative_path="bugfix/.bugfix-complete",
        action=SignalAction.TRIGGER_VALIDATION,
        message="Bugfix completed, triggering validation workflow",
    ),
)


@dataclass(frozen=True, slots=True)
class DetectedSignal:
    """A catalogue entry whose marker exists right now."""

    spec: SignalSpec
    path: Path


class MarkerStore:
    """Persistent flags backed by files.

    `claim` is a plain delete and is not atomic with `exists`: two concurrent
    invocations can both see a marker, and the slower one's claim then raises
    FileNotFoundError.
    """

    def exists(self, path: Path) -> bool:
        return path.is_file()

    def claim(self, path: Path) -> None:
        path.unlink()

    def set(self, path: Path, content: str = "") -> None:  # noqa: A003 (flag store verb)
        path.write_text(content, encoding="utf-8")


class SignalWatcher:
    """Report which catalogue signals are present under the worktrees directory.

    Nothing is cached; every call reads the filesystem.
    """

    def __init__(
        self,
        base_dir: Path,
        markers: MarkerStore | None = None,
        catalogue: tuple[SignalSpec, ...] = SIGNAL_CATALOGUE,
    ) -> None:
        self._base_dir = base_dir
        self._markers = markers or MarkerStore()
        self._catalogue = catalogue

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    def marker_path(self, spec: SignalSpec) -> Path:
        return self._base_dir / spec.relative_path

    def scan(self) -> DetectedSignal | None:
        """Return the highest-priority present signal, or None."""

        for spec in self._catalogue:
            path = self.marker_path(spec)
            if self._markers.exists(path):
                return DetectedSignal(spec=spec, path=path)
        return None

    def detect_all(self) -> list[DetectedSignal]:
        """Every present signal in priority order (status display only)."""

        return [
            DetectedSignal(spec=spec, path=self.marker_path(spec))
            for spec in self._catalogue
            if self._markers.exists(self.marker_path(spec))
        ]

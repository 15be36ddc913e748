"""Workflow routines triggered by signals.

Each routine is a fixed pipeline over one worktree: pull a branch, optionally
run the worktree's test command, then write the marker for the next stage.
Routines own their failures: they log `workflow_failed` and return a failed
outcome instead of raising.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from worktree_coordinator.coordinator.commands import CommandError, CommandRunner
from worktree_coordinator.coordinator.config import WorktreeConfig

from .event_log import EventLogger
from .events import EventKind
from .signals import MarkerStore

logger = logging.getLogger(__name__)

# First match wins.
BUILD_MANIFESTS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("package.json", ("npm", "test")),
    ("pyproject.toml", ("python3", "-m", "pytest")),
    ("Cargo.toml", ("cargo", "test")),
    ("go.mod", ("go", "test", "./...")),
)

DOCS_NEEDED_TEXT = "Documentation update needed for feature changes"


def find_test_command(worktree: Path) -> tuple[str, ...] | None:
    """Return the test command for the first build manifest found in `worktree`."""

    for manifest, command in BUILD_MANIFESTS:
        if (worktree / manifest).is_file():
            return command
    return None


@dataclass(frozen=True, slots=True)
class WorkflowOutcome:
    workflow: str
    succeeded: bool
    error: str | None = None
    skipped: bool = False


@dataclass(frozen=True, slots=True)
class WorkflowContext:
    """Everything a routine may touch, passed in explicitly."""

    config: WorktreeConfig
    worktrees_dir: Path
    runner: CommandRunner
    events: EventLogger
    markers: MarkerStore


class WorkflowRoutine(Protocol):
    """A named, fixed command pipeline that never raises."""

    name: str

    def run(self, context: WorkflowContext) -> WorkflowOutcome: ...


@dataclass(frozen=True, slots=True)
class PullAndMarkWorkflow(WorkflowRoutine):
    """Pull `<branch_kind>/<project>` into a worktree, maybe test, then write a marker.

    A missing worktree is a skip, not a failure: nothing runs and nothing is
    written besides the event log.
    """

    name: str
    worktree: str
    branch_kind: str
    marker_name: str
    run_tests: bool = False
    marker_text: str = ""

    def branch(self, config: WorktreeConfig) -> str:
        if self.branch_kind == "bugfix":
            return config.bugfix_branch
        return config.feature_branch

    def run(self, context: WorkflowContext) -> WorkflowOutcome:
        events = context.events
        events.append(EventKind.WORKFLOW_STARTED, {"workflow": self.name})

        try:
            worktree = context.worktrees_dir / self.worktree
            if not worktree.is_dir():
                logger.info(
                    "Worktree missing; skipping workflow",
                    extra={"workflow": self.name, "worktree": str(worktree)},
                )
                events.append(
                    EventKind.WORKFLOW_COMPLETED,
                    {"workflow": self.name, "skipped": True, "reason": "worktree missing"},
                )
                return WorkflowOutcome(workflow=self.name, succeeded=True, skipped=True)

            context.runner.run("git", ["pull", "origin", self.branch(context.config)], worktree)

            if self.run_tests:
                test_command = find_test_command(worktree)
                if test_command is not None:
                    context.runner.run(test_command[0], test_command[1:], worktree)

            context.markers.set(worktree / self.marker_name, self.marker_text)

        except CommandError as e:
            logger.warning(
                "Workflow command failed",
                extra={"workflow": self.name, "returncode": e.returncode},
            )
            events.append(EventKind.WORKFLOW_FAILED, {"workflow": self.name, "error": str(e)})
            return WorkflowOutcome(workflow=self.name, succeeded=False, error=str(e))

        except Exception as e:
            logger.exception("Workflow failed", extra={"workflow": self.name})
            events.append(EventKind.WORKFLOW_FAILED, {"workflow": self.name, "error": str(e)})
            return WorkflowOutcome(workflow=self.name, succeeded=False, error=str(e))

        events.append(EventKind.WORKFLOW_COMPLETED, {"workflow": self.name})
        return WorkflowOutcome(workflow=self.name, succeeded=True)


TEST_WORKFLOW = PullAndMarkWorkflow(
    name="test",
    worktree="test",
    branch_kind="feature",
    marker_name=".tests-complete",
    run_tests=True,
)

DOCS_WORKFLOW = PullAndMarkWorkflow(
    name="docs",
    worktree="docs",
    branch_kind="feature",
    marker_name=".docs-needed",
    marker_text=DOCS_NEEDED_TEXT,
)

VALIDATION_WORKFLOW = PullAndMarkWorkflow(
    name="validation",
    worktree="test",
    branch_kind="bugfix",
    marker_name=".validation-complete",
    run_tests=True,
)

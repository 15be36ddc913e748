"""Test configuration and fixtures."""

from pathlib import Path
from unittest.mock import Mock

import pytest

from worktree_coordinator.coordinator.commands import CommandRunner
from worktree_coordinator.coordinator.config import WorktreeConfig
from worktree_coordinator.coordinator.workflow.event_log import EventLogger
from worktree_coordinator.coordinator.workflow.routines import WorkflowContext
from worktree_coordinator.coordinator.workflow.signals import MarkerStore


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Provide the main working copy of a project named 'demo'."""
    path = tmp_path / "demo"
    path.mkdir()
    return path


@pytest.fixture
def worktree_config() -> WorktreeConfig:
    """Provide a test worktree configuration."""
    return WorktreeConfig(project_name="demo")


@pytest.fixture
def worktrees_dir(project_dir: Path, worktree_config: WorktreeConfig) -> Path:
    """Provide the sibling worktrees directory (demo-worktrees/)."""
    path = worktree_config.worktrees_dir(project_dir)
    path.mkdir()
    return path


@pytest.fixture
def event_log(tmp_path: Path, worktree_config: WorktreeConfig) -> EventLogger:
    """Provide an event logger writing under the temporary directory."""
    return EventLogger(tmp_path / "workflows.log", project=worktree_config.project_name)


@pytest.fixture
def runner() -> Mock:
    """Provide a command runner that succeeds without spawning anything."""
    mock_runner = Mock(spec=CommandRunner)
    mock_runner.run.return_value = ""
    return mock_runner


@pytest.fixture
def workflow_context(
    worktree_config: WorktreeConfig,
    worktrees_dir: Path,
    runner: Mock,
    event_log: EventLogger,
) -> WorkflowContext:
    """Provide a fully wired routine context."""
    return WorkflowContext(
        config=worktree_config,
        worktrees_dir=worktrees_dir,
        runner=runner,
        events=event_log,
        markers=MarkerStore(),
    )

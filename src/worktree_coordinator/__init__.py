"""Worktree Coordinator.

Coordinates a multi-stage workflow across several worktrees of one repository:
- signal marker files detected in priority order
- one workflow routine per detected signal (pull, optional tests, next marker)
- an append-only JSON-lines event log
"""

__version__ = "0.1.0"

from worktree_coordinator.coordinator.config import CoordinatorSettings, WorktreeConfig

__all__ = ["__version__", "CoordinatorSettings", "WorktreeConfig"]

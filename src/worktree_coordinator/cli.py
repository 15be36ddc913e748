"""Console entrypoint shim.

The CLI is implemented in `worktree_coordinator.coordinator.main`.
"""

from __future__ import annotations

from worktree_coordinator.coordinator.main import main

__all__ = ["main"]


if __name__ == "__main__":
    raise SystemExit(main())

"""Contextual text injected into the chat session by the hook host."""

from __future__ import annotations

from pathlib import Path

from worktree_coordinator.coordinator.config import WorktreeConfig

PROMPT_KEYWORDS: tuple[str, ...] = (
    "worktree",
    "sync",
    "monitor",
    "signal",
    "workflow",
    "feature",
    "test",
    "docs",
    "bugfix",
    "claude-complete",
    "tests-complete",
    "bugfix-complete",
)

_SLASH_COMMANDS = """\
Available slash commands:
- /worktree-feature - Work in feature worktree
- /worktree-test - Work in test worktree
- /worktree-docs - Work in docs worktree
- /worktree-bugfix - Work in bugfix worktree
- /sync-worktrees - Sync changes between worktrees
- /monitor-start - Start worktree monitoring
- /monitor-stop - Stop worktree monitoring
- /status-worktrees - Show worktree status"""

_SIGNAL_LEGEND = """\
Signal files for workflow coordination:
- .claude-complete - Feature work completed (triggers tests)
- .tests-complete - Tests completed (triggers documentation)
- .bugfix-complete - Bugfix completed (triggers validation)
- .docs-needed - Documentation updates needed"""

_TIPS = """\
Tips:
- Use signal files to coordinate automated workflows
- Worktrees are isolated, use sync commands to share changes
- Monitoring can be started for automated coordination
- Each worktree has its own Git branch and working directory"""


def _on_off(flag: bool, on: str, off: str) -> str:
    return on if flag else off


def session_start_context(config: WorktreeConfig) -> str:
    return "\n".join(
        [
            "🔄 Multi-Worktree Setup Active",
            f"Project: {config.project_name}",
            f"Worktrees: {', '.join(config.worktrees)}",
            "",
            _SLASH_COMMANDS,
            "",
            _SIGNAL_LEGEND,
            "",
            f"Auto-sync: {_on_off(config.auto_sync, 'Enabled', 'Disabled')}",
            f"Monitoring: {_on_off(config.monitoring, 'Active', 'Inactive')}",
            "",
            "Create the matching signal file when you finish work in a worktree; "
            "the next workflow stage starts automatically.",
        ]
    )


def mentions_worktrees(prompt: str) -> bool:
    lowered = prompt.lower()
    return any(keyword in lowered for keyword in PROMPT_KEYWORDS)


def prompt_context(
    config: WorktreeConfig, prompt: str, *, cwd: Path, project_dir: Path
) -> str | None:
    """Worktree context for a prompt, or None when the prompt is unrelated."""

    if not mentions_worktrees(prompt):
        return None
    return "\n".join(
        [
            "📋 Multi-Worktree Context:",
            f"Project: {config.project_name}",
            f"Active worktrees: {', '.join(config.worktrees)}",
            "",
            _SLASH_COMMANDS,
            "",
            _SIGNAL_LEGEND,
            "",
            f"Current working directory: {cwd}",
            f"Project root: {project_dir}",
            "",
            _TIPS,
        ]
    )

"""Unit tests for hook payload parsing, output envelopes and context text."""

from __future__ import annotations

import io
import json
from pathlib import Path

from worktree_coordinator.coordinator.config import WorktreeConfig
from worktree_coordinator.coordinator.context import prompt_context, session_start_context
from worktree_coordinator.coordinator.hooks import (
    HookInput,
    read_hook_input,
    write_hook_output,
)


def test_read_hook_input_parses_tool_payload() -> None:
    payload = read_hook_input(
        io.StringIO(
            json.dumps(
                {
                    "session_id": "abc",
                    "hook_event_name": "PostToolUse",
                    "tool_name": "Edit",
                    "tool_input": {"file_path": "src/app.py"},
                }
            )
        )
    )

    assert payload.tool_name == "Edit"
    assert payload.tool_input == {"file_path": "src/app.py"}
    assert payload.triggers_dispatch


def test_only_file_writing_tools_trigger_dispatch() -> None:
    assert HookInput(tool_name="MultiEdit").triggers_dispatch
    assert HookInput(tool_name="Write").triggers_dispatch
    assert not HookInput(tool_name="Read").triggers_dispatch
    assert not HookInput(tool_name="Bash").triggers_dispatch
    assert not HookInput().triggers_dispatch


def test_malformed_or_empty_input_is_an_empty_payload() -> None:
    assert read_hook_input(io.StringIO("")) == HookInput()
    assert read_hook_input(io.StringIO("{oops")) == HookInput()
    assert read_hook_input(io.StringIO('{"tool_name": 7}')) == HookInput()


def test_write_hook_output_envelope() -> None:
    out = io.StringIO()

    write_hook_output(out, "PostToolUse", "🔄 Testing completed")

    assert json.loads(out.getvalue()) == {
        "hookSpecificOutput": {
            "hookEventName": "PostToolUse",
            "additionalContext": "🔄 Testing completed",
        }
    }
    assert out.getvalue().count("\n") == 1


def test_session_start_context_reflects_config() -> None:
    text = session_start_context(
        WorktreeConfig(project_name="shop", worktrees=("feature", "docs"), auto_sync=False)
    )

    assert "Project: shop" in text
    assert "Worktrees: feature, docs" in text
    assert "Auto-sync: Disabled" in text
    assert "Monitoring: Inactive" in text
    assert ".claude-complete" in text


def test_prompt_context_only_for_worktree_prompts() -> None:
    config = WorktreeConfig(project_name="shop")

    where = {"cwd": Path("/work/shop-worktrees/feature"), "project_dir": Path("/work/shop")}

    assert prompt_context(config, "Rename this variable please", **where) is None

    text = prompt_context(config, "Can you SYNC the worktrees?", **where)
    assert text is not None
    assert "Project: shop" in text
    assert "Active worktrees: feature, test, docs, bugfix" in text
    assert "Current working directory: /work/shop-worktrees/feature" in text
    assert "Project root: /work/shop" in text
    assert text.endswith("Each worktree has its own Git branch and working directory")

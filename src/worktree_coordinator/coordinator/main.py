"""CLI entrypoint for the worktree coordinator.

The hook subcommands (`post-tool-use`, `session-start`, `user-prompt-submit`)
ALWAYS exit 0. The exit status is not an error channel: a nonzero status would
make the host treat the tool call or prompt as blocked. Failures surface only
in the workflow event log and the diagnostic log on stderr.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from worktree_coordinator import __version__
from worktree_coordinator.coordinator.commands import CommandRunner
from worktree_coordinator.coordinator.config import (
    CoordinatorSettings,
    WorktreeConfig,
    load_worktree_config,
)
from worktree_coordinator.coordinator.context import prompt_context, session_start_context
from worktree_coordinator.coordinator.hooks import read_hook_input, write_hook_output
from worktree_coordinator.coordinator.logging import configure_logging
from worktree_coordinator.coordinator.workflow.dispatcher import (
    DispatchResult,
    Notifier,
    WorkflowDispatcher,
)
from worktree_coordinator.coordinator.workflow.event_log import EventLogger
from worktree_coordinator.coordinator.workflow.routines import WorkflowContext
from worktree_coordinator.coordinator.workflow.signals import (
    SIGNAL_CATALOGUE,
    MarkerStore,
    SignalWatcher,
)

logger = logging.getLogger(__name__)

HOOK_COMMANDS: frozenset[str] = frozenset({"post-tool-use", "session-start", "user-prompt-submit"})


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="worktree-coordinator",
        description="Coordinate multi-worktree workflows through signal marker files",
    )
    parser.add_argument(
        "--version", action="version", version=f"worktree-coordinator {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser(
        "post-tool-use",
        help="Hook: after a file-writing tool, process the highest-priority signal marker",
    )
    subparsers.add_parser(
        "session-start",
        help="Hook: print the worktree setup context for a new session",
    )
    subparsers.add_parser(
        "user-prompt-submit",
        help="Hook: add worktree context to prompts that mention worktree workflows",
    )
    subparsers.add_parser(
        "dispatch",
        help="Process the highest-priority signal marker now, regardless of tool",
    )
    subparsers.add_parser("status", help="Show which signal markers are present")

    history = subparsers.add_parser("history", help="Show recent workflow events")
    history.add_argument(
        "--limit",
        type=int,
        default=20,
        help="Number of most recent events to show",
    )

    return parser


def build_dispatcher(
    settings: CoordinatorSettings,
    config: WorktreeConfig,
    *,
    notify: Notifier | None = None,
    runner: CommandRunner | None = None,
) -> tuple[WorkflowDispatcher, SignalWatcher]:
    """Wire one invocation's components around an already-loaded config."""

    markers = MarkerStore()
    worktrees_dir = config.worktrees_dir(settings.project_dir)
    context = WorkflowContext(
        config=config,
        worktrees_dir=worktrees_dir,
        runner=runner or CommandRunner(),
        events=EventLogger(settings.workflow_log_path, project=config.project_name),
        markers=markers,
    )
    dispatcher = WorkflowDispatcher(
        context,
        notify=notify,
        delete_marker_on_failure=settings.delete_marker_on_failure,
    )
    return dispatcher, SignalWatcher(worktrees_dir, markers)


def _describe(result: DispatchResult | None) -> str:
    if result is None:
        return "No signal markers present"
    line = f"{result.signal.spec.relative_path}: {result.state.value}"
    if result.outcome is not None:
        status = "succeeded" if result.outcome.succeeded else "failed"
        line += f" (workflow {result.outcome.workflow} {status})"
    if result.error:
        line += f": {result.error}"
    return line


def _run(args: argparse.Namespace, settings: CoordinatorSettings) -> int:
    config = load_worktree_config(
        settings.config_file, default_project_name=settings.project_name
    )

    if args.command == "post-tool-use":
        payload = read_hook_input(sys.stdin)
        if not payload.triggers_dispatch:
            return 0

        def notify(text: str) -> None:
            write_hook_output(sys.stdout, "PostToolUse", text)

        dispatcher, watcher = build_dispatcher(settings, config, notify=notify)
        result = dispatcher.run_cycle(watcher)
        if result is not None:
            logger.info("Dispatch cycle finished", extra={"result": _describe(result)})
        return 0

    if args.command == "session-start":
        write_hook_output(sys.stdout, "SessionStart", session_start_context(config))
        return 0

    if args.command == "user-prompt-submit":
        payload = read_hook_input(sys.stdin)
        text = prompt_context(
            config, payload.prompt or "", cwd=Path.cwd(), project_dir=settings.project_dir
        )
        if text is not None:
            write_hook_output(sys.stdout, "UserPromptSubmit", text)
        return 0

    if args.command == "dispatch":
        dispatcher, watcher = build_dispatcher(settings, config, notify=print)
        print(_describe(dispatcher.run_cycle(watcher)))
        return 0

    if args.command == "status":
        watcher = SignalWatcher(config.worktrees_dir(settings.project_dir))
        print(f"Project: {config.project_name} ({watcher.base_dir})")
        present = {d.spec.relative_path for d in watcher.detect_all()}
        for spec in SIGNAL_CATALOGUE:
            mark = "present" if spec.relative_path in present else "absent"
            print(f"  {spec.relative_path:<28} {mark:<8} -> {spec.action.value}")
        return 0

    if args.command == "history":
        records = EventLogger(settings.workflow_log_path, project=config.project_name).read()
        if args.limit > 0:
            for record in records[-args.limit :]:
                print(record.model_dump_json())
        return 0

    logger.error("Unknown command", extra={"command": args.command})
    return 2


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    is_hook = args.command in HOOK_COMMANDS

    try:
        settings = CoordinatorSettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your environment and .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 0 if is_hook else 2

    try:
        configure_logging(settings.log_level)
        return _run(args, settings)
    except Exception:
        logger.exception("Command failed", extra={"command": args.command})
        return 0 if is_hook else 1


if __name__ == "__main__":
    raise SystemExit(main())

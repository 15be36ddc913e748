"""Configuration for the worktree coordinator.

Two layers:

- `CoordinatorSettings`: process settings loaded from environment variables and
  a local `.env` file (if present). The hook host exports `CLAUDE_PROJECT_DIR`.
- `WorktreeConfig`: the per-project record read from
  `<project_dir>/.claude/worktree-config.json`. It is built once per invocation
  and handed to every component; nothing mutates it.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

DEFAULT_PROJECT_NAME = "unknown"
DEFAULT_WORKTREES: tuple[str, ...] = ("feature", "test", "docs", "bugfix")
DEFAULT_WORKFLOW_LOG = Path("/tmp/claude-worktree-workflows.log")


class ConfigError(ValueError):
    """The worktree config file exists but cannot be read or parsed."""


class CoordinatorSettings(BaseSettings):
    """Settings for the coordinator process.

    Environment variables:
    - CLAUDE_PROJECT_DIR                 (optional, defaults to the working directory)
    - CLAUDE_PROJECT_NAME                (optional)
    - LOG_LEVEL                          (optional)
    - WORKTREE_WORKFLOW_LOG              (optional)
    - WORKTREE_DELETE_MARKER_ON_FAILURE  (optional)

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `CoordinatorSettings(_env_file=path_to_env)`.
    """

    project_dir: Path = Field(
        default_factory=Path.cwd,
        validation_alias="CLAUDE_PROJECT_DIR",
        description="Root of the main working copy (where .claude/ lives)",
    )
    project_name: str = Field(
        default=DEFAULT_PROJECT_NAME,
        validation_alias="CLAUDE_PROJECT_NAME",
        description="Project name used when the config file does not set projectName",
    )

    # Hooks share the terminal with the host; keep diagnostics quiet by default.
    log_level: str = Field(
        default="WARNING",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    workflow_log_path: Path = Field(
        default=DEFAULT_WORKFLOW_LOG,
        validation_alias="WORKTREE_WORKFLOW_LOG",
        description="Append-only JSON-lines log of workflow events",
    )

    delete_marker_on_failure: bool = Field(
        default=True,
        validation_alias="WORKTREE_DELETE_MARKER_ON_FAILURE",
        description=(
            "Delete a signal marker even when its workflow failed. "
            "Disable to leave the marker in place so a later invocation retries it."
        ),
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
    )

    @property
    def config_file(self) -> Path:
        """Path of the per-project worktree config file."""

        return self.project_dir / ".claude" / "worktree-config.json"


class WorktreeConfig(BaseModel):
    """Per-project worktree layout.

    The worktree order is display order only; signal priority is fixed by the
    signal catalogue.
    """

    model_config = ConfigDict(frozen=True)

    project_name: str = DEFAULT_PROJECT_NAME
    worktrees: tuple[str, ...] = DEFAULT_WORKTREES
    auto_sync: bool = True
    monitoring: bool = False

    @property
    def feature_branch(self) -> str:
        return f"feature/{self.project_name}"

    @property
    def bugfix_branch(self) -> str:
        return f"bugfix/{self.project_name}"

    def worktrees_dir(self, project_dir: Path) -> Path:
        """Sibling directory holding one checkout per worktree name."""

        return project_dir.resolve().parent / f"{self.project_name}-worktrees"


def read_worktree_config_file(path: Path) -> dict[str, object]:
    """Read the raw JSON object from the config file.

    Raises:
        ConfigError: the file cannot be read, is not valid JSON, or is not an object.
    """

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read worktree config {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"Worktree config {path} is not a JSON object")
    return raw


def merge_worktree_config(
    raw: dict[str, object], *, default_project_name: str = DEFAULT_PROJECT_NAME
) -> WorktreeConfig:
    """Overlay well-typed keys from `raw` onto the defaults.

    Unknown keys are ignored, and so is any known key whose value has the wrong
    type; the remaining fields keep their defaults.
    """

    fields: dict[str, object] = {"project_name": default_project_name}

    name = raw.get("projectName")
    if isinstance(name, str):
        fields["project_name"] = name

    worktrees = raw.get("worktrees")
    if isinstance(worktrees, list) and all(isinstance(w, str) for w in worktrees):
        fields["worktrees"] = tuple(worktrees)

    # bool is checked exactly: JSON 0/1 are not flags.
    auto_sync = raw.get("autoSync")
    if isinstance(auto_sync, bool):
        fields["auto_sync"] = auto_sync
    monitoring = raw.get("monitoring")
    if isinstance(monitoring, bool):
        fields["monitoring"] = monitoring

    return WorktreeConfig.model_validate(fields)


def load_worktree_config(
    path: Path, *, default_project_name: str = DEFAULT_PROJECT_NAME
) -> WorktreeConfig:
    """Load the worktree config, falling back to defaults on any failure."""

    if not path.exists():
        return WorktreeConfig(project_name=default_project_name)

    try:
        raw = read_worktree_config_file(path)
    except ConfigError as e:
        logger.warning("Using default worktree config", extra={"path": str(path), "error": str(e)})
        return WorktreeConfig(project_name=default_project_name)

    return merge_worktree_config(raw, default_project_name=default_project_name)

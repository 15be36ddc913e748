"""Hook-driven coordinator components.

- Settings loaded from the environment and .env, plus the per-project worktree config
- Structured logging
- External command execution
- Hook payload parsing and context text
- The CLI surface used by the hook host
"""

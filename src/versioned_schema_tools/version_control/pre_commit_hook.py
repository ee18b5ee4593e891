"""Installation of the materialize-modified git pre-commit hook."""

from __future__ import annotations

import logging
import shlex
import sys
from pathlib import Path

from versioned_schema_tools.configuration import ToolOptions

from .git_operations import GitRepository

_LOGGER = logging.getLogger(__name__)

_PRE_COMMIT_TEMPLATE = """#!/bin/sh
# Installed by versioned-schema-tools.
# unset GIT_DIR so the tool can find the git root itself.
unset GIT_DIR

# Materialize staged {current_name} schema files; a failure aborts the commit.
exec {python} -m versioned_schema_tools materialize-modified --staged {arguments}
"""


def build_pre_commit_hook(options: ToolOptions, python_executable: str | None = None) -> str:
    """Render the pre-commit hook script for options."""
    arguments = ["--schema-base-path", str(Path(options.schema_base_path).resolve())]
    for config_path in options.config_paths:
        arguments.extend(["--config", str(Path(config_path).resolve())])
    return _PRE_COMMIT_TEMPLATE.format(
        current_name=options.current_name,
        python=shlex.quote(python_executable or sys.executable),
        arguments=shlex.join(arguments),
    )


def install_pre_commit_hook(
    options: ToolOptions,
    *,
    git: GitRepository | None = None,
    git_root: Path | None = None,
) -> Path:
    """Write an executable pre-commit hook into the repository and return its path."""
    repository = git or GitRepository(options.schema_base_path)
    root = git_root or repository.find_root()
    hook_path = root / ".git" / "hooks" / "pre-commit"

    _LOGGER.info("Saving materialize-modified pre-commit hook to %s", hook_path)
    if options.dry_run:
        _LOGGER.info("dry-run: not installing pre-commit hook.")
        return hook_path

    hook_path.parent.mkdir(parents=True, exist_ok=True)
    hook_path.write_text(build_pre_commit_hook(options), encoding="utf-8")
    hook_path.chmod(0o755)
    return hook_path

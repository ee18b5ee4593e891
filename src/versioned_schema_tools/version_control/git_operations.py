"""Thin git plumbing used by the materialize-modified and hook workflows."""

from __future__ import annotations

import logging
import shlex
import subprocess
from collections.abc import Callable, Sequence
from pathlib import Path

_LOGGER = logging.getLogger(__name__)

CommandRunner = Callable[[tuple[str, ...], Path], str]


class GitOperationError(Exception):
    """Raised when a git command fails."""


class GitRepository:
    """git commands executed relative to a working directory inside a repository."""

    def __init__(self, working_dir: Path | str, run_command: CommandRunner | None = None):
        self.working_dir = Path(working_dir)
        self._run_command = run_command or _run_checked_command

    def find_root(self) -> Path:
        """Return the top level directory of the repository containing working_dir."""
        output = self._run(("git", "rev-parse", "--show-toplevel"))
        return Path(output.strip())

    def modified_paths(self, *, staged: bool, current_name: str) -> list[Path]:
        """Return absolute paths of added, copied or modified current schema files.

        staged selects files in the index (git diff --cached); otherwise unstaged
        working tree changes are listed.
        """
        git_root = self.find_root()
        command = ["git", "diff"]
        if staged:
            command.append("--cached")
        command.extend(["--name-only", "--diff-filter=ACM"])
        output = self._run(tuple(command))
        return [
            (git_root / line.strip()).resolve()
            for line in output.splitlines()
            if line.strip() and Path(line.strip()).name == current_name
        ]

    def add(self, paths: Sequence[Path | str]) -> None:
        """Stage paths with git add."""
        if not paths:
            return
        self._run(("git", "add", *(str(path) for path in paths)))

    def _run(self, command: tuple[str, ...]) -> str:
        _LOGGER.debug("Running: `%s` in %s", shlex.join(command), self.working_dir)
        return self._run_command(command, self.working_dir)


def _run_checked_command(command: tuple[str, ...], cwd: Path) -> str:
    """Run one git command and wrap subprocess errors with domain-friendly messages."""
    try:
        completed = subprocess.run(
            list(command), cwd=cwd, check=True, capture_output=True, text=True
        )
    except FileNotFoundError as exc:
        raise GitOperationError(f"git command not found: {shlex.join(command)}") from exc
    except subprocess.CalledProcessError as exc:
        raise GitOperationError(
            f"git command failed with exit code {exc.returncode}: {shlex.join(command)}"
            f"{': ' + exc.stderr.strip() if exc.stderr else ''}"
        ) from exc
    return completed.stdout

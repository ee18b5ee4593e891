"""Version control domain exports."""

from .git_operations import CommandRunner, GitOperationError, GitRepository
from .pre_commit_hook import build_pre_commit_hook, install_pre_commit_hook

__all__ = [
    "CommandRunner",
    "GitOperationError",
    "GitRepository",
    "build_pre_commit_hook",
    "install_pre_commit_hook",
]

"""Git operations for the local plugin checkout."""

from .repository import GitError, GitStatus, Repository, StatusEntry

__all__ = [
    "GitError",
    "GitStatus",
    "Repository",
    "StatusEntry",
]

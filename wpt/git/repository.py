"""Git repository abstraction.

The local side of a release: which branch is checked out, switching
branches, and whether the working tree is clean. All operations return
Result types.

Usage:
    repo = Repository(Path("/path/to/plugin"))

    match repo.status():
        case Ok(status):
            print(f"Branch: {status.branch}")
            if status.is_clean:
                print("Working tree clean")
        case Err(e):
            print(f"Error: {e.message}")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from wpt.core.result import Err, Ok, Result
from wpt.platform.process import ProcessError
from wpt.platform.process import run as run_process

_GIT_TIMEOUT_SECONDS = 30.0

__all__ = [
    "GitError",
    "GitStatus",
    "Repository",
    "StatusEntry",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git command that failed
        message: Error message
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


@dataclass(frozen=True, slots=True)
class StatusEntry:
    """A single entry in git status.

    Attributes:
        xy: Two-character status code (e.g., "M ", " M", "??")
        path: File path
    """

    xy: str
    path: str


@dataclass(frozen=True, slots=True)
class GitStatus:
    """Parsed `git status --porcelain=v1 -b`."""

    branch: str
    entries: tuple[StatusEntry, ...] = field(default_factory=tuple)

    @property
    def is_clean(self) -> bool:
        """True if working tree has no changes."""
        return len(self.entries) == 0


class Repository:
    """Git repository abstraction.

    Attributes:
        path: Path to the repository root (or any directory inside it)
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def status(self) -> Result[GitStatus, GitError]:
        """Get repository status.

        Returns:
            Ok(GitStatus) on success
            Err(GitError) on failure
        """
        result = self._run(["status", "--porcelain=v1", "-b"])
        match result:
            case Err(e):
                return Err(
                    GitError(
                        command="status",
                        message=e.detail or "git status failed",
                        returncode=e.returncode,
                    )
                )
            case Ok(stdout):
                return Ok(self._parse_status(stdout))

    def current_branch(self) -> str | None:
        """Get current branch name.

        Returns None if detached HEAD or error.
        """
        result = self._run(["rev-parse", "--abbrev-ref", "HEAD"])
        match result:
            case Ok(stdout):
                branch = stdout.strip()
                return None if branch == "HEAD" else branch
            case Err(_):
                return None

    def checkout(self, branch: str) -> Result[None, GitError]:
        """Switch the working tree to `branch`."""
        result = self._run(["checkout", branch])
        match result:
            case Err(e):
                return Err(
                    GitError(
                        command=f"checkout {branch}",
                        message=e.detail or f"failed to checkout {branch}",
                        returncode=e.returncode,
                    )
                )
            case Ok(_):
                return Ok(None)

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        return run_process(
            ["git", "-C", str(self.path), *args],
            cwd=self.path,
            timeout=_GIT_TIMEOUT_SECONDS,
        )

    def _parse_status(self, output: str) -> GitStatus:
        lines = [ln for ln in output.splitlines() if ln.strip()]
        if not lines:
            return GitStatus(branch="")

        # First line is branch info: ## branch...upstream [ahead N, behind M]
        branch = ""
        if lines[0].startswith("##"):
            head = lines[0][2:].strip().split(" [", 1)[0]
            branch = head.split("...", 1)[0].strip()
            lines = lines[1:]

        entries: list[StatusEntry] = []
        for line in lines:
            if len(line) < 4:
                continue
            entries.append(StatusEntry(xy=line[:2], path=line[3:]))

        return GitStatus(branch=branch, entries=tuple(entries))

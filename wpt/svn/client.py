"""Subversion client for the release repository working copy.

Thin wrapper over the `svn` command line. Every method returns a Result;
nothing here retries. Network-bound commands get a long timeout, local
ones a short one.

Usage:
    svn = SvnClient(cwd=Path("/tmp/build"))
    match svn.missing_items(Path("/tmp/build/trunk")):
        case Ok(paths):
            for p in paths:
                svn.delete(p)
        case Err(e):
            print(f"svn status failed: {e.message}")
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from wpt.core.result import Err, Ok, Result
from wpt.platform.process import ProcessError
from wpt.platform.process import run as run_process
from wpt.platform.process import run_silent

_SVN_TIMEOUT_SECONDS = 60.0
_SVN_NETWORK_TIMEOUT_SECONDS = 10 * 60.0
_NETWORK_COMMANDS = frozenset({"checkout", "update", "copy"})

# First column of `svn status`
STATUS_MISSING = "!"
STATUS_UNTRACKED = "?"

__all__ = [
    "STATUS_MISSING",
    "STATUS_UNTRACKED",
    "SvnClient",
    "SvnError",
    "SvnStatusEntry",
]


@dataclass(frozen=True, slots=True)
class SvnError:
    """Error from an svn operation.

    Attributes:
        command: The svn subcommand that failed (e.g. "commit")
        message: Error message
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


@dataclass(frozen=True, slots=True)
class SvnStatusEntry:
    code: str
    path: Path


def _arg(path: Path) -> str:
    # svn reads a trailing "@rev" as a peg revision; "icon@2x.png" needs a final "@".
    s = str(path)
    return f"{s}@" if "@" in s else s


class SvnClient:
    """Runs svn commands from a fixed working directory."""

    def __init__(self, cwd: Path) -> None:
        self.cwd = cwd

    def checkout(self, url: str, destination: Path, *, depth: str = "immediates") -> Result[None, SvnError]:
        """Check out `url` into `destination`, shallow by default."""
        return self._call(["checkout", "--depth", depth, url, _arg(destination)])

    def update(self, path: Path, *flags: str) -> Result[None, SvnError]:
        """Update `path`; flags such as `--set-depth infinity` or `--accept mine-full`."""
        return self._call(["update", *flags, _arg(path)])

    def status(self, path: Path) -> Result[tuple[SvnStatusEntry, ...], SvnError]:
        result = self._run(["status", _arg(path)])
        if isinstance(result, Err):
            return Err(self._error("status", result.error))
        return Ok(parse_status(result.value))

    def missing_items(self, path: Path) -> Result[tuple[Path, ...], SvnError]:
        """Tracked paths that are gone from disk."""
        return self._with_code(path, STATUS_MISSING)

    def untracked_items(self, path: Path) -> Result[tuple[Path, ...], SvnError]:
        """Paths on disk that svn does not track yet."""
        return self._with_code(path, STATUS_UNTRACKED)

    def add(self, path: Path) -> Result[None, SvnError]:
        return self._call(["add", "--parents", _arg(path)])

    def delete(self, path: Path) -> Result[None, SvnError]:
        return self._call(["delete", "--force", _arg(path)])

    def copy(self, source: Path, destination: Path) -> Result[None, SvnError]:
        return self._call(["copy", _arg(source), _arg(destination)])

    def commit(self, path: Path, username: str | None, message: str) -> Result[None, SvnError]:
        """Commit `path`.

        Output is not captured so svn can prompt for a password.
        """
        cmd = ["svn", "commit", _arg(path), "-m", message]
        if username:
            cmd += ["--username", username]
        result = run_silent(cmd, cwd=self.cwd)
        if isinstance(result, Err):
            return Err(self._error("commit", result.error))
        return Ok(None)

    def _with_code(self, path: Path, code: str) -> Result[tuple[Path, ...], SvnError]:
        result = self.status(path)
        if isinstance(result, Err):
            return result
        return Ok(tuple(e.path for e in result.value if e.code == code))

    def _call(self, args: list[str]) -> Result[None, SvnError]:
        result = self._run(args)
        if isinstance(result, Err):
            return Err(self._error(args[0], result.error))
        return Ok(None)

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        timeout = _SVN_NETWORK_TIMEOUT_SECONDS if args[0] in _NETWORK_COMMANDS else _SVN_TIMEOUT_SECONDS
        return run_process(["svn", *args], cwd=self.cwd, timeout=timeout)

    @staticmethod
    def _error(command: str, e: ProcessError) -> SvnError:
        return SvnError(
            command=command,
            message=e.detail or f"svn {command} failed",
            returncode=e.returncode,
        )


def parse_status(output: str) -> tuple[SvnStatusEntry, ...]:
    """Parse `svn status` output.

    Each item line is seven status columns, a space, then the path. Lines
    that do not fit (conflict summaries, blank lines) are ignored.
    """
    entries: list[SvnStatusEntry] = []
    for line in output.splitlines():
        if len(line) < 9 or line[7] != " ":
            continue
        # Status columns are upper-case letters and symbols only.
        if any(c.islower() for c in line[:7]):
            continue
        code = line[0]
        path = line[8:].strip()
        if code == " " or not path:
            continue
        entries.append(SvnStatusEntry(code=code, path=Path(path)))
    return tuple(entries)

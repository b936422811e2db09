"""Run git and svn as child processes, reporting failures as values.

`run` captures output for commands whose stdout is parsed (status, branch
lookups). `run_silent` leaves the terminal attached, for commands that may
prompt the user; svn asks for a password on commit when none is cached.

    match run(["svn", "status", "trunk"], cwd=build_path):
        case Ok(stdout):
            entries = parse_status(stdout)
        case Err(error):
            console.error(error.detail)
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path

from wpt.core.result import Err, Ok, Result

__all__ = ["ProcessError", "run", "run_silent"]

_NOT_STARTED = -1


@dataclass(frozen=True, slots=True)
class ProcessError:
    """A command that could not be started, timed out, or exited non-zero.

    `returncode` is -1 when there was no exit status to report.
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    @property
    def detail(self) -> str:
        """Best available explanation: stderr, else stdout, else empty."""
        return self.stderr.strip() or self.stdout.strip()

    def __str__(self) -> str:
        shown = " ".join(self.command[:3])
        if len(self.command) > 3:
            shown += " ..."
        return f"{shown} failed (exit {self.returncode})"


def _start_failure(cmd: list[str], reason: str, stdout: str = "") -> Err[ProcessError]:
    return Err(ProcessError(command=tuple(cmd), returncode=_NOT_STARTED, stdout=stdout, stderr=reason))


def run(cmd: list[str], cwd: Path, *, timeout: float | None = None) -> Result[str, ProcessError]:
    """Run `cmd` in `cwd` and return its stdout.

    Args:
        cmd: Program and arguments.
        cwd: Working directory.
        timeout: Seconds before the child is killed; None waits forever.

    Returns:
        Ok(stdout) on exit status 0, otherwise Err(ProcessError) carrying
        whatever output was produced.
    """
    try:
        proc = subprocess.run(
            cmd,
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        partial = e.stdout if isinstance(e.stdout, str) else ""
        return _start_failure(cmd, f"Command timed out after {timeout}s", partial)
    except OSError as e:
        return _start_failure(cmd, str(e))

    if proc.returncode != 0:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=proc.returncode,
                stdout=proc.stdout,
                stderr=proc.stderr,
            )
        )
    return Ok(proc.stdout)


def run_silent(cmd: list[str], cwd: Path) -> Result[None, ProcessError]:
    """Run `cmd` with stdin/stdout/stderr inherited; only the exit code is kept."""
    try:
        returncode = subprocess.call(cmd, cwd=cwd)
    except OSError as e:
        return _start_failure(cmd, str(e))

    if returncode != 0:
        return Err(ProcessError(command=tuple(cmd), returncode=returncode, stdout="", stderr=""))
    return Ok(None)

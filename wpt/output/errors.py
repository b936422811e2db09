"""Error presentation utilities.

Centralized error formatting and exit code mapping for consistent UX.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from wpt.core.errors import ErrorCode
from wpt.output.console import Style
from wpt.services.release.errors import ReleaseError

if TYPE_CHECKING:
    from wpt.output.console import ConsoleProtocol

__all__ = ["print_release_error", "release_error_exit_code"]


def print_release_error(error: ReleaseError, console: ConsoleProtocol) -> None:
    """Print release error to console with its hint, if any."""
    console.error(error.message)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)


def release_error_exit_code(error: ReleaseError) -> int:
    match error.kind:
        case "validation":
            return int(ErrorCode.USER_ERROR)
        case "preflight":
            return int(ErrorCode.ENV_ERROR)
        case "vcs":
            return int(ErrorCode.VCS_ERROR)
        case "filesystem":
            return int(ErrorCode.IO_ERROR)

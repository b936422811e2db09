"""Error codes for CLI exit status.

Release failures are reported as ReleaseError values; the CLI maps their
kind onto one of these codes before exiting.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    These values are used as process exit codes and should remain stable:
    - 0: Success
    - 1: User error (bad input, missing configuration)
    - 2: Environment error (dirty working tree, version mismatch)
    - 3: VCS error (a git or svn command failed)
    - 5: I/O error (copy or delete failed)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    VCS_ERROR = 3
    IO_ERROR = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

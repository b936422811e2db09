"""Platform abstraction layer."""

from .paths import (
    relative_posix,
    relativize,
)
from .process import (
    ProcessError,
    run,
    run_silent,
)

__all__ = [
    # paths
    "relative_posix",
    "relativize",
    # process
    "ProcessError",
    "run",
    "run_silent",
]

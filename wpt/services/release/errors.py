from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ReleaseErrorKind = Literal[
    "validation",
    "preflight",
    "vcs",
    "filesystem",
]


@dataclass(frozen=True, slots=True)
class ReleaseError:
    """Canonical release error payload.

    kind:
        validation: a required parameter is missing or invalid
        preflight: the local checkout is not releasable (dirty, version mismatch)
        vcs: a git or svn command failed
        filesystem: a copy, delete or read failed
    """

    kind: ReleaseErrorKind
    message: str
    hint: str | None = None

    def pretty(self) -> str:
        if self.hint:
            return f"{self.message} (hint: {self.hint})"
        return self.message

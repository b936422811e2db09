"""Path normalization helpers.

Relativization works on Path values rather than string prefixes so that
separators and trailing slashes never leak into the computed names.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path, PurePath

__all__ = [
    "relative_posix",
    "relativize",
]


def relative_posix(path: PurePath, base: PurePath) -> str:
    """Return `path` relative to `base` as a POSIX string.

    Paths outside `base` collapse to their base name. The base itself maps
    to an empty string.
    """
    try:
        rel = path.relative_to(base)
    except ValueError:
        return path.name
    return rel.as_posix() if rel.parts else ""


def relativize(base: Path, paths: Iterable[Path]) -> tuple[str, ...]:
    """Relativize each path against `base`, dropping the base itself."""
    out: list[str] = []
    for p in paths:
        rel = relative_posix(p, base)
        if rel:
            out.append(rel)
    return tuple(out)

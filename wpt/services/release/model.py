from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from wpt.services.release.config import ASSETS_DIR, TAGS_DIR, TRUNK_DIR


@dataclass(frozen=True, slots=True)
class ReleaseParams:
    """Everything a release run needs, resolved and validated up front.

    Built once by resolve_params() and shared read-only by every stage.
    `build_files` never contains a path that is also in `asset_files`.
    """

    original_branch: str | None
    target_branch: str
    slug: str
    username: str | None
    version: str
    build_path: Path
    project_root: Path  # build files are mirrored relative to this
    build_files: tuple[Path, ...]
    asset_files: tuple[Path, ...]
    readme_path: Path
    package_type: str = "plugin"

    @property
    def trunk_dir(self) -> Path:
        return self.build_path / TRUNK_DIR

    @property
    def assets_dir(self) -> Path:
        return self.build_path / ASSETS_DIR

    @property
    def tag_dir(self) -> Path:
        return self.build_path / TAGS_DIR / self.version


class DiffKind(Enum):
    ADDED = "added"
    REMOVED = "removed"
    UNCHANGED = "unchanged"


@dataclass(frozen=True, slots=True)
class DiffEntry:
    """A run of consecutive values sharing one diff classification."""

    kind: DiffKind
    values: tuple[str, ...]

    @property
    def added(self) -> bool:
        return self.kind is DiffKind.ADDED

    @property
    def removed(self) -> bool:
        return self.kind is DiffKind.REMOVED

"""Resolve CLI overrides and .wpt.yml into one validated ReleaseParams.

Stages never read CLI options or config directly; everything they need is
resolved here, before any side effect happens.
"""

from __future__ import annotations

import glob
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from wpt.core.config import ReleaseConfig
from wpt.core.result import Err, Ok, Result
from wpt.services.release.errors import ReleaseError
from wpt.services.release.metadata import find_main_file, read_file_data
from wpt.services.release.model import ReleaseParams


@dataclass(frozen=True, slots=True)
class ReleaseOverrides:
    """Values given on the command line; None means "use the config"."""

    file: str | None = None
    type: str | None = None
    slug: str | None = None
    branch: str | None = None
    username: str | None = None
    build_path: str | None = None


def expand_globs(patterns: Sequence[str], root: Path) -> tuple[Path, ...]:
    """Expand glob patterns relative to `root`, in pattern order.

    `**` matches any depth. A pattern starting with `!` removes what it
    matches from the results collected so far. Dotfiles only match when the
    pattern names them.
    """
    found: dict[Path, None] = {}
    for pattern in patterns:
        negate = pattern.startswith("!")
        expr = pattern[1:] if negate else pattern
        matches = sorted(m for m in glob.glob(expr, root_dir=root, recursive=True) if m)
        paths = [root / m for m in matches]
        if negate:
            for p in paths:
                found.pop(p, None)
        else:
            for p in paths:
                found.setdefault(p, None)
    return tuple(found)


def resolve_build_files(
    src: Sequence[str] | None,
    assets: Sequence[Path],
    root: Path,
) -> Result[tuple[Path, ...], ReleaseError]:
    if not src:
        return Err(
            ReleaseError(
                kind="validation",
                message="no files to build",
                hint="Specify them via `files.src` in .wpt.yml.",
            )
        )
    asset_set = set(assets)
    files = tuple(p for p in expand_globs(src, root) if not (p in asset_set and p.is_file()))
    return Ok(files)


def _validation(message: str, hint: str) -> Err[ReleaseError]:
    return Err(ReleaseError(kind="validation", message=message, hint=hint))


def resolve_params(
    *,
    overrides: ReleaseOverrides,
    config: ReleaseConfig,
    project_root: Path,
    current_branch: str | None,
) -> Result[ReleaseParams, ReleaseError]:
    """Merge overrides over config into an immutable ReleaseParams.

    Args:
        overrides: CLI values, which win over the config.
        config: Parsed .wpt.yml.
        project_root: Directory globs and relative paths are resolved from.
        current_branch: Local branch before the run, restored afterwards.

    Returns:
        Ok(ReleaseParams), or Err(validation) naming what is missing.
    """
    root = project_root.resolve()
    repo_cfg = config.release_repo

    slug = overrides.slug or repo_cfg.slug
    if not slug:
        return _validation(
            "missing wp.org slug",
            "Specify it via --slug or define `releaseRepo.slug` in .wpt.yml.",
        )

    build_path_value = overrides.build_path or repo_cfg.build_path
    if not build_path_value:
        return _validation(
            "missing build path",
            "Specify it via --build-path or define `releaseRepo.buildPath` in .wpt.yml.",
        )
    build_path = Path(build_path_value).expanduser()
    if not build_path.is_absolute():
        build_path = root / build_path

    asset_files = expand_globs(config.files.assets, root)
    build_files = resolve_build_files(config.files.src, asset_files, root)
    if isinstance(build_files, Err):
        return build_files

    package_type = overrides.type or config.type
    main_value = overrides.file or config.files.main
    main_file = root / main_value if main_value else find_main_file(root, package_type)
    if main_file is None:
        return _validation(
            f"cannot find the {package_type} main file",
            "Specify it via --file or define `files.main` in .wpt.yml.",
        )

    data = read_file_data(main_file, package_type)
    if isinstance(data, Err):
        return data
    version = data.value.version
    if not version:
        return _validation(
            f"no Version header in {main_file}",
            "Add a `Version:` line to the file header.",
        )

    return Ok(
        ReleaseParams(
            original_branch=current_branch,
            target_branch=overrides.branch or config.vcs.branch,
            slug=slug,
            username=overrides.username or repo_cfg.username,
            version=version,
            build_path=build_path,
            project_root=root,
            build_files=build_files.value,
            asset_files=asset_files,
            readme_path=root / config.files.readme,
            package_type=package_type,
        )
    )

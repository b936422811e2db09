"""Mirror local build files into the SVN working copy.

Two steps, always in this order:
- reconcile(): delete what is in the working copy but no longer wanted
- populate(): copy the wanted files in

Only regular files and directories are mirrored; symlinks and special
files are skipped.
"""

from __future__ import annotations

import os
import shutil
import stat
from collections.abc import Callable, Iterable, Sequence
from pathlib import Path

from wpt.core.result import Err, Ok, Result
from wpt.platform.paths import relative_posix
from wpt.services.release.diff import diff_paths, removed_values
from wpt.services.release.errors import ReleaseError

SVN_ADMIN_DIR = ".svn"


def _remove_readonly(_func: Callable[[str], object], path: str, exc: BaseException) -> None:
    """Handle read-only files on Windows (e.g. .svn/pristine/*)."""
    if isinstance(exc, PermissionError):
        os.chmod(path, stat.S_IWRITE)
        os.unlink(path)
    else:
        raise exc


def list_relative(root: Path) -> tuple[str, ...]:
    """Every entry below `root` as a relative POSIX path, parents first.

    SVN administrative directories are left out. A missing root lists as empty.
    """
    if not root.is_dir():
        return ()
    out: list[str] = []
    for p in root.rglob("*"):
        rel = p.relative_to(root)
        if SVN_ADMIN_DIR in rel.parts:
            continue
        out.append(rel.as_posix())
    # Plain string order, the same order glob results are sorted in.
    return tuple(sorted(out))


def _discard(path: Path) -> bool:
    """Delete a file or a whole directory tree; False if nothing was deleted."""
    try:
        if path.is_symlink() or path.is_file():
            path.unlink()
            return True
        if path.is_dir():
            shutil.rmtree(path, onexc=_remove_readonly)
            return True
    except OSError:
        # The path is unwanted either way; a failed delete leaves svn to report it.
        return False
    return False


def reconcile(
    destination_root: Path,
    current: Sequence[str],
    desired: Sequence[str],
) -> list[str]:
    """Delete every value diffed as removed from `destination_root`.

    Added and unchanged values are never touched. Already-missing paths are
    fine, so running this twice is harmless.

    Returns:
        The relative paths that were actually deleted.
    """
    deleted: list[str] = []
    for value in removed_values(diff_paths(current, desired)):
        if _discard(destination_root / value):
            deleted.append(value)
    return deleted


def populate(
    sources: Iterable[Path],
    destination_root: Path,
    *,
    preserve_structure: bool,
    base: Path | None = None,
) -> Result[list[Path], ReleaseError]:
    """Copy `sources` into `destination_root`.

    Args:
        sources: Files and directories to publish.
        destination_root: Working copy subtree to copy into.
        preserve_structure: Trunk mode. Directories are recreated and files
            keep their path relative to `base`. When False (asset mode)
            directories are skipped and files are flattened to their name.
        base: Root the sources are relative to; required in trunk mode.

    Returns:
        Ok(list of created paths), or Err(filesystem) if a source cannot be
        read or a copy fails.
    """
    if preserve_structure and base is None:
        raise ValueError("base is required when preserve_structure is set")

    created: list[Path] = []
    try:
        destination_root.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        return Err(
            ReleaseError(
                kind="filesystem",
                message=f"cannot create {destination_root}",
                hint=str(e),
            )
        )

    for src in sources:
        try:
            mode = src.lstat().st_mode
        except OSError as e:
            return Err(
                ReleaseError(
                    kind="filesystem",
                    message=f"cannot read source: {src}",
                    hint=str(e),
                )
            )

        if preserve_structure and base is not None:
            target = destination_root / relative_posix(src, base)
        else:
            target = destination_root / src.name

        try:
            if stat.S_ISDIR(mode):
                if preserve_structure:
                    target.mkdir(parents=True, exist_ok=True)
                    created.append(target)
            elif stat.S_ISREG(mode):
                target.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(src, target)
                created.append(target)
        except OSError as e:
            return Err(
                ReleaseError(
                    kind="filesystem",
                    message=f"failed to copy {src} -> {target}",
                    hint=str(e),
                )
            )

    return Ok(created)


def remove_tree(path: Path) -> Result[None, ReleaseError]:
    """Remove `path` recursively; a missing path is already done."""
    if not path.exists() and not path.is_symlink():
        return Ok(None)
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path, onexc=_remove_readonly)
        else:
            path.unlink()
    except OSError as e:
        return Err(
            ReleaseError(
                kind="filesystem",
                message=f"failed to remove {path}",
                hint=str(e),
            )
        )
    return Ok(None)

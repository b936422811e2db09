"""Release pipeline: ordered stages and the driver that runs them.

Stages run strictly in order and the run stops at the first Err. Whatever
happens, the local git branch that was active before the run is checked
out again afterwards; a failure to do so is reported but never returned.

Nothing is rolled back remotely: a failure after the checkout stage leaves
the SVN working copy partially updated, and the trunk/assets commits that
already went through stay committed.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Protocol

from wpt.core.result import Err, Ok, Result
from wpt.git.repository import GitError, GitStatus
from wpt.output.console import ConsoleProtocol, Style
from wpt.platform.paths import relativize
from wpt.services.release import readme
from wpt.services.release.config import (
    ASSETS_COMMIT_MESSAGE,
    TAG_COMMIT_MESSAGE,
    TRUNK_COMMIT_MESSAGE,
    TRUNK_DIR,
    svn_url,
)
from wpt.services.release.errors import ReleaseError
from wpt.services.release.model import ReleaseParams
from wpt.services.release.sync import list_relative, populate, reconcile, remove_tree
from wpt.svn.client import SvnError


class LocalVcs(Protocol):
    def status(self) -> Result[GitStatus, GitError]: ...

    def checkout(self, branch: str) -> Result[None, GitError]: ...


class RemoteVcs(Protocol):
    def checkout(self, url: str, destination: Path, *, depth: str = ...) -> Result[None, SvnError]: ...

    def update(self, path: Path, *flags: str) -> Result[None, SvnError]: ...

    def missing_items(self, path: Path) -> Result[tuple[Path, ...], SvnError]: ...

    def untracked_items(self, path: Path) -> Result[tuple[Path, ...], SvnError]: ...

    def add(self, path: Path) -> Result[None, SvnError]: ...

    def delete(self, path: Path) -> Result[None, SvnError]: ...

    def copy(self, source: Path, destination: Path) -> Result[None, SvnError]: ...

    def commit(self, path: Path, username: str | None, message: str) -> Result[None, SvnError]: ...


@dataclass(frozen=True, slots=True)
class ReleaseServices:
    git: LocalVcs
    svn: RemoteVcs
    console: ConsoleProtocol


class Stage(StrEnum):
    SWITCH_BRANCH = "switch_branch"
    PREFLIGHT = "preflight"
    CLEAN_BUILD = "clean_build"
    CHECKOUT = "checkout"
    SYNC_FILES = "sync_files"
    COMMIT_TRUNK = "commit_trunk"
    COMMIT_ASSETS = "commit_assets"
    CREATE_TAG = "create_tag"
    CLEANUP = "cleanup"


RELEASE_STAGES: tuple[Stage, ...] = (
    Stage.SWITCH_BRANCH,
    Stage.PREFLIGHT,
    Stage.CLEAN_BUILD,
    Stage.CHECKOUT,
    Stage.SYNC_FILES,
    Stage.COMMIT_TRUNK,
    Stage.COMMIT_ASSETS,
    Stage.CREATE_TAG,
    Stage.CLEANUP,
)

StageHandler = Callable[[ReleaseParams, ReleaseServices], Result[None, ReleaseError]]


def _vcs_error(error: GitError | SvnError, tool: str) -> ReleaseError:
    return ReleaseError(
        kind="vcs",
        message=f"{tool} {error.command} failed",
        hint=error.message or None,
    )


def _git(result: Result[None, GitError]) -> Result[None, ReleaseError]:
    if isinstance(result, Err):
        return Err(_vcs_error(result.error, "git"))
    return Ok(None)


def _svn[T](result: Result[T, SvnError]) -> Result[T, ReleaseError]:
    if isinstance(result, Err):
        return Err(_vcs_error(result.error, "svn"))
    return result


# -----------------------------------------------------------------------------
# Stages
# -----------------------------------------------------------------------------


def switch_branch(params: ReleaseParams, services: ReleaseServices) -> Result[None, ReleaseError]:
    services.console.print(f"git checkout {params.target_branch}", Style.DIM)
    return _git(services.git.checkout(params.target_branch))


def preflight(params: ReleaseParams, services: ReleaseServices) -> Result[None, ReleaseError]:
    status = services.git.status()
    if isinstance(status, Err):
        return Err(_vcs_error(status.error, "git"))
    if not status.value.is_clean:
        count = len(status.value.entries)
        return Err(
            ReleaseError(
                kind="preflight",
                message=f"working tree has {count} uncommitted change(s)",
                hint="Commit or stash your changes, then retry.",
            )
        )

    services.console.print(f"check {params.readme_path.name} for {params.version}", Style.DIM)
    return readme.check_version(params.readme_path, params.version)


def clean_build(params: ReleaseParams, services: ReleaseServices) -> Result[None, ReleaseError]:
    services.console.print(f"rm -rf {params.build_path}", Style.DIM)
    return remove_tree(params.build_path)


def checkout(params: ReleaseParams, services: ReleaseServices) -> Result[None, ReleaseError]:
    svn = services.svn
    url = svn_url(params.slug)
    services.console.print(f"svn checkout {url} {params.build_path}", Style.DIM)
    ok = _svn(svn.checkout(url, params.build_path))
    if isinstance(ok, Err):
        return ok

    for subtree in (params.trunk_dir, params.assets_dir):
        services.console.print(f"svn update --set-depth infinity {subtree}", Style.DIM)
        ok = _svn(svn.update(subtree, "--set-depth", "infinity"))
        if isinstance(ok, Err):
            return ok
    return Ok(None)


def sync_files(params: ReleaseParams, services: ReleaseServices) -> Result[None, ReleaseError]:
    console = services.console
    trunk = params.trunk_dir
    assets = params.assets_dir

    # Remove whatever the working copy has that the build no longer ships.
    # Both sides are compared in list_relative's string order.
    stale = reconcile(
        trunk,
        list_relative(trunk),
        sorted(relativize(params.project_root, params.build_files)),
    )
    stale += reconcile(
        assets,
        list_relative(assets),
        sorted(p.name for p in params.asset_files),
    )
    for rel in stale:
        console.print(f"rm {rel}", Style.DIM)

    console.print(f"copy {len(params.build_files)} path(s) -> {trunk}", Style.DIM)
    copied = populate(params.build_files, trunk, preserve_structure=True, base=params.project_root)
    if isinstance(copied, Err):
        return copied

    console.print(f"copy {len(params.asset_files)} asset(s) -> {assets}", Style.DIM)
    copied = populate(params.asset_files, assets, preserve_structure=False)
    if isinstance(copied, Err):
        return copied
    return Ok(None)


def _track_changes(svn: RemoteVcs, path: Path, console: ConsoleProtocol) -> Result[None, ReleaseError]:
    """Schedule deletes for vanished files and adds for new ones."""
    missing = _svn(svn.missing_items(path))
    if isinstance(missing, Err):
        return missing
    for item in missing.value:
        console.print(f"svn delete {item}", Style.DIM)
        ok = _svn(svn.delete(item))
        if isinstance(ok, Err):
            return ok

    untracked = _svn(svn.untracked_items(path))
    if isinstance(untracked, Err):
        return untracked
    for item in untracked.value:
        console.print(f"svn add {item}", Style.DIM)
        ok = _svn(svn.add(item))
        if isinstance(ok, Err):
            return ok
    return Ok(None)


def _commit(services: ReleaseServices, path: Path, username: str | None, message: str) -> Result[None, ReleaseError]:
    services.console.print(f"svn commit {path} -m {message!r}", Style.DIM)
    return _svn(services.svn.commit(path, username, message))


def commit_trunk(params: ReleaseParams, services: ReleaseServices) -> Result[None, ReleaseError]:
    trunk = params.trunk_dir
    ok = _track_changes(services.svn, trunk, services.console)
    if isinstance(ok, Err):
        return ok
    return _commit(services, trunk, params.username, TRUNK_COMMIT_MESSAGE.format(version=params.version))


def commit_assets(params: ReleaseParams, services: ReleaseServices) -> Result[None, ReleaseError]:
    assets = params.assets_dir
    ok = _track_changes(services.svn, assets, services.console)
    if isinstance(ok, Err):
        return ok

    services.console.print(f"svn update --accept mine-full {assets}", Style.DIM)
    ok = _svn(services.svn.update(assets, "--accept", "mine-full"))
    if isinstance(ok, Err):
        return ok
    return _commit(services, assets, params.username, ASSETS_COMMIT_MESSAGE.format(version=params.version))


def create_tag(params: ReleaseParams, services: ReleaseServices) -> Result[None, ReleaseError]:
    svn = services.svn
    console = services.console
    source = params.trunk_dir
    tag = params.tag_dir

    console.print(f"svn update {tag}", Style.DIM)
    ok = _svn(svn.update(tag))
    if isinstance(ok, Err):
        return ok

    console.print(f"svn copy {source} {tag}", Style.DIM)
    ok = _svn(svn.copy(source, tag))
    if isinstance(ok, Err):
        return ok

    # Copying onto an existing tag nests the whole source dir inside it;
    # a third copy would fail with E150002 (already exists).
    nested = tag / TRUNK_DIR
    if nested.exists():
        console.print(f"svn delete {nested}", Style.DIM)
        ok = _svn(svn.delete(nested))
        if isinstance(ok, Err):
            return ok

    return _commit(services, tag, params.username, TAG_COMMIT_MESSAGE.format(version=params.version))


STAGE_HANDLERS: Mapping[Stage, StageHandler] = {
    Stage.SWITCH_BRANCH: switch_branch,
    Stage.PREFLIGHT: preflight,
    Stage.CLEAN_BUILD: clean_build,
    Stage.CHECKOUT: checkout,
    Stage.SYNC_FILES: sync_files,
    Stage.COMMIT_TRUNK: commit_trunk,
    Stage.COMMIT_ASSETS: commit_assets,
    Stage.CREATE_TAG: create_tag,
    Stage.CLEANUP: clean_build,
}

STAGE_TITLES: Mapping[Stage, str] = {
    Stage.SWITCH_BRANCH: "Switch branch",
    Stage.PREFLIGHT: "Preflight checks",
    Stage.CLEAN_BUILD: "Clean build directory",
    Stage.CHECKOUT: "Checkout SVN working copy",
    Stage.SYNC_FILES: "Sync files",
    Stage.COMMIT_TRUNK: "Commit trunk",
    Stage.COMMIT_ASSETS: "Commit assets",
    Stage.CREATE_TAG: "Create tag",
    Stage.CLEANUP: "Clean up",
}


# -----------------------------------------------------------------------------
# Driver
# -----------------------------------------------------------------------------


def run_stages(
    params: ReleaseParams,
    services: ReleaseServices,
    stages: Sequence[Stage] = RELEASE_STAGES,
) -> Result[None, ReleaseError]:
    """Run `stages` in order, stopping at the first error."""
    for stage in stages:
        services.console.header(STAGE_TITLES[stage])
        result = STAGE_HANDLERS[stage](params, services)
        if isinstance(result, Err):
            return result
    return Ok(None)


@contextmanager
def restoring_branch(
    branch: str | None,
    git: LocalVcs,
    console: ConsoleProtocol,
) -> Iterator[None]:
    """Check `branch` out again on every exit path, best effort.

    A failed restore is printed and otherwise ignored; it never replaces the
    outcome of the run it wraps.
    """
    try:
        yield
    finally:
        if branch:
            restored = git.checkout(branch)
            if isinstance(restored, Err):
                console.print(f"could not restore branch {branch}: {restored.error.message}", Style.DIM)


def release(params: ReleaseParams, services: ReleaseServices) -> Result[str, ReleaseError]:
    """Run the full release.

    Returns:
        Ok(tag URL) on success, Err(ReleaseError) from the first failing stage.
    """
    with restoring_branch(params.original_branch, services.git, services.console):
        result = run_stages(params, services)

    if isinstance(result, Err):
        return result
    return Ok(svn_url(params.slug, params.version))

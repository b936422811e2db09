"""Release command - publish the plugin to the wp.org SVN repository."""

from __future__ import annotations

from pathlib import Path

import typer

from wpt.cli.context import build_context
from wpt.core.result import Err
from wpt.git.repository import Repository
from wpt.output.errors import print_release_error, release_error_exit_code
from wpt.services.release.params import ReleaseOverrides, resolve_params
from wpt.services.release.pipeline import ReleaseServices, release
from wpt.svn.client import SvnClient


def release_cmd(
    file: str | None = typer.Option(None, "--file", help="Main file carrying the version header"),
    type_: str | None = typer.Option(None, "--type", help="Package type: plugin or theme"),
    slug: str | None = typer.Option(None, "--slug", help="wp.org slug (releaseRepo.slug)"),
    branch: str | None = typer.Option(None, "--branch", help="Git branch to release from"),
    username: str | None = typer.Option(None, "--username", help="wp.org SVN username"),
    build_path: str | None = typer.Option(
        None, "--build-path", help="SVN working copy directory (releaseRepo.buildPath)"
    ),
    config: Path | None = typer.Option(None, "--config", help="Config file (default: ./.wpt.yml)"),
) -> None:
    """Commit trunk and assets to wp.org SVN and tag the release."""
    ctx = build_context(config)
    console = ctx.console
    repo = Repository(ctx.project_root)

    params = resolve_params(
        overrides=ReleaseOverrides(
            file=file,
            type=type_,
            slug=slug,
            branch=branch,
            username=username,
            build_path=build_path,
        ),
        config=ctx.config,
        project_root=ctx.project_root,
        current_branch=repo.current_branch(),
    )
    if isinstance(params, Err):
        print_release_error(params.error, console)
        raise typer.Exit(code=release_error_exit_code(params.error))

    services = ReleaseServices(
        git=repo,
        svn=SvnClient(cwd=ctx.project_root),
        console=console,
    )
    result = release(params.value, services)
    if isinstance(result, Err):
        print_release_error(result.error, console)
        raise typer.Exit(code=release_error_exit_code(result.error))

    console.success(f"release created: {result.value}")

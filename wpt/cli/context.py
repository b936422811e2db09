from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from wpt.core.config import CONFIG_FILENAME, ReleaseConfig, load_config
from wpt.core.errors import ErrorCode
from wpt.core.result import Err
from wpt.output.console import ConsoleProtocol, RichConsole


@dataclass(frozen=True, slots=True)
class CLIContext:
    project_root: Path
    config: ReleaseConfig
    console: ConsoleProtocol


def build_context(config_path: Path | None = None) -> CLIContext:
    """Load .wpt.yml from the current directory (or `config_path`).

    An explicitly given config file must exist; the default one is optional.
    """
    project_root = Path.cwd()
    path = config_path or project_root / CONFIG_FILENAME

    config = ReleaseConfig()
    if config_path is not None or path.exists():
        config_result = load_config(path)
        if isinstance(config_result, Err):
            typer.echo(f"error: {config_result.error.message}", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))
        config = config_result.value

    return CLIContext(
        project_root=project_root,
        config=config,
        console=RichConsole(),
    )

"""Typed configuration loading and access.

This module provides dataclasses for the .wpt.yml structure with
full type safety and validation.

Example .wpt.yml:

    type: plugin
    files:
      main: my-plugin.php
      src:
        - "**"
        - "!node_modules/**"
      assets: ".wordpress-org/*"
    releaseRepo:
      slug: my-plugin
      username: someone
      buildPath: /tmp/my-plugin-svn
    vcs:
      branch: main
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_str, get_str_list, get_table

__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "FilesConfig",
    "ReleaseConfig",
    "ReleaseRepoConfig",
    "VcsConfig",
    "load_config",
]

CONFIG_FILENAME = ".wpt.yml"

DEFAULT_PACKAGE_TYPE = "plugin"
DEFAULT_BRANCH = "master"
DEFAULT_README = "readme.txt"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class FilesConfig:
    """Files section: what gets published.

    `src` is None when the section does not name any build sources, which is
    different from an explicit empty list of patterns.
    """

    src: tuple[str, ...] | None = None
    assets: tuple[str, ...] = ()
    main: str | None = None
    readme: str = DEFAULT_README


@dataclass(frozen=True, slots=True)
class ReleaseRepoConfig:
    """Release repository (wp.org SVN) settings."""

    slug: str | None = None
    username: str | None = None
    build_path: str | None = None


@dataclass(frozen=True, slots=True)
class VcsConfig:
    """Local git settings."""

    branch: str = DEFAULT_BRANCH


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    """Main configuration container."""

    type: str = DEFAULT_PACKAGE_TYPE
    files: FilesConfig = field(default_factory=FilesConfig)
    release_repo: ReleaseRepoConfig = field(default_factory=ReleaseRepoConfig)
    vcs: VcsConfig = field(default_factory=VcsConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> ReleaseConfig:
        """Create ReleaseConfig from a mapping (parsed YAML).

        The older `wporg` and `gh` sections are still read as fallbacks for
        `releaseRepo` and `vcs`.
        """
        files: StrDict = get_table(data, "files") or {}
        repo: StrDict = get_table(data, "releaseRepo") or {}
        legacy_repo: StrDict = get_table(data, "wporg") or {}
        vcs: StrDict = get_table(data, "vcs") or {}
        legacy_vcs: StrDict = get_table(data, "gh") or {}

        def repo_str(key: str) -> str | None:
            return get_str(repo, key) or get_str(legacy_repo, key)

        return cls(
            type=get_str(data, "type") or DEFAULT_PACKAGE_TYPE,
            files=FilesConfig(
                src=get_str_list(files, "src"),
                assets=get_str_list(files, "assets") or (),
                main=get_str(files, "main"),
                readme=get_str(files, "readme") or DEFAULT_README,
            ),
            release_repo=ReleaseRepoConfig(
                slug=repo_str("slug"),
                username=repo_str("username"),
                build_path=repo_str("buildPath"),
            ),
            vcs=VcsConfig(
                branch=get_str(vcs, "branch") or get_str(legacy_vcs, "branch") or DEFAULT_BRANCH,
            ),
        )


def _parse_yaml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a YAML file, handling read and parse errors."""
    try:
        content = path.read_text(encoding="utf-8")
        data_obj: object = yaml.safe_load(content)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except yaml.YAMLError as e:
        return Err(ConfigError(f"Invalid YAML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))

    if data_obj is None:
        return Ok({})
    data = as_str_dict(data_obj)
    if data is None:
        return Err(ConfigError("Config root must be a mapping", path=path))
    return Ok(data)


def load_config(path: Path) -> Result[ReleaseConfig, ConfigError]:
    """Load and parse configuration from a YAML file.

    Args:
        path: Path to .wpt.yml

    Returns:
        Ok(ReleaseConfig) on success, Err(ConfigError) on failure
    """
    result = _parse_yaml(path)
    if isinstance(result, Err):
        return result

    return Ok(ReleaseConfig.from_dict(result.value))

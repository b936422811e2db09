from __future__ import annotations

from pathlib import Path

import pytest

from wpt.core.config import FilesConfig, ReleaseConfig, ReleaseRepoConfig, VcsConfig
from wpt.core.result import Err, Ok
from wpt.services.release.params import ReleaseOverrides, expand_globs, resolve_params

_HEADER = "<?php\n/**\n * Plugin Name: Demo\n * Version: 1.4.0\n */\n"


def _write(path: Path, content: str = "x") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture()
def project(tmp_path: Path) -> Path:
    root = tmp_path / "demo"
    _write(root / "demo.php", _HEADER)
    _write(root / "inc" / "a.php")
    _write(root / "wp-assets" / "banner.png")
    _write(root / "wp-assets" / "icon.png")
    return root


def _config(**repo: str) -> ReleaseConfig:
    return ReleaseConfig(
        files=FilesConfig(
            src=("**",),
            assets=("wp-assets/*",),
            main="demo.php",
        ),
        release_repo=ReleaseRepoConfig(**repo),
    )


def _resolve(project: Path, config: ReleaseConfig, overrides: ReleaseOverrides | None = None):
    return resolve_params(
        overrides=overrides or ReleaseOverrides(),
        config=config,
        project_root=project,
        current_branch="feature",
    )


class TestExpandGlobs:
    def test_recursive_pattern_lists_files_and_dirs(self, project: Path) -> None:
        found = expand_globs(["**"], project)

        assert project / "demo.php" in found
        assert project / "inc" in found
        assert project / "inc" / "a.php" in found

    def test_negated_pattern_excludes(self, project: Path) -> None:
        found = expand_globs(["**", "!wp-assets/**"], project)

        assert project / "wp-assets" / "banner.png" not in found
        assert project / "demo.php" in found

    def test_zero_matches_is_empty(self, project: Path) -> None:
        assert expand_globs(["nothing/*"], project) == ()

    def test_dedupes_in_pattern_order(self, project: Path) -> None:
        found = expand_globs(["demo.php", "*.php"], project)
        assert found == (project / "demo.php",)

    def test_dotfiles_need_explicit_pattern(self, project: Path) -> None:
        _write(project / ".wpt.yml")
        assert project / ".wpt.yml" not in expand_globs(["**"], project)


class TestResolveParams:
    def test_config_only_slug_is_accepted(self, project: Path, tmp_path: Path) -> None:
        result = _resolve(project, _config(slug="demo", build_path=str(tmp_path / "svn")))

        assert isinstance(result, Ok)
        params = result.value
        assert params.slug == "demo"
        assert params.version == "1.4.0"
        assert params.original_branch == "feature"
        assert params.target_branch == "master"
        assert params.build_path == tmp_path / "svn"
        assert params.readme_path == project.resolve() / "readme.txt"

    def test_overrides_win(self, project: Path, tmp_path: Path) -> None:
        result = _resolve(
            project,
            _config(slug="demo", build_path="/nowhere", username="cfg-user"),
            ReleaseOverrides(
                slug="other",
                branch="release",
                username="cli-user",
                build_path=str(tmp_path / "b"),
            ),
        )

        assert isinstance(result, Ok)
        assert result.value.slug == "other"
        assert result.value.target_branch == "release"
        assert result.value.username == "cli-user"
        assert result.value.build_path == tmp_path / "b"

    def test_branch_from_config(self, project: Path, tmp_path: Path) -> None:
        config = ReleaseConfig(
            files=_config().files,
            release_repo=ReleaseRepoConfig(slug="demo", build_path=str(tmp_path / "b")),
            vcs=VcsConfig(branch="main"),
        )
        result = _resolve(project, config)

        assert isinstance(result, Ok)
        assert result.value.target_branch == "main"

    def test_missing_slug(self, project: Path) -> None:
        result = _resolve(project, _config(build_path="/tmp/b"))

        assert isinstance(result, Err)
        assert result.error.kind == "validation"
        assert result.error.hint is not None
        assert "--slug" in result.error.hint

    def test_empty_slug_override_falls_back_and_fails(self, project: Path) -> None:
        result = _resolve(project, _config(build_path="/tmp/b"), ReleaseOverrides(slug=""))

        assert isinstance(result, Err)
        assert result.error.kind == "validation"

    def test_missing_build_path(self, project: Path) -> None:
        result = _resolve(project, _config(slug="demo"))

        assert isinstance(result, Err)
        assert result.error.kind == "validation"
        assert "build path" in result.error.message

    def test_missing_src(self, project: Path, tmp_path: Path) -> None:
        config = ReleaseConfig(
            files=FilesConfig(main="demo.php"),
            release_repo=ReleaseRepoConfig(slug="demo", build_path=str(tmp_path / "b")),
        )

        result = _resolve(project, config)

        assert isinstance(result, Err)
        assert result.error.message == "no files to build"

    def test_assets_are_excluded_from_build_files(self, project: Path, tmp_path: Path) -> None:
        result = _resolve(project, _config(slug="demo", build_path=str(tmp_path / "b")))

        assert isinstance(result, Ok)
        params = result.value
        root = project.resolve()
        banner = root / "wp-assets" / "banner.png"
        assert banner in params.asset_files
        assert banner not in params.build_files
        assert root / "inc" / "a.php" in params.build_files
        assert not set(params.asset_files) & set(params.build_files)

    def test_no_assets_is_valid(self, project: Path, tmp_path: Path) -> None:
        config = ReleaseConfig(
            files=FilesConfig(src=("*.php",), main="demo.php"),
            release_repo=ReleaseRepoConfig(slug="demo", build_path=str(tmp_path / "b")),
        )

        result = _resolve(project, config)

        assert isinstance(result, Ok)
        assert result.value.asset_files == ()

    def test_main_file_is_discovered(self, project: Path, tmp_path: Path) -> None:
        config = ReleaseConfig(
            files=FilesConfig(src=("**",)),
            release_repo=ReleaseRepoConfig(slug="demo", build_path=str(tmp_path / "b")),
        )

        result = _resolve(project, config)

        assert isinstance(result, Ok)
        assert result.value.version == "1.4.0"

    def test_missing_version_header(self, project: Path, tmp_path: Path) -> None:
        _write(project / "demo.php", "<?php\n/* Plugin Name: Demo */\n")

        result = _resolve(project, _config(slug="demo", build_path=str(tmp_path / "b")))

        assert isinstance(result, Err)
        assert result.error.kind == "validation"
        assert "Version" in result.error.message

    def test_params_are_frozen(self, project: Path, tmp_path: Path) -> None:
        result = _resolve(project, _config(slug="demo", build_path=str(tmp_path / "b")))

        assert isinstance(result, Ok)
        with pytest.raises(AttributeError):
            result.value.slug = "x"  # type: ignore[misc]

from __future__ import annotations

from pathlib import Path

from wpt.core.result import Err, Ok
from wpt.services.release.metadata import find_main_file, parse_file_data, read_file_data
from wpt.services.release.readme import check_version, parse_readme

_PLUGIN = """<?php
/**
 * Plugin Name:       Demo Plugin
 * Plugin URI:        https://example.org/demo
 * Version:           2.0.0
 * Requires at least: 6.0
 * Text Domain:       demo
 */
"""

_README = """=== Demo Plugin ===
Contributors: someone
Stable tag: {stable}
License: GPLv2

== Description ==

Does things.

== Changelog ==

= {latest} =
* Fix things.

= 1.8.0 =
* Older.

== Upgrade Notice ==

= 9.9.9 =
Not a changelog entry.
"""


class TestFileHeaders:
    def test_plugin_headers(self) -> None:
        data = parse_file_data(_PLUGIN, "plugin")

        assert data.name == "Demo Plugin"
        assert data.version == "2.0.0"
        assert data.headers["requires_wp"] == "6.0"
        assert data.headers["text_domain"] == "demo"

    def test_theme_headers(self) -> None:
        css = "/*\nTheme Name: Demo Theme\nVersion: 0.3.1\nTemplate: parent\n*/\n"
        data = parse_file_data(css, "theme")

        assert data.name == "Demo Theme"
        assert data.version == "0.3.1"
        assert data.headers["template"] == "parent"

    def test_closing_comment_on_same_line(self) -> None:
        data = parse_file_data("<?php /* Plugin Name: Tiny */ ?>\n<?php /* Version: 1.0 */", "plugin")

        assert data.name == "Tiny"
        assert data.version == "1.0"

    def test_read_file_data_missing_file(self, tmp_path: Path) -> None:
        result = read_file_data(tmp_path / "missing.php")

        assert isinstance(result, Err)
        assert result.error.kind == "validation"

    def test_read_theme_from_directory(self, tmp_path: Path) -> None:
        (tmp_path / "style.css").write_text("/*\nTheme Name: T\nVersion: 3.0\n*/", encoding="utf-8")

        result = read_file_data(tmp_path, "theme")

        assert isinstance(result, Ok)
        assert result.value.version == "3.0"

    def test_find_main_file_skips_php_without_header(self, tmp_path: Path) -> None:
        (tmp_path / "a-helpers.php").write_text("<?php\nfunction x() {}\n", encoding="utf-8")
        (tmp_path / "demo.php").write_text(_PLUGIN, encoding="utf-8")

        assert find_main_file(tmp_path, "plugin") == tmp_path / "demo.php"

    def test_find_main_file_none(self, tmp_path: Path) -> None:
        assert find_main_file(tmp_path, "plugin") is None
        assert find_main_file(tmp_path, "theme") is None


class TestReadme:
    def test_parse(self) -> None:
        versions = parse_readme(_README.format(stable="2.0.0", latest="2.0.0"))

        assert versions.stable_tag == "2.0.0"
        assert versions.latest_changelog == "2.0.0"

    def test_parse_markdown(self) -> None:
        content = "# Demo\n\nStable tag: 1.1.0\n\n## Changelog\n\n### v1.1.0 - 2024-05-01\n- fix\n"
        versions = parse_readme(content)

        assert versions.stable_tag == "1.1.0"
        assert versions.latest_changelog == "1.1.0"

    def test_blank_changelog_entry(self) -> None:
        versions = parse_readme("Stable tag: 1.0.0\n\n== Changelog ==\n\n= =\n* nothing\n")

        assert versions.stable_tag == "1.0.0"
        assert versions.latest_changelog is None

    def test_check_version_ok(self, tmp_path: Path) -> None:
        readme = tmp_path / "readme.txt"
        readme.write_text(_README.format(stable="2.0.0", latest="2.0.0"), encoding="utf-8")

        assert isinstance(check_version(readme, "2.0.0"), Ok)

    def test_changelog_behind_version_fails(self, tmp_path: Path) -> None:
        readme = tmp_path / "readme.txt"
        readme.write_text(_README.format(stable="2.0.0", latest="1.9.0"), encoding="utf-8")

        result = check_version(readme, "2.0.0")

        assert isinstance(result, Err)
        assert result.error.kind == "preflight"
        assert "1.9.0" in result.error.message

    def test_stable_tag_mismatch_fails(self, tmp_path: Path) -> None:
        readme = tmp_path / "readme.txt"
        readme.write_text(_README.format(stable="1.9.0", latest="2.0.0"), encoding="utf-8")

        result = check_version(readme, "2.0.0")

        assert isinstance(result, Err)
        assert "stable tag" in result.error.message

    def test_missing_readme_fails(self, tmp_path: Path) -> None:
        result = check_version(tmp_path / "readme.txt", "2.0.0")

        assert isinstance(result, Err)
        assert result.error.kind == "preflight"

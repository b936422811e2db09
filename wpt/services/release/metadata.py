"""Read WordPress file headers (plugin main file / theme style.css).

Headers are `Name: value` lines inside the leading comment block, e.g.

    <?php
    /**
     * Plugin Name: My Plugin
     * Version: 1.2.0
     */

Like WordPress itself, only the first 8 KiB of the file are scanned.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path

from wpt.core.result import Err, Ok, Result
from wpt.services.release.errors import ReleaseError

_HEADER_SCAN_BYTES = 8 * 1024

PLUGIN_HEADERS: dict[str, str] = {
    "name": "Plugin Name",
    "plugin_uri": "Plugin URI",
    "version": "Version",
    "description": "Description",
    "author": "Author",
    "author_uri": "Author URI",
    "text_domain": "Text Domain",
    "domain_path": "Domain Path",
    "requires_wp": "Requires at least",
    "requires_php": "Requires PHP",
}

THEME_HEADERS: dict[str, str] = {
    "name": "Theme Name",
    "theme_uri": "Theme URI",
    "version": "Version",
    "description": "Description",
    "author": "Author",
    "author_uri": "Author URI",
    "template": "Template",
    "text_domain": "Text Domain",
    "domain_path": "Domain Path",
    "tags": "Tags",
}

PACKAGE_HEADERS = {"plugin": PLUGIN_HEADERS, "theme": THEME_HEADERS}


@dataclass(frozen=True, slots=True)
class FileData:
    name: str | None
    version: str | None
    headers: dict[str, str] = field(default_factory=dict)


def _header_value(content: str, header: str) -> str | None:
    pattern = re.compile(
        rf"^(?:[ \t]*<\?php)?[ \t/*#@]*{re.escape(header)}:(.*)$",
        re.IGNORECASE | re.MULTILINE,
    )
    match = pattern.search(content)
    if not match:
        return None
    # Strip a closing comment or PHP tag on the same line.
    value = re.sub(r"\s*(?:\*/|\?>).*", "", match.group(1)).strip()
    return value or None


def parse_file_data(content: str, package_type: str = "plugin") -> FileData:
    """Parse header fields from file content."""
    names = PACKAGE_HEADERS.get(package_type, PLUGIN_HEADERS)
    headers: dict[str, str] = {}
    for key, header in names.items():
        value = _header_value(content, header)
        if value is not None:
            headers[key] = value
    return FileData(name=headers.get("name"), version=headers.get("version"), headers=headers)


def find_main_file(project_root: Path, package_type: str) -> Path | None:
    """Locate the file carrying the package header.

    Themes always use style.css. For plugins, the first top-level .php file
    with a `Plugin Name` header wins.
    """
    if package_type == "theme":
        style = project_root / "style.css"
        return style if style.is_file() else None

    for candidate in sorted(project_root.glob("*.php")):
        data = read_file_data(candidate, package_type)
        if isinstance(data, Ok) and data.value.name:
            return candidate
    return None


def read_file_data(path: Path, package_type: str = "plugin") -> Result[FileData, ReleaseError]:
    """Read and parse the header block of `path`.

    A theme directory is read through its style.css.
    """
    if package_type == "theme" and path.is_dir():
        path = path / "style.css"

    try:
        with path.open("rb") as handle:
            raw = handle.read(_HEADER_SCAN_BYTES)
    except OSError as e:
        return Err(
            ReleaseError(
                kind="validation",
                message=f"cannot read package metadata: {path}",
                hint=str(e),
            )
        )

    content = raw.decode("utf-8", errors="replace").replace("\r", "\n")
    return Ok(parse_file_data(content, package_type))

"""Check that readme.txt agrees with the version being released.

Two things must match the package version:
- the `Stable tag:` header
- the newest entry of the changelog section (`= 1.2.0 =` in readme.txt,
  `### 1.2.0` in a markdown readme)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from wpt.core.result import Err, Ok, Result
from wpt.services.release.errors import ReleaseError

_STABLE_TAG_RE = re.compile(r"^[ \t*]*Stable tag:[ \t]*(\S+)", re.IGNORECASE | re.MULTILINE)
_CHANGELOG_RE = re.compile(r"^(?:==\s*Changelog\s*==|##\s*Changelog)\s*$", re.IGNORECASE | re.MULTILINE)
_SECTION_RE = re.compile(r"^(?:==\s*[^=].*==|##\s+\S.*)\s*$", re.MULTILINE)
_ENTRY_RE = re.compile(r"^(?:=\s*(.+?)\s*=|###\s*(.+?))\s*$", re.MULTILINE)


@dataclass(frozen=True, slots=True)
class ReadmeVersions:
    stable_tag: str | None
    latest_changelog: str | None


def _first_token(text: str) -> str | None:
    # "1.2.0 - 2024-05-01" / "v1.2.0 (beta)" -> "1.2.0"
    parts = text.split()
    if not parts:
        return None
    token = parts[0]
    return token[1:] if token[:1] in {"v", "V"} and token[1:2].isdigit() else token


def parse_readme(content: str) -> ReadmeVersions:
    stable = _STABLE_TAG_RE.search(content)

    latest: str | None = None
    changelog = _CHANGELOG_RE.search(content)
    if changelog:
        body = content[changelog.end() :]
        next_section = _SECTION_RE.search(body)
        if next_section:
            body = body[: next_section.start()]
        entry = _ENTRY_RE.search(body)
        if entry:
            latest = _first_token(entry.group(1) or entry.group(2))

    return ReadmeVersions(
        stable_tag=stable.group(1) if stable else None,
        latest_changelog=latest,
    )


def check_version(readme_path: Path, version: str) -> Result[None, ReleaseError]:
    """Fail unless the readme's stable tag and latest changelog entry equal `version`."""
    try:
        content = readme_path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        return Err(
            ReleaseError(
                kind="preflight",
                message=f"cannot read readme: {readme_path}",
                hint=str(e),
            )
        )

    versions = parse_readme(content)

    if versions.stable_tag != version:
        return Err(
            ReleaseError(
                kind="preflight",
                message=f"readme stable tag is {versions.stable_tag or 'missing'}, expected {version}",
                hint=f"Set `Stable tag: {version}` in {readme_path.name}.",
            )
        )

    if versions.latest_changelog != version:
        return Err(
            ReleaseError(
                kind="preflight",
                message=(
                    f"latest changelog entry is {versions.latest_changelog or 'missing'}, "
                    f"expected {version}"
                ),
                hint=f"Add a `= {version} =` entry at the top of the changelog.",
            )
        )

    return Ok(None)

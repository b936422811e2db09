from __future__ import annotations

SVN_HOST = "plugins.svn.wordpress.org"

TRUNK_DIR = "trunk"
ASSETS_DIR = "assets"
TAGS_DIR = "tags"

TRUNK_COMMIT_MESSAGE = "Updates trunk for {version}"
ASSETS_COMMIT_MESSAGE = "Updates assets for {version}"
TAG_COMMIT_MESSAGE = "Creates tag {version}"


def svn_url(slug: str, tag: str | None = None) -> str:
    """Release repository URL for `slug`, or for one of its tags."""
    url = f"https://{SVN_HOST}/{slug}"
    return f"{url}/{tag}" if tag else url

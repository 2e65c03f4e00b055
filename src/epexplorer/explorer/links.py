"""Code search links into a plugin's source repository."""

from __future__ import annotations

import re
from typing import Optional, Sequence
from urllib.parse import quote_plus

from epexplorer.config.models import DEFAULT_CODE_SEARCH_URL, DEFAULT_PATH_GLOBS

# scheme and www are optional; anything after owner/repo is ignored
GITHUB_REPO_PATTERN = re.compile(
    r"^(?:https?://)?(?:www\.)?github\.com/"
    r"(?P<owner>[^/?#]+)/(?P<repo>[^/?#]+?)(?:\.git)?"
    r"(?:[/?#].*)?$",
    re.IGNORECASE,
)


def parse_github_repo(source_url: str) -> Optional[str]:
    """Return "owner/repo" for a GitHub repository URL, or None."""
    match = GITHUB_REPO_PATTERN.match(source_url.strip())
    if match is None:
        return None
    return f"{match.group('owner')}/{match.group('repo')}"


def short_name(extension_point: str) -> str:
    """Return the last dotted segment of an extension-point name."""
    return extension_point.rsplit(".", 1)[-1]


def build_search_query(
    owner_repo: str,
    extension_point: str,
    path_globs: Sequence[str] = DEFAULT_PATH_GLOBS,
) -> str:
    """Build a code search query for an extension point inside one repository."""
    paths = " OR ".join(f"path:{glob}" for glob in path_globs)
    return (
        f"repo:{owner_repo} {extension_point} OR "
        f"repo:{owner_repo} {short_name(extension_point)} AND ({paths})"
    )


def build_search_url(
    source_url: str,
    extension_point: str,
    base_url: str = DEFAULT_CODE_SEARCH_URL,
    path_globs: Sequence[str] = DEFAULT_PATH_GLOBS,
) -> Optional[str]:
    """Build a GitHub code search URL for an extension point in a plugin's repository.

    Args:
        source_url: The plugin's source code URL.
        extension_point: Fully qualified extension-point name.
        base_url: Code search endpoint.
        path_globs: Source file globs the search is restricted to.

    Returns:
        Search URL, or None when source_url is not a GitHub repository.
    """
    owner_repo = parse_github_repo(source_url)
    if owner_repo is None:
        return None

    query = build_search_query(owner_repo, extension_point, path_globs)
    return f"{base_url}?q={quote_plus(query, safe='/')}&type=code"

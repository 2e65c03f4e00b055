"""Configuration validation for epexplorer.

Validates configuration keys and value types and warns on unknown keys.
"""

from __future__ import annotations

from dataclasses import dataclass
from difflib import get_close_matches
from typing import Any, Dict, List, Optional, Set

from epexplorer.core.logging import get_logger

LOGGER = get_logger(__name__)


# Valid top-level keys
VALID_TOP_LEVEL_KEYS: Set[str] = {
    "version",
    "marketplace",
    "selection",
    "links",
}

# Valid keys under marketplace section
VALID_MARKETPLACE_KEYS: Set[str] = {
    "index_url",
    "search_url",
    "timeout",
    "page_size",
    "family",
    "user_agent",
}

# Valid keys under selection section
VALID_SELECTION_KEYS: Set[str] = {
    "popular",
    "recent",
    "verified",
    "max_results",
}

# Valid keys under links section
VALID_LINKS_KEYS: Set[str] = {
    "search_base_url",
    "path_globs",
}

SECTION_KEYS: Dict[str, Set[str]] = {
    "marketplace": VALID_MARKETPLACE_KEYS,
    "selection": VALID_SELECTION_KEYS,
    "links": VALID_LINKS_KEYS,
}

STRING_KEYS: Set[str] = {
    "marketplace.index_url",
    "marketplace.search_url",
    "marketplace.family",
    "marketplace.user_agent",
    "links.search_base_url",
}

COUNT_KEYS: Set[str] = {
    "marketplace.page_size",
    "selection.popular",
    "selection.recent",
    "selection.verified",
    "selection.max_results",
}


@dataclass
class ConfigValidationWarning:
    """A validation warning for configuration."""

    message: str
    source: str
    key: Optional[str] = None
    suggestion: Optional[str] = None


def validate_config(
    data: Dict[str, Any],
    source: str,
) -> List[ConfigValidationWarning]:
    """Validate configuration dictionary.

    Does not raise exceptions - returns warnings instead. Values that cannot
    be used at all are rejected later, when the typed config is built.

    Args:
        data: Config dictionary to validate.
        source: Source file path for warning messages.

    Returns:
        List of validation warnings.
    """
    warnings: List[ConfigValidationWarning] = []

    if not isinstance(data, dict):  # type: ignore[unreachable]
        warnings.append(ConfigValidationWarning(
            message=f"Config must be a mapping, got {type(data).__name__}",
            source=source,
        ))
        return warnings  # type: ignore[unreachable]

    for key in data.keys():
        if key not in VALID_TOP_LEVEL_KEYS:
            suggestion = _suggest_key(key, VALID_TOP_LEVEL_KEYS)
            _add(warnings, ConfigValidationWarning(
                message=f"Unknown top-level key '{key}'",
                source=source,
                key=key,
                suggestion=suggestion,
            ))

    for section, valid_keys in SECTION_KEYS.items():
        section_data = data.get(section)
        if section_data is None:
            continue
        if not isinstance(section_data, dict):
            _add(warnings, ConfigValidationWarning(
                message=f"'{section}' must be a mapping, got {type(section_data).__name__}",
                source=source,
                key=section,
            ))
            continue

        for key, value in section_data.items():
            dotted = f"{section}.{key}"
            if key not in valid_keys:
                _add(warnings, ConfigValidationWarning(
                    message=f"Unknown key '{dotted}'",
                    source=source,
                    key=dotted,
                    suggestion=_suggest_key(key, valid_keys),
                ))
            elif dotted in STRING_KEYS and not isinstance(value, str):
                _add(warnings, ConfigValidationWarning(
                    message=f"'{dotted}' must be a string, got {type(value).__name__}",
                    source=source,
                    key=dotted,
                ))
            elif dotted in COUNT_KEYS and (
                isinstance(value, bool) or not isinstance(value, int) or value < 0
            ):
                _add(warnings, ConfigValidationWarning(
                    message=f"'{dotted}' must be a non-negative integer",
                    source=source,
                    key=dotted,
                ))

    marketplace = data.get("marketplace")
    if isinstance(marketplace, dict) and "timeout" in marketplace:
        timeout = marketplace["timeout"]
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            _add(warnings, ConfigValidationWarning(
                message="'marketplace.timeout' must be a positive number of seconds",
                source=source,
                key="marketplace.timeout",
            ))

    links = data.get("links")
    if isinstance(links, dict) and "path_globs" in links:
        globs = links["path_globs"]
        if not isinstance(globs, list) or not all(isinstance(g, str) for g in globs):
            _add(warnings, ConfigValidationWarning(
                message="'links.path_globs' must be a list of strings",
                source=source,
                key="links.path_globs",
            ))

    return warnings


def _add(warnings: List[ConfigValidationWarning], warning: ConfigValidationWarning) -> None:
    warnings.append(warning)
    _log_warning(warning)


def _suggest_key(invalid_key: str, valid_keys: Set[str]) -> Optional[str]:
    """Suggest a valid key for a potential typo.

    Args:
        invalid_key: The invalid key entered.
        valid_keys: Set of valid keys.

    Returns:
        Closest matching valid key, or None if no good match.
    """
    matches = get_close_matches(invalid_key, list(valid_keys), n=1, cutoff=0.6)
    return matches[0] if matches else None


def _log_warning(warning: ConfigValidationWarning) -> None:
    """Log a validation warning."""
    msg = f"{warning.message} in {warning.source}"
    if warning.suggestion:
        msg += f" (did you mean '{warning.suggestion}'?)"
    LOGGER.warning(msg)

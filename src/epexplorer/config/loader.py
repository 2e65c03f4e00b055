"""Configuration file loading.

Handles loading configuration from YAML files with:
- Project-level config (.epexplorer.yml)
- Custom config passed via --config
- Environment variable expansion (${VAR})
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from epexplorer.config.models import (
    ExplorerConfig,
    LinksConfig,
    MarketplaceConfig,
    SelectionConfig,
)
from epexplorer.config.validation import validate_config
from epexplorer.core.logging import get_logger

LOGGER = get_logger(__name__)

# Config file names
PROJECT_CONFIG_NAMES = [".epexplorer.yml", ".epexplorer.yaml", "epexplorer.yml", "epexplorer.yaml"]

# Environment variable pattern: ${VAR} or ${VAR:-default}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::-([^}]*))?\}")


class ConfigError(Exception):
    """Configuration loading or parsing error."""

    pass


def load_config(
    project_root: Path,
    cli_config_path: Optional[Path] = None,
) -> ExplorerConfig:
    """Load configuration.

    Precedence (highest to lowest):
    1. Custom config file (cli_config_path) OR project config (.epexplorer.yml)
    2. Built-in defaults

    Args:
        project_root: Directory searched for a project config file.
        cli_config_path: Optional path to custom config file (--config flag).

    Returns:
        ExplorerConfig instance.

    Raises:
        ConfigError: If the config file is missing, unparsable or holds
            values that cannot be used.
    """
    sources: List[str] = []
    data: Dict[str, Any] = {}

    if cli_config_path:
        config_path: Optional[Path] = cli_config_path
        if not cli_config_path.exists():
            raise ConfigError(f"Config file not found: {cli_config_path}")
        label = "custom"
    else:
        config_path = find_project_config(project_root)
        label = "project"

    if config_path is not None:
        try:
            data = load_yaml_file(config_path)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e
        validate_config(data, source=str(config_path))
        sources.append(f"{label}:{config_path}")
        LOGGER.debug(f"Loaded {label} config from {config_path}")

    config = dict_to_config(data)
    config._config_sources = sources

    LOGGER.debug(f"Config loaded from sources: {sources}")
    return config


def find_project_config(project_root: Path) -> Optional[Path]:
    """Find config file in project root.

    Args:
        project_root: Directory to search in.

    Returns:
        Path to config file if found, None otherwise.
    """
    for name in PROJECT_CONFIG_NAMES:
        config_path = project_root / name
        if config_path.exists():
            return config_path
    return None


def load_yaml_file(path: Path) -> Dict[str, Any]:
    """Load and parse a YAML config file.

    Performs environment variable expansion on string values.

    Args:
        path: Path to YAML file.

    Returns:
        Parsed dictionary.

    Raises:
        yaml.YAMLError: If YAML parsing fails.
        ConfigError: If the document is not a mapping.
    """
    with open(path, "r", encoding="utf-8") as f:
        content = f.read()

    data = yaml.safe_load(content)

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise ConfigError(f"Config file must be a YAML mapping, got {type(data).__name__}")

    return expand_env_vars(data)


def expand_env_vars(data: Any) -> Any:
    """Recursively expand environment variables in config values.

    Supports ${VAR} and ${VAR:-default} syntax.
    """
    if isinstance(data, dict):
        return {k: expand_env_vars(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [expand_env_vars(item) for item in data]
    elif isinstance(data, str):
        return ENV_VAR_PATTERN.sub(_env_var_replacer, data)
    else:
        return data


def _env_var_replacer(match: re.Match[str]) -> str:
    """Replace environment variable reference with its value."""
    var_name = match.group(1)
    default_value = match.group(2)

    value = os.environ.get(var_name)
    if value is not None:
        return value
    if default_value is not None:
        return default_value

    LOGGER.warning(f"Environment variable ${var_name} is not set and has no default")
    return ""


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"'{name}' must be a mapping, got {type(section).__name__}")
    return section


def _count(section: Dict[str, Any], key: str, default: int, name: str) -> int:
    value = section.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ConfigError(f"'{name}.{key}' must be a non-negative integer, got {value!r}")
    return value


def dict_to_config(data: Dict[str, Any]) -> ExplorerConfig:
    """Convert a config dict to typed ExplorerConfig.

    Args:
        data: Configuration dictionary.

    Returns:
        Typed ExplorerConfig instance.

    Raises:
        ConfigError: If a value has an unusable type or range.
    """
    defaults = ExplorerConfig()

    market_data = _section(data, "marketplace")
    timeout = market_data.get("timeout", defaults.marketplace.timeout)
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
        raise ConfigError(f"'marketplace.timeout' must be a positive number, got {timeout!r}")

    marketplace = MarketplaceConfig(
        index_url=str(market_data.get("index_url", defaults.marketplace.index_url)),
        search_url=str(market_data.get("search_url", defaults.marketplace.search_url)),
        timeout=float(timeout),
        page_size=_count(market_data, "page_size", defaults.marketplace.page_size, "marketplace"),
        family=str(market_data.get("family", defaults.marketplace.family)),
        user_agent=str(market_data.get("user_agent", defaults.marketplace.user_agent)),
    )

    selection_data = _section(data, "selection")
    selection = SelectionConfig(
        popular=_count(selection_data, "popular", defaults.selection.popular, "selection"),
        recent=_count(selection_data, "recent", defaults.selection.recent, "selection"),
        verified=_count(selection_data, "verified", defaults.selection.verified, "selection"),
        max_results=_count(
            selection_data, "max_results", defaults.selection.max_results, "selection"
        ),
    )

    links_data = _section(data, "links")
    globs = links_data.get("path_globs", defaults.links.path_globs)
    if not isinstance(globs, list) or not all(isinstance(g, str) for g in globs):
        raise ConfigError("'links.path_globs' must be a list of strings")

    links = LinksConfig(
        search_base_url=str(links_data.get("search_base_url", defaults.links.search_base_url)),
        path_globs=list(globs),
    )

    return ExplorerConfig(marketplace=marketplace, selection=selection, links=links)

"""Ancestry configuration management.

Loads configuration from .ancestry/config.yaml with sensible defaults.
All settings can be overridden via environment variables (ANCESTRY_*).

Config locations (in priority order):
1. Explicit path passed to load_config()
2. .ancestry/config.yaml (project-local)
3. ~/.ancestry/config.yaml (user-global)
4. Built-in defaults
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from ancestry.foundation.errors import ConfigError, ErrorCode

logger = logging.getLogger(__name__)


@dataclass
class ServerConfig:
    """Where the orchestrator is and how long to wait for it."""

    url: str = "127.0.0.1:9090"
    """Orchestrator address, scheme optional."""

    timeout: float = 30.0
    """Overall request timeout in seconds."""

    connect_timeout: float = 10.0
    """Connection timeout in seconds."""


@dataclass
class ExploreConfig:
    """Defaults for exploring ancestry."""

    default_target: str = "0-0-0-2400000000000000"
    """Handle explored when none is given."""

    max_depth: int = 3
    """Generations fetched by `ancestry explore` unless --depth is given."""


@dataclass
class AncestryConfig:
    """Root configuration for Ancestry."""

    server: ServerConfig = field(default_factory=ServerConfig)
    explore: ExploreConfig = field(default_factory=ExploreConfig)

    debug: bool = False
    """Enable debug logging by default."""


# Global config instance (lazy-loaded, thread-safe)
_config: AncestryConfig | None = None
_config_lock = threading.Lock()

_PREFIX = "ANCESTRY_"
_KNOWN_SECTIONS = {
    "server": {"url", "timeout", "connect_timeout"},
    "explore": {"default_target", "max_depth"},
}


def _deep_update(base: dict, updates: dict) -> dict:
    """Recursively update a dict with another dict."""
    for key, value in updates.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_update(base[key], value)
        else:
            base[key] = value
    return base


def _coerce(value: str) -> Any:
    if value.lower() in ("true", "false"):
        return value.lower() == "true"
    if value.isdigit() or (value.startswith("-") and value[1:].isdigit()):
        return int(value)
    try:
        return float(value)
    except ValueError:
        return value


def _apply_env_overrides(config_dict: dict, environ: dict[str, str] | None = None) -> dict:
    """Apply environment variable overrides.

    Environment variables follow pattern: ANCESTRY_SECTION_KEY, plus
    ANCESTRY_DEBUG at the top level.

    Examples:
        ANCESTRY_SERVER_URL=build-host:9090
        ANCESTRY_SERVER_TIMEOUT=5
        ANCESTRY_EXPLORE_MAX_DEPTH=6
    """
    environ = os.environ if environ is None else environ

    for key, value in environ.items():
        if not key.startswith(_PREFIX):
            continue
        path_str = key[len(_PREFIX):].lower()

        if path_str == "debug":
            config_dict["debug"] = value.lower() in ("true", "1", "yes")
            continue

        for section, keys in _KNOWN_SECTIONS.items():
            if not path_str.startswith(section + "_"):
                continue
            name = path_str[len(section) + 1:]
            if name in keys:
                coerced = _coerce(value)
                # Handles and addresses stay strings even when they look numeric
                if name in ("url", "default_target"):
                    coerced = value
                config_dict.setdefault(section, {})[name] = coerced
            break

    return config_dict


def _dict_to_config(data: dict) -> AncestryConfig:
    """Convert a dict to AncestryConfig."""
    try:
        return AncestryConfig(
            server=ServerConfig(**data.get("server", {})),
            explore=ExploreConfig(**data.get("explore", {})),
            debug=bool(data.get("debug", False)),
        )
    except TypeError as e:
        raise ConfigError(
            code=ErrorCode.CONFIG_INVALID,
            context={"path": "<merged config>", "detail": str(e)},
            cause=e,
        ) from e


def _default_dict() -> dict[str, Any]:
    return {
        "server": {
            "url": "127.0.0.1:9090",
            "timeout": 30.0,
            "connect_timeout": 10.0,
        },
        "explore": {
            "default_target": "0-0-0-2400000000000000",
            "max_depth": 3,
        },
        "debug": False,
    }


def load_config(path: str | Path | None = None) -> AncestryConfig:
    """Load configuration from file with defaults and env overrides.

    Priority (highest to lowest):
    1. Environment variables (ANCESTRY_*)
    2. Explicit path if provided
    3. .ancestry/config.yaml (project-local)
    4. ~/.ancestry/config.yaml (user-global)
    5. Built-in defaults

    Args:
        path: Optional explicit config file path.

    Returns:
        Merged AncestryConfig instance.

    Raises:
        ConfigError: If the first config file found is not valid YAML or
            has unknown keys.
    """
    global _config

    config_dict = _default_dict()

    config_paths = []
    if path:
        config_paths.append(Path(path))
    config_paths.extend([
        Path(".ancestry/config.yaml"),
        Path.home() / ".ancestry" / "config.yaml",
    ])

    for config_path in config_paths:
        if not config_path.exists():
            continue
        try:
            with open(config_path) as f:
                file_config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(
                code=ErrorCode.CONFIG_INVALID,
                context={"path": str(config_path), "detail": str(e)},
                cause=e,
            ) from e
        if not isinstance(file_config, dict):
            raise ConfigError(
                code=ErrorCode.CONFIG_INVALID,
                context={"path": str(config_path), "detail": "top level must be a mapping"},
            )
        logger.debug("Loaded config from %s", config_path)
        _deep_update(config_dict, file_config)
        break  # Use first found config

    config_dict = _apply_env_overrides(config_dict)

    _config = _dict_to_config(config_dict)
    return _config


def get_config() -> AncestryConfig:
    """Get the current configuration, loading if needed."""
    global _config

    if _config is not None:
        return _config

    with _config_lock:
        if _config is None:
            _config = load_config()
        return _config


def reset_config() -> None:
    """Reset the global config (useful for testing)."""
    global _config
    with _config_lock:
        _config = None


def save_default_config(path: str | Path = ".ancestry/config.yaml") -> Path:
    """Save the default configuration to a file.

    Args:
        path: Where to save the config.

    Returns:
        Path to the saved config file.
    """
    config_content = '''# Ancestry Configuration

# Build orchestrator
server:
  # Address of the orchestrator (scheme optional)
  url: "127.0.0.1:9090"

  # Overall request timeout in seconds
  timeout: 30.0

  # Connection timeout in seconds
  connect_timeout: 10.0

# Exploring ancestry
explore:
  # Handle explored when none is given on the command line
  default_target: "0-0-0-2400000000000000"

  # Generations fetched by `ancestry explore` unless --depth is given
  max_depth: 3

# Enable debug logging
debug: false
'''

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(config_content)
    return path

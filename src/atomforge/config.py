# src/atomforge/config.py
"""Configuration loading utilities for Atomforge.

Used by the CLI and by applications that want file/env based setup:
- Finding and loading atomforge.yaml config files
- Loading .env files for API keys
- Building Settings objects from YAML and ATOMFORGE_* environment variables
- Creating Forge instances from configuration
"""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from atomforge.providers.litellm.models import EmbeddingModels

if TYPE_CHECKING:
    from atomforge.forge import Forge
    from atomforge.settings import Settings

# Default paths
DEFAULT_DATA_DIR = "./atomforge_data"
CONFIG_FILES = ["atomforge.yaml", "atomforge.yml", ".atomforgerc"]
ENV_FILE = ".env"
ENV_PREFIX = "ATOMFORGE_"


@dataclass
class ConfigError:
    """Why a Forge could not be configured, with an optional hint."""

    message: str
    suggestion: str | None = None


def load_env_file(env_path: str | Path = ENV_FILE) -> None:
    """Load environment variables from a .env file if it exists.

    Existing environment variables are never overridden.

    Args:
        env_path: File of KEY=value lines (default: ./.env)
    """
    path = Path(env_path)
    if not path.exists():
        return

    with open(path, encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, _, value = line.partition("=")
            key = key.strip().removeprefix("export ").strip()
            value = value.strip().strip("'\"")
            if key and key not in os.environ:
                os.environ[key] = value


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Walk up from `start_dir` looking for one of CONFIG_FILES.

    Args:
        start_dir: First directory to look in (default: cwd)

    Returns:
        The first match, or None when no directory up the tree has one
    """
    current = start_dir or Path.cwd()
    for _ in range(10):  # Limit search depth
        for config_name in CONFIG_FILES:
            config_path = current / config_name
            if config_path.exists():
                return config_path
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


VALID_ROOT_KEYS = {
    "provider",
    "embedding_model",
    "data_dir",
    "public_base_url",
    "settings",
}


def _parse_optional_str(value: str) -> str | None:
    return value or None


# Settings field -> parser for its ATOMFORGE_* environment variable
SETTINGS_PARSERS: dict[str, Callable[[str], Any]] = {
    "max_code_bytes": int,
    "search_threshold": float,
    "default_search_limit": int,
    "embedding_max_chars": int,
    "num_retries": int,
    "build_history_limit": int,
    "versioned_cache_seconds": int,
    "rebuild_url": _parse_optional_str,
    "rebuild_token": _parse_optional_str,
    "rebuild_timeout": float,
}

VALID_SETTINGS_KEYS = set(SETTINGS_PARSERS)


def validate_config(config: dict[str, Any], config_path: Path | None = None) -> list[str]:
    """Report root and settings keys atomforge does not recognise.

    Args:
        config: Parsed YAML mapping
        config_path: Where the mapping came from, used in the message

    Returns:
        Human readable warnings; empty when every key is known
    """
    warnings = []

    unknown_root = set(config.keys()) - VALID_ROOT_KEYS
    if unknown_root:
        path_str = str(config_path) if config_path else "config"
        warnings.append(f"Unknown config keys in {path_str}: {', '.join(sorted(unknown_root))}")

    settings = config.get("settings", {})
    if isinstance(settings, dict):
        unknown_settings = set(settings.keys()) - VALID_SETTINGS_KEYS
        if unknown_settings:
            warnings.append(f"Unknown settings keys: {', '.join(sorted(unknown_settings))}")

    return warnings


def load_config(config_path: Path | str | None = None) -> dict[str, Any]:
    """Load configuration from a YAML file.

    Args:
        config_path: File to read; searched for when None

    Returns:
        The parsed mapping, or {} when there is no file or it is empty
    """
    config_path = Path(config_path) if config_path is not None else find_config_file()

    if config_path is None:
        return {}

    with open(config_path, encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}

    return config


def get_settings_from_env() -> dict[str, Any]:
    """Read behavioral settings from ATOMFORGE_* environment variables.

    Only variables that are set, and parse, are returned, so YAML values
    survive unless explicitly overridden.

    Returns:
        Setting name to parsed value, for the variables present
    """
    result: dict[str, Any] = {}
    for key, parse in SETTINGS_PARSERS.items():
        raw = os.environ.get(f"{ENV_PREFIX}{key.upper()}")
        if raw is None:
            continue
        try:
            result[key] = parse(raw)
        except ValueError:
            continue
    return result


def get_settings_from_yaml(config: dict[str, Any]) -> dict[str, Any]:
    """Extract the known keys of the YAML `settings:` section."""
    yaml_settings = config.get("settings", {}) or {}
    return {key: value for key, value in yaml_settings.items() if key in VALID_SETTINGS_KEYS}


def build_settings(
    config: dict[str, Any] | None = None,
    env_settings: dict[str, Any] | None = None,
) -> Settings:
    """Build a Settings object from YAML config and env vars.

    Later sources win:
    1. Settings class defaults
    2. YAML settings: section
    3. ATOMFORGE_* environment variables

    Args:
        config: Parsed YAML mapping
        env_settings: Overrides to apply last; read from the environment when None

    Returns:
        The merged Settings
    """
    from atomforge.settings import Settings

    config = config or {}
    yaml_settings = get_settings_from_yaml(config)
    env_settings = env_settings if env_settings is not None else get_settings_from_env()

    return Settings(**{**yaml_settings, **env_settings})


@dataclass
class ForgeConfig:
    """Configuration for creating a Forge instance."""

    provider: str
    embedding_model: str
    data_dir: str
    settings: Settings
    public_base_url: str | None = None


def get_forge_config(
    data_dir: str | None = None,
    config_path: str | Path | None = None,
) -> ForgeConfig | ConfigError:
    """Get configuration for creating a Forge instance.

    Nothing is opened here, so callers can report a bad configuration
    before any store or client is created.

    Args:
        data_dir: Override data directory
        config_path: Override config file path

    Returns:
        ForgeConfig with all settings, or ConfigError if invalid
    """
    config = load_config(config_path)
    provider = config.get("provider", "litellm")
    if provider != "litellm":
        return ConfigError(
            message=f"Unknown provider '{provider}'",
            suggestion="Supported providers: litellm",
        )

    effective_data_dir = (
        data_dir
        or os.environ.get(f"{ENV_PREFIX}DATA_DIR")
        or config.get("data_dir")
        or DEFAULT_DATA_DIR
    )
    embedding_model = (
        os.environ.get(f"{ENV_PREFIX}EMBEDDING_MODEL")
        or config.get("embedding_model")
        or EmbeddingModels.TEXT_3_SMALL
    )
    public_base_url = os.environ.get(f"{ENV_PREFIX}PUBLIC_BASE_URL") or config.get(
        "public_base_url"
    )

    try:
        settings = build_settings(config)
    except ValueError as e:
        return ConfigError(
            message=f"Invalid settings: {e}",
            suggestion="Check the settings: section of atomforge.yaml and ATOMFORGE_* variables",
        )

    return ForgeConfig(
        provider=provider,
        embedding_model=embedding_model,
        data_dir=str(effective_data_dir),
        settings=settings,
        public_base_url=public_base_url,
    )


def create_forge(config: ForgeConfig) -> Forge:
    """Create a Forge instance from configuration."""
    from atomforge.configuration import LiteLLMProvider, LocalStorage
    from atomforge.forge import Forge

    return Forge(
        provider=LiteLLMProvider(embedding=config.embedding_model),
        storage=LocalStorage(config.data_dir, public_base_url=config.public_base_url),
        settings=config.settings,
    )


def get_forge(
    data_dir: str | None = None,
    config_path: str | Path | None = None,
) -> Forge | ConfigError:
    """Create a Forge instance based on configuration.

    Combines get_forge_config and create_forge.
    """
    config = get_forge_config(data_dir, config_path)
    if isinstance(config, ConfigError):
        return config
    return create_forge(config)

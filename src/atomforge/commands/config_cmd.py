# src/atomforge/commands/config_cmd.py
"""Config command - display current configuration."""

from __future__ import annotations

from pathlib import Path

from atomforge.commands.base import ConfigResult, SettingInfo
from atomforge.config import (
    ConfigError,
    find_config_file,
    get_forge_config,
    get_settings_from_env,
    get_settings_from_yaml,
    load_config,
    validate_config,
)

SECRET_SETTINGS = {"rebuild_token"}


def _get_setting_source(key: str, yaml_settings: dict, env_settings: dict) -> str:
    """Determine the source of a setting value."""
    if key in env_settings:
        return "env var"
    if key in yaml_settings:
        return "yaml"
    return "default"


def config(
    data_dir: str | None = None,
    config_path: str | Path | None = None,
) -> ConfigResult:
    """Get current configuration settings.

    Args:
        data_dir: Override data directory
        config_path: Override config file path

    Returns:
        ConfigResult with all settings and their sources
    """
    file_config = load_config(config_path)
    env_settings = get_settings_from_env()
    yaml_settings = get_settings_from_yaml(file_config)

    forge_config = get_forge_config(data_dir, config_path)
    if isinstance(forge_config, ConfigError):
        return ConfigResult(success=False, error=forge_config.message, error_kind="config")

    found_config_path = Path(config_path) if config_path is not None else find_config_file()

    result = ConfigResult(
        success=True,
        provider=forge_config.provider,
        embedding_model=forge_config.embedding_model,
        data_dir=forge_config.data_dir,
        public_base_url=forge_config.public_base_url,
        config_path=str(found_config_path) if found_config_path else None,
        warnings=validate_config(file_config, found_config_path),
    )

    for key, value in forge_config.settings.model_dump().items():
        if key in SECRET_SETTINGS and value:
            shown = "********"
        else:
            shown = "(not set)" if value is None else str(value)
        result.settings.append(
            SettingInfo(
                name=key,
                value=shown,
                source=_get_setting_source(key, yaml_settings, env_settings),
            )
        )

    return result

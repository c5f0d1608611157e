# src/docent/commands/config_cmd.py
"""Config command - display current configuration."""

from __future__ import annotations

import os
from pathlib import Path

from docent.commands.base import ConfigResult, SettingInfo
from docent.config import (
    build_settings,
    find_config_file,
    get_settings_from_env,
    get_settings_from_yaml,
    load_config,
    resolve_storage,
)

DISPLAYED_SETTINGS = [
    "summary_trigger",
    "summary_keep",
    "rewrite_window",
    "default_k",
    "temperature",
    "embed_timeout",
    "rewrite_timeout",
    "summarize_timeout",
    "generate_timeout",
    "chunk_size",
    "chunk_overlap",
    "max_file_bytes",
    "max_total_bytes",
    "num_retries",
]


def _get_setting_source(
    key: str,
    yaml_settings: dict,
    env_settings: dict,
) -> str:
    """Determine the source of a setting value."""
    if key in env_settings:
        return "env var"
    if key in yaml_settings:
        return "yaml"
    return "default"


def config(
    config_path: str | Path | None = None,
) -> ConfigResult:
    """Get current configuration settings.

    Args:
        config_path: Override config file path

    Returns:
        ConfigResult with all settings and their sources
    """
    cli_config = load_config(config_path)
    env_settings = get_settings_from_env()
    yaml_settings = get_settings_from_yaml(cli_config)

    try:
        settings = build_settings(cli_config, env_settings)
    except ValueError as e:
        return ConfigResult(success=False, error=f"Invalid settings: {e}")

    found_config_path = Path(config_path) if config_path else find_config_file()

    result = ConfigResult(success=True)
    result.config_path = str(found_config_path) if found_config_path else None
    result.provider = cli_config.get("provider", "litellm")

    if result.provider == "litellm":
        result.llm_model = cli_config.get("llm_model") or os.environ.get(
            "DOCENT_LITELLM_LLM_MODEL"
        )
        result.embedding_model = cli_config.get("embedding_model") or os.environ.get(
            "DOCENT_LITELLM_EMBEDDING_MODEL"
        )

    result.data_dir, result.vector_backend = resolve_storage(None, config_path)

    for key in DISPLAYED_SETTINGS:
        value = getattr(settings, key)
        result.settings.append(
            SettingInfo(
                name=key,
                value="default" if value is None else str(value),
                source=_get_setting_source(key, yaml_settings, env_settings),
            )
        )

    return result

# src/docent/config.py
"""Configuration loading utilities for Docent.

This module provides configuration loading that can be used by:
- CLI commands
- External applications (e.g. a chat web service) using Docent as a library

It handles:
- Finding and loading docent.yaml config files
- Loading .env files for API keys
- Building Settings objects from multiple sources
- Creating Docent instances from configuration
"""

from __future__ import annotations

import importlib
import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, TypedDict, cast

if TYPE_CHECKING:
    from docent.docent import Docent
    from docent.settings import Settings
    from docent.stores import ChunkStore, ConversationLogStore

try:
    import yaml  # type: ignore[import-untyped]

    YAML_AVAILABLE = True
except ImportError:
    YAML_AVAILABLE = False

# Default paths
DEFAULT_DATA_DIR = "./docent_data"
CONFIG_FILES = ["docent.yaml", "docent.yml", ".docentrc"]
ENV_FILE = ".env"


class StoreBundle(TypedDict):
    """Bundle of store instances for operations that make no model calls."""

    chunk_store: ChunkStore
    log_store: ConversationLogStore


@dataclass
class ConfigError:
    """Error during configuration loading."""

    message: str
    suggestion: str | None = None


def load_env_file(env_path: str | Path = ENV_FILE) -> None:
    """Load environment variables from .env file if it exists.

    Existing environment variables are never overridden.

    Args:
        env_path: Path to .env file (default: .env in current directory)
    """
    path = Path(env_path)
    if not path.exists():
        return

    with open(path, encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" in line:
                key, _, value = line.partition("=")
                key = key.strip()
                value = value.strip().strip("'\"")
                if key not in os.environ:
                    os.environ[key] = value


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Find configuration file in current directory or parent directories.

    Args:
        start_dir: Directory to start searching from (default: cwd)

    Returns:
        Path to config file if found, None otherwise
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
    # Provider config
    "provider",
    "llm_model",
    "embedding_model",
    "rewrite_model",
    "summary_model",
    "embedding_dimensions",
    "data_dir",
    "vector_backend",
    # Custom provider
    "embedder",
    "llm_client",
    "embedder_kwargs",
    "llm_client_kwargs",
    # Settings section
    "settings",
}

# YAML key -> Settings field
SETTINGS_KEYS = {
    "summary_trigger": "summary_trigger",
    "summary_keep": "summary_keep",
    "summary_temperature": "summary_temperature",
    "rewrite_window": "rewrite_window",
    "rewrite_temperature": "rewrite_temperature",
    "default_k": "default_k",
    "temperature": "temperature",
    "embed_timeout": "embed_timeout",
    "rewrite_timeout": "rewrite_timeout",
    "summarize_timeout": "summarize_timeout",
    "summary_timeout": "summarize_timeout",  # alias
    "generate_timeout": "generate_timeout",
    "max_threads": "max_threads",
    "thread_idle_ttl": "thread_idle_ttl",
    "chunk_size": "chunk_size",
    "chunk_overlap": "chunk_overlap",
    "max_file_bytes": "max_file_bytes",
    "max_total_bytes": "max_total_bytes",
    "num_retries": "num_retries",
    "timeout_profile": "timeout_profile",
}

VALID_SETTINGS_KEYS = set(SETTINGS_KEYS)

# DOCENT_* variable -> Settings field
_INT_ENV = {
    "DOCENT_SUMMARY_TRIGGER": "summary_trigger",
    "DOCENT_SUMMARY_KEEP": "summary_keep",
    "DOCENT_REWRITE_WINDOW": "rewrite_window",
    "DOCENT_DEFAULT_K": "default_k",
    "DOCENT_MAX_THREADS": "max_threads",
    "DOCENT_CHUNK_SIZE": "chunk_size",
    "DOCENT_CHUNK_OVERLAP": "chunk_overlap",
    "DOCENT_MAX_FILE_BYTES": "max_file_bytes",
    "DOCENT_MAX_TOTAL_BYTES": "max_total_bytes",
    "DOCENT_NUM_RETRIES": "num_retries",
}
_FLOAT_ENV = {
    "DOCENT_TEMPERATURE": "temperature",
    "DOCENT_EMBED_TIMEOUT": "embed_timeout",
    "DOCENT_REWRITE_TIMEOUT": "rewrite_timeout",
    "DOCENT_SUMMARIZE_TIMEOUT": "summarize_timeout",
    "DOCENT_GENERATE_TIMEOUT": "generate_timeout",
    "DOCENT_THREAD_IDLE_TTL": "thread_idle_ttl",
}


def validate_config(config: dict[str, Any], config_path: Path | None = None) -> list[str]:
    """Validate config and return warnings about unknown keys.

    Args:
        config: The loaded configuration dictionary
        config_path: Path to config file (for error messages)

    Returns:
        List of warning messages (empty if no issues)
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
    """Load configuration from YAML file.

    Args:
        config_path: Explicit path to config file, or None to search

    Returns:
        Configuration dictionary (empty if no config found)
    """
    config_path = Path(config_path) if config_path is not None else find_config_file()

    if config_path is None:
        return {}

    if not YAML_AVAILABLE:
        # Can't load YAML without pyyaml
        return {}

    with open(config_path, encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}

    return cast(dict[str, Any], config)


def _safe_int(value: str | None) -> int | None:
    """Parse int from string, returning None on invalid value."""
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _safe_float(value: str | None) -> float | None:
    """Parse float from string, returning None on invalid value."""
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def get_settings_from_env() -> dict[str, Any]:
    """Read behavioral settings from DOCENT_* environment variables.

    Returns values that were explicitly set (not defaults), to allow proper
    precedence: YAML settings are used unless overridden by env vars.

    Returns:
        Dictionary of setting name -> value for explicitly set env vars
    """
    result: dict[str, Any] = {}

    for env_key, field in _INT_ENV.items():
        if (ival := _safe_int(os.environ.get(env_key))) is not None:
            result[field] = ival
    for env_key, field in _FLOAT_ENV.items():
        if (fval := _safe_float(os.environ.get(env_key))) is not None:
            result[field] = fval
    if os.environ.get("DOCENT_TIMEOUT_PROFILE"):
        result["timeout_profile"] = os.environ["DOCENT_TIMEOUT_PROFILE"]

    return result


def get_settings_from_yaml(config: dict[str, Any]) -> dict[str, Any]:
    """Extract settings from the 'settings:' section of a YAML config.

    Args:
        config: The loaded YAML configuration

    Returns:
        Dictionary of setting name -> value
    """
    result: dict[str, Any] = {}
    yaml_settings = config.get("settings", {}) or {}

    for yaml_key, settings_key in SETTINGS_KEYS.items():
        if yaml_key in yaml_settings:
            result[settings_key] = yaml_settings[yaml_key]

    return result


def build_settings(
    config: dict[str, Any] | None = None,
    env_settings: dict[str, Any] | None = None,
) -> Settings:
    """Build Settings object from YAML config and env vars.

    Precedence (highest to lowest):
    1. Environment variables
    2. YAML settings: section
    3. Timeout profile, if one is named
    4. Settings class defaults

    Args:
        config: YAML configuration dictionary
        env_settings: Environment variable overrides (if None, reads from env)

    Returns:
        Configured Settings instance
    """
    from docent.settings import Settings

    config = config or {}
    yaml_settings = get_settings_from_yaml(config)
    env_settings = env_settings if env_settings is not None else get_settings_from_env()

    merged = {**yaml_settings, **env_settings}

    # A timeout profile sets several timeouts at once
    timeout_profile = merged.pop("timeout_profile", None)
    if timeout_profile:
        return Settings.with_profile(timeout_profile, **merged)
    return Settings(**merged)


def resolve_storage(
    data_dir: str | None = None,
    config_path: str | Path | None = None,
) -> tuple[str, str]:
    """Resolve the data directory and vector backend.

    Precedence: explicit argument, then docent.yaml, then the DOCENT_DATA_DIR
    and DOCENT_VECTOR_BACKEND environment variables, then defaults.

    Returns:
        Tuple of (data_dir, vector_backend)
    """
    config = load_config(config_path)
    effective_data_dir = (
        data_dir or config.get("data_dir") or os.environ.get("DOCENT_DATA_DIR") or DEFAULT_DATA_DIR
    )
    vector_backend = config.get("vector_backend") or os.environ.get(
        "DOCENT_VECTOR_BACKEND", "sqlite"
    )
    return str(effective_data_dir), vector_backend


def get_stores(data_dir: str | Path, vector_backend: str = "sqlite") -> StoreBundle:
    """Get store instances for document management (list, delete, bind).

    This doesn't require provider configuration since it only accesses stores.

    Args:
        data_dir: Path to data directory
        vector_backend: "sqlite" or "chroma"

    Returns:
        Bundle of store instances
    """
    from docent.configuration import LocalStorage

    chunk_store, log_store = LocalStorage(
        str(data_dir),
        vector_backend=cast(Any, vector_backend),
    ).build_stores()
    return {"chunk_store": chunk_store, "log_store": log_store}


def import_class(class_path: str) -> type[Any]:
    """Import a class from a dotted path like 'my_package.module.ClassName'.

    Args:
        class_path: Dotted path to class

    Returns:
        The imported class
    """
    module_path, class_name = class_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    return cast(type[Any], getattr(module, class_name))


def is_local_model(model: str) -> bool:
    """Check if a model is a local model (doesn't need API key).

    Args:
        model: Model name (e.g., "ollama/llama3", "gpt-5-mini")

    Returns:
        True if the model runs locally
    """
    model_lower = model.lower()
    return any(
        pattern in model_lower
        for pattern in [
            "ollama",
            "local",
            "llama.cpp",
            "llamacpp",
            "gguf",
            "ggml",
        ]
    )


@dataclass
class DocentConfig:
    """Configuration for creating a Docent instance."""

    provider: str
    llm_model: str | None
    embedding_model: str | None
    data_dir: str
    settings: Settings
    vector_backend: str = "sqlite"
    rewrite_model: str | None = None
    summary_model: str | None = None
    embedding_dimensions: int | None = None
    llm_api_key: str | None = None
    embedding_api_key: str | None = None
    # Custom provider fields
    embedder_class: str | None = None
    llm_client_class: str | None = None
    embedder_kwargs: dict[str, Any] | None = None
    llm_client_kwargs: dict[str, Any] | None = None


def get_docent_config(
    data_dir: str | None = None,
    config_path: str | Path | None = None,
) -> DocentConfig | ConfigError:
    """Get configuration for creating a Docent instance.

    This extracts configuration without creating the instance, allowing
    the caller to handle errors and missing values appropriately.

    Args:
        data_dir: Override data directory
        config_path: Override config file path

    Returns:
        DocentConfig with all settings, or ConfigError if invalid
    """
    config = load_config(config_path)
    effective_data_dir, vector_backend = resolve_storage(data_dir, config_path)
    provider = config.get("provider", "litellm")
    if vector_backend not in ("sqlite", "chroma"):
        return ConfigError(
            message=f"Unknown vector backend '{vector_backend}'",
            suggestion="Supported backends: sqlite, chroma",
        )

    try:
        settings = build_settings(config, get_settings_from_env())
    except ValueError as e:
        return ConfigError(message=f"Invalid settings: {e}")

    if provider == "litellm":
        llm_model = config.get("llm_model") or os.environ.get("DOCENT_LITELLM_LLM_MODEL")
        embedding_model = config.get("embedding_model") or os.environ.get(
            "DOCENT_LITELLM_EMBEDDING_MODEL"
        )

        if not llm_model or not embedding_model:
            return ConfigError(
                message="LiteLLM provider requires llm_model and embedding_model.",
                suggestion="Set them in docent.yaml or via DOCENT_LITELLM_LLM_MODEL "
                "and DOCENT_LITELLM_EMBEDDING_MODEL",
            )

        return DocentConfig(
            provider=provider,
            llm_model=llm_model,
            embedding_model=embedding_model,
            data_dir=effective_data_dir,
            settings=settings,
            vector_backend=vector_backend,
            rewrite_model=config.get("rewrite_model"),
            summary_model=config.get("summary_model"),
            embedding_dimensions=config.get("embedding_dimensions"),
            llm_api_key=os.environ.get("DOCENT_LLM_API_KEY"),
            embedding_api_key=os.environ.get("DOCENT_EMBEDDING_API_KEY"),
        )

    elif provider == "custom":
        embedder_class = config.get("embedder")
        llm_client_class = config.get("llm_client")

        if not embedder_class or not llm_client_class:
            return ConfigError(
                message="Custom provider requires embedder and llm_client.",
                suggestion="Add these to docent.yaml as dotted class paths",
            )

        return DocentConfig(
            provider=provider,
            llm_model=None,
            embedding_model=None,
            data_dir=effective_data_dir,
            settings=settings,
            vector_backend=vector_backend,
            embedder_class=embedder_class,
            llm_client_class=llm_client_class,
            embedder_kwargs=config.get("embedder_kwargs", {}),
            llm_client_kwargs=config.get("llm_client_kwargs", {}),
        )

    else:
        return ConfigError(
            message=f"Unknown provider '{provider}'",
            suggestion="Supported providers: litellm, custom",
        )


@dataclass(frozen=True)
class _CustomProvider:
    """Provider wrapping user-supplied embedder and LLM client instances."""

    _embedder: Any
    _llm_client: Any

    def build_embedder(self, settings: Settings) -> Any:
        return self._embedder

    def build_llm_client(self, settings: Settings) -> Any:
        return self._llm_client

    def build_rewrite_client(self, settings: Settings) -> Any:
        return self._llm_client

    def build_summary_client(self, settings: Settings) -> Any:
        return self._llm_client


def create_docent(config: DocentConfig) -> Docent:
    """Create a Docent instance from configuration.

    Args:
        config: Configuration for the Docent instance

    Returns:
        Configured Docent instance

    Raises:
        ImportError: If custom provider classes cannot be imported
    """
    from docent.configuration import LiteLLMProvider, LocalStorage
    from docent.docent import Docent

    storage = LocalStorage(config.data_dir, vector_backend=cast(Any, config.vector_backend))

    if config.provider == "litellm":
        if not config.llm_model or not config.embedding_model:
            raise ValueError("LiteLLM provider requires llm_model and embedding_model")

        return Docent(
            provider=LiteLLMProvider(
                llm=config.llm_model,
                embedding=config.embedding_model,
                rewrite_llm=config.rewrite_model,
                summary_llm=config.summary_model,
                embedding_dimensions=config.embedding_dimensions,
                llm_api_key=config.llm_api_key,
                embedding_api_key=config.embedding_api_key,
            ),
            storage=storage,
            settings=config.settings,
        )

    elif config.provider == "custom":
        if not config.embedder_class or not config.llm_client_class:
            raise ValueError("Custom provider requires all class paths")

        embedder = import_class(config.embedder_class)(**(config.embedder_kwargs or {}))
        llm_client = import_class(config.llm_client_class)(**(config.llm_client_kwargs or {}))

        return Docent(
            provider=_CustomProvider(_embedder=embedder, _llm_client=llm_client),
            storage=storage,
            settings=config.settings,
        )

    else:
        raise ValueError(f"Unknown provider: {config.provider}")


def get_docent(
    data_dir: str | None = None,
    config_path: str | Path | None = None,
) -> Docent | ConfigError:
    """Create a Docent instance based on configuration.

    This is a convenience function that combines get_docent_config and
    create_docent. For more control, use those functions separately.

    Args:
        data_dir: Override data directory
        config_path: Override config file path

    Returns:
        Configured Docent instance, or ConfigError if configuration is invalid
    """
    config = get_docent_config(data_dir, config_path)
    if isinstance(config, ConfigError):
        return config
    return create_docent(config)

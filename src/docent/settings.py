# src/docent/settings.py
"""Configuration management for Docent.

This module contains behavioral settings that apply regardless of which
LLM provider or store is used. Settings are passed programmatically - the
library does not read from environment variables. The CLI layer (config.py)
reads DOCENT_* variables and YAML files and passes values in explicitly.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, model_validator

MIB = 1024 * 1024

# Timeout profile definitions (seconds)
TIMEOUT_PROFILES: dict[str, dict[str, float]] = {
    "interactive": {
        "embed_timeout": 5.0,
        "rewrite_timeout": 8.0,
        "summarize_timeout": 20.0,
        "generate_timeout": 30.0,
    },
    "patient": {
        "embed_timeout": 30.0,
        "rewrite_timeout": 60.0,
        "summarize_timeout": 120.0,
        "generate_timeout": 180.0,
    },
}


class Settings(BaseModel):
    """Behavioral settings for Docent.

    Example:
        settings = Settings(summary_trigger=20, default_k=8)

        # Or start from a timeout profile for slow local models
        settings = Settings.with_profile("patient")
    """

    # Conversation memory
    summary_trigger: int = Field(default=12, ge=1)
    summary_keep: int = Field(default=4, ge=0)
    summary_temperature: float | None = 0.0

    # Query rewriting
    rewrite_window: int = Field(default=3, ge=1)
    rewrite_temperature: float | None = 0.0

    # Retrieval
    default_k: int = Field(default=5, ge=0)

    # Generation
    temperature: float | None = 0.7

    # Per-call timeouts in seconds. generate_timeout bounds the wait for each
    # streamed fragment, including the first one.
    embed_timeout: float = Field(default=10.0, gt=0)
    rewrite_timeout: float = Field(default=15.0, gt=0)
    summarize_timeout: float = Field(default=30.0, gt=0)
    generate_timeout: float = Field(default=60.0, gt=0)

    # Thread retention
    max_threads: int = Field(default=1000, ge=1)
    thread_idle_ttl: float | None = 3600.0

    # Ingestion
    chunk_size: int = Field(default=1000, ge=1)
    chunk_overlap: int = Field(default=200, ge=0)
    max_file_bytes: int = Field(default=10 * MIB, ge=1)
    max_total_bytes: int = Field(default=200 * MIB, ge=1)

    # Retry configuration (LiteLLM handles exponential backoff for RateLimitError)
    num_retries: int = Field(default=3, ge=0)

    @model_validator(mode="after")
    def _check_ranges(self) -> Settings:
        if self.summary_keep >= self.summary_trigger:
            raise ValueError(
                f"summary_keep ({self.summary_keep}) must be less than "
                f"summary_trigger ({self.summary_trigger})"
            )
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError(
                f"chunk_overlap ({self.chunk_overlap}) must be less than "
                f"chunk_size ({self.chunk_size})"
            )
        return self

    @classmethod
    def with_profile(
        cls,
        profile: Literal["interactive", "patient"],
        **overrides: Any,
    ) -> Settings:
        """Create Settings with a timeout profile.

        Profiles bundle timeouts suited to different model deployments:
        - "interactive": hosted APIs where a slow call should degrade quickly
        - "patient": local models that take a while to produce first tokens

        Args:
            profile: The timeout profile to use.
            **overrides: Additional settings to override profile defaults.

        Returns:
            Settings instance with profile values applied.
        """
        if profile not in TIMEOUT_PROFILES:
            raise ValueError(
                f"Unknown profile '{profile}'. "
                f"Available profiles: {list(TIMEOUT_PROFILES.keys())}"
            )

        profile_settings: dict[str, Any] = dict(TIMEOUT_PROFILES[profile])
        profile_settings.update(overrides)
        return cls(**profile_settings)

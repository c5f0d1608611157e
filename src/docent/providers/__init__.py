"""Provider implementations for Docent.

This module contains LLM and embedding provider abstractions:
- LLMClient: Abstract base class for completion and streaming providers
- EmbeddingClient: Abstract base class for embedding providers
- LiteLLM implementations (requires: pip install docent-rag[litellm])

Usage:
    from docent.providers import LLMClient, EmbeddingClient
    from docent.providers.litellm import LiteLLMClient, ChatModels
"""

from docent.providers.base import EmbeddingClient, LLMClient

try:
    from docent.providers.litellm import (
        ChatModels,
        EmbeddingModels,
        LiteLLMClient,
        LiteLLMEmbeddingClient,
    )
except ImportError:
    from docent._optional import _create_missing_dependency_class

    class ChatModels:  # type: ignore[no-redef]
        """Placeholder - requires litellm package."""

        pass

    class EmbeddingModels:  # type: ignore[no-redef]
        """Placeholder - requires litellm package."""

        pass

    LiteLLMClient = _create_missing_dependency_class(  # type: ignore[misc,assignment]
        "LiteLLMClient", "litellm"
    )
    LiteLLMEmbeddingClient = _create_missing_dependency_class(  # type: ignore[misc,assignment]
        "LiteLLMEmbeddingClient", "litellm"
    )

__all__ = [
    # ABCs
    "LLMClient",
    "EmbeddingClient",
    # Model constants
    "ChatModels",
    "EmbeddingModels",
    # LiteLLM clients
    "LiteLLMClient",
    "LiteLLMEmbeddingClient",
]

"""LiteLLM provider clients for Docent.

This module contains LiteLLM-based client implementations:
- LiteLLMClient: completions and streamed completions using LiteLLM
- LiteLLMEmbeddingClient: embeddings using LiteLLM
- ChatModels / EmbeddingModels: curated model constants

Usage:
    from docent.providers.litellm import LiteLLMClient, ChatModels

    client = LiteLLMClient(model=ChatModels.GPT_5_MINI)
"""

from docent.providers.litellm.client import LiteLLMClient, LiteLLMEmbeddingClient
from docent.providers.litellm.models import ChatModels, EmbeddingModels

__all__ = [
    # Model constants
    "ChatModels",
    "EmbeddingModels",
    # Clients
    "LiteLLMClient",
    "LiteLLMEmbeddingClient",
]

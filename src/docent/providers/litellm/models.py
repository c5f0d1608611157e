# src/docent/providers/litellm/models.py
"""Curated model constants for the LiteLLM provider.

Convenience constants for IDE autocomplete. Any valid LiteLLM model string
can be passed directly instead.

Example:
    from docent.providers.litellm import ChatModels, LiteLLMClient

    llm_client = LiteLLMClient(model=ChatModels.GPT_5_MINI)
"""


class ChatModels:
    """Chat models for answer generation, query rewriting and summaries."""

    # OpenAI
    GPT_5 = "openai/gpt-5"
    GPT_5_MINI = "openai/gpt-5-mini"
    GPT_5_NANO = "openai/gpt-5-nano"

    # Anthropic
    CLAUDE_SONNET_45 = "anthropic/claude-sonnet-4-5-20250929"
    CLAUDE_HAIKU_45 = "anthropic/claude-haiku-4-5-20251001"

    # Google Gemini
    GEMINI_3_FLASH = "gemini/gemini-3-flash-preview"

    # Local
    OLLAMA_LLAMA_32 = "ollama/llama3.2"


class EmbeddingModels:
    """Embedding models for LiteLLMEmbeddingClient."""

    # OpenAI (supports the dimensions parameter)
    TEXT_3_SMALL = "openai/text-embedding-3-small"
    TEXT_3_LARGE = "openai/text-embedding-3-large"

    # Google Gemini
    GEMINI_EMBEDDING_001 = "gemini/gemini-embedding-001"

    # Local
    OLLAMA_NOMIC = "ollama/nomic-embed-text"

# src/docent/configuration/providers/litellm.py
"""LiteLLM provider configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from docent.embedder import Embedder
    from docent.providers import LLMClient
    from docent.settings import Settings


@dataclass(frozen=True)
class LiteLLMProvider:
    """Provider configuration using LiteLLM for LLM and embedding calls.

    LiteLLM provides a unified interface to 100+ LLM providers including
    OpenAI, Anthropic, Gemini, Bedrock, Ollama and more.

    Args:
        llm: LiteLLM model identifier for answers.
             Examples: "openai/gpt-5", "anthropic/claude-sonnet-4-5-20250929"
        embedding: LiteLLM model identifier for embeddings.
                   Examples: "openai/text-embedding-3-small", "gemini/gemini-embedding-001"
        rewrite_llm: Model for query rewriting. Defaults to llm.
        summary_llm: Model for conversation summaries. Defaults to llm.
        embedding_dimensions: Requested embedding size for models that support
                              shortening. Must stay the same for the lifetime
                              of a chunk store.
        llm_api_key: API key for the chat models. If None, LiteLLM reads the
                     provider's standard environment variable.
        embedding_api_key: API key for the embedding model.

    Example:
        provider = LiteLLMProvider(
            llm="openai/gpt-5",
            embedding="openai/text-embedding-3-small",
            rewrite_llm="openai/gpt-5-nano",
            embedding_dimensions=768,
        )
    """

    llm: str
    embedding: str
    rewrite_llm: str | None = None
    summary_llm: str | None = None
    embedding_dimensions: int | None = None
    llm_api_key: str | None = None
    embedding_api_key: str | None = None

    def build_embedder(self, settings: Settings) -> Embedder:
        """Build a ClientEmbedder using the LiteLLM embedding client.

        Args:
            settings: Settings containing num_retries for rate limit handling.
        """
        from docent.embedder import ClientEmbedder
        from docent.providers.litellm import LiteLLMEmbeddingClient

        embedding_client = LiteLLMEmbeddingClient(
            model=self.embedding,
            num_retries=settings.num_retries,
            dimensions=self.embedding_dimensions,
            api_key=self.embedding_api_key,
        )
        return ClientEmbedder(embedding_client=embedding_client)

    def _client(self, model: str, settings: Settings) -> LLMClient:
        from docent.providers.litellm import LiteLLMClient

        return LiteLLMClient(
            model=model, num_retries=settings.num_retries, api_key=self.llm_api_key
        )

    def build_llm_client(self, settings: Settings) -> LLMClient:
        """Build a LiteLLMClient for streamed answers."""
        return self._client(self.llm, settings)

    def build_rewrite_client(self, settings: Settings) -> LLMClient:
        """Build a LiteLLMClient for query rewriting."""
        return self._client(self.rewrite_llm or self.llm, settings)

    def build_summary_client(self, settings: Settings) -> LLMClient:
        """Build a LiteLLMClient for conversation summaries."""
        return self._client(self.summary_llm or self.llm, settings)

# src/docent/providers/base.py
"""Abstract base classes for LLM and embedding providers."""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator


class LLMClient(ABC):
    """Abstract base class for LLM completion providers.

    Implementations provide text generation. Only complete() is required;
    acomplete() and astream() fall back to it so that simple clients work
    everywhere, and real providers override them for true async behavior.

    Example:
        class MyLLMClient(LLMClient):
            def complete(self, messages, temperature=None):
                return my_api.chat(messages, temp=temperature)
    """

    @abstractmethod
    def complete(
        self,
        messages: list[dict],
        temperature: float | None = None,
    ) -> str:
        """Generate a completion for the given messages.

        Args:
            messages: List of message dicts with 'role' and 'content' keys.
                      Example: [{"role": "user", "content": "Hello"}]
            temperature: Optional temperature for generation (0.0-1.0).
                         If None, use provider default.

        Returns:
            The generated text response.
        """
        ...

    async def acomplete(
        self,
        messages: list[dict],
        temperature: float | None = None,
    ) -> str:
        """Generate a completion for the given messages (async).

        Default implementation calls sync complete().
        """
        return self.complete(messages, temperature)

    async def astream(
        self,
        messages: list[dict],
        temperature: float | None = None,
    ) -> AsyncIterator[str]:
        """Stream a completion as incremental text fragments.

        Default implementation yields the whole acomplete() result as a
        single fragment.
        """
        yield await self.acomplete(messages, temperature)


class EmbeddingClient(ABC):
    """Abstract base class for embedding providers.

    Implementations generate vector embeddings for text. Every vector a
    client returns must have the same dimension.

    Example:
        class MyEmbeddingClient(EmbeddingClient):
            def embed(self, texts):
                return my_api.embed_batch(texts)
    """

    @abstractmethod
    def embed(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors for multiple texts.

        Args:
            texts: List of texts to embed.

        Returns:
            List of embedding vectors, one per input text.
            Order is preserved (result[i] corresponds to texts[i]).
        """
        ...

    async def aembed(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors for multiple texts (async).

        Default implementation calls sync embed().
        """
        return self.embed(texts)

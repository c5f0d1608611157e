# src/docent/providers/litellm/client.py
"""LiteLLM client implementations for LLM and embedding APIs."""

import inspect
from collections.abc import AsyncIterator
from typing import Any

import litellm

from docent.providers.base import EmbeddingClient, LLMClient
from docent.providers.litellm.models import ChatModels, EmbeddingModels


class LiteLLMClient(LLMClient):
    """LiteLLM-based LLM client for text generation.

    Supports any model available through LiteLLM (OpenAI, Anthropic, Gemini,
    Bedrock, Ollama, etc.).

    Example:
        from docent.providers.litellm import LiteLLMClient, ChatModels

        client = LiteLLMClient(model=ChatModels.GPT_5_MINI)
        response = client.complete([{"role": "user", "content": "Hello"}])

        async for fragment in client.astream([{"role": "user", "content": "Hi"}]):
            print(fragment, end="")
    """

    def __init__(
        self,
        model: str = ChatModels.GPT_5,
        num_retries: int = 3,
        api_base: str | None = None,
        api_key: str | None = None,
    ) -> None:
        """Initialize the LiteLLM client.

        Args:
            model: LiteLLM model identifier.
                   Examples: "openai/gpt-5-mini", "anthropic/claude-sonnet-4-5-20250929"
            num_retries: Number of retries on rate limit errors. LiteLLM handles
                        exponential backoff automatically. Default: 3.
            api_base: Optional base URL (e.g. an AI gateway or local server).
            api_key: Optional API key. If None, LiteLLM reads the provider's
                     usual environment variable.
        """
        self.model = model
        self.num_retries = num_retries
        self.api_base = api_base
        self.api_key = api_key

    def _completion_kwargs(
        self,
        messages: list[dict],
        temperature: float | None,
    ) -> dict[str, Any]:
        completion_kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "drop_params": True,
            "num_retries": self.num_retries,
        }
        if temperature is not None:
            completion_kwargs["temperature"] = temperature
        if self.api_base is not None:
            completion_kwargs["api_base"] = self.api_base
        if self.api_key is not None:
            completion_kwargs["api_key"] = self.api_key
        return completion_kwargs

    def _extract_content(self, response: Any) -> str:
        if not response.choices:
            raise ValueError(f"LLM returned no choices for model {self.model}")
        content = response.choices[0].message.content
        if content is None:
            raise ValueError(f"LLM returned None content for model {self.model}")
        return str(content)

    def complete(
        self,
        messages: list[dict],
        temperature: float | None = None,
    ) -> str:
        """Generate a completion using LiteLLM."""
        response = litellm.completion(**self._completion_kwargs(messages, temperature))
        return self._extract_content(response)

    async def acomplete(
        self,
        messages: list[dict],
        temperature: float | None = None,
    ) -> str:
        """Generate a completion using LiteLLM (async)."""
        response = await litellm.acompletion(**self._completion_kwargs(messages, temperature))
        return self._extract_content(response)

    async def astream(
        self,
        messages: list[dict],
        temperature: float | None = None,
    ) -> AsyncIterator[str]:
        """Stream a completion using LiteLLM.

        The underlying HTTP stream is closed when the consumer stops
        iterating early, so cancelling a turn releases the connection.
        """
        response = await litellm.acompletion(
            **self._completion_kwargs(messages, temperature),
            stream=True,
        )
        try:
            async for chunk in response:
                if not chunk.choices:
                    continue
                delta = chunk.choices[0].delta.content
                if delta:
                    yield str(delta)
        finally:
            close = getattr(response, "aclose", None)
            if callable(close):
                result = close()
                if inspect.isawaitable(result):
                    await result


class LiteLLMEmbeddingClient(EmbeddingClient):
    """LiteLLM-based embedding client.

    Supports any embedding model available through LiteLLM.

    Example:
        from docent.providers.litellm import LiteLLMEmbeddingClient, EmbeddingModels

        client = LiteLLMEmbeddingClient(model=EmbeddingModels.TEXT_3_SMALL, dimensions=768)
        embeddings = client.embed(["Hello world", "How are you?"])
    """

    def __init__(
        self,
        model: str = EmbeddingModels.TEXT_3_SMALL,
        num_retries: int = 3,
        dimensions: int | None = None,
        api_base: str | None = None,
        api_key: str | None = None,
    ) -> None:
        """Initialize the LiteLLM embedding client.

        Args:
            model: LiteLLM embedding model identifier.
                   Examples: "openai/text-embedding-3-small", "gemini/gemini-embedding-001"
            num_retries: Number of retries on rate limit errors. Default: 3.
            dimensions: Requested vector size for models that support
                        shortening (OpenAI text-embedding-3-*). None keeps the
                        model's native size.
            api_base: Optional base URL.
            api_key: Optional API key.
        """
        self.model = model
        self.num_retries = num_retries
        self.dimensions = dimensions
        self.api_base = api_base
        self.api_key = api_key

    def _embedding_kwargs(self, texts: list[str]) -> dict[str, Any]:
        embedding_kwargs: dict[str, Any] = {
            "model": self.model,
            "input": texts,
            "num_retries": self.num_retries,
        }
        if self.dimensions is not None:
            embedding_kwargs["dimensions"] = self.dimensions
        if self.api_base is not None:
            embedding_kwargs["api_base"] = self.api_base
        if self.api_key is not None:
            embedding_kwargs["api_key"] = self.api_key
        return embedding_kwargs

    @staticmethod
    def _ordered(response: Any) -> list[list[float]]:
        # Sort by index to maintain order
        sorted_data = sorted(response.data, key=lambda x: x["index"])
        return [item["embedding"] for item in sorted_data]

    def embed(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings using LiteLLM."""
        if not texts:
            return []
        response = litellm.embedding(**self._embedding_kwargs(texts))
        return self._ordered(response)

    async def aembed(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings using LiteLLM (async)."""
        if not texts:
            return []
        response = await litellm.aembedding(**self._embedding_kwargs(texts))
        return self._ordered(response)

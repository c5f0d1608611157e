# tests/providers/test_litellm_client.py
"""Tests for the LiteLLM clients."""

from unittest.mock import MagicMock, patch

import pytest

pytest.importorskip("litellm", reason="Tests require litellm package")

from docent.providers.base import EmbeddingClient, LLMClient
from docent.providers.litellm import ChatModels, LiteLLMClient, LiteLLMEmbeddingClient


def mock_completion_response(content: str | None):
    """Create a mock LiteLLM completion response."""
    mock_response = MagicMock()
    mock_response.choices = [MagicMock()]
    mock_response.choices[0].message.content = content
    return mock_response


def mock_stream_chunk(content: str | None):
    chunk = MagicMock()
    chunk.choices = [MagicMock()]
    chunk.choices[0].delta.content = content
    return chunk


class FakeStream:
    """Async iterator standing in for a LiteLLM streaming response."""

    def __init__(self, chunks):
        self._chunks = list(chunks)
        self.closed = False

    def __aiter__(self):
        return self

    async def __anext__(self):
        if not self._chunks:
            raise StopAsyncIteration
        return self._chunks.pop(0)

    async def aclose(self):
        self.closed = True


@pytest.fixture
def llm_client():
    """Create a LiteLLMClient instance."""
    return LiteLLMClient()


class TestLiteLLMClient:
    def test_is_llm_client(self, llm_client):
        assert isinstance(llm_client, LLMClient)

    def test_default_model(self, llm_client):
        assert llm_client.model == ChatModels.GPT_5

    @patch("docent.providers.litellm.client.litellm.completion")
    def test_complete(self, mock_completion, llm_client):
        """Test sync completion returns the message content."""
        mock_completion.return_value = mock_completion_response("Hello!")

        result = llm_client.complete([{"role": "user", "content": "Hi"}])

        assert result == "Hello!"
        call_kwargs = mock_completion.call_args.kwargs
        assert call_kwargs["model"] == ChatModels.GPT_5
        assert call_kwargs["num_retries"] == 3
        assert "temperature" not in call_kwargs
        assert "api_key" not in call_kwargs

    @patch("docent.providers.litellm.client.litellm.completion")
    def test_complete_passes_options(self, mock_completion):
        """Test that temperature, api_base and api_key are forwarded."""
        mock_completion.return_value = mock_completion_response("ok")
        client = LiteLLMClient(
            model="ollama/llama3.2", api_base="http://localhost:11434", api_key="secret"
        )

        client.complete([{"role": "user", "content": "Hi"}], temperature=0.2)

        call_kwargs = mock_completion.call_args.kwargs
        assert call_kwargs["temperature"] == 0.2
        assert call_kwargs["api_base"] == "http://localhost:11434"
        assert call_kwargs["api_key"] == "secret"

    @patch("docent.providers.litellm.client.litellm.completion")
    def test_none_content_raises(self, mock_completion, llm_client):
        mock_completion.return_value = mock_completion_response(None)

        with pytest.raises(ValueError, match="None content"):
            llm_client.complete([{"role": "user", "content": "Hi"}])

    @pytest.mark.asyncio
    @patch("docent.providers.litellm.client.litellm.acompletion")
    async def test_acomplete(self, mock_acompletion, llm_client):
        """Test async completion using litellm.acompletion."""
        mock_acompletion.return_value = mock_completion_response("Async hello")

        result = await llm_client.acomplete([{"role": "user", "content": "Hi"}])

        assert result == "Async hello"
        mock_acompletion.assert_called_once()

    @pytest.mark.asyncio
    @patch("docent.providers.litellm.client.litellm.acompletion")
    async def test_astream_yields_fragments(self, mock_acompletion, llm_client):
        """Test that streamed deltas are yielded and empty ones skipped."""
        stream = FakeStream(
            [mock_stream_chunk("Hel"), mock_stream_chunk(None), mock_stream_chunk("lo")]
        )
        mock_acompletion.return_value = stream

        fragments = [f async for f in llm_client.astream([{"role": "user", "content": "Hi"}])]

        assert fragments == ["Hel", "lo"]
        assert mock_acompletion.call_args.kwargs["stream"] is True
        assert stream.closed

    @pytest.mark.asyncio
    @patch("docent.providers.litellm.client.litellm.acompletion")
    async def test_astream_closes_on_early_exit(self, mock_acompletion, llm_client):
        """Test that abandoning the stream closes the response."""
        stream = FakeStream([mock_stream_chunk("a"), mock_stream_chunk("b")])
        mock_acompletion.return_value = stream

        fragments = llm_client.astream([{"role": "user", "content": "Hi"}])
        assert await fragments.__anext__() == "a"
        await fragments.aclose()

        assert stream.closed


class TestLiteLLMEmbeddingClient:
    def test_is_embedding_client(self):
        assert isinstance(LiteLLMEmbeddingClient(), EmbeddingClient)

    @patch("docent.providers.litellm.client.litellm.embedding")
    def test_embed_preserves_order(self, mock_embedding):
        """Test that out-of-order response data is sorted by index."""
        mock_response = MagicMock()
        mock_response.data = [
            {"index": 1, "embedding": [0.0, 1.0]},
            {"index": 0, "embedding": [1.0, 0.0]},
        ]
        mock_embedding.return_value = mock_response

        result = LiteLLMEmbeddingClient().embed(["first", "second"])

        assert result == [[1.0, 0.0], [0.0, 1.0]]

    @patch("docent.providers.litellm.client.litellm.embedding")
    def test_embed_empty(self, mock_embedding):
        assert LiteLLMEmbeddingClient().embed([]) == []
        mock_embedding.assert_not_called()

    @patch("docent.providers.litellm.client.litellm.embedding")
    def test_dimensions_forwarded(self, mock_embedding):
        mock_response = MagicMock()
        mock_response.data = [{"index": 0, "embedding": [0.5] * 4}]
        mock_embedding.return_value = mock_response

        LiteLLMEmbeddingClient(dimensions=4).embed(["x"])

        assert mock_embedding.call_args.kwargs["dimensions"] == 4

    @pytest.mark.asyncio
    @patch("docent.providers.litellm.client.litellm.aembedding")
    async def test_aembed(self, mock_aembedding):
        mock_response = MagicMock()
        mock_response.data = [{"index": 0, "embedding": [0.1, 0.2]}]
        mock_aembedding.return_value = mock_response

        assert await LiteLLMEmbeddingClient().aembed(["x"]) == [[0.1, 0.2]]

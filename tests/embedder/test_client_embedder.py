# tests/embedder/test_client_embedder.py
"""Tests for the ClientEmbedder wrapper."""

import pytest

from docent.embedder import ClientEmbedder, Embedder
from docent.providers.base import EmbeddingClient


class RecordingClient(EmbeddingClient):
    def __init__(self) -> None:
        self.batches: list[list[str]] = []

    def embed(self, texts: list[str]) -> list[list[float]]:
        self.batches.append(texts)
        return [[float(len(text)), 1.0] for text in texts]


@pytest.fixture
def client():
    return RecordingClient()


@pytest.fixture
def client_embedder(client):
    return ClientEmbedder(embedding_client=client)


class TestClientEmbedder:
    def test_is_embedder(self, client_embedder):
        assert isinstance(client_embedder, Embedder)

    def test_embed_text(self, client_embedder, client):
        assert client_embedder.embed_text("abc") == [3.0, 1.0]
        assert client.batches == [["abc"]]

    def test_embed_texts_is_one_batch(self, client_embedder, client):
        """Test that multiple texts are embedded in a single call."""
        result = client_embedder.embed_texts(["a", "bb"])

        assert result == [[1.0, 1.0], [2.0, 1.0]]
        assert client.batches == [["a", "bb"]]

    def test_embed_texts_empty(self, client_embedder, client):
        assert client_embedder.embed_texts([]) == []
        assert client.batches == []

    @pytest.mark.asyncio
    async def test_async_defaults_to_sync_client(self, client_embedder, client):
        """Test the async path through the client's default aembed."""
        assert await client_embedder.aembed_text("abcd") == [4.0, 1.0]
        assert await client_embedder.aembed_texts(["a"]) == [[1.0, 1.0]]
        assert await client_embedder.aembed_texts([]) == []
        assert client.batches == [["abcd"], ["a"]]

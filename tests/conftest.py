"""Shared pytest fixtures."""

import asyncio
import contextlib
import tempfile
from collections.abc import AsyncIterator

import pytest

from docent.embedder import Embedder
from docent.providers.base import LLMClient

KEYWORDS = ["cat", "dog", "tax", "leave", "salary", "holiday"]


class ScriptedLLM(LLMClient):
    """LLM client with scripted completions and streams.

    completions: returned in order by complete()/acomplete(). An Exception
        instance in the list is raised instead of returned.
    stream: fragments yielded by astream().
    stream_error: raised by astream() after the fragments.
    fragment_delay: seconds to sleep before each fragment.
    hang_after: stop producing fragments (sleep forever) after this many.
    """

    def __init__(
        self,
        completions: list | None = None,
        stream: list[str] | None = None,
        stream_error: Exception | None = None,
        fragment_delay: float = 0.0,
        hang_after: int | None = None,
    ) -> None:
        self.completions = list(completions or [])
        self.stream = list(stream if stream is not None else ["Hello", " there"])
        self.stream_error = stream_error
        self.fragment_delay = fragment_delay
        self.hang_after = hang_after
        self.calls: list[list[dict]] = []
        self.stream_calls: list[list[dict]] = []
        self.stream_closed = False

    def complete(self, messages: list[dict], temperature: float | None = None) -> str:
        self.calls.append(messages)
        if not self.completions:
            return "completion"
        result = self.completions.pop(0)
        if isinstance(result, Exception):
            raise result
        return str(result)

    async def astream(
        self, messages: list[dict], temperature: float | None = None
    ) -> AsyncIterator[str]:
        self.stream_calls.append(messages)
        try:
            for i, fragment in enumerate(self.stream):
                if self.hang_after is not None and i >= self.hang_after:
                    await asyncio.sleep(3600)
                if self.fragment_delay:
                    await asyncio.sleep(self.fragment_delay)
                yield fragment
            if self.hang_after is not None and self.hang_after >= len(self.stream):
                await asyncio.sleep(3600)
            if self.stream_error is not None:
                raise self.stream_error
        finally:
            self.stream_closed = True


class KeywordEmbedder(Embedder):
    """Embeds text as keyword counts plus a small constant component."""

    def __init__(self, keywords: list[str] | None = None) -> None:
        self.keywords = keywords or KEYWORDS
        self.calls = 0

    def embed_text(self, text: str) -> list[float]:
        self.calls += 1
        lowered = text.lower()
        return [float(lowered.count(word)) for word in self.keywords] + [0.01]

    def embed_texts(self, texts: list[str]) -> list[list[float]]:
        return [self.embed_text(text) for text in texts]


@pytest.fixture
def temp_dir():
    """Create a temporary directory for stores."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir

        # Cleanup ChromaDB's shared system cache to release file handles
        # See: https://github.com/chroma-core/chroma/issues/5868
        try:
            from chromadb.api.shared_system_client import SharedSystemClient

            if hasattr(SharedSystemClient, "_identifier_to_system"):
                identifiers_to_remove = [
                    identifier
                    for identifier in list(SharedSystemClient._identifier_to_system.keys())
                    if tmpdir in str(identifier)
                ]
                for identifier in identifiers_to_remove:
                    if identifier in SharedSystemClient._identifier_to_system:
                        system = SharedSystemClient._identifier_to_system.pop(identifier)
                        with contextlib.suppress(Exception):
                            system.stop()
        except Exception:
            pass  # Best effort cleanup - ChromaDB internals may change


@pytest.fixture
def llm():
    """Scripted LLM client with default completions and stream."""
    return ScriptedLLM()


@pytest.fixture
def embedder():
    """Deterministic keyword embedder."""
    return KeywordEmbedder()


@pytest.fixture
def chunk_store():
    from docent.stores import InMemoryChunkStore

    return InMemoryChunkStore()


@pytest.fixture
def log_store():
    from docent.stores import InMemoryConversationLogStore

    return InMemoryConversationLogStore()


@pytest.fixture
def mock_provider(embedder, llm):
    """Create a mock provider for testing.

    This provider wraps the test components and satisfies the ProviderConfig protocol.
    """
    from dataclasses import dataclass
    from typing import Any

    @dataclass(frozen=True)
    class MockProvider:
        """Mock provider that wraps test components."""

        _embedder: Any
        _llm_client: Any

        def build_embedder(self, settings: Any) -> Any:
            return self._embedder

        def build_llm_client(self, settings: Any) -> Any:
            return self._llm_client

        def build_rewrite_client(self, settings: Any) -> Any:
            return self._llm_client

        def build_summary_client(self, settings: Any) -> Any:
            return self._llm_client

    return MockProvider(_embedder=embedder, _llm_client=llm)


def make_document(
    filename: str = "doc.txt",
    texts: list[str] | None = None,
    thread_id: str | None = None,
    embedder: Embedder | None = None,
    size: int | None = None,
):
    """Build a document with embedded chunks (ordinals 0..n-1)."""
    from docent.models import Chunk, Document, DocumentMetadata, visibility_for

    texts = texts or ["some text"]
    embedder = embedder or KeywordEmbedder()
    content = "\n\n".join(texts)
    document = Document(
        filename=filename,
        content=content,
        metadata=DocumentMetadata(size=size if size is not None else len(content.encode())),
        visibility=visibility_for(thread_id),
    )
    chunks = [
        Chunk(document_id=document.id, content=text, ordinal=i, embedding=embedder.embed_text(text))
        for i, text in enumerate(texts)
    ]
    return document, chunks


@pytest.fixture
def make_llm():
    """Factory for scripted LLM clients."""
    return ScriptedLLM


@pytest.fixture
def make_doc():
    """Factory for documents with embedded chunks."""
    return make_document


@pytest.fixture
def isolated_env(temp_dir, monkeypatch):
    """Run in an empty directory with no DOCENT_* variables set."""
    import os

    for key in list(os.environ):
        if key.startswith("DOCENT_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(temp_dir)
    return temp_dir


@pytest.fixture
def docent(mock_provider):
    """Docent over in-memory stores with scripted components."""
    from docent import Docent, MemoryStorage

    instance = Docent(provider=mock_provider, storage=MemoryStorage())
    yield instance
    instance.close()


@pytest.fixture
def configured_env(isolated_env, monkeypatch, mock_provider):
    """A configured environment whose Docent instances use the scripted provider.

    Commands resolve configuration normally (data dir under the temp dir);
    only the provider is swapped for the scripted one.
    """
    import importlib.util
    import os

    from docent import Docent, LocalStorage

    data_dir = os.path.join(isolated_env, "data")
    monkeypatch.setenv("DOCENT_LITELLM_LLM_MODEL", "openai/gpt-5")
    monkeypatch.setenv("DOCENT_LITELLM_EMBEDDING_MODEL", "openai/text-embedding-3-small")
    monkeypatch.setenv("DOCENT_DATA_DIR", data_dir)

    def create(config):
        return Docent(
            provider=mock_provider,
            storage=LocalStorage(config.data_dir, vector_backend=config.vector_backend),
            settings=config.settings,
        )

    monkeypatch.setattr("docent.commands.ingest.create_docent", create)
    monkeypatch.setattr("docent.commands.ask.create_docent", create)
    if importlib.util.find_spec("typer") is not None:
        # docent.cli re-exports the Typer app under the module's name
        cli_module = importlib.import_module("docent.cli.app")
        monkeypatch.setattr(cli_module, "create_docent", create)
    return data_dir

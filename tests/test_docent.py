# tests/test_docent.py
"""Tests for the central Docent class."""

from pathlib import Path

import pytest

from docent import Docent, MemoryStorage, Settings
from docent.exceptions import DocumentNotFoundError, FileTooLargeError, InputValidationError
from docent.models import Completed, Global, Role, ScopedTo, TokenDelta
from docent.stores import InMemoryChunkStore, InMemoryConversationLogStore


def write_file(directory: str, name: str, text: str) -> str:
    path = Path(directory) / name
    path.write_text(text, encoding="utf-8")
    return str(path)


class TestConstruction:
    def test_requires_stores(self, mock_provider):
        with pytest.raises(ValueError, match="Must provide"):
            Docent(provider=mock_provider)

    def test_rejects_partial_explicit_stores(self, mock_provider):
        with pytest.raises(ValueError, match="Must provide"):
            Docent(provider=mock_provider, chunk_store=InMemoryChunkStore())

    def test_rejects_mixed_configuration(self, mock_provider):
        with pytest.raises(ValueError, match="Cannot mix"):
            Docent(
                provider=mock_provider,
                storage=MemoryStorage(),
                chunk_store=InMemoryChunkStore(),
            )

    def test_from_stores(self, mock_provider):
        chunk_store = InMemoryChunkStore()
        log_store = InMemoryConversationLogStore()

        docent = Docent.from_stores(
            provider=mock_provider, chunk_store=chunk_store, log_store=log_store
        )

        assert docent.chunk_store is chunk_store
        assert docent.log_store is log_store
        assert docent.settings == Settings()

    def test_components_come_from_provider(self, docent, embedder):
        assert docent.embedder is embedder


class TestPipeline:
    def test_default_pipeline_is_reused(self, docent):
        assert docent.pipeline() is docent.pipeline()

    def test_observed_pipeline_shares_memory(self, docent):
        default = docent.pipeline()
        observed = docent.pipeline(on_transition=lambda state: None)

        assert observed is not default
        assert observed.memory is default.memory

    def test_settings_flow_into_components(self, mock_provider):
        settings = Settings(summary_trigger=6, summary_keep=2, rewrite_window=5, default_k=2)
        docent = Docent(provider=mock_provider, storage=MemoryStorage(), settings=settings)

        pipeline = docent.pipeline()

        assert pipeline.summary_trigger == 6
        assert pipeline.summary_keep == 2
        assert pipeline.rewriter.window == 5
        assert pipeline.retriever.default_k == 2


class TestTurns:
    @pytest.mark.asyncio
    async def test_run_turn(self, docent):
        terminal = await docent.run_turn("thread-1", "Hello?")

        assert isinstance(terminal, Completed)
        assert terminal.text == "Hello there"

        history = docent.history("thread-1")
        assert [m.role for m in history] == [Role.USER, Role.ASSISTANT]
        assert history[1].content == "Hello there"

    @pytest.mark.asyncio
    async def test_submit_turn_streams(self, docent):
        events = [event async for event in docent.submit_turn("thread-1", "Hi", "thread-1")]

        assert [e.token_delta for e in events if isinstance(e, TokenDelta)] == ["Hello", " there"]
        assert isinstance(events[-1], Completed)

    def test_submit_turn_validates(self, docent):
        with pytest.raises(InputValidationError):
            docent.submit_turn("thread-1", "   ")

    @pytest.mark.asyncio
    async def test_turns_are_logged(self, docent):
        await docent.run_turn("thread-1", "First")

        logged = docent.log_store.read("thread-1")
        assert [m.content for m in logged] == ["First", "Hello there"]

    def test_history_of_unknown_thread(self, docent):
        assert docent.history("never-seen") == []


class TestIngestion:
    def test_ingest_text_file(self, docent, temp_dir):
        path = write_file(temp_dir, "notes.txt", "The cat sat on the mat.")

        result = docent.ingest_file(path, thread_id="thread-1")

        assert result["filename"] == "notes.txt"
        assert result["chunks"] == 1
        document = docent.get_document(result["document_id"])
        assert document.visibility == ScopedTo.of("thread-1")
        assert document.metadata.mime_type == "text/plain"

    def test_ingest_global(self, docent, temp_dir):
        path = write_file(temp_dir, "policy.txt", "Holiday policy.")

        result = docent.ingest_file(path)

        assert isinstance(docent.get_document(result["document_id"]).visibility, Global)

    def test_url_recorded(self, docent, temp_dir):
        path = write_file(temp_dir, "policy.txt", "Holiday policy.")

        result = docent.ingest_file(path, url="https://files.example.com/policy.txt")

        document = docent.get_document(result["document_id"])
        assert document.metadata.url == "https://files.example.com/policy.txt"

    def test_missing_file(self, docent):
        with pytest.raises(FileNotFoundError):
            docent.ingest_file("/nonexistent/notes.txt")

    def test_file_too_large(self, mock_provider, temp_dir):
        docent = Docent(
            provider=mock_provider,
            storage=MemoryStorage(),
            settings=Settings(max_file_bytes=10),
        )
        path = write_file(temp_dir, "big.txt", "x" * 11)

        with pytest.raises(FileTooLargeError):
            docent.ingest_file(path)
        assert docent.list_documents() == []

    def test_progress_reported(self, docent, temp_dir):
        path = write_file(temp_dir, "notes.txt", "Some text.")
        events: list[str] = []

        docent.ingest_file(path, on_progress=lambda event, *_: events.append(event))

        assert events[0] == "splitting"
        assert "embedding" in events
        assert events[-1] == "storing"

    @pytest.mark.asyncio
    async def test_aingest_file(self, docent, temp_dir):
        path = write_file(temp_dir, "notes.txt", "Dogs and cats.")

        result = await docent.aingest_file(path, "thread-2")

        assert docent.list_documents("thread-2")[0].id == result["document_id"]

    @pytest.mark.asyncio
    async def test_ingested_document_grounds_turn(self, docent, temp_dir, llm):
        path = write_file(temp_dir, "pets.txt", "The cat is called Miso.")
        docent.ingest_file(path, thread_id="thread-1")

        await docent.run_turn("thread-1", "What is the cat called?", "thread-1")

        system_prompt = llm.stream_calls[-1][0]["content"]
        assert "The cat is called Miso." in system_prompt
        assert "pets.txt" in system_prompt


class TestDocumentManagement:
    def test_list_documents_by_thread(self, docent, temp_dir):
        a = docent.ingest_file(write_file(temp_dir, "a.txt", "alpha"), thread_id="A")
        b = docent.ingest_file(write_file(temp_dir, "b.txt", "beta"), thread_id="B")
        g = docent.ingest_file(write_file(temp_dir, "g.txt", "gamma"))

        visible_to_a = {d.id for d in docent.list_documents("A")}

        assert visible_to_a == {a["document_id"], g["document_id"]}
        assert len(docent.list_documents()) == 3
        assert b["document_id"] not in visible_to_a

    def test_get_missing_document(self, docent):
        with pytest.raises(DocumentNotFoundError):
            docent.get_document("missing")

    def test_delete_document(self, docent, temp_dir):
        result = docent.ingest_file(write_file(temp_dir, "a.txt", "alpha"), thread_id="A")

        stats = docent.delete_document(result["document_id"])

        assert stats == {"deleted": True, "filename": "a.txt", "chunks_removed": 1}
        assert docent.list_documents() == []
        assert docent.chunk_store.get_chunks(result["document_id"]) == []

    def test_delete_missing_document(self, docent):
        with pytest.raises(DocumentNotFoundError):
            docent.delete_document("missing")

    def test_bind_and_unbind(self, docent, temp_dir):
        result = docent.ingest_file(write_file(temp_dir, "a.txt", "alpha"), thread_id="A")
        document_id = result["document_id"]

        bound = docent.bind_document(document_id, "B")
        assert bound.visibility == ScopedTo.of("A", "B")
        assert {d.id for d in docent.list_documents("B")} == {document_id}

        unbound = docent.unbind_document(document_id, "A")
        assert unbound.visibility == ScopedTo.of("B")
        assert docent.list_documents("A") == []

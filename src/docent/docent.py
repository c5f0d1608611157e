# src/docent/docent.py
"""Central configuration class for Docent."""

from __future__ import annotations

import asyncio
import logging
import mimetypes
from collections.abc import AsyncIterator, Callable
from pathlib import Path
from typing import TYPE_CHECKING, cast

if TYPE_CHECKING:
    from docent.configuration import ProviderConfig, StorageConfig
    from docent.ingestor import Ingestor, ProgressCallback
    from docent.loaders import LoaderRegistry
    from docent.models import Cancelled, Completed, Document, Failed, Message, TokenDelta
    from docent.pipeline import Pipeline, TurnState
    from docent.retriever import Retriever
    from docent.stores import ChunkStore, ConversationLogStore

from docent.exceptions import DocumentNotFoundError
from docent.settings import Settings

logger = logging.getLogger(__name__)


class Docent:
    """Central configuration for Docent stores and components.

    Docent bundles the stores, the AI components and the settings so you can
    configure once and then ingest documents and run turns.

    There are two ways to create a Docent instance:

    1. With a storage bundle (developer-friendly):

        from docent import Docent, LiteLLMProvider, LocalStorage

        docent = Docent(
            provider=LiteLLMProvider(
                llm="openai/gpt-5",
                embedding="openai/text-embedding-3-small",
            ),
            storage=LocalStorage("./data"),
        )
        docent.ingest_file("handbook.pdf", thread_id="thread-1")

        async for event in docent.submit_turn("thread-1", "What is the leave policy?", "thread-1"):
            print(event.to_dict())

    2. With explicit stores:

        from docent.stores import SQLiteChunkStore, SQLiteConversationLogStore

        docent = Docent.from_stores(
            provider=LiteLLMProvider(...),
            chunk_store=SQLiteChunkStore("./data/chunks.db"),
            log_store=SQLiteConversationLogStore("./data/threads.db"),
        )
    """

    def __init__(
        self,
        *,
        provider: ProviderConfig,
        # EITHER storage bundle...
        storage: StorageConfig | None = None,
        # ...OR explicit stores
        chunk_store: ChunkStore | None = None,
        log_store: ConversationLogStore | None = None,
        # Common
        settings: Settings | None = None,
        loader_registry: LoaderRegistry | None = None,
    ) -> None:
        """Create a Docent instance.

        Args:
            provider: Provider configuration (builds embedder and LLM clients).
            storage: Storage bundle (convenience). Mutually exclusive with explicit stores.
                     Example: LocalStorage("./data")
            chunk_store: Explicit chunk store.
            log_store: Explicit conversation log store.
            settings: Behavioral settings (summary policy, timeouts, limits, etc.)
            loader_registry: Optional loader registry for file loading. If None, uses default.

        Raises:
            ValueError: If neither storage bundle nor both explicit stores are provided,
                       or if both are provided.
        """
        self._settings = settings if settings is not None else Settings()

        # Path 1: Storage bundle (convenience)
        if storage is not None:
            if any([chunk_store, log_store]):
                raise ValueError("Cannot mix 'storage' bundle with explicit stores")
            self.chunk_store, self.log_store = storage.build_stores()

        # Path 2: Explicit stores
        elif chunk_store is not None and log_store is not None:
            self.chunk_store = cast("ChunkStore", chunk_store)
            self.log_store = cast("ConversationLogStore", log_store)

        else:
            raise ValueError(
                "Must provide either 'storage' bundle or both explicit stores "
                "(chunk_store, log_store)"
            )

        # Build provider components
        self.embedder = provider.build_embedder(self._settings)
        self._llm_client = provider.build_llm_client(self._settings)
        self._rewrite_client = provider.build_rewrite_client(self._settings)
        self._summary_client = provider.build_summary_client(self._settings)

        self._loader_registry = loader_registry
        self._pipeline: Pipeline | None = None

    @classmethod
    def from_stores(
        cls,
        *,
        provider: ProviderConfig,
        chunk_store: ChunkStore,
        log_store: ConversationLogStore,
        settings: Settings | None = None,
        loader_registry: LoaderRegistry | None = None,
    ) -> Docent:
        """Create Docent with explicit stores.

        Args:
            provider: Provider configuration for AI components.
            chunk_store: Store for documents and chunks.
            log_store: Store for conversation logs.
            settings: Optional behavioral settings.
            loader_registry: Optional custom loader registry.
        """
        return cls(
            provider=provider,
            chunk_store=chunk_store,
            log_store=log_store,
            settings=settings,
            loader_registry=loader_registry,
        )

    @property
    def settings(self) -> Settings:
        return self._settings

    def _get_loader_registry(self) -> LoaderRegistry:
        """Get or create the loader registry."""
        if self._loader_registry is None:
            from docent.loaders import LoaderRegistry

            self._loader_registry = LoaderRegistry.default()
        return self._loader_registry

    # Turns

    def pipeline(self, *, on_transition: Callable[[TurnState], None] | None = None) -> Pipeline:
        """Get the turn pipeline.

        The default pipeline is built once and reused so that conversation
        memory persists across turns. Passing on_transition builds a new
        pipeline sharing that memory.
        """
        if self._pipeline is not None and on_transition is None:
            return self._pipeline

        from docent.context import ContextAssembler
        from docent.generator import StreamingGenerator
        from docent.memory import ConversationMemory
        from docent.pipeline import Pipeline
        from docent.prompts import PromptComposer
        from docent.rewriter import QueryRewriter

        s = self._settings
        memory = (
            self._pipeline.memory
            if self._pipeline is not None
            else ConversationMemory(
                self._summary_client,
                self.log_store,
                max_threads=s.max_threads,
                idle_ttl=s.thread_idle_ttl,
                summary_timeout=s.summarize_timeout,
                summary_temperature=s.summary_temperature,
            )
        )
        pipeline = Pipeline(
            memory=memory,
            rewriter=QueryRewriter(
                self._rewrite_client,
                window=s.rewrite_window,
                timeout=s.rewrite_timeout,
                temperature=s.rewrite_temperature,
            ),
            retriever=self.retriever(),
            assembler=ContextAssembler(),
            composer=PromptComposer(),
            generator=StreamingGenerator(
                self._llm_client,
                temperature=s.temperature,
                timeout=s.generate_timeout,
            ),
            log_store=self.log_store,
            summary_trigger=s.summary_trigger,
            summary_keep=s.summary_keep,
            on_transition=on_transition,
        )
        if self._pipeline is None:
            self._pipeline = pipeline
        return pipeline

    def submit_turn(
        self,
        thread_id: str,
        user_text: str,
        scope: str | None = None,
        *,
        disconnect: asyncio.Event | None = None,
    ) -> AsyncIterator[TokenDelta | Completed | Failed | Cancelled]:
        """Submit a turn and get its event stream. See Pipeline.submit_turn."""
        return self.pipeline().submit_turn(thread_id, user_text, scope, disconnect=disconnect)

    async def run_turn(
        self, thread_id: str, user_text: str, scope: str | None = None
    ) -> Completed | Failed | Cancelled:
        """Run a turn to its end and return only the terminal event."""
        return await self.pipeline().run_turn(thread_id, user_text, scope)

    def history(self, thread_id: str) -> list[Message]:
        """The thread's current log, including any summary message."""
        return self.pipeline().memory.history(thread_id)

    def retriever(self, *, default_k: int | None = None) -> Retriever:
        """Create a Retriever over this instance's chunk store."""
        from docent.retriever import Retriever

        return Retriever(
            chunk_store=self.chunk_store,
            embedder=self.embedder,
            default_k=default_k if default_k is not None else self._settings.default_k,
            embed_timeout=self._settings.embed_timeout,
        )

    # Ingestion

    def ingestor(self) -> Ingestor:
        """Create an Ingestor using this instance's chunk store and settings."""
        from docent.ingestor import Ingestor
        from docent.splitter import TextSplitter

        return Ingestor(
            chunk_store=self.chunk_store,
            embedder=self.embedder,
            splitter=TextSplitter(
                chunk_size=self._settings.chunk_size,
                chunk_overlap=self._settings.chunk_overlap,
            ),
            max_file_bytes=self._settings.max_file_bytes,
            max_total_bytes=self._settings.max_total_bytes,
        )

    def _load(self, filepath: str) -> tuple[str, str, int, str | None]:
        file_path = Path(filepath)
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {filepath}")

        # Size limits are checked before the file is parsed
        ingestor = self.ingestor()
        ingestor.check_limits(file_path.stat().st_size)

        loaded = self._get_loader_registry().load(filepath)
        mime_type = loaded.mime_type or mimetypes.guess_type(file_path.name)[0]
        return loaded.text, loaded.filename, loaded.size, mime_type

    def ingest_file(
        self,
        filepath: str,
        thread_id: str | None = None,
        *,
        url: str | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> dict:
        """Load, split, embed and store a file.

        Args:
            filepath: Path to the file to ingest
            thread_id: Thread the document is scoped to. None makes it Global.
            url: Where the original file is stored, recorded in metadata
            on_progress: Optional callback for progress updates

        Returns:
            Dict with document_id, filename, chunks and bytes.
        """
        text, filename, size, mime_type = self._load(filepath)
        return self.ingestor().ingest_text(
            text,
            filename,
            thread_id,
            size=size,
            mime_type=mime_type,
            url=url,
            on_progress=on_progress,
        )

    async def aingest_file(
        self,
        filepath: str,
        thread_id: str | None = None,
        *,
        url: str | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> dict:
        """Same as ingest_file() but with an async embedding call."""
        text, filename, size, mime_type = self._load(filepath)
        return await self.ingestor().aingest_text(
            text,
            filename,
            thread_id,
            size=size,
            mime_type=mime_type,
            url=url,
            on_progress=on_progress,
        )

    # Document management

    def list_documents(self, thread_id: str | None = None) -> list[Document]:
        """List all documents, or only those visible to thread_id."""
        return self.chunk_store.list_documents(thread_id)

    def get_document(self, document_id: str) -> Document:
        """Get a document.

        Raises:
            DocumentNotFoundError: If the document does not exist.
        """
        document = self.chunk_store.get_document(document_id)
        if document is None:
            raise DocumentNotFoundError(document_id)
        return document

    def delete_document(self, document_id: str) -> dict:
        """Delete a document and all of its chunks.

        Returns:
            Dict with deletion statistics.
        """
        document = self.get_document(document_id)
        chunk_count = len(self.chunk_store.get_chunks(document_id))
        self.chunk_store.delete_document(document_id)
        logger.info("Deleted document %s (%s)", document_id, document.filename)
        return {"deleted": True, "filename": document.filename, "chunks_removed": chunk_count}

    def bind_document(self, document_id: str, thread_id: str) -> Document:
        """Make a document visible to an additional thread."""
        return self.chunk_store.bind_thread(document_id, thread_id)

    def unbind_document(self, document_id: str, thread_id: str) -> Document:
        """Remove a thread from a document's visibility."""
        return self.chunk_store.unbind_thread(document_id, thread_id)

    def close(self) -> None:
        """Close the stores and release resources.

        Call this when you're done with the Docent instance to release
        ChromaDB file handles. After calling close(), the instance should
        not be used.
        """
        self.chunk_store.close()

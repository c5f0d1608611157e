# src/docent/stores/memory.py
"""In-memory store implementations.

Useful for tests and short-lived sessions. Nothing survives the process.
"""

import threading
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from docent.exceptions import DocumentNotFoundError
from docent.models import Chunk, Document, Message, RetrievalResult
from docent.models.document import Visibility
from docent.stores.base import ChunkStore, ConversationLogStore, validate_chunks
from docent.stores.ranking import check_dimension, rank_chunks


@dataclass(frozen=True)
class _Snapshot:
    documents: Mapping[str, Document] = field(default_factory=dict)
    chunks: Mapping[str, tuple[Chunk, ...]] = field(default_factory=dict)


class InMemoryChunkStore(ChunkStore):
    """Dictionary-backed chunk store.

    Writers build a new snapshot under a lock and swap it in with a single
    assignment, so readers (which take no lock) always see a document with
    all of its chunks or not at all.
    """

    def __init__(self) -> None:
        self._snapshot = _Snapshot()
        self._dimension: int | None = None
        self._lock = threading.Lock()

    def _swap(
        self,
        documents: dict[str, Document],
        chunks: dict[str, tuple[Chunk, ...]],
    ) -> None:
        self._snapshot = _Snapshot(MappingProxyType(documents), MappingProxyType(chunks))

    def put_chunks(self, document: Document, chunks: list[Chunk]) -> None:
        """Store a document with all of its chunks."""
        validate_chunks(document, chunks)
        with self._lock:
            current = self._snapshot
            if document.id in current.documents:
                raise ValueError(f"Document already stored: {document.id}")
            dimension = check_dimension(self._dimension, (c.embedding for c in chunks))

            documents = dict(current.documents)
            documents[document.id] = document
            all_chunks = dict(current.chunks)
            all_chunks[document.id] = tuple(chunks)

            self._swap(documents, all_chunks)
            self._dimension = dimension

    def query(
        self,
        thread_id: str | None,
        embedding: list[float],
        k: int = 5,
    ) -> list[RetrievalResult]:
        """Rank visible chunks by cosine similarity."""
        if k <= 0:
            return []
        snapshot = self._snapshot
        check_dimension(self._dimension, [embedding])
        candidates = [
            (chunk, document.filename)
            for document in snapshot.documents.values()
            if _visible(document, thread_id)
            for chunk in snapshot.chunks.get(document.id, ())
        ]
        return rank_chunks(embedding, candidates, k)

    def get_document(self, document_id: str) -> Document | None:
        """Retrieve a document by ID."""
        return self._snapshot.documents.get(document_id)

    def list_documents(self, thread_id: str | None = None) -> list[Document]:
        """List all documents, or only those visible to thread_id."""
        documents = sorted(self._snapshot.documents.values(), key=lambda d: d.created_at)
        if thread_id is None:
            return documents
        return [d for d in documents if d.visibility.is_visible_to(thread_id)]

    def get_chunks(self, document_id: str) -> list[Chunk]:
        """Get a document's chunks in ordinal order."""
        return list(self._snapshot.chunks.get(document_id, ()))

    def delete_document(self, document_id: str) -> None:
        """Delete a document and its chunks."""
        with self._lock:
            current = self._snapshot
            if document_id not in current.documents:
                raise DocumentNotFoundError(document_id)
            documents = {k: v for k, v in current.documents.items() if k != document_id}
            chunks = {k: v for k, v in current.chunks.items() if k != document_id}
            self._swap(documents, chunks)

    def set_visibility(self, document_id: str, visibility: Visibility) -> Document:
        """Replace a document's visibility."""
        with self._lock:
            current = self._snapshot
            document = current.documents.get(document_id)
            if document is None:
                raise DocumentNotFoundError(document_id)
            updated = document.model_copy(update={"visibility": visibility})
            documents = dict(current.documents)
            documents[document_id] = updated
            self._swap(documents, dict(current.chunks))
            return updated

    def count_chunks(self) -> int:
        """Count the total number of chunks in the store."""
        return sum(len(chunks) for chunks in self._snapshot.chunks.values())

    def total_bytes(self) -> int:
        """Sum of recorded document sizes."""
        return sum(d.metadata.size for d in self._snapshot.documents.values())


def _visible(document: Document, thread_id: str | None) -> bool:
    if thread_id is None:
        return document.visibility.kind == "global"
    return document.visibility.is_visible_to(thread_id)


class InMemoryConversationLogStore(ConversationLogStore):
    """Dictionary-backed conversation log store."""

    def __init__(self) -> None:
        self._logs: dict[str, list[Message]] = {}
        self._lock = threading.Lock()

    def append(self, thread_id: str, message: Message) -> None:
        """Append a message to a thread's log."""
        with self._lock:
            self._logs.setdefault(thread_id, []).append(message)

    def read(self, thread_id: str) -> list[Message]:
        """Read a thread's log."""
        with self._lock:
            return list(self._logs.get(thread_id, []))

    def delete(self, thread_id: str) -> None:
        """Delete a thread's log."""
        with self._lock:
            self._logs.pop(thread_id, None)

    def list_threads(self) -> list[str]:
        """List all thread IDs with at least one message."""
        with self._lock:
            return [thread_id for thread_id, log in self._logs.items() if log]

# src/docent/stores/base.py
"""Abstract base classes for storage."""

import logging
from abc import ABC, abstractmethod

from docent.exceptions import DocumentNotFoundError
from docent.models import Chunk, Document, Global, Message, RetrievalResult
from docent.models.document import Visibility

logger = logging.getLogger(__name__)


def validate_chunks(document: Document, chunks: list[Chunk]) -> None:
    """Check a document's chunk batch before it is stored.

    Raises:
        ValueError: If a chunk belongs to another document or the ordinals
            are not strictly increasing.
    """
    previous = -1
    for chunk in chunks:
        if chunk.document_id != document.id:
            raise ValueError(
                f"Chunk {chunk.id} belongs to document {chunk.document_id}, not {document.id}"
            )
        if chunk.ordinal <= previous:
            raise ValueError(
                f"Chunk ordinals must be unique and increasing (got {chunk.ordinal} "
                f"after {previous}) in document {document.id}"
            )
        previous = chunk.ordinal


class ChunkStore(ABC):
    """Abstract base class for document and chunk storage.

    A store owns both documents and their chunks. Writes are atomic per
    document: retrieval either sees all of a document's chunks or none.
    Reads need no locking and may run concurrently with a write.
    """

    @abstractmethod
    def put_chunks(self, document: Document, chunks: list[Chunk]) -> None:
        """Store a document together with all of its chunks, atomically.

        Raises:
            ValueError: If the document already exists or the batch is invalid.
            DimensionMismatchError: If an embedding differs from the store's dimension.
        """
        ...

    @abstractmethod
    def query(
        self,
        thread_id: str | None,
        embedding: list[float],
        k: int = 5,
    ) -> list[RetrievalResult]:
        """Rank chunks visible to thread_id by cosine similarity.

        Only chunks of Global documents and documents scoped to thread_id are
        candidates (thread_id None means Global documents only). Results are
        ordered by score descending, ties broken by ascending ordinal and then
        document id, and truncated to k.
        """
        ...

    @abstractmethod
    def get_document(self, document_id: str) -> Document | None:
        """Retrieve a document by ID. Returns None if not found."""
        ...

    @abstractmethod
    def list_documents(self, thread_id: str | None = None) -> list[Document]:
        """List all documents, or only those visible to thread_id."""
        ...

    @abstractmethod
    def get_chunks(self, document_id: str) -> list[Chunk]:
        """Get a document's chunks in ordinal order."""
        ...

    @abstractmethod
    def delete_document(self, document_id: str) -> None:
        """Delete a document and every chunk it owns.

        Raises:
            DocumentNotFoundError: If the document does not exist.
        """
        ...

    @abstractmethod
    def set_visibility(self, document_id: str, visibility: Visibility) -> Document:
        """Replace a document's visibility. Returns the updated document.

        Raises:
            DocumentNotFoundError: If the document does not exist.
        """
        ...

    @abstractmethod
    def count_chunks(self) -> int:
        """Count the total number of chunks in the store."""
        ...

    @abstractmethod
    def total_bytes(self) -> int:
        """Sum of the recorded byte sizes of all stored documents."""
        ...

    def bind_thread(self, document_id: str, thread_id: str) -> Document:
        """Make a document visible to an additional thread.

        Global documents are already visible everywhere and stay Global.
        """
        document = self._require(document_id)
        if isinstance(document.visibility, Global):
            return document
        return self.set_visibility(document_id, document.visibility.with_thread(thread_id))

    def unbind_thread(self, document_id: str, thread_id: str) -> Document:
        """Remove a thread from a scoped document's visibility.

        Unbinding the last thread leaves an empty ScopedTo, so the document
        becomes visible to nobody rather than falling back to Global.
        Global documents are left unchanged.
        """
        document = self._require(document_id)
        if isinstance(document.visibility, Global):
            logger.debug("Document %s is global; unbind from %s ignored", document_id, thread_id)
            return document
        return self.set_visibility(document_id, document.visibility.without_thread(thread_id))

    def close(self) -> None:  # noqa: B027
        """Release resources held by the store."""

    def _require(self, document_id: str) -> Document:
        document = self.get_document(document_id)
        if document is None:
            raise DocumentNotFoundError(document_id)
        return document


class ConversationLogStore(ABC):
    """Abstract base class for durable per-thread message logs.

    The log is verbatim and append-only; summarization only ever rewrites the
    in-memory working copy of a thread.
    """

    @abstractmethod
    def append(self, thread_id: str, message: Message) -> None:
        """Append a message to a thread's log."""
        ...

    @abstractmethod
    def read(self, thread_id: str) -> list[Message]:
        """Read a thread's log in append order. Unknown threads give []."""
        ...

    @abstractmethod
    def delete(self, thread_id: str) -> None:
        """Delete a thread's log."""
        ...

    @abstractmethod
    def list_threads(self) -> list[str]:
        """List all thread IDs with at least one message."""
        ...


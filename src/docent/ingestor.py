"""Ingestion pipeline for Docent."""

import logging
from collections.abc import Callable

from docent.embedder import Embedder
from docent.exceptions import FileTooLargeError, IngestionError, StorageQuotaExceededError
from docent.models import Chunk, Document, DocumentMetadata, visibility_for
from docent.splitter import TextSplitter
from docent.stores import ChunkStore

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, int, int, str], None]
"""Callback for ingestion progress updates.

Args:
    event: "splitting", "embedding" or "storing"
    current: Current progress count (0 to total)
    total: Total items to process
    message: Human-readable status message

Example:
    def on_progress(event: str, current: int, total: int, message: str) -> None:
        print(f"[{event}] {current}/{total}: {message}")
"""


class Ingestor:
    """Turns document text into stored, embedded chunks.

    Pipeline:
    1. Check the per-file and total storage limits
    2. Split the text into overlapping chunks
    3. Embed every chunk in one batched call
    4. Store the document and its chunks atomically (ordinals 0..n-1)
    """

    def __init__(
        self,
        chunk_store: ChunkStore,
        embedder: Embedder,
        splitter: TextSplitter | None = None,
        max_file_bytes: int = 10 * 1024 * 1024,
        max_total_bytes: int = 200 * 1024 * 1024,
    ) -> None:
        """Initialize the ingestor.

        Args:
            chunk_store: Store receiving documents and chunks
            embedder: Component to embed chunk texts
            splitter: Text splitter (default: 1000 chars with 200 overlap)
            max_file_bytes: Largest single file accepted
            max_total_bytes: Limit on the summed size of all stored documents
        """
        self.chunk_store = chunk_store
        self.embedder = embedder
        self.splitter = splitter or TextSplitter()
        self.max_file_bytes = max_file_bytes
        self.max_total_bytes = max_total_bytes

    def check_limits(self, size: int) -> None:
        """Reject a file before any work is done.

        Raises:
            FileTooLargeError: If size exceeds max_file_bytes
            StorageQuotaExceededError: If storing it would exceed max_total_bytes
        """
        if size > self.max_file_bytes:
            raise FileTooLargeError(
                f"File size {size} bytes exceeds the {self.max_file_bytes} byte limit"
            )
        used = self.chunk_store.total_bytes()
        if used + size > self.max_total_bytes:
            raise StorageQuotaExceededError(
                f"Storage limit reached: {used} of {self.max_total_bytes} bytes used, "
                f"file needs {size}"
            )

    def _prepare(
        self,
        text: str,
        filename: str,
        thread_id: str | None,
        size: int | None,
        mime_type: str | None,
        url: str | None,
        progress: Callable[[str, int, int, str], None],
    ) -> tuple[Document, list[str]]:
        byte_size = size if size is not None else len(text.encode("utf-8"))
        self.check_limits(byte_size)

        progress("splitting", 0, 1, f"Splitting {filename}...")
        pieces = self.splitter.split(text)
        progress("splitting", 1, 1, f"Split into {len(pieces)} chunks")
        if not pieces:
            raise IngestionError(f"No text content in {filename}")

        document = Document(
            filename=filename,
            content=text,
            metadata=DocumentMetadata(size=byte_size, mime_type=mime_type, url=url),
            visibility=visibility_for(thread_id),
        )
        return document, pieces

    def _store(
        self,
        document: Document,
        pieces: list[str],
        embeddings: list[list[float]],
        progress: Callable[[str, int, int, str], None],
    ) -> dict:
        if len(pieces) != len(embeddings):
            raise IngestionError(
                f"Embedding count mismatch: {len(pieces)} chunks, {len(embeddings)} embeddings"
            )
        chunks = [
            Chunk(document_id=document.id, content=piece, ordinal=i, embedding=embedding)
            for i, (piece, embedding) in enumerate(zip(pieces, embeddings, strict=True))
        ]

        progress("storing", 0, 1, f"Storing {len(chunks)} chunks...")
        self.chunk_store.put_chunks(document, chunks)
        progress("storing", 1, 1, "Storing complete")

        logger.info(
            "Ingested %s as %s (%d chunks, %s)",
            document.filename,
            document.id,
            len(chunks),
            document.visibility.kind,
        )
        return {
            "document_id": document.id,
            "filename": document.filename,
            "chunks": len(chunks),
            "bytes": document.metadata.size,
        }

    def ingest_text(
        self,
        text: str,
        filename: str,
        thread_id: str | None = None,
        *,
        size: int | None = None,
        mime_type: str | None = None,
        url: str | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> dict:
        """Ingest document text.

        Args:
            text: Full document text
            filename: Name shown as the source of retrieved chunks
            thread_id: Thread the document is scoped to. None makes it Global.
            size: Byte size of the original file (default: UTF-8 size of text)
            mime_type: MIME type of the original file
            url: Where the original file is stored
            on_progress: Optional callback(event, current, total, message)

        Returns:
            Dict with document_id, filename, chunks and bytes.
        """

        def progress(event: str, current: int, total: int, message: str = "") -> None:
            if on_progress:
                on_progress(event, current, total, message)

        document, pieces = self._prepare(
            text, filename, thread_id, size, mime_type, url, progress
        )
        progress("embedding", 0, 1, f"Embedding {len(pieces)} chunks...")
        embeddings = self.embedder.embed_texts(pieces)
        progress("embedding", 1, 1, "Embedding complete")
        return self._store(document, pieces, embeddings, progress)

    async def aingest_text(
        self,
        text: str,
        filename: str,
        thread_id: str | None = None,
        *,
        size: int | None = None,
        mime_type: str | None = None,
        url: str | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> dict:
        """Ingest document text with an async embedding call.

        Same as ingest_text() but awaits the embedder, so ingestion can run
        alongside turns on the same event loop.
        """

        def progress(event: str, current: int, total: int, message: str = "") -> None:
            if on_progress:
                on_progress(event, current, total, message)

        document, pieces = self._prepare(
            text, filename, thread_id, size, mime_type, url, progress
        )
        progress("embedding", 0, 1, f"Embedding {len(pieces)} chunks (async)...")
        embeddings = await self.embedder.aembed_texts(pieces)
        progress("embedding", 1, 1, "Embedding complete")
        return self._store(document, pieces, embeddings, progress)

# src/docent/stores/chroma.py
"""ChromaDB chunk store implementation."""

import logging
import sqlite3
from pathlib import Path
from typing import Any

import chromadb

from docent.exceptions import DocumentNotFoundError
from docent.models import Chunk, Document, RetrievalResult
from docent.models.document import Visibility
from docent.stores import sqlite_catalog as catalog
from docent.stores.base import ChunkStore, validate_chunks
from docent.stores.ranking import check_dimension, clip_score, order_results

logger = logging.getLogger(__name__)


class ChromaChunkStore(ChunkStore):
    """ChromaDB-based chunk store.

    Chunk vectors live in a Chroma collection using the cosine space; documents
    and thread bindings live in a SQLite catalog next to it. Queries only ever
    consider documents present in the catalog, and a document row is written
    after all of its vectors have been added, so a half-written document is
    never retrievable.
    """

    def __init__(
        self,
        persist_dir: str,
        collection_name: str = "docent",
        catalog_path: str | None = None,
    ) -> None:
        """Initialize the ChromaDB store.

        Args:
            persist_dir: Directory for Chroma's persistent files
            collection_name: Name of the chunk collection
            catalog_path: SQLite catalog path. Defaults to persist_dir/catalog.db
        """
        Path(persist_dir).mkdir(parents=True, exist_ok=True)
        self.catalog_path = catalog_path or str(Path(persist_dir) / "catalog.db")
        self._client = chromadb.PersistentClient(path=persist_dir)
        self._collection = self._client.get_or_create_collection(
            name=collection_name,
            metadata={"hnsw:space": "cosine"},
        )
        with sqlite3.connect(self.catalog_path) as conn:
            catalog.create_tables(conn)
            conn.commit()
        self._dimension = self._load_dimension()

    def close(self) -> None:
        """Close the store and release resources.

        ChromaDB doesn't have an official close method, so we call the internal
        _system.stop() to release file handles. This is necessary to avoid
        'too many open files' errors in test suites.

        See: https://github.com/chroma-core/chroma/issues/5868
        """
        self._collection = None  # type: ignore[assignment]

        # ChromaDB lacks official close() - use internal _system.stop() workaround
        try:
            if self._client is not None and hasattr(self._client, "_system"):
                self._client._system.stop()
        except Exception:
            logger.debug("Chroma client stop failed", exc_info=True)

        self._client = None  # type: ignore[assignment]

    def _load_dimension(self) -> int | None:
        if self._collection.count() == 0:
            return None
        sample = self._collection.get(limit=1, include=["embeddings"])
        embeddings = sample["embeddings"]
        if embeddings is None or len(embeddings) == 0:
            return None
        return len(embeddings[0])

    def put_chunks(self, document: Document, chunks: list[Chunk]) -> None:
        """Add chunk vectors, then publish the document in the catalog."""
        validate_chunks(document, chunks)
        dimension = check_dimension(self._dimension, (c.embedding for c in chunks))
        if self.get_document(document.id) is not None:
            raise ValueError(f"Document already stored: {document.id}")

        chunk_ids = [c.id for c in chunks]
        if chunks:
            self._collection.add(
                ids=chunk_ids,
                embeddings=[c.embedding for c in chunks],  # type: ignore[arg-type]
                documents=[c.content for c in chunks],
                metadatas=[
                    {
                        "document_id": c.document_id,
                        "ordinal": c.ordinal,
                        "filename": document.filename,
                    }
                    for c in chunks
                ],
            )
        try:
            with sqlite3.connect(self.catalog_path) as conn:
                catalog.insert_document(conn, document)
                conn.commit()
        except Exception:
            if chunk_ids:
                self._collection.delete(ids=chunk_ids)
            raise
        self._dimension = dimension
        logger.debug("Stored document %s with %d chunks", document.id, len(chunks))

    def query(
        self,
        thread_id: str | None,
        embedding: list[float],
        k: int = 5,
    ) -> list[RetrievalResult]:
        """Search the collection restricted to documents visible to thread_id."""
        if k <= 0:
            return []
        check_dimension(self._dimension, [embedding])
        with sqlite3.connect(self.catalog_path) as conn:
            visible_ids = catalog.visible_document_ids(conn, thread_id)
        if not visible_ids:
            return []

        total = self._collection.count()
        if total == 0:
            return []

        results = self._collection.query(
            query_embeddings=[embedding],  # type: ignore[arg-type]
            n_results=min(k, total),
            where={"document_id": {"$in": visible_ids}},  # type: ignore[dict-item]
            include=["documents", "metadatas", "distances", "embeddings"],
        )

        ids = results["ids"][0]
        contents = results["documents"][0]  # type: ignore[index]
        metadatas = results["metadatas"][0]  # type: ignore[index]
        distances = results["distances"][0]  # type: ignore[index]
        vectors = results["embeddings"][0]  # type: ignore[index]

        ranked = []
        for chunk_id, content, meta, dist, vector in zip(
            ids, contents, metadatas, distances, vectors, strict=True
        ):
            chunk = _to_chunk(chunk_id, content, meta, vector)
            # Cosine distance: similarity = 1 - distance
            ranked.append(
                RetrievalResult(
                    chunk=chunk,
                    score=clip_score(1.0 - dist),
                    source=str(meta["filename"]),
                )
            )
        return order_results(ranked, k)

    def get_document(self, document_id: str) -> Document | None:
        """Retrieve a document by ID."""
        with sqlite3.connect(self.catalog_path) as conn:
            return catalog.get_document(conn, document_id)

    def list_documents(self, thread_id: str | None = None) -> list[Document]:
        """List all documents, or only those visible to thread_id."""
        with sqlite3.connect(self.catalog_path) as conn:
            return catalog.list_documents(conn, thread_id)

    def get_chunks(self, document_id: str) -> list[Chunk]:
        """Get a document's chunks in ordinal order."""
        results = self._collection.get(
            where={"document_id": document_id},
            include=["documents", "metadatas", "embeddings"],
        )
        contents = results["documents"] or []
        metadatas = results["metadatas"] or []
        vectors = results["embeddings"]
        if vectors is None:
            vectors = []
        chunks = [
            _to_chunk(chunk_id, content, meta, vector)
            for chunk_id, content, meta, vector in zip(
                results["ids"], contents, metadatas, vectors, strict=True
            )
        ]
        return sorted(chunks, key=lambda c: c.ordinal)

    def delete_document(self, document_id: str) -> None:
        """Remove the document from the catalog, then drop its vectors."""
        with sqlite3.connect(self.catalog_path) as conn:
            if not catalog.delete_document(conn, document_id):
                raise DocumentNotFoundError(document_id)
            conn.commit()
        self._collection.delete(where={"document_id": document_id})

    def set_visibility(self, document_id: str, visibility: Visibility) -> Document:
        """Replace a document's visibility."""
        with sqlite3.connect(self.catalog_path) as conn:
            if not catalog.update_visibility(conn, document_id, visibility):
                raise DocumentNotFoundError(document_id)
            conn.commit()
            document = catalog.get_document(conn, document_id)
        if document is None:
            raise DocumentNotFoundError(document_id)
        return document

    def count_chunks(self) -> int:
        """Count the total number of chunks in the store."""
        return self._collection.count()

    def total_bytes(self) -> int:
        """Sum of recorded document sizes."""
        with sqlite3.connect(self.catalog_path) as conn:
            return catalog.total_bytes(conn)


def _to_chunk(chunk_id: str, content: Any, meta: Any, vector: Any) -> Chunk:
    return Chunk(
        id=chunk_id,
        document_id=str(meta["document_id"]),
        ordinal=int(meta["ordinal"]),
        content=str(content),
        embedding=[float(x) for x in vector],
    )

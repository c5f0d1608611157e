# src/docent/stores/sqlite_chunk.py
"""SQLite chunk store implementation."""

import json
import logging
import sqlite3
from pathlib import Path

from docent.exceptions import DocumentNotFoundError
from docent.models import Chunk, Document, RetrievalResult
from docent.models.document import Visibility
from docent.stores import sqlite_catalog as catalog
from docent.stores.base import ChunkStore, validate_chunks
from docent.stores.ranking import check_dimension, rank_chunks

logger = logging.getLogger(__name__)


class SQLiteChunkStore(ChunkStore):
    """SQLite-based chunk store with exact (brute-force) cosine ranking.

    Embeddings are stored as JSON arrays and scored with numpy over the chunks
    visible to the querying thread. A document and its chunks are written in
    one transaction.
    """

    def __init__(self, db_path: str) -> None:
        """Initialize the SQLite store."""
        self.db_path = db_path
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_db()
        self._dimension = self._load_dimension()

    def _init_db(self) -> None:
        """Create tables if they don't exist."""
        with sqlite3.connect(self.db_path) as conn:
            catalog.create_tables(conn)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS chunks (
                    id TEXT PRIMARY KEY,
                    document_id TEXT NOT NULL,
                    ordinal INTEGER NOT NULL,
                    content TEXT NOT NULL,
                    embedding TEXT NOT NULL,
                    UNIQUE (document_id, ordinal)
                )
            """)
            conn.execute("CREATE INDEX IF NOT EXISTS idx_chunks_document ON chunks(document_id)")
            conn.commit()

    def _load_dimension(self) -> int | None:
        with sqlite3.connect(self.db_path) as conn:
            row = conn.execute("SELECT embedding FROM chunks LIMIT 1").fetchone()
            return len(json.loads(row[0])) if row else None

    def put_chunks(self, document: Document, chunks: list[Chunk]) -> None:
        """Store a document and its chunks in a single transaction."""
        validate_chunks(document, chunks)
        dimension = check_dimension(self._dimension, (c.embedding for c in chunks))
        with sqlite3.connect(self.db_path) as conn:
            catalog.insert_document(conn, document)
            conn.executemany(
                """
                INSERT INTO chunks (id, document_id, ordinal, content, embedding)
                VALUES (?, ?, ?, ?, ?)
                """,
                [
                    (c.id, c.document_id, c.ordinal, c.content, json.dumps(c.embedding))
                    for c in chunks
                ],
            )
            conn.commit()
        self._dimension = dimension
        logger.debug("Stored document %s with %d chunks", document.id, len(chunks))

    def query(
        self,
        thread_id: str | None,
        embedding: list[float],
        k: int = 5,
    ) -> list[RetrievalResult]:
        """Rank visible chunks by cosine similarity."""
        if k <= 0:
            return []
        check_dimension(self._dimension, [embedding])
        clause, params = catalog.visibility_clause(thread_id, "c.document_id")
        with sqlite3.connect(self.db_path) as conn:
            rows = conn.execute(
                f"""
                SELECT c.id, c.document_id, c.ordinal, c.content, c.embedding, d.filename
                FROM chunks c JOIN documents d ON d.id = c.document_id
                WHERE {clause}
                """,
                params,
            ).fetchall()
        candidates = [
            (
                Chunk(
                    id=row[0],
                    document_id=row[1],
                    ordinal=row[2],
                    content=row[3],
                    embedding=json.loads(row[4]),
                ),
                row[5],
            )
            for row in rows
        ]
        return rank_chunks(embedding, candidates, k)

    def get_document(self, document_id: str) -> Document | None:
        """Retrieve a document by ID."""
        with sqlite3.connect(self.db_path) as conn:
            return catalog.get_document(conn, document_id)

    def list_documents(self, thread_id: str | None = None) -> list[Document]:
        """List all documents, or only those visible to thread_id."""
        with sqlite3.connect(self.db_path) as conn:
            return catalog.list_documents(conn, thread_id)

    def get_chunks(self, document_id: str) -> list[Chunk]:
        """Get a document's chunks in ordinal order."""
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute(
                """
                SELECT id, document_id, ordinal, content, embedding
                FROM chunks WHERE document_id = ? ORDER BY ordinal
                """,
                (document_id,),
            )
            return [
                Chunk(
                    id=row[0],
                    document_id=row[1],
                    ordinal=row[2],
                    content=row[3],
                    embedding=json.loads(row[4]),
                )
                for row in cursor.fetchall()
            ]

    def delete_document(self, document_id: str) -> None:
        """Delete a document and its chunks in one transaction."""
        with sqlite3.connect(self.db_path) as conn:
            if not catalog.delete_document(conn, document_id):
                raise DocumentNotFoundError(document_id)
            conn.execute("DELETE FROM chunks WHERE document_id = ?", (document_id,))
            conn.commit()

    def set_visibility(self, document_id: str, visibility: Visibility) -> Document:
        """Replace a document's visibility."""
        with sqlite3.connect(self.db_path) as conn:
            if not catalog.update_visibility(conn, document_id, visibility):
                raise DocumentNotFoundError(document_id)
            conn.commit()
            document = catalog.get_document(conn, document_id)
        if document is None:
            raise DocumentNotFoundError(document_id)
        return document

    def count_chunks(self) -> int:
        """Count the total number of chunks in the store."""
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute("SELECT COUNT(id) FROM chunks")
            count = cursor.fetchone()
            return count[0] if count else 0

    def total_bytes(self) -> int:
        """Sum of recorded document sizes."""
        with sqlite3.connect(self.db_path) as conn:
            return catalog.total_bytes(conn)

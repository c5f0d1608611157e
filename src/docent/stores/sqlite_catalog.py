# src/docent/stores/sqlite_catalog.py
"""SQLite document catalog shared by the SQLite and Chroma chunk stores.

The catalog holds document rows and thread bindings. Every function takes an
open connection so callers can fold catalog writes into their own transaction.
"""

import json
import sqlite3
from datetime import datetime

from docent.models import Document, DocumentMetadata, Global, ScopedTo
from docent.models.document import Visibility


def create_tables(conn: sqlite3.Connection) -> None:
    """Create catalog tables if they don't exist."""
    conn.execute("""
        CREATE TABLE IF NOT EXISTS documents (
            id TEXT PRIMARY KEY,
            filename TEXT NOT NULL,
            content TEXT NOT NULL,
            metadata TEXT NOT NULL,
            visibility TEXT NOT NULL,
            created_at TEXT NOT NULL
        )
    """)
    conn.execute("""
        CREATE TABLE IF NOT EXISTS document_threads (
            document_id TEXT NOT NULL,
            thread_id TEXT NOT NULL,
            PRIMARY KEY (document_id, thread_id)
        )
    """)
    conn.execute(
        "CREATE INDEX IF NOT EXISTS idx_document_threads_thread "
        "ON document_threads(thread_id)"
    )


def visibility_clause(thread_id: str | None, column: str) -> tuple[str, list[str]]:
    """SQL condition selecting document ids (in column) visible to thread_id."""
    if thread_id is None:
        return (
            f"{column} IN (SELECT id FROM documents WHERE visibility = 'global')",
            [],
        )
    return (
        f"({column} IN (SELECT id FROM documents WHERE visibility = 'global') "
        f"OR {column} IN (SELECT document_id FROM document_threads WHERE thread_id = ?))",
        [thread_id],
    )


def insert_document(conn: sqlite3.Connection, document: Document) -> None:
    """Insert a document row and its thread bindings.

    Raises:
        ValueError: If the document already exists.
    """
    try:
        conn.execute(
            """
            INSERT INTO documents (id, filename, content, metadata, visibility, created_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                document.id,
                document.filename,
                document.content,
                document.metadata.model_dump_json(),
                document.visibility.kind,
                document.created_at.isoformat(),
            ),
        )
    except sqlite3.IntegrityError as e:
        raise ValueError(f"Document already stored: {document.id}") from e
    _write_threads(conn, document.id, document.visibility)


def _write_threads(conn: sqlite3.Connection, document_id: str, visibility: Visibility) -> None:
    conn.execute("DELETE FROM document_threads WHERE document_id = ?", (document_id,))
    if isinstance(visibility, ScopedTo) and visibility.thread_ids:
        conn.executemany(
            "INSERT INTO document_threads (document_id, thread_id) VALUES (?, ?)",
            [(document_id, thread_id) for thread_id in sorted(visibility.thread_ids)],
        )


def update_visibility(
    conn: sqlite3.Connection,
    document_id: str,
    visibility: Visibility,
) -> bool:
    """Replace a document's visibility. Returns False if it doesn't exist."""
    cursor = conn.execute(
        "UPDATE documents SET visibility = ? WHERE id = ?",
        (visibility.kind, document_id),
    )
    if cursor.rowcount == 0:
        return False
    _write_threads(conn, document_id, visibility)
    return True


def delete_document(conn: sqlite3.Connection, document_id: str) -> bool:
    """Delete a document row and its bindings. Returns False if it doesn't exist."""
    cursor = conn.execute("DELETE FROM documents WHERE id = ?", (document_id,))
    conn.execute("DELETE FROM document_threads WHERE document_id = ?", (document_id,))
    return cursor.rowcount > 0


def get_document(conn: sqlite3.Connection, document_id: str) -> Document | None:
    """Load a single document."""
    row = conn.execute(
        """
        SELECT id, filename, content, metadata, visibility, created_at
        FROM documents WHERE id = ?
        """,
        (document_id,),
    ).fetchone()
    if row is None:
        return None
    threads = [
        r[0]
        for r in conn.execute(
            "SELECT thread_id FROM document_threads WHERE document_id = ?",
            (document_id,),
        ).fetchall()
    ]
    return _row_to_document(row, threads)


def list_documents(conn: sqlite3.Connection, thread_id: str | None = None) -> list[Document]:
    """List all documents, or only those visible to thread_id, oldest first."""
    query = "SELECT id, filename, content, metadata, visibility, created_at FROM documents"
    params: list[str] = []
    if thread_id is not None:
        clause, params = visibility_clause(thread_id, "id")
        query += f" WHERE {clause}"
    rows = conn.execute(query + " ORDER BY created_at, id", params).fetchall()

    threads: dict[str, list[str]] = {}
    for document_id, bound_thread in conn.execute(
        "SELECT document_id, thread_id FROM document_threads"
    ).fetchall():
        threads.setdefault(document_id, []).append(bound_thread)

    return [_row_to_document(row, threads.get(row[0], [])) for row in rows]


def visible_document_ids(conn: sqlite3.Connection, thread_id: str | None) -> list[str]:
    """IDs of documents visible to thread_id."""
    clause, params = visibility_clause(thread_id, "id")
    rows = conn.execute(f"SELECT id FROM documents WHERE {clause}", params).fetchall()
    return [row[0] for row in rows]


def total_bytes(conn: sqlite3.Connection) -> int:
    """Sum of recorded document sizes."""
    rows = conn.execute("SELECT metadata FROM documents").fetchall()
    return sum(int(json.loads(row[0]).get("size", 0)) for row in rows)


def _row_to_document(row: tuple, threads: list[str]) -> Document:
    visibility: Visibility
    if row[4] == "global":
        visibility = Global()
    else:
        visibility = ScopedTo(thread_ids=frozenset(threads))
    return Document(
        id=row[0],
        filename=row[1],
        content=row[2],
        metadata=DocumentMetadata.model_validate_json(row[3]),
        visibility=visibility,
        created_at=datetime.fromisoformat(row[5]),
    )

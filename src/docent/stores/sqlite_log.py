# src/docent/stores/sqlite_log.py
"""SQLite conversation log store implementation."""

import sqlite3
from datetime import UTC, datetime
from pathlib import Path

from docent.models import Message, Role
from docent.stores.base import ConversationLogStore


class SQLiteConversationLogStore(ConversationLogStore):
    """SQLite-backed conversation log store."""

    def __init__(self, db_path: str) -> None:
        """Initialize the log store.

        Args:
            db_path: Path to SQLite database file
        """
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._db_path = db_path
        self._init_db()

    def _init_db(self) -> None:
        """Initialize the database schema."""
        with sqlite3.connect(self._db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS messages (
                    seq INTEGER PRIMARY KEY AUTOINCREMENT,
                    thread_id TEXT NOT NULL,
                    role TEXT NOT NULL,
                    content TEXT NOT NULL,
                    position INTEGER,
                    created_at TEXT NOT NULL
                )
            """)
            conn.execute("CREATE INDEX IF NOT EXISTS idx_messages_thread ON messages(thread_id)")

    def append(self, thread_id: str, message: Message) -> None:
        """Append a message to a thread's log."""
        now = datetime.now(UTC).isoformat()
        with sqlite3.connect(self._db_path) as conn:
            conn.execute(
                """
                INSERT INTO messages (thread_id, role, content, position, created_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (thread_id, message.role.value, message.content, message.position, now),
            )

    def read(self, thread_id: str) -> list[Message]:
        """Read a thread's log in append order."""
        with sqlite3.connect(self._db_path) as conn:
            cursor = conn.execute(
                "SELECT role, content, position FROM messages WHERE thread_id = ? ORDER BY seq",
                (thread_id,),
            )
            return [
                Message(role=Role(row[0]), content=row[1], position=row[2])
                for row in cursor.fetchall()
            ]

    def delete(self, thread_id: str) -> None:
        """Delete a thread's log."""
        with sqlite3.connect(self._db_path) as conn:
            conn.execute("DELETE FROM messages WHERE thread_id = ?", (thread_id,))

    def list_threads(self) -> list[str]:
        """List all thread IDs with at least one message, most recent first."""
        with sqlite3.connect(self._db_path) as conn:
            cursor = conn.execute(
                "SELECT thread_id FROM messages GROUP BY thread_id ORDER BY MAX(seq) DESC"
            )
            return [row[0] for row in cursor.fetchall()]

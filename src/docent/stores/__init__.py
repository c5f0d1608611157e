"""Storage abstractions for Docent."""

from docent.stores.base import ChunkStore, ConversationLogStore
from docent.stores.memory import InMemoryChunkStore, InMemoryConversationLogStore
from docent.stores.sqlite_chunk import SQLiteChunkStore
from docent.stores.sqlite_log import SQLiteConversationLogStore

try:
    from docent.stores.chroma import ChromaChunkStore
except ImportError:
    from docent._optional import _create_missing_dependency_class

    ChromaChunkStore = _create_missing_dependency_class(  # type: ignore[misc,assignment]
        "ChromaChunkStore", "chroma"
    )

__all__ = [
    "ChunkStore",
    "ConversationLogStore",
    "InMemoryChunkStore",
    "InMemoryConversationLogStore",
    "SQLiteChunkStore",
    "SQLiteConversationLogStore",
    "ChromaChunkStore",
]

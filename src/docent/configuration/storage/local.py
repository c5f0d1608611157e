# src/docent/configuration/storage/local.py
"""Local filesystem storage configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from docent.stores import ChunkStore, ConversationLogStore


@dataclass(frozen=True)
class LocalStorage:
    """Local filesystem storage using SQLite, optionally with Chroma.

    All data is persisted to the specified directory:
    - chunks.db: Documents and chunk embeddings (vector_backend="sqlite")
    - chroma/: Chunk vectors plus a document catalog (vector_backend="chroma")
    - threads.db: Conversation logs (SQLite)

    The Chroma backend requires: pip install docent-rag[chroma]

    Args:
        data_dir: Base directory for all storage files.
                  Created if it doesn't exist.
        vector_backend: "sqlite" for exact search over a modest corpus,
                        "chroma" for an HNSW index.

    Example:
        storage = LocalStorage("./my_data")

        # In combination with a provider:
        docent = Docent(
            provider=LiteLLMProvider(llm="openai/gpt-5", embedding="openai/text-embedding-3-small"),
            storage=LocalStorage("./my_data", vector_backend="chroma"),
        )
    """

    data_dir: str
    vector_backend: Literal["sqlite", "chroma"] = "sqlite"

    def build_stores(self) -> tuple[ChunkStore, ConversationLogStore]:
        """Build the chunk store and the conversation log store.

        Creates the data directory if it doesn't exist.

        Returns:
            Tuple of (chunk_store, log_store)
        """
        from docent.stores import ChromaChunkStore, SQLiteChunkStore, SQLiteConversationLogStore

        # Ensure directory exists
        Path(self.data_dir).mkdir(parents=True, exist_ok=True)

        chunk_store: ChunkStore
        if self.vector_backend == "chroma":
            chunk_store = ChromaChunkStore(os.path.join(self.data_dir, "chroma"))
        elif self.vector_backend == "sqlite":
            chunk_store = SQLiteChunkStore(os.path.join(self.data_dir, "chunks.db"))
        else:
            raise ValueError(f"Unknown vector backend: {self.vector_backend!r}")

        log_store = SQLiteConversationLogStore(os.path.join(self.data_dir, "threads.db"))
        return chunk_store, log_store

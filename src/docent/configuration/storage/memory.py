# src/docent/configuration/storage/memory.py
"""In-memory storage configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from docent.stores import ChunkStore, ConversationLogStore


@dataclass(frozen=True)
class MemoryStorage:
    """Process-local storage. Nothing is persisted.

    Example:
        docent = Docent(provider=provider, storage=MemoryStorage())
    """

    def build_stores(self) -> tuple[ChunkStore, ConversationLogStore]:
        """Build in-memory chunk and log stores."""
        from docent.stores import InMemoryChunkStore, InMemoryConversationLogStore

        return InMemoryChunkStore(), InMemoryConversationLogStore()

# src/docent/configuration/base.py
"""Protocol definitions for configuration objects.

These protocols define the interfaces for provider and storage configurations.
Implementations can use @dataclass(frozen=True) for immutability.

Protocols here vs ABCs in stores/base.py: configuration objects are small
factories that vary by vendor, so any frozen dataclass with the right methods
satisfies the interface without inheritance. Stores need polymorphic behavior
and share helpers through inheritance, so they use ABCs.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from docent.embedder import Embedder
    from docent.providers import LLMClient
    from docent.settings import Settings
    from docent.stores import ChunkStore, ConversationLogStore


@runtime_checkable
class ProviderConfig(Protocol):
    """Protocol for provider configurations.

    Provider configurations build the AI components:
    - Embedder: vectors for chunks and queries
    - LLM clients: answer generation, query rewriting and summaries

    Example implementation:
        @dataclass(frozen=True)
        class LiteLLMProvider:
            llm: str
            embedding: str

            def build_embedder(self, settings: Settings) -> Embedder: ...
            def build_llm_client(self, settings: Settings) -> LLMClient: ...
            def build_rewrite_client(self, settings: Settings) -> LLMClient: ...
            def build_summary_client(self, settings: Settings) -> LLMClient: ...
    """

    def build_embedder(self, settings: Settings) -> Embedder:
        """Build an embedder for chunk and query embeddings."""
        ...

    def build_llm_client(self, settings: Settings) -> LLMClient:
        """Build the LLM client used for streamed answers."""
        ...

    def build_rewrite_client(self, settings: Settings) -> LLMClient:
        """Build the LLM client used for standalone query rewriting."""
        ...

    def build_summary_client(self, settings: Settings) -> LLMClient:
        """Build the LLM client used for conversation summaries."""
        ...


@runtime_checkable
class StorageConfig(Protocol):
    """Protocol for storage configurations.

    Storage configurations build the data stores:
    - ChunkStore: documents, chunks and their embeddings
    - ConversationLogStore: verbatim per-thread message logs

    Example implementation:
        @dataclass(frozen=True)
        class LocalStorage:
            data_dir: str

            def build_stores(self) -> tuple[ChunkStore, ConversationLogStore]: ...
    """

    def build_stores(self) -> tuple[ChunkStore, ConversationLogStore]:
        """Build both storage components.

        Returns:
            Tuple of (chunk_store, log_store)
        """
        ...

# src/docent/retriever.py
"""Scoped vector retrieval."""

import asyncio
import logging

from docent.embedder import Embedder
from docent.exceptions import RetrievalUnavailable
from docent.models import RetrievalResult
from docent.stores import ChunkStore

logger = logging.getLogger(__name__)


class Retriever:
    """Embeds a query and ranks the chunks visible to a thread."""

    def __init__(
        self,
        chunk_store: ChunkStore,
        embedder: Embedder,
        default_k: int = 5,
        embed_timeout: float = 10.0,
    ) -> None:
        """Initialize the retriever.

        Args:
            chunk_store: Store holding documents and chunk embeddings
            embedder: Embedder for query embedding
            default_k: Default number of results to return
            embed_timeout: Timeout for the query embedding call in seconds
        """
        self.chunk_store = chunk_store
        self.embedder = embedder
        self.default_k = default_k
        self.embed_timeout = embed_timeout

    async def retrieve(
        self,
        query: str,
        scope: str | None,
        k: int | None = None,
    ) -> list[RetrievalResult]:
        """Get the chunks most similar to query, visible to scope.

        Args:
            query: Search query (usually the rewritten standalone query)
            scope: Thread ID whose scoped documents are visible, in addition to
                   Global documents. None restricts the search to Global documents.
            k: Number of results to return (default: self.default_k)

        Returns:
            Results ordered by score descending. Empty when k is 0, the query
            is blank, or nothing visible is stored.

        Raises:
            RetrievalUnavailable: If embedding or the store query fails.
        """
        k = self.default_k if k is None else k
        if k <= 0 or not query.strip():
            return []

        try:
            embedding = await asyncio.wait_for(
                self.embedder.aembed_text(query),
                timeout=self.embed_timeout,
            )
        except asyncio.CancelledError:
            raise
        except Exception as e:
            raise RetrievalUnavailable(f"Query embedding failed: {type(e).__name__}: {e}") from e

        try:
            results = await asyncio.to_thread(self.chunk_store.query, scope, embedding, k)
        except Exception as e:
            raise RetrievalUnavailable(f"Chunk store query failed: {type(e).__name__}: {e}") from e

        logger.debug(
            "Retrieved %d chunks for scope %s: %s",
            len(results),
            scope,
            [(r.chunk.id, round(r.score, 4)) for r in results],
        )
        return results

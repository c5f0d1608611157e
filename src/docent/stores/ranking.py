# src/docent/stores/ranking.py
"""Cosine similarity ranking shared by the chunk stores."""

from collections.abc import Iterable, Sequence

import numpy as np

from docent.exceptions import DimensionMismatchError
from docent.models import Chunk, RetrievalResult


def check_dimension(expected: int | None, vectors: Iterable[Sequence[float]]) -> int | None:
    """Check vectors against the store's dimension.

    Returns the dimension to record: expected if already fixed, otherwise the
    dimension of the first vector (None if there are no vectors).

    Raises:
        DimensionMismatchError: If any vector has a different dimension.
    """
    dimension = expected
    for vector in vectors:
        if dimension is None:
            dimension = len(vector)
        elif len(vector) != dimension:
            raise DimensionMismatchError(dimension, len(vector))
    return dimension


def cosine_similarity(query: Sequence[float], matrix: np.ndarray) -> np.ndarray:
    """Cosine similarity of a query vector against each row of matrix.

    Zero vectors score 0. Results are clipped to [-1, 1].
    """
    q = np.asarray(query, dtype=np.float64)
    norms = np.linalg.norm(matrix, axis=1) * np.linalg.norm(q)
    with np.errstate(divide="ignore", invalid="ignore"):
        scores = np.where(norms > 0, (matrix @ q) / norms, 0.0)
    return np.clip(scores, -1.0, 1.0)


def clip_score(score: float) -> float:
    return float(min(1.0, max(-1.0, score)))


def ranking_key(result: RetrievalResult) -> tuple[float, int, str]:
    """Score descending, then ordinal ascending, then document id."""
    return (-result.score, result.chunk.ordinal, result.chunk.document_id)


def order_results(results: Iterable[RetrievalResult], k: int) -> list[RetrievalResult]:
    """Sort results by ranking_key and keep the top k."""
    if k <= 0:
        return []
    return sorted(results, key=ranking_key)[:k]


def rank_chunks(
    embedding: Sequence[float],
    candidates: Sequence[tuple[Chunk, str]],
    k: int,
) -> list[RetrievalResult]:
    """Score (chunk, filename) candidates against embedding and keep the top k."""
    if k <= 0 or not candidates:
        return []
    matrix = np.asarray([chunk.embedding for chunk, _ in candidates], dtype=np.float64)
    scores = cosine_similarity(embedding, matrix)
    results = [
        RetrievalResult(chunk=chunk, score=float(score), source=filename)
        for (chunk, filename), score in zip(candidates, scores, strict=True)
    ]
    return order_results(results, k)

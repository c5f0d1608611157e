# src/docent/models/results.py
"""Result data models for retrieval and context assembly."""

from pydantic import BaseModel, Field

from docent.models.chunk import Chunk


class RetrievalResult(BaseModel):
    """A matched chunk with its cosine similarity to the query."""

    chunk: Chunk
    score: float = Field(ge=-1.0, le=1.0)
    source: str  # Filename of the owning document


class GroundingContext(BaseModel):
    """Retrieved text grouped per document, plus its rendered form.

    documents maps document id to chunk texts in ordinal order; key order is
    the order in which each document first appeared in the ranked results.
    """

    documents: dict[str, list[str]] = Field(default_factory=dict)
    sources: dict[str, str] = Field(default_factory=dict)
    text: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.text

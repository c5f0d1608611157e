# src/docent/models/chunk.py
"""Chunk data model."""

from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


class Chunk(BaseModel):
    """A span of a document's text stored with its embedding vector."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    document_id: str
    content: str
    ordinal: int = Field(ge=0)  # Position within the owning document
    embedding: list[float]

# src/docent/models/document.py
"""Document and visibility data models."""

from datetime import UTC, datetime
from typing import Annotated, Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


class Global(BaseModel):
    """Visibility of a document that every thread can retrieve from."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["global"] = "global"

    def is_visible_to(self, thread_id: str) -> bool:
        return True


class ScopedTo(BaseModel):
    """Visibility of a document bound to specific threads.

    An empty thread set is allowed: it is what remains after a document is
    unbound from its last thread, and such a document is visible to nobody.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["scoped"] = "scoped"
    thread_ids: frozenset[str]

    @classmethod
    def of(cls, *thread_ids: str) -> "ScopedTo":
        return cls(thread_ids=frozenset(thread_ids))

    def is_visible_to(self, thread_id: str) -> bool:
        return thread_id in self.thread_ids

    def with_thread(self, thread_id: str) -> "ScopedTo":
        return ScopedTo(thread_ids=self.thread_ids | {thread_id})

    def without_thread(self, thread_id: str) -> "ScopedTo":
        return ScopedTo(thread_ids=self.thread_ids - {thread_id})


Visibility = Annotated[Global | ScopedTo, Field(discriminator="kind")]


def visibility_for(thread_id: str | None) -> Global | ScopedTo:
    """Visibility for a newly ingested document (None means global)."""
    if thread_id is None:
        return Global()
    return ScopedTo.of(thread_id)


class DocumentMetadata(BaseModel):
    """File-level facts recorded at ingestion."""

    size: int = 0
    mime_type: str | None = None
    url: str | None = None


class Document(BaseModel):
    """An uploaded document. Its text never changes after creation."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    filename: str
    content: str
    metadata: DocumentMetadata = Field(default_factory=DocumentMetadata)
    visibility: Visibility = Field(default_factory=Global)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

"""Data models for Docent."""

from docent.models.chunk import Chunk
from docent.models.document import (
    Document,
    DocumentMetadata,
    Global,
    ScopedTo,
    Visibility,
    visibility_for,
)
from docent.models.events import Cancelled, Completed, Failed, TokenDelta, TurnEvent, is_terminal
from docent.models.message import ConversationThread, Message, Role
from docent.models.results import GroundingContext, RetrievalResult

__all__ = [
    "Chunk",
    "Document",
    "DocumentMetadata",
    "Global",
    "ScopedTo",
    "Visibility",
    "visibility_for",
    "Message",
    "Role",
    "ConversationThread",
    "RetrievalResult",
    "GroundingContext",
    "TokenDelta",
    "Completed",
    "Failed",
    "Cancelled",
    "TurnEvent",
    "is_terminal",
]

# src/docent/models/message.py
"""Conversation message and thread models."""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field


class Role(str, Enum):
    """Author of a message."""

    USER = "user"
    ASSISTANT = "assistant"
    SUMMARY = "summary"


class Message(BaseModel):
    """One entry in a thread's log.

    position is assigned by the thread on append and increases monotonically;
    a summary message takes the position of the last message it replaced.
    """

    role: Role
    content: str
    position: int | None = None

    @classmethod
    def user(cls, content: str) -> "Message":
        return cls(role=Role.USER, content=content)

    @classmethod
    def assistant(cls, content: str) -> "Message":
        return cls(role=Role.ASSISTANT, content=content)

    def to_llm(self) -> dict[str, str]:
        """Convert to a chat-completion message dict."""
        if self.role is Role.SUMMARY:
            return {
                "role": "system",
                "content": f"Summary of the earlier conversation:\n{self.content}",
            }
        return {"role": self.role.value, "content": self.content}


class ConversationThread(BaseModel):
    """In-memory working state of one conversation."""

    thread_id: str
    messages: list[Message] = Field(default_factory=list)
    turn_count: int = 0
    next_position: int = 0
    last_turn_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def summary(self) -> Message | None:
        """The running summary, if the log has been summarized."""
        if self.messages and self.messages[0].role is Role.SUMMARY:
            return self.messages[0]
        return None

    def append(self, message: Message) -> Message:
        """Append a message, stamping its position."""
        stamped = message.model_copy(update={"position": self.next_position})
        self.messages.append(stamped)
        self.next_position += 1
        return stamped

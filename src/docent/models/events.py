# src/docent/models/events.py
"""Boundary-visible turn events.

A turn emits any number of TokenDelta events followed by exactly one
terminal event (Completed, Failed or Cancelled). None of them carries the
rewritten query or similarity scores.
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field


class TokenDelta(BaseModel):
    """An incremental fragment of the answer."""

    type: Literal["token_delta"] = "token_delta"
    token_delta: str

    def to_dict(self) -> dict[str, Any]:
        return {"tokenDelta": self.token_delta}


class Completed(BaseModel):
    """The answer finished; text is the full answer."""

    type: Literal["completed"] = "completed"
    text: str
    turn_id: str

    def to_dict(self) -> dict[str, Any]:
        return {"completed": {"text": self.text, "turnId": self.turn_id}}


class Failed(BaseModel):
    """The turn aborted; kind is an ErrorKind value."""

    type: Literal["failed"] = "failed"
    kind: str

    def to_dict(self) -> dict[str, Any]:
        return {"failed": {"kind": self.kind}}


class Cancelled(BaseModel):
    """The turn was cancelled during generation.

    partial_text is best-effort output produced before cancellation. It is
    never persisted as an assistant message.
    """

    type: Literal["cancelled"] = "cancelled"
    partial_text: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"cancelled": {}}


TurnEvent = Annotated[TokenDelta | Completed | Failed | Cancelled, Field(discriminator="type")]

TERMINAL_EVENT_TYPES = (Completed, Failed, Cancelled)


def is_terminal(event: TokenDelta | Completed | Failed | Cancelled) -> bool:
    return isinstance(event, TERMINAL_EVENT_TYPES)

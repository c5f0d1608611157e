# tests/models/test_events.py
"""Tests for boundary turn events."""

from pydantic import TypeAdapter

from docent.models import Cancelled, Completed, Failed, TokenDelta, TurnEvent, is_terminal


class TestEventSerialization:
    def test_token_delta(self):
        """Test the token delta wire shape."""
        assert TokenDelta(token_delta="Hel").to_dict() == {"tokenDelta": "Hel"}

    def test_completed(self):
        """Test the completed wire shape."""
        event = Completed(text="Hello", turn_id="turn-1")
        assert event.to_dict() == {"completed": {"text": "Hello", "turnId": "turn-1"}}

    def test_failed(self):
        """Test the failed wire shape."""
        assert Failed(kind="generation_failure").to_dict() == {
            "failed": {"kind": "generation_failure"}
        }

    def test_cancelled_hides_partial_text(self):
        """Test that partial text never appears on the wire."""
        assert Cancelled(partial_text="Hel").to_dict() == {"cancelled": {}}


class TestTerminal:
    def test_is_terminal(self):
        """Test which events end a turn."""
        assert not is_terminal(TokenDelta(token_delta="x"))
        assert is_terminal(Completed(text="", turn_id="t"))
        assert is_terminal(Failed(kind="internal"))
        assert is_terminal(Cancelled())

    def test_discriminated_union(self):
        """Test that events parse back by their type tag."""
        adapter = TypeAdapter(TurnEvent)
        event = adapter.validate_python({"type": "failed", "kind": "internal"})
        assert isinstance(event, Failed)

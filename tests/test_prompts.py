# tests/test_prompts.py
"""Tests for the grounding prompt composer."""

from docent.prompts import GROUNDING_PROMPT, NO_CONTEXT_PLACEHOLDER, PromptComposer


class TestPromptComposer:
    def test_includes_grounding_text(self):
        instruction = PromptComposer().compose("## Source: a.txt\ncats")
        assert "## Source: a.txt\ncats" in instruction
        assert NO_CONTEXT_PLACEHOLDER not in instruction

    def test_empty_grounding_uses_placeholder(self):
        """Test that no grounding yields the fixed placeholder."""
        assert NO_CONTEXT_PLACEHOLDER in PromptComposer().compose("")

    def test_whitespace_grounding_uses_placeholder(self):
        assert NO_CONTEXT_PLACEHOLDER in PromptComposer().compose("  \n ")

    def test_deterministic(self):
        composer = PromptComposer()
        assert composer.compose("same") == composer.compose("same")

    def test_default_template(self):
        assert PromptComposer().compose("x") == GROUNDING_PROMPT.format(context="x")

    def test_custom_template_and_placeholder(self):
        composer = PromptComposer(template="Context: {context}", placeholder="nothing")
        assert composer.compose("") == "Context: nothing"
        assert composer.compose("facts") == "Context: facts"

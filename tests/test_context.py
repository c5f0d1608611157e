# tests/test_context.py
"""Tests for context assembly."""

from docent.context import ContextAssembler
from docent.models import Chunk, RetrievalResult
from docent.prompts import CONTEXT_CLOSING, CONTEXT_PREAMBLE


def result(document_id: str, ordinal: int, score: float, source: str | None = None):
    chunk = Chunk(
        document_id=document_id,
        content=f"{document_id}#{ordinal}",
        ordinal=ordinal,
        embedding=[1.0],
    )
    return RetrievalResult(chunk=chunk, score=score, source=source or f"{document_id}.txt")


class TestContextAssembler:
    def test_empty_results(self):
        """Test that no results give empty grounding."""
        context = ContextAssembler().assemble([])
        assert context.is_empty
        assert context.text == ""
        assert context.documents == {}

    def test_groups_by_document_in_reading_order(self):
        """Test ranked A#2, B#0, A#0 -> A#0, A#2, B#0."""
        context = ContextAssembler().assemble(
            [result("A", 2, 0.9), result("B", 0, 0.8), result("A", 0, 0.7)]
        )

        assert list(context.documents) == ["A", "B"]
        assert context.documents["A"] == ["A#0", "A#2"]
        assert context.documents["B"] == ["B#0"]
        text = context.text
        assert text.index("A#0") < text.index("A#2") < text.index("B#0")

    def test_rendered_format(self):
        context = ContextAssembler().assemble([result("A", 0, 0.9, source="handbook.pdf")])

        assert context.text == "\n".join(
            [
                CONTEXT_PREAMBLE,
                "",
                "## Source: handbook.pdf",
                "",
                "A#0",
                "",
                "---",
                "",
                CONTEXT_CLOSING,
            ]
        )
        assert context.sources == {"A": "handbook.pdf"}

    def test_each_document_has_one_header(self):
        context = ContextAssembler().assemble(
            [result("A", 0, 0.9), result("A", 1, 0.8), result("B", 0, 0.7)]
        )
        assert context.text.count("## Source: A.txt") == 1
        assert context.text.count("## Source: B.txt") == 1
        assert context.text.count("---") == 2

    def test_custom_preamble_and_closing(self):
        context = ContextAssembler(preamble="START", closing="END").assemble([result("A", 0, 0.5)])
        assert context.text.startswith("START")
        assert context.text.endswith("END")

# src/docent/context.py
"""Context assembly: ranked chunks to grounding text."""

from docent.models import GroundingContext, RetrievalResult
from docent.prompts import CONTEXT_CLOSING, CONTEXT_PREAMBLE, SOURCE_HEADER, SOURCE_SEPARATOR


class ContextAssembler:
    """Groups retrieved chunks per document and formats them for the LLM.

    Documents appear in the order they first occur in the ranked results;
    within a document, chunks are put back in reading (ordinal) order.

    Example:
        ranked A#2, B#0, A#0 -> grounding text ordered A#0, A#2, B#0
    """

    def __init__(
        self,
        preamble: str = CONTEXT_PREAMBLE,
        closing: str = CONTEXT_CLOSING,
    ) -> None:
        self.preamble = preamble
        self.closing = closing

    def assemble(self, results: list[RetrievalResult]) -> GroundingContext:
        """Build the grounding context. Empty input gives empty text."""
        if not results:
            return GroundingContext()

        groups: dict[str, list[RetrievalResult]] = {}
        sources: dict[str, str] = {}
        for result in results:
            document_id = result.chunk.document_id
            groups.setdefault(document_id, []).append(result)
            sources.setdefault(document_id, result.source)

        documents: dict[str, list[str]] = {}
        lines = [self.preamble, ""]
        for document_id, group in groups.items():
            ordered = sorted(group, key=lambda r: r.chunk.ordinal)
            documents[document_id] = [r.chunk.content for r in ordered]

            lines.append(SOURCE_HEADER.format(filename=sources[document_id]))
            lines.append("")
            for text in documents[document_id]:
                lines.append(text)
                lines.append("")
            lines.append(SOURCE_SEPARATOR)
            lines.append("")
        lines.append(self.closing)

        return GroundingContext(documents=documents, sources=sources, text="\n".join(lines))

# src/docent/splitter.py
"""Recursive character text splitting for ingestion."""

from langchain_text_splitters import RecursiveCharacterTextSplitter

# Paragraphs, lines, CJK sentence and clause marks, words, then characters
DEFAULT_SEPARATORS = ["\n\n", "\n", "。", "、", " ", ""]


class TextSplitter:
    """Split document text into overlapping chunks.

    Tries each separator in turn, so chunks break at paragraph boundaries
    where possible and fall back to lines, sentences, words and finally
    single characters for text without natural breaks.

    Example:
        splitter = TextSplitter(chunk_size=1000, chunk_overlap=200)
        pieces = splitter.split(document_text)
    """

    def __init__(
        self,
        chunk_size: int = 1000,
        chunk_overlap: int = 200,
        separators: list[str] | None = None,
    ) -> None:
        """Initialize the splitter.

        Args:
            chunk_size: Maximum characters per chunk
            chunk_overlap: Characters shared by adjacent chunks

        Raises:
            ValueError: If chunk_overlap >= chunk_size
        """
        if chunk_overlap >= chunk_size:
            raise ValueError(
                f"chunk_overlap ({chunk_overlap}) must be less than chunk_size ({chunk_size})"
            )
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.separators = separators or list(DEFAULT_SEPARATORS)
        self._splitter = RecursiveCharacterTextSplitter(
            chunk_size=chunk_size,
            chunk_overlap=chunk_overlap,
            separators=self.separators,
            length_function=len,
        )

    def split(self, text: str) -> list[str]:
        """Split text into chunks. Blank text gives no chunks."""
        if not text.strip():
            return []
        return [piece for piece in self._splitter.split_text(text) if piece.strip()]

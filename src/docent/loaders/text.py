# src/docent/loaders/text.py
"""Text and Markdown file loader."""

from pathlib import Path

from docent.loaders.base import LoadedFile, Loader


class TextLoader(Loader):
    """Load plain text and markdown files."""

    SUPPORTED_EXTENSIONS = {".txt", ".md", ".markdown", ".text"}

    def supports(self, path: str) -> bool:
        """Check if this loader supports the given file."""
        return Path(path).suffix.lower() in self.SUPPORTED_EXTENSIONS

    def load(self, path: str) -> LoadedFile:
        """Read a text file as UTF-8."""
        file_path = Path(path)

        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        is_markdown = file_path.suffix.lower() in {".md", ".markdown"}
        return LoadedFile(
            filename=file_path.name,
            text=file_path.read_text(encoding="utf-8"),
            size=file_path.stat().st_size,
            mime_type="text/markdown" if is_markdown else "text/plain",
        )

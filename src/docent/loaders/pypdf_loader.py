# src/docent/loaders/pypdf_loader.py
"""PDF loader using pypdf - lightweight, pure Python."""

from pathlib import Path

from docent.loaders.base import LoadedFile, Loader


class PyPDFLoader(Loader):
    """Load PDF files using pypdf.

    Page texts are joined with newlines into one document text.

    Requires: pip install docent-rag[pdf-text]
    """

    SUPPORTED_EXTENSIONS = {".pdf"}

    def supports(self, path: str) -> bool:
        """Check if this loader supports the given file."""
        return Path(path).suffix.lower() in self.SUPPORTED_EXTENSIONS

    def load(self, path: str) -> LoadedFile:
        """Extract the text of every page.

        Raises:
            ImportError: If pypdf is not installed
            FileNotFoundError: If file does not exist
        """
        try:
            from pypdf import PdfReader
        except ImportError:
            raise ImportError(
                "pypdf is required for PDF text extraction. "
                "Install with: pip install docent-rag[pdf-text]"
            ) from None

        file_path = Path(path)
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        reader = PdfReader(path)
        pages = [page.extract_text() or "" for page in reader.pages]

        return LoadedFile(
            filename=file_path.name,
            text="\n".join(pages),
            size=file_path.stat().st_size,
            mime_type="application/pdf",
        )

# src/docent/loaders/base.py
"""Loader abstract base class."""

from abc import ABC, abstractmethod

from pydantic import BaseModel


class LoadedFile(BaseModel):
    """Text extracted from a file, ready for splitting."""

    filename: str
    text: str
    size: int  # Bytes on disk
    mime_type: str | None = None


class Loader(ABC):
    """Abstract base class for file loading."""

    @abstractmethod
    def load(self, path: str) -> LoadedFile:
        """Load a file and extract its text.

        Args:
            path: Path to the file to load

        Returns:
            LoadedFile with the extracted text and file facts

        Raises:
            FileNotFoundError: If the file does not exist
        """
        ...

    @abstractmethod
    def supports(self, path: str) -> bool:
        """Check if this loader supports the given path."""
        ...

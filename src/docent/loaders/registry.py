# src/docent/loaders/registry.py
"""Loader registry for auto-selecting file loaders."""

from docent.loaders.base import LoadedFile, Loader
from docent.loaders.pypdf_loader import PyPDFLoader
from docent.loaders.text import TextLoader


class LoaderRegistry:
    """Registry for file loaders.

    Automatically selects the appropriate loader based on file extension.
    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._loaders: list[Loader] = []

    def register(self, loader: Loader) -> None:
        """Register a loader."""
        self._loaders.append(loader)

    def find_loader(self, path: str) -> Loader | None:
        """Find a loader that supports the given path."""
        for loader in self._loaders:
            if loader.supports(path):
                return loader
        return None

    def load(self, path: str) -> LoadedFile:
        """Load a file using the appropriate loader.

        Raises:
            ValueError: If no loader supports the file type
        """
        loader = self.find_loader(path)
        if loader is None:
            raise ValueError(f"No loader found for: {path}")
        return loader.load(path)

    @classmethod
    def default(cls) -> "LoaderRegistry":
        """Create a registry with text and PDF loaders registered.

        PyPDFLoader imports pypdf only when a PDF is loaded, so it is always
        registered and reports the missing extra at load time.
        """
        registry = cls()
        registry.register(TextLoader())
        registry.register(PyPDFLoader())
        return registry

"""File loaders for Docent."""

from docent.loaders.base import LoadedFile, Loader
from docent.loaders.pypdf_loader import PyPDFLoader
from docent.loaders.registry import LoaderRegistry
from docent.loaders.text import TextLoader

__all__ = ["LoadedFile", "Loader", "LoaderRegistry", "PyPDFLoader", "TextLoader"]

"""Embedding functionality for Docent."""

from docent.embedder.base import Embedder
from docent.embedder.client import ClientEmbedder

__all__ = ["Embedder", "ClientEmbedder"]

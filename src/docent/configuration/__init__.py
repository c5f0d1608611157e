# src/docent/configuration/__init__.py
"""Configuration objects for Docent.

Instead of factory methods, you pass configuration objects that know how to
build their components.

Provider configurations (build AI components):
- LiteLLMProvider: Uses LiteLLM for LLM and embedding calls

Storage configurations (build data stores):
- LocalStorage: SQLite (or Chroma + SQLite) on the local filesystem
- MemoryStorage: In-process stores for tests and scratch sessions

Example:
    from docent import Docent, LiteLLMProvider, LocalStorage

    docent = Docent(
        provider=LiteLLMProvider(llm="openai/gpt-5", embedding="openai/text-embedding-3-small"),
        storage=LocalStorage("./data"),
    )
"""

from docent.configuration.base import ProviderConfig, StorageConfig
from docent.configuration.providers import LiteLLMProvider
from docent.configuration.storage import LocalStorage, MemoryStorage

__all__ = [
    "ProviderConfig",
    "StorageConfig",
    "LiteLLMProvider",
    "LocalStorage",
    "MemoryStorage",
]

"""Storage configurations for Docent."""

from docent.configuration.storage.local import LocalStorage
from docent.configuration.storage.memory import MemoryStorage

__all__ = ["LocalStorage", "MemoryStorage"]

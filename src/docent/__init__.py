"""Docent - conversational answers grounded in your documents.

A retrieval-augmented chat core: per-thread memory with summarization,
query rewriting, scoped vector retrieval, context assembly and streamed,
cancellable answer generation.

Quick Start (LiteLLM + Local Storage):
    from docent import Docent, LiteLLMProvider, LocalStorage

    docent = Docent(
        provider=LiteLLMProvider(llm="openai/gpt-5", embedding="openai/text-embedding-3-small"),
        storage=LocalStorage("./data"),
    )

    # Ingest a document for one thread
    docent.ingest_file("handbook.pdf", thread_id="thread-1")

    # Stream a turn
    async for event in docent.submit_turn("thread-1", "What is the leave policy?", "thread-1"):
        print(event.to_dict())

Explicit Stores:
    from docent import Docent, LiteLLMProvider
    from docent.stores import ChromaChunkStore, SQLiteConversationLogStore

    docent = Docent.from_stores(
        provider=LiteLLMProvider(llm="openai/gpt-5", embedding="openai/text-embedding-3-small"),
        chunk_store=ChromaChunkStore("./data/chroma"),
        log_store=SQLiteConversationLogStore("./data/threads.db"),
    )
"""

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("docent-rag")
except PackageNotFoundError:
    # Source-tree fallback (e.g. running tests without installing the wheel).
    try:
        import tomllib
        from pathlib import Path

        def _read_version_from_pyproject() -> str | None:
            for parent in Path(__file__).resolve().parents:
                pyproject = parent / "pyproject.toml"
                if pyproject.exists():
                    data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
                    version = data.get("project", {}).get("version")
                    return str(version) if version is not None else None
            return None

        __version__ = _read_version_from_pyproject() or "unknown"
    except Exception:
        __version__ = "unknown"

# Configuration objects
from docent.configuration import (
    LiteLLMProvider,
    LocalStorage,
    MemoryStorage,
    ProviderConfig,
    StorageConfig,
)

# Pipeline components
from docent.context import ContextAssembler

# Central configuration
from docent.docent import Docent
from docent.embedder import ClientEmbedder, Embedder

# Errors
from docent.exceptions import (
    DimensionMismatchError,
    DocentError,
    DocumentNotFoundError,
    ErrorKind,
    FileTooLargeError,
    GenerationFailure,
    IngestionError,
    InputValidationError,
    RetrievalUnavailable,
    RewriteFailure,
    StorageQuotaExceededError,
    SummarizationFailure,
)
from docent.generator import StreamingGenerator
from docent.ingestor import Ingestor, ProgressCallback

# File loading
from docent.loaders import LoaderRegistry
from docent.memory import ConversationMemory

# Core models
from docent.models import (
    Cancelled,
    Chunk,
    Completed,
    ConversationThread,
    Document,
    DocumentMetadata,
    Failed,
    Global,
    GroundingContext,
    Message,
    RetrievalResult,
    Role,
    ScopedTo,
    TokenDelta,
)
from docent.pipeline import Pipeline, TurnState, TurnStatus
from docent.prompts import PromptComposer
from docent.retriever import Retriever
from docent.rewriter import QueryRewriter
from docent.settings import Settings
from docent.splitter import TextSplitter

# Stores
from docent.stores import ChunkStore, ConversationLogStore

__all__ = [
    "__version__",
    # Central configuration
    "Docent",
    "Settings",
    # Configuration objects
    "ProviderConfig",
    "StorageConfig",
    "LiteLLMProvider",
    "LocalStorage",
    "MemoryStorage",
    # Models
    "Document",
    "DocumentMetadata",
    "Global",
    "ScopedTo",
    "Chunk",
    "Message",
    "Role",
    "ConversationThread",
    "RetrievalResult",
    "GroundingContext",
    "TokenDelta",
    "Completed",
    "Failed",
    "Cancelled",
    # Components
    "Embedder",
    "ClientEmbedder",
    "ConversationMemory",
    "QueryRewriter",
    "Retriever",
    "ContextAssembler",
    "PromptComposer",
    "StreamingGenerator",
    "Pipeline",
    "TurnState",
    "TurnStatus",
    "Ingestor",
    "ProgressCallback",
    "TextSplitter",
    "LoaderRegistry",
    # Stores
    "ChunkStore",
    "ConversationLogStore",
    # Errors
    "ErrorKind",
    "DocentError",
    "InputValidationError",
    "RetrievalUnavailable",
    "RewriteFailure",
    "SummarizationFailure",
    "GenerationFailure",
    "DimensionMismatchError",
    "IngestionError",
    "FileTooLargeError",
    "StorageQuotaExceededError",
    "DocumentNotFoundError",
]

# src/docent/commands/base.py
"""Base types for the commands layer.

This module defines the data structures used by all commands:
- Progress callbacks for long-running operations
- Confirmation callbacks for destructive commands
- Result types for each command
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum


class CommandStage(Enum):
    """Stages of command execution for progress reporting."""

    # Ingest stages
    SPLITTING = "Splitting"
    EMBEDDING = "Embedding"
    STORING = "Storing"

    # General stages
    LOADING = "Loading"
    PROCESSING = "Processing"
    COMPLETE = "Complete"


@dataclass
class ProgressUpdate:
    """Progress update for long-running operations.

    Attributes:
        stage: Current stage of the operation
        current: Current item number
        total: Total number of items (0 for indeterminate)
        message: Optional status message
    """

    stage: CommandStage
    current: int
    total: int
    message: str | None = None

    @property
    def is_indeterminate(self) -> bool:
        """True if progress is indeterminate (total unknown)."""
        return self.total == 0

    @property
    def percentage(self) -> int:
        """Progress as percentage (0-100). Returns 0 if indeterminate."""
        if self.total == 0:
            return 0
        return int(100 * self.current / self.total)


# Callback type for progress updates
ProgressCallback = Callable[[ProgressUpdate], None]


@dataclass
class ConfirmRequest:
    """Request for confirmation before a destructive operation."""

    message: str
    details: str | None = None


# Callback type for confirmation - returns True to proceed
ConfirmCallback = Callable[[ConfirmRequest], bool]


@dataclass
class CommandResult:
    """Base result type for commands."""

    success: bool
    error: str | None = None


@dataclass
class FileIngestResult:
    """Result for a single file ingestion."""

    filepath: str
    failed: bool = False
    reason: str | None = None  # Reason if failed
    document_id: str | None = None
    chunks: int = 0
    bytes: int = 0


@dataclass
class IngestResult(CommandResult):
    """Result of the ingest command.

    Attributes:
        files_processed: Number of files successfully stored
        files_failed: Number of files that failed
        total_chunks: Total chunks created
        total_bytes: Total bytes stored
        file_results: Per-file results
        errors: List of (filepath, error_message) for failed files
    """

    files_processed: int = 0
    files_failed: int = 0
    total_chunks: int = 0
    total_bytes: int = 0
    file_results: list[FileIngestResult] = field(default_factory=list)
    errors: list[tuple[str, str]] = field(default_factory=list)


@dataclass
class AskResult(CommandResult):
    """Result of the ask command.

    Attributes:
        thread_id: Thread the turn ran on
        question: The user's message
        status: Terminal status: "completed", "failed" or "cancelled"
        answer: Full answer, or the partial answer of a cancelled turn
        error_kind: Failure category when status is "failed"
        turn_id: Id of the completed turn
    """

    thread_id: str = ""
    question: str = ""
    status: str = ""
    answer: str = ""
    error_kind: str | None = None
    turn_id: str | None = None


@dataclass
class DocumentInfo:
    """Information about a stored document."""

    document_id: str
    filename: str
    visibility: str
    threads: list[str] = field(default_factory=list)
    bytes: int = 0
    chunk_count: int = 0
    uploaded_at: str = ""


@dataclass
class ListResult(CommandResult):
    """Result of the docs list command."""

    documents: list[DocumentInfo] = field(default_factory=list)


@dataclass
class DeleteResult(CommandResult):
    """Result of the docs delete command."""

    document_id: str = ""
    filename: str = ""
    chunks_deleted: int = 0


@dataclass
class BindResult(CommandResult):
    """Result of the docs bind and unbind commands."""

    document: DocumentInfo | None = None


@dataclass
class StatusResult(CommandResult):
    """Result of the status command.

    Attributes:
        total_documents: Number of stored documents
        total_chunks: Total chunks in the store
        total_bytes: Summed size of all documents
        max_total_bytes: Storage limit
        total_threads: Number of threads with a stored log
    """

    total_documents: int = 0
    total_chunks: int = 0
    total_bytes: int = 0
    max_total_bytes: int = 0
    total_threads: int = 0


@dataclass
class SettingInfo:
    """Information about a single setting."""

    name: str
    value: str
    source: str  # "env var", "yaml", "default"


@dataclass
class ConfigResult(CommandResult):
    """Result of the config command.

    Attributes:
        provider: Provider type (litellm, custom)
        llm_model: LLM model name
        embedding_model: Embedding model name
        data_dir: Data directory path
        vector_backend: sqlite or chroma
        settings: List of behavioral settings with sources
        config_path: Path to config file (if found)
    """

    provider: str = "litellm"
    llm_model: str | None = None
    embedding_model: str | None = None
    data_dir: str = ""
    vector_backend: str = "sqlite"
    settings: list[SettingInfo] = field(default_factory=list)
    config_path: str | None = None

# src/docent/commands/__init__.py
"""UI-agnostic command layer for Docent.

This module provides command functions that the CLI (and any other front end)
can call. Commands return data structures, allowing UIs to render results
appropriately.

Usage:
    from docent.commands import ask, documents, ingest

    # Ingest files for one thread
    result = ingest.ingest("./handbook.pdf", thread_id="thread-1")

    # Ask a question, printing tokens as they arrive
    result = ask.ask("What is the leave policy?", "thread-1", scope="thread-1", on_token=print)

    # List documents visible to a thread
    result = documents.list_documents("thread-1")
"""

from docent.commands import ask, config_cmd, documents, ingest, status
from docent.commands.base import (
    AskResult,
    BindResult,
    CommandResult,
    CommandStage,
    ConfigResult,
    ConfirmCallback,
    ConfirmRequest,
    DeleteResult,
    DocumentInfo,
    FileIngestResult,
    IngestResult,
    ListResult,
    ProgressCallback,
    ProgressUpdate,
    SettingInfo,
    StatusResult,
)

__all__ = [
    # Base types
    "CommandStage",
    "ProgressUpdate",
    "ProgressCallback",
    "ConfirmRequest",
    "ConfirmCallback",
    "CommandResult",
    # Result types
    "IngestResult",
    "FileIngestResult",
    "AskResult",
    "DocumentInfo",
    "ListResult",
    "DeleteResult",
    "BindResult",
    "StatusResult",
    "ConfigResult",
    "SettingInfo",
    # Command modules
    "ingest",
    "ask",
    "documents",
    "status",
    "config_cmd",
]

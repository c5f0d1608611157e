# src/docent/commands/ingest.py
"""Ingest command - store files as searchable documents.

This module provides the core ingest logic that the CLI and library callers use.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from docent.commands.base import (
    CommandStage,
    FileIngestResult,
    IngestResult,
    ProgressCallback,
    ProgressUpdate,
)
from docent.config import ConfigError, create_docent, get_docent_config
from docent.exceptions import DocentError

if TYPE_CHECKING:
    from docent.docent import Docent


# Map ingestor event names to CommandStage
STAGE_MAP = {
    "splitting": CommandStage.SPLITTING,
    "embedding": CommandStage.EMBEDDING,
    "storing": CommandStage.STORING,
}


def find_files(path: Path) -> list[str]:
    """Files under path that a registered loader can read."""
    from docent.loaders import LoaderRegistry

    if path.is_file():
        return [str(path)]

    registry = LoaderRegistry.default()
    files = []
    for root, _, filenames in os.walk(path):
        for filename in sorted(filenames):
            filepath = os.path.join(root, filename)
            if registry.find_loader(filepath):
                files.append(filepath)
    return files


def ingest(
    path: str | Path,
    thread_id: str | None = None,
    data_dir: str | None = None,
    config_path: str | Path | None = None,
    on_progress: ProgressCallback | None = None,
    on_file_start: Callable | None = None,
    on_file_complete: Callable | None = None,
) -> IngestResult:
    """Ingest files or directories.

    Args:
        path: File or directory to ingest
        thread_id: Thread the documents are scoped to. None makes them Global.
        data_dir: Override data directory (uses config if not provided)
        config_path: Override config file path
        on_progress: Callback for progress updates during ingestion
        on_file_start: Callback when starting a file (receives filepath, file_index, total_files)
        on_file_complete: Callback when a file is done (receives FileIngestResult)

    Returns:
        IngestResult with aggregated statistics and per-file results
    """
    path = Path(path)
    if not path.exists():
        return IngestResult(success=False, error=f"Path not found: {path}")

    config = get_docent_config(data_dir, config_path)
    if isinstance(config, ConfigError):
        return IngestResult(success=False, error=config.message)

    try:
        docent = create_docent(config)
    except Exception as e:
        return IngestResult(success=False, error=f"Failed to create Docent: {e}")

    try:
        return ingest_with_docent(
            docent,
            path,
            thread_id=thread_id,
            on_progress=on_progress,
            on_file_start=on_file_start,
            on_file_complete=on_file_complete,
        )
    finally:
        docent.close()


def _ingest_file(
    docent: Docent,
    filepath: str,
    thread_id: str | None,
    on_progress: ProgressCallback | None = None,
) -> FileIngestResult:
    """Ingest a single file.

    Args:
        docent: Docent instance to use
        filepath: Path to the file
        thread_id: Thread the document is scoped to
        on_progress: Optional progress callback

    Returns:
        FileIngestResult with stats for this file
    """

    def progress_adapter(event: str, current: int, total: int, message: str) -> None:
        """Adapt the ingestor's progress callback to our ProgressUpdate format."""
        if on_progress:
            stage = STAGE_MAP.get(event, CommandStage.PROCESSING)
            on_progress(
                ProgressUpdate(
                    stage=stage,
                    current=current,
                    total=total,
                    message=message,
                )
            )

    try:
        result = docent.ingest_file(
            filepath,
            thread_id,
            on_progress=progress_adapter if on_progress else None,
        )
    except (DocentError, OSError, ValueError, RuntimeError) as e:
        return FileIngestResult(
            filepath=filepath,
            failed=True,
            reason=f"{type(e).__name__}: {e}",
        )

    return FileIngestResult(
        filepath=filepath,
        document_id=result["document_id"],
        chunks=result["chunks"],
        bytes=result["bytes"],
    )


def ingest_with_docent(
    docent: Docent,
    path: str | Path,
    thread_id: str | None = None,
    on_progress: ProgressCallback | None = None,
    on_file_start: Callable | None = None,
    on_file_complete: Callable | None = None,
) -> IngestResult:
    """Ingest files using an existing Docent instance.

    Args:
        docent: Existing Docent instance
        path: File or directory to ingest
        thread_id: Thread the documents are scoped to. None makes them Global.
        on_progress: Callback for progress updates
        on_file_start: Callback when starting a file
        on_file_complete: Callback when a file is done

    Returns:
        IngestResult with aggregated statistics
    """
    path = Path(path)
    if not path.exists():
        return IngestResult(success=False, error=f"Path not found: {path}")

    files = find_files(path)
    if not files:
        return IngestResult(success=True, error="No supported files found")

    result = IngestResult(success=True)

    for i, filepath in enumerate(files):
        if on_file_start:
            on_file_start(filepath, i, len(files))

        file_result = _ingest_file(docent, filepath, thread_id, on_progress)
        result.file_results.append(file_result)

        if file_result.failed:
            result.errors.append((filepath, file_result.reason or "unknown error"))
        else:
            result.files_processed += 1
            result.total_chunks += file_result.chunks
            result.total_bytes += file_result.bytes

        if on_file_complete:
            on_file_complete(file_result)

    if result.errors:
        result.files_failed = len(result.errors)
        if result.files_processed == 0:
            result.success = False
            result.error = result.errors[0][1]

    return result

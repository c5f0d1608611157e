# src/docent/commands/status.py
"""Status command - show storage statistics."""

from __future__ import annotations

import os
from pathlib import Path

from docent.commands.base import StatusResult
from docent.config import build_settings, get_stores, load_config, resolve_storage


def status(
    data_dir: str | None = None,
    config_path: str | Path | None = None,
) -> StatusResult:
    """Get storage statistics.

    Args:
        data_dir: Override data directory
        config_path: Override config file path

    Returns:
        StatusResult with document, chunk, byte and thread counts
    """
    try:
        settings = build_settings(load_config(config_path))
    except ValueError as e:
        return StatusResult(success=False, error=f"Invalid settings: {e}")

    effective_data_dir, vector_backend = resolve_storage(data_dir, config_path)
    if not os.path.exists(effective_data_dir):
        return StatusResult(success=True, max_total_bytes=settings.max_total_bytes)

    try:
        stores = get_stores(effective_data_dir, vector_backend)
    except Exception as e:
        return StatusResult(success=False, error=f"Failed to access database: {e}")

    chunk_store = stores["chunk_store"]
    try:
        return StatusResult(
            success=True,
            total_documents=len(chunk_store.list_documents()),
            total_chunks=chunk_store.count_chunks(),
            total_bytes=chunk_store.total_bytes(),
            max_total_bytes=settings.max_total_bytes,
            total_threads=len(stores["log_store"].list_threads()),
        )
    finally:
        chunk_store.close()

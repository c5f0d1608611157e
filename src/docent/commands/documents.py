# src/docent/commands/documents.py
"""Document commands - list, delete, bind and unbind stored documents.

These operations only touch the stores, so they need no provider
configuration and make no model calls.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

from docent.commands.base import (
    BindResult,
    ConfirmCallback,
    ConfirmRequest,
    DeleteResult,
    DocumentInfo,
    ListResult,
)
from docent.config import get_stores, resolve_storage
from docent.exceptions import DocumentNotFoundError
from docent.models import Global

if TYPE_CHECKING:
    from docent.config import StoreBundle
    from docent.models import Document
    from docent.stores import ChunkStore


def document_info(document: Document, chunk_count: int = 0) -> DocumentInfo:
    """Flatten a document into display fields."""
    visibility = document.visibility
    threads = [] if isinstance(visibility, Global) else sorted(visibility.thread_ids)
    return DocumentInfo(
        document_id=document.id,
        filename=document.filename,
        visibility=visibility.kind,
        threads=threads,
        bytes=document.metadata.size,
        chunk_count=chunk_count,
        uploaded_at=document.created_at.isoformat(timespec="seconds"),
    )


def _open_stores(
    data_dir: str | None,
    config_path: str | Path | None,
) -> StoreBundle | str | None:
    """Open the stores, or return None if there is no data yet, or an error message."""
    effective_data_dir, vector_backend = resolve_storage(data_dir, config_path)
    if not os.path.exists(effective_data_dir):
        return None
    try:
        return get_stores(effective_data_dir, vector_backend)
    except Exception as e:
        return f"Failed to access database: {e}"


def _close(stores: StoreBundle) -> None:
    stores["chunk_store"].close()


def list_documents(
    thread_id: str | None = None,
    data_dir: str | None = None,
    config_path: str | Path | None = None,
) -> ListResult:
    """List stored documents.

    Args:
        thread_id: Only documents visible to this thread (None lists all)
        data_dir: Override data directory
        config_path: Override config file path

    Returns:
        ListResult with document information
    """
    stores = _open_stores(data_dir, config_path)
    if stores is None:
        return ListResult(success=True)
    if isinstance(stores, str):
        return ListResult(success=False, error=stores)

    chunk_store: ChunkStore = stores["chunk_store"]
    try:
        documents = chunk_store.list_documents(thread_id)
        return ListResult(
            success=True,
            documents=[
                document_info(document, len(chunk_store.get_chunks(document.id)))
                for document in documents
            ],
        )
    finally:
        _close(stores)


def delete_document(
    document_id: str,
    data_dir: str | None = None,
    config_path: str | Path | None = None,
    on_confirm: ConfirmCallback | None = None,
) -> DeleteResult:
    """Delete a document and all of its chunks.

    Args:
        document_id: Document to delete
        data_dir: Override data directory
        config_path: Override config file path
        on_confirm: Optional callback for confirmation. Return True to
            proceed, False to cancel. If None, deletion proceeds without
            confirmation (equivalent to --force).

    Returns:
        DeleteResult with deletion statistics, or cancelled result
    """
    stores = _open_stores(data_dir, config_path)
    if stores is None:
        return DeleteResult(success=False, document_id=document_id, error="No database found.")
    if isinstance(stores, str):
        return DeleteResult(success=False, document_id=document_id, error=stores)

    chunk_store: ChunkStore = stores["chunk_store"]
    try:
        document = chunk_store.get_document(document_id)
        if document is None:
            return DeleteResult(
                success=False,
                document_id=document_id,
                error=f"Document not found: {document_id}",
            )

        chunks_to_delete = len(chunk_store.get_chunks(document_id))

        if on_confirm is not None:
            confirm_request = ConfirmRequest(
                message=f"Delete {document.filename}?",
                details=f"This will remove {chunks_to_delete} chunks from the database.",
            )
            if not on_confirm(confirm_request):
                return DeleteResult(
                    success=False,
                    document_id=document_id,
                    filename=document.filename,
                    error="Cancelled.",
                )

        chunk_store.delete_document(document_id)
        return DeleteResult(
            success=True,
            document_id=document_id,
            filename=document.filename,
            chunks_deleted=chunks_to_delete,
        )
    finally:
        _close(stores)


def _change_binding(
    document_id: str,
    thread_id: str,
    bind: bool,
    data_dir: str | None,
    config_path: str | Path | None,
) -> BindResult:
    stores = _open_stores(data_dir, config_path)
    if stores is None:
        return BindResult(success=False, error="No database found.")
    if isinstance(stores, str):
        return BindResult(success=False, error=stores)

    chunk_store: ChunkStore = stores["chunk_store"]
    try:
        if bind:
            document = chunk_store.bind_thread(document_id, thread_id)
        else:
            document = chunk_store.unbind_thread(document_id, thread_id)
    except DocumentNotFoundError:
        return BindResult(success=False, error=f"Document not found: {document_id}")
    finally:
        _close(stores)
    return BindResult(success=True, document=document_info(document))


def bind_document(
    document_id: str,
    thread_id: str,
    data_dir: str | None = None,
    config_path: str | Path | None = None,
) -> BindResult:
    """Make a document visible to an additional thread.

    Global documents are already visible everywhere and stay Global.
    """
    return _change_binding(document_id, thread_id, True, data_dir, config_path)


def unbind_document(
    document_id: str,
    thread_id: str,
    data_dir: str | None = None,
    config_path: str | Path | None = None,
) -> BindResult:
    """Remove a thread from a document's visibility.

    Global documents are unaffected.
    """
    return _change_binding(document_id, thread_id, False, data_dir, config_path)

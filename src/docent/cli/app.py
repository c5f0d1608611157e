# src/docent/cli/app.py
"""Command-line interface for Docent.

This module provides a thin Typer wrapper around the commands layer.
Each command:
1. Parses args (via Typer)
2. Creates progress and token callbacks (for Rich display)
3. Calls commands module functions
4. Renders results with Rich
"""

from __future__ import annotations

import asyncio
import logging
import os
import signal
import uuid
from typing import TYPE_CHECKING

try:
    import typer
    from rich.console import Console
    from rich.markdown import Markdown
    from rich.panel import Panel
    from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn
    from rich.table import Table
except ImportError as e:
    raise SystemExit(
        "CLI requires additional dependencies.\nInstall with: pip install docent-rag[cli]"
    ) from e

from docent import __version__
from docent.commands import (
    CommandStage,
    ProgressUpdate,
    ask,
    config_cmd,
    documents,
    ingest,
    status,
)
from docent.commands.base import (
    AskResult,
    BindResult,
    ConfirmRequest,
    DocumentInfo,
    FileIngestResult,
    IngestResult,
)
from docent.config import ConfigError, create_docent, get_docent_config, load_env_file
from docent.logger import configure_logging

if TYPE_CHECKING:
    from docent.docent import Docent

app = typer.Typer(
    name="docent",
    help="Docent - conversational answers grounded in your documents.",
    no_args_is_help=True,
)
docs_app = typer.Typer(help="Manage stored documents")
app.add_typer(docs_app, name="docs")
console = Console()


def version_callback(value: bool) -> None:
    if value:
        console.print(f"docent {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log pipeline activity to stderr.",
    ),
) -> None:
    """Docent - conversational answers grounded in your documents."""
    load_env_file()
    configure_logging(logging.DEBUG if verbose else logging.WARNING)


# Stage names for progress display
STAGE_NAMES = {
    CommandStage.SPLITTING: "Splitting",
    CommandStage.EMBEDDING: "Embedding",
    CommandStage.STORING: "Storing",
    CommandStage.LOADING: "Loading",
    CommandStage.PROCESSING: "Processing",
    CommandStage.COMPLETE: "Complete",
}

DATA_DIR_OPTION = typer.Option(
    None,
    "--data-dir",
    "-d",
    help="Data directory (default: from settings)",
)
CONFIG_OPTION = typer.Option(
    None,
    "--config",
    "-c",
    help="Path to config file",
)
PLAIN_OPTION = typer.Option(
    False,
    "--plain",
    help="Plain output (no colors/formatting)",
)


def _error(message: str | None, plain: bool = False) -> None:
    if plain:
        console.print(f"Error: {message}", markup=False)
    else:
        console.print(f"[red]Error: {message}[/red]")


@app.command(name="ingest")
def ingest_cmd(
    path: str = typer.Argument(..., help="File or directory to ingest"),
    thread: str = typer.Option(
        None,
        "--thread",
        "-t",
        help="Scope the documents to this thread (default: global)",
    ),
    data_dir: str = DATA_DIR_OPTION,
    config_file: str = CONFIG_OPTION,
    plain: bool = PLAIN_OPTION,
    no_progress: bool = typer.Option(
        False,
        "--no-progress",
        help="Disable progress bars",
    ),
) -> None:
    """Ingest a file or directory."""
    show_progress = not plain and not no_progress and console.is_terminal

    if show_progress:
        _ingest_with_progress(path, thread, data_dir, config_file)
    else:
        _ingest_simple(path, thread, data_dir, config_file, plain)


def _ingest_with_progress(
    path: str,
    thread: str | None,
    data_dir: str | None,
    config_file: str | None,
) -> None:
    """Ingest with Rich progress bars."""
    with Progress(
        SpinnerColumn(),
        TextColumn("[bold]{task.fields[stage]:>12}", justify="right"),
        BarColumn(bar_width=20),
        TextColumn("{task.fields[progress_text]}", style="cyan"),
        TextColumn("{task.description}", style="dim"),
        console=console,
    ) as progress:
        files_task = progress.add_task("", total=None, stage="Files", progress_text="")
        stage_task = progress.add_task("", total=100, stage="", visible=False, progress_text="")

        total_files = 0

        def on_file_start(filepath: str, index: int, total: int) -> None:
            nonlocal total_files
            total_files = total
            progress.update(
                files_task,
                description=os.path.basename(filepath),
                completed=index,
                total=total,
                progress_text=f"{index + 1}/{total}",
            )

        def on_progress(update: ProgressUpdate) -> None:
            progress.update(
                stage_task,
                visible=True,
                stage=STAGE_NAMES.get(update.stage, update.stage.value),
                progress_text="",
                description=update.message or "",
                total=None,
            )

        def on_file_complete(result: FileIngestResult) -> None:
            progress.update(stage_task, visible=False)

        result = ingest.ingest(
            path=path,
            thread_id=thread,
            data_dir=data_dir,
            config_path=config_file,
            on_progress=on_progress,
            on_file_start=on_file_start,
            on_file_complete=on_file_complete,
        )

        progress.update(files_task, completed=total_files, progress_text="Done", description="")

    _render_ingest_result(result, plain=False)


def _ingest_simple(
    path: str,
    thread: str | None,
    data_dir: str | None,
    config_file: str | None,
    plain: bool,
) -> None:
    """Ingest with simple console output."""

    def on_file_complete(file_result: FileIngestResult) -> None:
        if plain:
            return
        if file_result.failed:
            console.print(f"[red]Failed {file_result.filepath}: {file_result.reason}[/red]")
        else:
            console.print(f"[green]Ingested {file_result.filepath}[/green]")

    result = ingest.ingest(
        path=path,
        thread_id=thread,
        data_dir=data_dir,
        config_path=config_file,
        on_file_complete=on_file_complete,
    )

    _render_ingest_result(result, plain=plain)


def _render_ingest_result(result: IngestResult, plain: bool) -> None:
    """Render ingest result to console."""
    if not result.success:
        _error(result.error, plain)
        raise typer.Exit(1)

    summary = (
        f"Ingested {result.files_processed} files "
        f"({result.total_chunks} chunks, {result.total_bytes} bytes)"
    )
    if plain:
        console.print(summary)
        for filepath, reason in result.errors:
            console.print(f"Failed {filepath}: {reason}")
    else:
        console.print()
        console.print(f"[green]{summary}[/green]")
        for filepath, reason in result.errors:
            console.print(f"[red]Failed {filepath}: {reason}[/red]")
        if result.error and result.files_processed == 0:
            console.print(f"[dim]{result.error}[/dim]")


def _render_ask_result(result: AskResult, plain: bool, streamed: bool) -> None:
    """Render the terminal outcome of a turn."""
    if result.status == "completed":
        if not streamed:
            if plain:
                console.print(result.answer)
            else:
                console.print(Panel(Markdown(result.answer), title="Answer", border_style="green"))
        return
    if result.status == "cancelled":
        console.print("Cancelled." if plain else "[yellow]Cancelled.[/yellow]")
        return
    _error(result.error, plain)
    raise typer.Exit(1)


@app.command(name="ask")
def ask_cmd(
    question: str = typer.Argument(..., help="Question to ask"),
    thread: str = typer.Option(
        "default",
        "--thread",
        "-t",
        help="Conversation thread",
    ),
    scope: str = typer.Option(
        None,
        "--scope",
        "-s",
        help="Thread whose documents are searched (default: the conversation thread)",
    ),
    no_docs: bool = typer.Option(
        False,
        "--no-docs",
        help="Answer without searching documents",
    ),
    stream: bool = typer.Option(
        True,
        "--stream/--no-stream",
        help="Print tokens as they arrive",
    ),
    data_dir: str = DATA_DIR_OPTION,
    config_file: str = CONFIG_OPTION,
    plain: bool = PLAIN_OPTION,
) -> None:
    """Ask one question on a conversation thread."""
    effective_scope = None if no_docs else (scope or thread)

    def on_token(token: str) -> None:
        console.print(token, end="", markup=False, highlight=False)

    result = ask.ask(
        question=question,
        thread_id=thread,
        scope=effective_scope,
        data_dir=data_dir,
        config_path=config_file,
        on_token=on_token if stream else None,
    )
    if stream and result.answer:
        console.print()
    _render_ask_result(result, plain, streamed=stream)


@app.command(name="chat")
def chat_cmd(
    thread: str = typer.Option(
        None,
        "--thread",
        "-t",
        help="Conversation thread (default: a new thread)",
    ),
    scope: str = typer.Option(
        None,
        "--scope",
        "-s",
        help="Thread whose documents are searched (default: the conversation thread)",
    ),
    no_docs: bool = typer.Option(
        False,
        "--no-docs",
        help="Answer without searching documents",
    ),
    data_dir: str = DATA_DIR_OPTION,
    config_file: str = CONFIG_OPTION,
) -> None:
    """Interactive chat. Ctrl-C cancels the answer in progress; 'exit' quits."""
    config = get_docent_config(data_dir, config_file)
    if isinstance(config, ConfigError):
        _error(config.message)
        if config.suggestion:
            console.print(f"[dim]{config.suggestion}[/dim]")
        raise typer.Exit(1)

    thread_id = thread or f"chat-{uuid.uuid4().hex[:8]}"
    effective_scope = None if no_docs else (scope or thread_id)
    docent = create_docent(config)
    console.print(f"[dim]Thread {thread_id}. Type 'exit' to quit.[/dim]")

    try:
        asyncio.run(_chat_loop(docent, thread_id, effective_scope))
    except KeyboardInterrupt:
        console.print()
    finally:
        docent.close()


async def _chat_loop(docent: Docent, thread_id: str, scope: str | None) -> None:
    loop = asyncio.get_running_loop()
    while True:
        try:
            question = await asyncio.to_thread(console.input, "[bold cyan]> [/bold cyan]")
        except (EOFError, KeyboardInterrupt):
            console.print()
            return
        if question.strip().lower() in ("exit", "quit"):
            return
        if not question.strip():
            continue

        disconnect = asyncio.Event()
        try:
            loop.add_signal_handler(signal.SIGINT, disconnect.set)
            handler_installed = True
        except (NotImplementedError, RuntimeError):
            handler_installed = False
        try:
            result = await ask.ask_with_docent(
                docent,
                question,
                thread_id,
                scope,
                on_token=lambda token: console.print(
                    token, end="", markup=False, highlight=False
                ),
                disconnect=disconnect,
            )
        finally:
            if handler_installed:
                loop.remove_signal_handler(signal.SIGINT)

        console.print()
        if result.status == "cancelled":
            console.print("[yellow]Cancelled.[/yellow]")
        elif result.status == "failed":
            console.print(f"[red]Error: {result.error}[/red]")


def _document_row(info: DocumentInfo) -> tuple[str, ...]:
    scope = "global" if info.visibility == "global" else ", ".join(info.threads) or "(unbound)"
    return (info.document_id, info.filename, scope, str(info.chunk_count), str(info.bytes))


@docs_app.command(name="list")
def list_docs_cmd(
    thread: str = typer.Option(
        None,
        "--thread",
        "-t",
        help="Only documents visible to this thread",
    ),
    data_dir: str = DATA_DIR_OPTION,
    config_file: str = CONFIG_OPTION,
    plain: bool = PLAIN_OPTION,
) -> None:
    """List stored documents."""
    result = documents.list_documents(thread_id=thread, data_dir=data_dir, config_path=config_file)

    if not result.success:
        _error(result.error, plain)
        raise typer.Exit(1)

    if not result.documents:
        console.print("No documents stored." if plain else "[dim]No documents stored.[/dim]")
        raise typer.Exit(0)

    if plain:
        console.print(f"Documents ({len(result.documents)}):")
        for info in result.documents:
            doc_id, filename, scope, chunks, size = _document_row(info)
            console.print(
                f"  {doc_id}  {filename}  [{scope}]  {chunks} chunks, {size} bytes", markup=False
            )
        return

    table = Table(title=f"Documents ({len(result.documents)})")
    table.add_column("ID", style="dim")
    table.add_column("Filename", style="cyan")
    table.add_column("Visible to")
    table.add_column("Chunks", justify="right")
    table.add_column("Bytes", justify="right")
    for info in result.documents:
        table.add_row(*_document_row(info))
    console.print(table)


@docs_app.command(name="delete")
def delete_doc_cmd(
    document_id: str = typer.Argument(..., help="Document id to delete"),
    data_dir: str = DATA_DIR_OPTION,
    config_file: str = CONFIG_OPTION,
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Skip confirmation prompt",
    ),
    plain: bool = PLAIN_OPTION,
) -> None:
    """Delete a document and all its chunks."""

    def cli_confirm(request: ConfirmRequest) -> bool:
        """CLI confirmation callback using typer.confirm."""
        if request.details:
            if plain:
                console.print(request.details)
            else:
                console.print(f"[yellow]{request.details}[/yellow]")
        return typer.confirm(request.message)

    result = documents.delete_document(
        document_id,
        data_dir=data_dir,
        config_path=config_file,
        on_confirm=None if force else cli_confirm,
    )

    if not result.success:
        # Handle cancellation gracefully (exit 0, not error)
        if result.error == "Cancelled.":
            console.print("Cancelled.")
            raise typer.Exit(0)
        _error(result.error, plain)
        raise typer.Exit(1)

    message = f"Deleted {result.filename} ({result.chunks_deleted} chunks)"
    console.print(message if plain else f"[green]{message}[/green]")


def _render_bind_result(result: BindResult, plain: bool) -> None:
    if not result.success or result.document is None:
        _error(result.error, plain)
        raise typer.Exit(1)
    _, filename, scope, _, _ = _document_row(result.document)
    message = f"{filename} is visible to: {scope}"
    console.print(message if plain else f"[green]{message}[/green]")


@docs_app.command(name="bind")
def bind_doc_cmd(
    document_id: str = typer.Argument(..., help="Document id"),
    thread: str = typer.Argument(..., help="Thread to grant access"),
    data_dir: str = DATA_DIR_OPTION,
    config_file: str = CONFIG_OPTION,
    plain: bool = PLAIN_OPTION,
) -> None:
    """Make a document visible to another thread."""
    result = documents.bind_document(
        document_id, thread, data_dir=data_dir, config_path=config_file
    )
    _render_bind_result(result, plain)


@docs_app.command(name="unbind")
def unbind_doc_cmd(
    document_id: str = typer.Argument(..., help="Document id"),
    thread: str = typer.Argument(..., help="Thread to revoke"),
    data_dir: str = DATA_DIR_OPTION,
    config_file: str = CONFIG_OPTION,
    plain: bool = PLAIN_OPTION,
) -> None:
    """Remove a thread from a document's visibility."""
    result = documents.unbind_document(
        document_id, thread, data_dir=data_dir, config_path=config_file
    )
    _render_bind_result(result, plain)


@app.command(name="status")
def status_cmd(
    data_dir: str = DATA_DIR_OPTION,
    config_file: str = CONFIG_OPTION,
    plain: bool = PLAIN_OPTION,
) -> None:
    """Show storage statistics."""
    result = status.status(data_dir=data_dir, config_path=config_file)

    if not result.success:
        _error(result.error, plain)
        raise typer.Exit(1)

    rows = [
        ("Documents", str(result.total_documents)),
        ("Chunks", str(result.total_chunks)),
        ("Storage", f"{result.total_bytes} / {result.max_total_bytes} bytes"),
        ("Threads", str(result.total_threads)),
    ]
    if plain:
        console.print("Status:")
        for name, value in rows:
            console.print(f"  {name}: {value}")
        return

    table = Table(title="Docent Status")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green", justify="right")
    for name, value in rows:
        table.add_row(name, value)
    console.print(table)


@app.command(name="config")
def config_cmd_handler(
    config_file: str = CONFIG_OPTION,
) -> None:
    """Show current configuration settings."""
    result = config_cmd.config(config_path=config_file)

    if not result.success:
        _error(result.error)
        raise typer.Exit(1)

    table = Table(title="Docent Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    table.add_column("Source", style="dim")

    table.add_row("provider", result.provider, "yaml" if result.config_path else "default")
    if result.provider == "litellm":
        table.add_row("llm_model", result.llm_model or "(not set)", "")
        table.add_row("embedding_model", result.embedding_model or "(not set)", "")
    table.add_row("data_dir", result.data_dir, "")
    table.add_row("vector_backend", result.vector_backend, "")

    table.add_row("", "", "")

    for setting in result.settings:
        table.add_row(setting.name, setting.value, setting.source)

    console.print(table)

    if result.config_path:
        console.print(f"\n[dim]Config file: {result.config_path}[/dim]")
    else:
        console.print("\n[dim]No config file found. Using env vars / defaults.[/dim]")

    console.print("\n[dim]Precedence: env var > yaml settings > default[/dim]")

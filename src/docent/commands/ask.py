# src/docent/commands/ask.py
"""Ask command - run one conversational turn.

This module provides the turn logic that the CLI and library callers use.
Tokens are delivered through a callback as they stream in.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from docent.commands.base import AskResult
from docent.config import ConfigError, create_docent, get_docent_config
from docent.exceptions import InputValidationError
from docent.models import Cancelled, Completed, Failed, TokenDelta

if TYPE_CHECKING:
    from docent.docent import Docent

# Callback receiving each streamed token
TokenCallback = Callable[[str], None]


def ask(
    question: str,
    thread_id: str,
    scope: str | None = None,
    data_dir: str | None = None,
    config_path: str | Path | None = None,
    on_token: TokenCallback | None = None,
) -> AskResult:
    """Ask a question on a thread.

    Args:
        question: The user's message
        thread_id: Conversation the turn belongs to
        scope: Thread whose documents are searched along with Global ones.
               None answers without retrieval.
        data_dir: Override data directory
        config_path: Override config file path
        on_token: Optional callback for each streamed token

    Returns:
        AskResult with the terminal status and answer
    """
    config = get_docent_config(data_dir, config_path)
    if isinstance(config, ConfigError):
        return AskResult(
            success=False, thread_id=thread_id, question=question, error=config.message
        )

    try:
        docent = create_docent(config)
    except Exception as e:
        return AskResult(
            success=False,
            thread_id=thread_id,
            question=question,
            error=f"Failed to create Docent: {e}",
        )

    try:
        return asyncio.run(ask_with_docent(docent, question, thread_id, scope, on_token))
    finally:
        docent.close()


async def ask_with_docent(
    docent: Docent,
    question: str,
    thread_id: str,
    scope: str | None = None,
    on_token: TokenCallback | None = None,
    disconnect: asyncio.Event | None = None,
) -> AskResult:
    """Ask a question using an existing Docent instance.

    Args:
        docent: Existing Docent instance
        question: The user's message
        thread_id: Conversation the turn belongs to
        scope: Retrieval scope, or None
        on_token: Optional callback for each streamed token
        disconnect: Set this event to cancel the turn

    Returns:
        AskResult with the terminal status and answer
    """
    result = AskResult(success=False, thread_id=thread_id, question=question)
    try:
        events = docent.submit_turn(thread_id, question, scope, disconnect=disconnect)
    except InputValidationError as e:
        result.status = "failed"
        result.error_kind = e.kind.value
        result.error = str(e)
        return result

    async for event in events:
        if isinstance(event, TokenDelta):
            if on_token:
                on_token(event.token_delta)
        elif isinstance(event, Completed):
            result.success = True
            result.status = "completed"
            result.answer = event.text
            result.turn_id = event.turn_id
        elif isinstance(event, Failed):
            result.status = "failed"
            result.error_kind = event.kind
            result.error = f"Turn failed: {event.kind}"
        elif isinstance(event, Cancelled):
            result.status = "cancelled"
            result.answer = event.partial_text
            result.error = "Cancelled."
    return result

# src/docent/rewriter.py
"""Standalone query rewriting."""

import asyncio
import logging
from dataclasses import dataclass

from docent.exceptions import RewriteFailure
from docent.models import Message, Role
from docent.prompts import REWRITE_PROMPT
from docent.providers.base import LLMClient

logger = logging.getLogger(__name__)


@dataclass
class RewriteOutcome:
    """Result of a rewrite call.

    The query is internal to the turn: it is used for retrieval and must not
    be shown to the user or stored as their message.
    """

    query: str
    rewritten: bool = False
    warning: RewriteFailure | None = None


class QueryRewriter:
    """Turns the latest user message into a standalone search query.

    First turns and logs that don't end with a user message pass through
    without a model call. Any failure falls back to the literal text.
    """

    def __init__(
        self,
        llm_client: LLMClient,
        window: int = 3,
        timeout: float = 15.0,
        temperature: float | None = 0.0,
        prompt: str | None = None,
    ) -> None:
        """Initialize the rewriter.

        Args:
            llm_client: LLM used for rewriting
            window: Number of most recent messages sent with the instruction
            timeout: Timeout for the rewrite call in seconds
            temperature: Temperature for the rewrite call
            prompt: Custom rewrite instruction
        """
        self._llm_client = llm_client
        self.window = window
        self.timeout = timeout
        self.temperature = temperature
        self.prompt = prompt or REWRITE_PROMPT

    async def rewrite(self, log: list[Message]) -> RewriteOutcome:
        """Produce the working query for a turn from the thread's log."""
        if not log:
            return RewriteOutcome(query="")
        literal = log[-1].content
        if len(log) <= 1 or log[-1].role is not Role.USER:
            return RewriteOutcome(query=literal)

        messages = [{"role": "system", "content": self.prompt}]
        messages.extend(m.to_llm() for m in log[-self.window :])
        try:
            query = await asyncio.wait_for(
                self._llm_client.acomplete(messages, temperature=self.temperature),
                timeout=self.timeout,
            )
        except asyncio.CancelledError:
            raise
        except Exception as e:
            failure = RewriteFailure(f"Query rewrite failed: {type(e).__name__}: {e}")
            logger.warning("Using literal query: %s", failure)
            return RewriteOutcome(query=literal, warning=failure)

        query = query.strip()
        if not query:
            failure = RewriteFailure("LLM returned an empty query")
            logger.warning("Using literal query: %s", failure)
            return RewriteOutcome(query=literal, warning=failure)

        logger.debug("Rewrote query %r -> %r", literal, query)
        return RewriteOutcome(query=query, rewritten=True)

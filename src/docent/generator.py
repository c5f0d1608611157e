# src/docent/generator.py
"""Streaming answer generation with timeout and disconnect handling."""

import asyncio
import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Any

from docent.exceptions import GenerationFailure
from docent.models import Message
from docent.providers.base import LLMClient

logger = logging.getLogger(__name__)


@dataclass
class Fragment:
    """An incremental piece of the answer."""

    text: str


@dataclass
class Finished:
    """The stream ended normally; text is the full answer."""

    text: str


class GenerationCancelled(Exception):
    """Raised when the disconnect signal fires during generation."""

    def __init__(self, partial_text: str = "") -> None:
        super().__init__("Generation cancelled by disconnect")
        self.partial_text = partial_text


async def _pull(iterator: AsyncIterator[str]) -> tuple[bool, str]:
    try:
        return True, await iterator.__anext__()
    except StopAsyncIteration:
        return False, ""


async def _close(iterator: Any) -> None:
    close = getattr(iterator, "aclose", None)
    if close is None:
        return
    try:
        await close()
    except Exception:
        logger.debug("Closing the upstream stream failed", exc_info=True)


class StreamingGenerator:
    """Drives the LLM stream for the final answer.

    Yields Fragment events followed by exactly one Finished event. Each wait
    for the next fragment is bounded by `timeout` and raced against the
    optional disconnect event. The upstream stream is always closed, whether
    the turn completes, fails, is cancelled or is abandoned by its consumer.
    """

    def __init__(
        self,
        llm_client: LLMClient,
        temperature: float | None = 0.7,
        timeout: float = 60.0,
    ) -> None:
        """Initialize the generator.

        Args:
            llm_client: LLM used for the answer
            temperature: Temperature for generation
            timeout: Maximum wait in seconds for each fragment, including the first
        """
        self._llm_client = llm_client
        self.temperature = temperature
        self.timeout = timeout

    def build_messages(self, instruction: str, history: list[Message]) -> list[dict]:
        """Instruction as the system message, followed by the thread's log."""
        return [
            {"role": "system", "content": instruction},
            *(message.to_llm() for message in history),
        ]

    async def stream(
        self,
        instruction: str,
        history: list[Message],
        disconnect: asyncio.Event | None = None,
    ) -> AsyncIterator[Fragment | Finished]:
        """Stream the answer.

        Raises:
            GenerationFailure: If the LLM call fails or times out.
            GenerationCancelled: If disconnect is set before the stream ends.
        """
        messages = self.build_messages(instruction, history)
        parts: list[str] = []
        iterator = self._llm_client.astream(messages, temperature=self.temperature).__aiter__()
        try:
            while True:
                try:
                    has_more, text = await self._next(iterator, disconnect)
                except GenerationCancelled:
                    raise GenerationCancelled("".join(parts)) from None
                except GenerationFailure:
                    raise
                except Exception as e:
                    raise GenerationFailure(f"Generation failed: {type(e).__name__}: {e}") from e
                if not has_more:
                    break
                if text:
                    parts.append(text)
                    yield Fragment(text)
        finally:
            await _close(iterator)
        yield Finished("".join(parts))

    async def _next(
        self,
        iterator: AsyncIterator[str],
        disconnect: asyncio.Event | None,
    ) -> tuple[bool, str]:
        pull = asyncio.ensure_future(_pull(iterator))
        waiters: set[asyncio.Future] = {pull}
        stop: asyncio.Future | None = None
        if disconnect is not None:
            stop = asyncio.ensure_future(disconnect.wait())
            waiters.add(stop)
        try:
            done, _ = await asyncio.wait(
                waiters, timeout=self.timeout, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            for waiter in waiters:
                if not waiter.done():
                    waiter.cancel()
            # The pull must settle before the upstream generator can be closed
            await asyncio.gather(*waiters, return_exceptions=True)

        if stop is not None and stop in done:
            raise GenerationCancelled()
        if pull in done:
            return pull.result()
        raise GenerationFailure(
            f"No output from the model within {self.timeout}s", timed_out=True
        )

# src/docent/memory.py
"""Conversation memory: per-thread message logs with summarization.

Threads are created on first use (hydrated from the log store when one is
configured) and kept in an LRU registry. Idle threads past the TTL and the
least recently used threads beyond max_threads are dropped from memory; a
thread pinned by a running or queued turn is never dropped.
"""

import asyncio
import logging
import time
from collections import OrderedDict
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import UTC, datetime

from docent.exceptions import SummarizationFailure
from docent.models import ConversationThread, Message, Role
from docent.prompts import SUMMARY_PROMPT
from docent.providers.base import LLMClient
from docent.stores.base import ConversationLogStore

logger = logging.getLogger(__name__)


@dataclass
class SummaryOutcome:
    """Result of a maybe_summarize call.

    Attributes:
        summarized: True if the log was replaced by [Summary] + kept messages
        dropped: Number of messages folded into the summary
        warning: The failure, if summarization was attempted and failed
    """

    summarized: bool = False
    dropped: int = 0
    warning: SummarizationFailure | None = None


@dataclass
class _Entry:
    thread: ConversationThread
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    last_used: float = 0.0
    pins: int = 0


def render_transcript(messages: list[Message]) -> str:
    """Render messages as a plain-text transcript for summarization."""
    labels = {Role.USER: "User", Role.ASSISTANT: "Assistant", Role.SUMMARY: "Earlier summary"}
    return "\n\n".join(f"{labels[m.role]}: {m.content}" for m in messages)


class ConversationMemory:
    """Registry of conversation threads with a summarization policy."""

    def __init__(
        self,
        llm_client: LLMClient,
        log_store: ConversationLogStore | None = None,
        *,
        max_threads: int = 1000,
        idle_ttl: float | None = 3600.0,
        summary_timeout: float = 30.0,
        summary_temperature: float | None = 0.0,
        summary_prompt: str | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize conversation memory.

        Args:
            llm_client: LLM used to write summaries
            log_store: Durable log used to hydrate threads on first use
            max_threads: Maximum number of threads kept in memory
            idle_ttl: Seconds of inactivity before a thread may be dropped (None disables)
            summary_timeout: Timeout for the summary call in seconds
            summary_temperature: Temperature for the summary call
            summary_prompt: Custom summary instruction
            clock: Monotonic clock, injectable for tests
        """
        self._llm_client = llm_client
        self._log_store = log_store
        self.max_threads = max_threads
        self.idle_ttl = idle_ttl
        self.summary_timeout = summary_timeout
        self.summary_temperature = summary_temperature
        self.summary_prompt = summary_prompt or SUMMARY_PROMPT
        self._clock = clock
        self._entries: OrderedDict[str, _Entry] = OrderedDict()

    def __contains__(self, thread_id: object) -> bool:
        return thread_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def _entry(self, thread_id: str, logged: list[Message] | None = None) -> _Entry:
        entry = self._entries.get(thread_id)
        if entry is None:
            if logged is None and self._log_store is not None:
                logged = self._log_store.read(thread_id)
            entry = _Entry(thread=self._hydrate(thread_id, logged or []))
            self._entries[thread_id] = entry
            self._evict(keep=thread_id)
        else:
            self._entries.move_to_end(thread_id)
        entry.last_used = self._clock()
        return entry

    def _hydrate(self, thread_id: str, logged: list[Message]) -> ConversationThread:
        thread = ConversationThread(thread_id=thread_id)
        for message in logged:
            thread.append(message)
        thread.turn_count = sum(1 for m in thread.messages if m.role is Role.USER)
        if thread.messages:
            logger.debug("Hydrated thread %s with %d messages", thread_id, len(thread.messages))
        return thread

    def _evict(self, keep: str) -> None:
        now = self._clock()
        if self.idle_ttl is not None:
            expired = [
                thread_id
                for thread_id, entry in self._entries.items()
                if thread_id != keep and not entry.pins and now - entry.last_used > self.idle_ttl
            ]
            for thread_id in expired:
                del self._entries[thread_id]
                logger.debug("Evicted idle thread %s", thread_id)

        if len(self._entries) <= self.max_threads:
            return
        # OrderedDict order is least recently used first
        for thread_id in list(self._entries):
            if len(self._entries) <= self.max_threads:
                break
            if thread_id == keep or self._entries[thread_id].pins:
                continue
            del self._entries[thread_id]
            logger.debug("Evicted least recently used thread %s", thread_id)

    def get(self, thread_id: str) -> ConversationThread:
        """Get a thread, creating it on first use."""
        return self._entry(thread_id).thread

    def pinned(self, thread_id: str) -> bool:
        """True while a turn holds or waits for the thread's lock."""
        entry = self._entries.get(thread_id)
        return entry is not None and entry.pins > 0

    @asynccontextmanager
    async def acquire(self, thread_id: str) -> AsyncIterator[ConversationThread]:
        """Hold the thread's lock for one turn.

        The thread is pinned, and so never evicted, from before the lock is
        awaited until after it is released.
        A thread not yet in memory is read from the log store off the event
        loop.
        """
        logged = None
        if thread_id not in self._entries and self._log_store is not None:
            logged = await asyncio.to_thread(self._log_store.read, thread_id)
        entry = self._entry(thread_id, logged)
        entry.pins += 1
        try:
            async with entry.lock:
                yield entry.thread
        finally:
            entry.pins -= 1
            entry.last_used = self._clock()

    def history(self, thread_id: str) -> list[Message]:
        """A copy of the thread's current (possibly summarized) log."""
        return list(self.get(thread_id).messages)

    def append(self, thread_id: str, message: Message) -> Message:
        """Append a message to a thread. Returns the message with its position."""
        thread = self.get(thread_id)
        stamped = thread.append(message)
        if message.role is Role.USER:
            thread.turn_count += 1
        thread.last_turn_at = datetime.now(UTC)
        return stamped

    async def maybe_summarize(
        self,
        thread_id: str,
        trigger: int = 12,
        keep: int = 4,
    ) -> SummaryOutcome:
        """Collapse a long log into [Summary] + the last `keep` messages.

        No-op while the log has at most `trigger` messages, so repeated calls
        without new messages leave the log unchanged. On failure the log is
        left untouched and the outcome carries the warning.
        """
        if keep >= trigger:
            raise ValueError(f"keep ({keep}) must be less than trigger ({trigger})")

        thread = self.get(thread_id)
        if len(thread.messages) <= trigger:
            return SummaryOutcome()

        drop_count = len(thread.messages) - keep
        dropped = thread.messages[:drop_count]
        try:
            summary_text = await asyncio.wait_for(
                self._llm_client.acomplete(
                    [
                        {"role": "system", "content": self.summary_prompt},
                        {"role": "user", "content": render_transcript(dropped)},
                    ],
                    temperature=self.summary_temperature,
                ),
                timeout=self.summary_timeout,
            )
            summary_text = summary_text.strip()
            if not summary_text:
                raise SummarizationFailure("LLM returned an empty summary")
        except asyncio.CancelledError:
            raise
        except SummarizationFailure as e:
            logger.warning("Summarization skipped for thread %s: %s", thread_id, e)
            return SummaryOutcome(warning=e)
        except Exception as e:
            failure = SummarizationFailure(
                f"Summarizing thread {thread_id} failed: {type(e).__name__}: {e}"
            )
            logger.warning("Summarization skipped for thread %s: %s", thread_id, failure)
            return SummaryOutcome(warning=failure)

        summary = Message(
            role=Role.SUMMARY,
            content=summary_text,
            position=dropped[-1].position,
        )
        thread.messages = [summary, *thread.messages[drop_count:]]
        logger.debug(
            "Summarized thread %s: %d messages folded, %d kept", thread_id, drop_count, keep
        )
        return SummaryOutcome(summarized=True, dropped=drop_count)

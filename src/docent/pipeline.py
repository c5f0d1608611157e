# src/docent/pipeline.py
"""Turn pipeline: a fixed chain of stages over one shared turn state.

Stages run in the order given by PRE_GENERATION_STAGES, followed by streamed
generation. Each stage is a plain async function taking the Pipeline and the
TurnState; degraded stages record a warning on the state instead of raising.

Turn states:

    RECEIVED -> MEMORY_UPDATED -> (SUMMARIZED | UNCHANGED) -> QUERY_READY
      -> (RETRIEVED | SKIPPED) -> CONTEXT_ASSEMBLED -> PROMPT_COMPOSED
      -> GENERATING -> (COMPLETED | FAILED | CANCELLED)

FAILED and CANCELLED are reachable from every non-terminal state.
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from uuid import uuid4

from docent.context import ContextAssembler
from docent.exceptions import (
    ErrorKind,
    GenerationFailure,
    InputValidationError,
    InvalidTransitionError,
    RetrievalUnavailable,
)
from docent.generator import Finished, Fragment, GenerationCancelled, StreamingGenerator
from docent.memory import ConversationMemory
from docent.models import (
    Cancelled,
    Completed,
    Failed,
    GroundingContext,
    Message,
    RetrievalResult,
    TokenDelta,
)
from docent.prompts import PromptComposer
from docent.retriever import Retriever
from docent.rewriter import QueryRewriter
from docent.stores.base import ConversationLogStore

logger = logging.getLogger(__name__)

TurnEventType = TokenDelta | Completed | Failed | Cancelled


class TurnStatus(str, Enum):
    """States of a single turn."""

    RECEIVED = "received"
    MEMORY_UPDATED = "memory_updated"
    SUMMARIZED = "summarized"
    UNCHANGED = "unchanged"
    QUERY_READY = "query_ready"
    RETRIEVED = "retrieved"
    SKIPPED = "skipped"
    CONTEXT_ASSEMBLED = "context_assembled"
    PROMPT_COMPOSED = "prompt_composed"
    GENERATING = "generating"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset({TurnStatus.COMPLETED, TurnStatus.FAILED, TurnStatus.CANCELLED})

_ENDINGS = {TurnStatus.FAILED, TurnStatus.CANCELLED}

TRANSITIONS: dict[TurnStatus, frozenset[TurnStatus]] = {
    TurnStatus.RECEIVED: frozenset({TurnStatus.MEMORY_UPDATED, *_ENDINGS}),
    TurnStatus.MEMORY_UPDATED: frozenset(
        {TurnStatus.SUMMARIZED, TurnStatus.UNCHANGED, *_ENDINGS}
    ),
    TurnStatus.SUMMARIZED: frozenset({TurnStatus.QUERY_READY, *_ENDINGS}),
    TurnStatus.UNCHANGED: frozenset({TurnStatus.QUERY_READY, *_ENDINGS}),
    TurnStatus.QUERY_READY: frozenset({TurnStatus.RETRIEVED, TurnStatus.SKIPPED, *_ENDINGS}),
    TurnStatus.RETRIEVED: frozenset({TurnStatus.CONTEXT_ASSEMBLED, *_ENDINGS}),
    TurnStatus.SKIPPED: frozenset({TurnStatus.CONTEXT_ASSEMBLED, *_ENDINGS}),
    TurnStatus.CONTEXT_ASSEMBLED: frozenset({TurnStatus.PROMPT_COMPOSED, *_ENDINGS}),
    TurnStatus.PROMPT_COMPOSED: frozenset({TurnStatus.GENERATING, *_ENDINGS}),
    TurnStatus.GENERATING: frozenset({TurnStatus.COMPLETED, *_ENDINGS}),
    TurnStatus.COMPLETED: frozenset(),
    TurnStatus.FAILED: frozenset(),
    TurnStatus.CANCELLED: frozenset(),
}


@dataclass
class TurnState:
    """Working record for one turn, handed from stage to stage.

    query is the standalone (possibly rewritten) search query. It never
    leaves the pipeline in an event and is never persisted.
    """

    thread_id: str
    user_text: str
    scope: str | None = None
    turn_id: str = field(default_factory=lambda: str(uuid4()))
    status: TurnStatus = TurnStatus.RECEIVED
    history: list[Message] = field(default_factory=list)
    query: str = ""
    results: list[RetrievalResult] = field(default_factory=list)
    context: GroundingContext = field(default_factory=GroundingContext)
    instruction: str = ""
    answer: str = ""
    warnings: list[ErrorKind] = field(default_factory=list)
    error: ErrorKind | None = None

    def advance(self, status: TurnStatus) -> None:
        """Move to status, enforcing the turn state machine."""
        if status not in TRANSITIONS[self.status]:
            raise InvalidTransitionError(
                f"Turn {self.turn_id}: {self.status.value} -> {status.value} is not allowed"
            )
        self.status = status


Stage = Callable[["Pipeline", TurnState], Awaitable[None]]


async def update_memory(pipeline: "Pipeline", state: TurnState) -> None:
    """Append the user's message to memory and to the durable log."""
    message = pipeline.memory.append(state.thread_id, Message.user(state.user_text))
    if pipeline.log_store is not None:
        await asyncio.to_thread(pipeline.log_store.append, state.thread_id, message)
    pipeline.advance(state, TurnStatus.MEMORY_UPDATED)


async def maybe_summarize(pipeline: "Pipeline", state: TurnState) -> None:
    """Collapse a long log into a summary plus the most recent messages."""
    outcome = await pipeline.memory.maybe_summarize(
        state.thread_id, trigger=pipeline.summary_trigger, keep=pipeline.summary_keep
    )
    if outcome.warning is not None:
        state.warnings.append(outcome.warning.kind)
    state.history = pipeline.memory.history(state.thread_id)
    pipeline.advance(state, TurnStatus.SUMMARIZED if outcome.summarized else TurnStatus.UNCHANGED)


async def rewrite_query(pipeline: "Pipeline", state: TurnState) -> None:
    """Derive the standalone search query."""
    outcome = await pipeline.rewriter.rewrite(state.history)
    if outcome.warning is not None:
        state.warnings.append(outcome.warning.kind)
    state.query = outcome.query
    pipeline.advance(state, TurnStatus.QUERY_READY)


async def retrieve_context(pipeline: "Pipeline", state: TurnState) -> None:
    """Retrieve chunks visible to the turn's scope. Skipped without a scope."""
    if state.scope is None or not state.query.strip():
        pipeline.advance(state, TurnStatus.SKIPPED)
        return
    try:
        state.results = await pipeline.retriever.retrieve(state.query, state.scope)
    except RetrievalUnavailable as e:
        logger.warning("Answering turn %s without grounding: %s", state.turn_id, e)
        state.warnings.append(e.kind)
        state.results = []
    pipeline.advance(state, TurnStatus.RETRIEVED)


async def assemble_context(pipeline: "Pipeline", state: TurnState) -> None:
    state.context = pipeline.assembler.assemble(state.results)
    pipeline.advance(state, TurnStatus.CONTEXT_ASSEMBLED)


async def compose_prompt(pipeline: "Pipeline", state: TurnState) -> None:
    state.instruction = pipeline.composer.compose(state.context.text)
    pipeline.advance(state, TurnStatus.PROMPT_COMPOSED)


PRE_GENERATION_STAGES: tuple[Stage, ...] = (
    update_memory,
    maybe_summarize,
    rewrite_query,
    retrieve_context,
    assemble_context,
    compose_prompt,
)


class Pipeline:
    """Runs turns through the stage chain and streams boundary events.

    Turns on the same thread run strictly one after another (the thread is
    pinned in memory and its lock held for the whole turn); turns on different
    threads run concurrently.

    Example:
        async for event in pipeline.submit_turn("thread-1", "What is in the report?", "thread-1"):
            print(event.to_dict())
    """

    def __init__(
        self,
        memory: ConversationMemory,
        rewriter: QueryRewriter,
        retriever: Retriever,
        assembler: ContextAssembler,
        composer: PromptComposer,
        generator: StreamingGenerator,
        log_store: ConversationLogStore | None = None,
        summary_trigger: int = 12,
        summary_keep: int = 4,
        on_transition: Callable[[TurnState], None] | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            memory: Conversation memory holding thread logs
            rewriter: Standalone query rewriter
            retriever: Scoped chunk retriever
            assembler: Context assembler
            composer: Grounding prompt composer
            generator: Streaming answer generator
            log_store: Durable log receiving user messages and completed answers
            summary_trigger: Log length above which the log is summarized
            summary_keep: Messages kept verbatim after summarization
            on_transition: Called with the turn state after every state change
        """
        self.memory = memory
        self.rewriter = rewriter
        self.retriever = retriever
        self.assembler = assembler
        self.composer = composer
        self.generator = generator
        self.log_store = log_store
        self.summary_trigger = summary_trigger
        self.summary_keep = summary_keep
        self.on_transition = on_transition

    def advance(self, state: TurnState, status: TurnStatus) -> None:
        """Move a turn to status and notify the transition observer."""
        state.advance(status)
        logger.debug("Turn %s -> %s", state.turn_id, status.value)
        if self.on_transition is not None:
            self.on_transition(state)

    def submit_turn(
        self,
        thread_id: str,
        user_text: str,
        scope: str | None = None,
        *,
        disconnect: asyncio.Event | None = None,
    ) -> AsyncIterator[TurnEventType]:
        """Validate a turn and return its event stream.

        Args:
            thread_id: Conversation the turn belongs to
            user_text: The user's message
            scope: Thread whose scoped documents are searched, along with Global
                   documents. None skips retrieval.
            disconnect: Set this event to cancel the turn during generation

        Returns:
            Async iterator of TokenDelta events followed by exactly one
            Completed, Failed or Cancelled event.

        Raises:
            InputValidationError: If thread_id or user_text is missing or blank.
                Nothing is recorded for a rejected turn.
        """
        if not isinstance(thread_id, str) or not thread_id.strip():
            raise InputValidationError("thread_id is required")
        if not isinstance(user_text, str) or not user_text.strip():
            raise InputValidationError("user_text must not be empty")
        if scope is not None and not scope.strip():
            raise InputValidationError("scope must be a thread id or None")

        state = TurnState(thread_id=thread_id, user_text=user_text, scope=scope)
        return self._run_turn(state, disconnect)

    async def run_turn(
        self,
        thread_id: str,
        user_text: str,
        scope: str | None = None,
    ) -> Completed | Failed | Cancelled:
        """Run a turn to its end and return only the terminal event."""
        terminal: Completed | Failed | Cancelled | None = None
        async for event in self.submit_turn(thread_id, user_text, scope):
            if not isinstance(event, TokenDelta):
                terminal = event
        if terminal is None:
            raise InvalidTransitionError(
                f"Turn on thread {thread_id} ended without a terminal event"
            )
        return terminal

    async def _run_turn(
        self,
        state: TurnState,
        disconnect: asyncio.Event | None,
    ) -> AsyncIterator[TurnEventType]:
        logger.info("Turn %s started on thread %s", state.turn_id, state.thread_id)
        async with self.memory.acquire(state.thread_id):
            try:
                for stage in PRE_GENERATION_STAGES:
                    await stage(self, state)
            except (asyncio.CancelledError, GeneratorExit):
                self._finish(state, TurnStatus.CANCELLED)
                raise
            except Exception:
                logger.exception("Turn %s failed before generation", state.turn_id)
                yield self._fail(state, ErrorKind.INTERNAL)
                return

            if state.warnings:
                logger.info(
                    "Turn %s degraded: %s",
                    state.turn_id,
                    ", ".join(w.value for w in state.warnings),
                )

            self.advance(state, TurnStatus.GENERATING)
            stream = self.generator.stream(state.instruction, state.history, disconnect)
            try:
                async for item in stream:
                    if isinstance(item, Fragment):
                        state.answer += item.text
                        yield TokenDelta(token_delta=item.text)
                    elif isinstance(item, Finished):
                        state.answer = item.text
            except GenerationCancelled as e:
                self._finish(state, TurnStatus.CANCELLED)
                yield Cancelled(partial_text=e.partial_text)
                return
            except GenerationFailure as e:
                logger.error("Turn %s generation failed: %s", state.turn_id, e)
                yield self._fail(state, e.kind)
                return
            except (asyncio.CancelledError, GeneratorExit):
                self._finish(state, TurnStatus.CANCELLED)
                raise
            except Exception:
                logger.exception("Turn %s failed during generation", state.turn_id)
                yield self._fail(state, ErrorKind.INTERNAL)
                return
            finally:
                await stream.aclose()

            try:
                assistant = self.memory.append(state.thread_id, Message.assistant(state.answer))
                if self.log_store is not None:
                    await asyncio.to_thread(self.log_store.append, state.thread_id, assistant)
            except Exception:
                logger.exception("Turn %s could not persist the answer", state.turn_id)
                yield self._fail(state, ErrorKind.INTERNAL)
                return

            self._finish(state, TurnStatus.COMPLETED)
            yield Completed(text=state.answer, turn_id=state.turn_id)

    def _fail(self, state: TurnState, kind: ErrorKind) -> Failed:
        state.error = kind
        self._finish(state, TurnStatus.FAILED)
        return Failed(kind=kind.value)

    def _finish(self, state: TurnState, status: TurnStatus) -> None:
        if state.status.is_terminal:
            return
        self.advance(state, status)
        logger.info("Turn %s %s", state.turn_id, status.value)

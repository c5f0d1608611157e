# src/docent/exceptions.py
"""Exceptions for the Docent turn pipeline.

Every failure a turn can hit maps to an ErrorKind. Only generation failures
and input validation end a turn; the other kinds are raised by their component
and absorbed by the matching pipeline stage, which records the kind as a
warning and carries on with a degraded turn.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Boundary-visible failure categories."""

    RETRIEVAL_UNAVAILABLE = "retrieval_unavailable"
    REWRITE_FAILURE = "rewrite_failure"
    SUMMARIZATION_FAILURE = "summarization_failure"
    GENERATION_FAILURE = "generation_failure"
    INPUT_VALIDATION = "input_validation"
    INTERNAL = "internal"


class DocentError(Exception):
    """Base class for all Docent errors."""

    kind: ErrorKind = ErrorKind.INTERNAL


class InputValidationError(DocentError, ValueError):
    """Raised when a turn is rejected before entering the pipeline."""

    kind = ErrorKind.INPUT_VALIDATION


class RetrievalUnavailable(DocentError):
    """Raised when the embedding call or the chunk store fails."""

    kind = ErrorKind.RETRIEVAL_UNAVAILABLE


class RewriteFailure(DocentError):
    """Raised when the standalone-query rewrite call fails."""

    kind = ErrorKind.REWRITE_FAILURE


class SummarizationFailure(DocentError):
    """Raised when the conversation summary call fails."""

    kind = ErrorKind.SUMMARIZATION_FAILURE


class GenerationFailure(DocentError):
    """Raised when the final answer generation fails.

    Attributes:
        timed_out: True if the model stopped producing output within the
            configured timeout rather than raising an error itself.
    """

    kind = ErrorKind.GENERATION_FAILURE

    def __init__(self, message: str, *, timed_out: bool = False) -> None:
        super().__init__(message)
        self.timed_out = timed_out


class DimensionMismatchError(DocentError, ValueError):
    """Raised when an embedding does not match the store's dimension.

    Attributes:
        expected: Dimension already fixed by the store.
        actual: Dimension of the offending vector.
    """

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(f"Embedding dimension mismatch: expected {expected}, got {actual}")
        self.expected = expected
        self.actual = actual


class IngestionError(DocentError):
    """Raised when a document cannot be ingested."""


class FileTooLargeError(IngestionError):
    """Raised when a single file exceeds the per-file size limit."""


class StorageQuotaExceededError(IngestionError):
    """Raised when ingesting a file would exceed the total storage limit."""


class DocumentNotFoundError(DocentError, KeyError):
    """Raised when a document id is not known to the chunk store."""

    def __init__(self, document_id: str) -> None:
        super().__init__(document_id)
        self.document_id = document_id

    def __str__(self) -> str:
        return f"Document not found: {self.document_id}"


class InvalidTransitionError(DocentError, RuntimeError):
    """Raised when a turn is moved along an edge the state machine does not allow."""

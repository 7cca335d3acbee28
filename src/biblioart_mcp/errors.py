"""Structured error handling -- error categories, exceptions, and tool error model."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class ErrorCategory(str, Enum):
    """Categories of errors for diagnostics and user notices."""

    TIMEOUT = "TIMEOUT"
    CANCELLED = "CANCELLED"
    SERVICE_FAILURE = "SERVICE_FAILURE"
    MALFORMED_RESPONSE = "MALFORMED_RESPONSE"
    NOT_RECOGNIZED = "NOT_RECOGNIZED"
    SOURCE_UNSUPPORTED = "SOURCE_UNSUPPORTED"
    SOURCE_UNREADABLE = "SOURCE_UNREADABLE"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    INVALID_INPUT = "INVALID_INPUT"
    NO_DOCUMENT = "NO_DOCUMENT"
    API_PERMISSION_DENIED = "API_PERMISSION_DENIED"
    API_QUOTA_EXCEEDED = "API_QUOTA_EXCEEDED"
    API_INVALID_ARGUMENT = "API_INVALID_ARGUMENT"
    UNKNOWN = "UNKNOWN"


class BiblioartError(Exception):
    """Base class for errors raised by the engine."""

    category = ErrorCategory.UNKNOWN


class OperationTimeout(BiblioartError):
    """An operation lost the race against its deadline."""

    category = ErrorCategory.TIMEOUT

    def __init__(self, operation: str, timeout: float) -> None:
        super().__init__(f"{operation} timed out after {timeout:g}s")
        self.operation = operation
        self.timeout = timeout


class ServiceFailure(BiblioartError):
    """The content service or the extractor failed or returned nothing usable."""

    category = ErrorCategory.SERVICE_FAILURE


class MalformedResponse(ServiceFailure):
    """Payload does not parse as the expected document schema."""

    category = ErrorCategory.MALFORMED_RESPONSE


class SourceExtractionError(ServiceFailure):
    """Source file is unsupported or unreadable."""

    def __init__(self, message: str, *, unsupported: bool = False) -> None:
        super().__init__(message)
        self.category = (
            ErrorCategory.SOURCE_UNSUPPORTED if unsupported else ErrorCategory.SOURCE_UNREADABLE
        )


class InvalidTransition(BiblioartError):
    """A trigger arrived in a state that does not accept it."""

    category = ErrorCategory.INVALID_TRANSITION

    def __init__(self, trigger: str, state: str) -> None:
        super().__init__(f"Cannot {trigger} while {state}")
        self.trigger = trigger
        self.state = state


class NoDocument(BiblioartError):
    """A view or export operation ran with no journey open."""

    category = ErrorCategory.NO_DOCUMENT


class ToolError(BaseModel):
    """Structured error returned from any tool."""

    error: str
    category: str
    hint: str
    retryable: bool = False


_HINTS: dict[ErrorCategory, str] = {
    ErrorCategory.TIMEOUT: "The screenplay took too long: submit again, or try a shorter source",
    ErrorCategory.CANCELLED: "The request was cancelled before it finished: submit again",
    ErrorCategory.SERVICE_FAILURE: "The content service failed: submit again later",
    ErrorCategory.MALFORMED_RESPONSE: "The content service returned an unusable screenplay: submit again",
    ErrorCategory.NOT_RECOGNIZED: "The title is not known: upload the book file instead",
    ErrorCategory.SOURCE_UNSUPPORTED: "Unsupported source: use a PDF, .txt, or .md file",
    ErrorCategory.SOURCE_UNREADABLE: "Source could not be read: check the file is not encrypted or empty",
    ErrorCategory.INVALID_TRANSITION: "Another operation is in progress or the journey is not open",
    ErrorCategory.INVALID_INPUT: "Bad request: check input values",
    ErrorCategory.NO_DOCUMENT: "No journey is open: open a book first",
}


def categorize_error(error: Exception) -> tuple[ErrorCategory, str]:
    """Map an exception to an ErrorCategory + human-readable hint."""
    if isinstance(error, BiblioartError):
        return error.category, _HINTS.get(error.category, str(error))

    s = str(error).lower()

    if "403" in s or "permission" in s:
        return (
            ErrorCategory.API_PERMISSION_DENIED,
            "API key lacks permission: check GEMINI_API_KEY",
        )
    if "429" in s or "quota" in s or "resource_exhausted" in s:
        return (
            ErrorCategory.API_QUOTA_EXCEEDED,
            "Rate limit hit: wait, then submit again or switch with infra_configure(preset='fast')",
        )
    if "400" in s or "invalid thinking level" in s:
        return (
            ErrorCategory.API_INVALID_ARGUMENT,
            "Bad request: check model and thinking level values",
        )
    if isinstance(error, TimeoutError) or "timeout" in s or "timed out" in s:
        return (ErrorCategory.TIMEOUT, _HINTS[ErrorCategory.TIMEOUT])
    if isinstance(error, ValueError):
        return (ErrorCategory.INVALID_INPUT, _HINTS[ErrorCategory.INVALID_INPUT])

    return (ErrorCategory.UNKNOWN, str(error))


def make_tool_error(error: Exception) -> dict:
    """Create a serialisable ToolError dict from an exception.

    Nothing is flagged retryable: every retry is a fresh user submission.
    """
    cat, hint = categorize_error(error)
    return ToolError(
        error=str(error),
        category=cat.value,
        hint=hint,
    ).model_dump(mode="json")

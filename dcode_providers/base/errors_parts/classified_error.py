"""
Structured, retry-annotated provider error.

Wraps a non-success HTTP response or transport failure with a normalized
`ErrorKind` so the orchestration loop can decide between a transient
"retrying" state and a terminal error without knowing which vendor failed.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .error_kind import ErrorKind

_BODY_PREVIEW_CHARS = 200


@dataclass
class ClassifiedError(Exception):
    """Represents a classified provider failure.

    Attributes:
        kind: Normalized :class:`ErrorKind` for the failure.
        message: Human-readable error message suitable for logging.
        retryable: Whether the same request may succeed if sent again later.
        raw_status: HTTP status when the failure came from a response.
        provider: Provider id where the error originated (e.g., ``"groq"``).
        model: Optional model id associated with the failure.
        body: Original response body, preserved for diagnostics.
        retry_after: Seconds suggested by a ``Retry-After`` header, if any.
        context_overflow: True when the backend rejected the request because
            the conversation no longer fits the model's context window.
        raw: Optional original exception.
    """

    kind: ErrorKind
    message: str
    retryable: bool = False
    raw_status: Optional[int] = None
    provider: Optional[str] = None
    model: Optional[str] = None
    body: Optional[str] = None
    retry_after: Optional[float] = None
    context_overflow: bool = False
    raw: Optional[BaseException] = None

    def __str__(self) -> str:
        status = f" ({self.raw_status})" if self.raw_status is not None else ""
        text = f"{self.provider or '-'}:{self.model or '-'} {self.kind.value}{status}: {self.message}"
        if self.body and self.body not in self.message:
            text += f" | body={self.body[:_BODY_PREVIEW_CHARS]}"
        return text


__all__ = ["ClassifiedError"]

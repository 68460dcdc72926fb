"""Cancellation error type.

Defines the public ``CancelledError`` raised when a caller cancels an
in-flight provider call. Kept isolated to satisfy one-class-per-file policy.
"""

from __future__ import annotations


class CancelledError(RuntimeError):
    """Raised when a provider call is cancelled by its caller.

    Distinct from :class:`ClassifiedError`: cancellation is caller intent, not a
    backend failure, so it is never classified or retried.
    """


__all__ = ["CancelledError"]

"""Cancellation public surface.

Re-exports the token and error types from ``cancellation_parts``.
"""

from .cancellation_parts import CancellationToken, CancelHook, CancelledError

__all__ = ["CancellationToken", "CancelHook", "CancelledError"]

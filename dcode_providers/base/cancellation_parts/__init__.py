"""Cancellation parts (one class per module)."""

from .cancellation_token import CancellationToken, CancelHook
from .cancelled_error import CancelledError

__all__ = ["CancellationToken", "CancelHook", "CancelledError"]

"""Cooperative cancellation token implementation.

Exposes the ``CancellationToken`` class callers pass into adapter calls.
Adapters poll it between SSE lines and register hooks (typically
``response.close``) so that a read blocked on the network ends promptly when
another thread cancels.
"""

from __future__ import annotations

from threading import Lock
from typing import Callable, List, Optional

from .cancelled_error import CancelledError

CancelHook = Callable[[], None]


class CancellationToken:
    """A thread-safe cancellation flag with cancel hooks and child cascading."""

    def __init__(self, *, parent: "CancellationToken | None" = None) -> None:
        self._lock = Lock()
        self._cancelled = False
        self._reason: Optional[str] = None
        self._hooks: List[CancelHook] = []
        if parent is not None:
            parent.on_cancel(lambda: self.cancel(parent.reason))

    @property
    def cancelled(self) -> bool:  # noqa: D401 - short form
        """Whether cancellation has been requested."""
        return self._cancelled

    @property
    def reason(self) -> str | None:  # noqa: D401 - short form
        """Reason string supplied at cancel time (if any)."""
        return self._reason

    def cancel(self, reason: str | None = None) -> None:
        """Request cancellation and run registered hooks once."""
        with self._lock:
            if self._cancelled:
                return
            self._cancelled = True
            self._reason = reason
            hooks = list(self._hooks)
            self._hooks.clear()
        for hook in hooks:
            hook()

    def on_cancel(self, hook: CancelHook) -> Callable[[], None]:
        """Register ``hook`` to run on cancellation; return an unregister callable.

        If the token is already cancelled the hook runs immediately.
        """
        with self._lock:
            if not self._cancelled:
                self._hooks.append(hook)

                def _unregister() -> None:
                    with self._lock:
                        if hook in self._hooks:
                            self._hooks.remove(hook)

                return _unregister
        hook()
        return lambda: None

    def raise_if_cancelled(self) -> None:
        """Raise ``CancelledError`` if the token is cancelled."""
        if self._cancelled:
            raise CancelledError(self._reason or "operation cancelled")

    def child(self) -> "CancellationToken":
        """Create a token cancelled whenever this one is."""
        return CancellationToken(parent=self)

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        return f"CancellationToken(cancelled={self._cancelled}, reason={self._reason!r})"


__all__ = ["CancellationToken", "CancelHook"]

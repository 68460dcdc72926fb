"""Normalized start/end/error events for adapter calls.

``ProviderCallLogMixin`` gives every adapter the same three structured events
per call (``<kind>.start``, ``<kind>.end``, ``<kind>.error`` where ``kind`` is
``chat`` for blocking calls and ``stream`` for streaming calls). Adapters
supply ``self._logger``; payloads never include credentials or message text.
"""
from __future__ import annotations

import logging
import time
from typing import Any, Optional

from ..logging import normalized_log_event
from .logging_context import LogContext


class ProviderCallLogMixin:
    """Mixin emitting normalized call lifecycle events via ``self._logger``."""

    _logger: logging.Logger

    def _log_call_start(self, kind: str, ctx: LogContext, request: Any) -> float:
        """Emit ``<kind>.start`` and return a monotonic start timestamp."""
        if ctx.operation is None:
            ctx.operation = kind
        normalized_log_event(
            self._logger,
            f"{kind}.start",
            ctx,
            phase="start",
            messages=len(request.messages),
            tools=len(request.tools),
            max_tokens=request.max_tokens,
            temperature=request.temperature,
        )
        return time.monotonic()

    def _log_call_end(
        self,
        kind: str,
        ctx: LogContext,
        started: float,
        *,
        usage: Any = None,
        emitted: Optional[int] = None,
        stop_reason: Optional[str] = None,
    ) -> None:
        normalized_log_event(
            self._logger,
            f"{kind}.end",
            ctx,
            phase="finalize",
            emitted=emitted,
            tokens=usage,
            stop_reason=stop_reason,
            latency_ms=round((time.monotonic() - started) * 1000.0, 1),
        )

    def _log_call_error(self, kind: str, ctx: LogContext, exc: BaseException) -> None:
        """Emit ``<kind>.error`` with the classified kind as ``error_code``."""
        code = getattr(getattr(exc, "kind", None), "value", None) or type(exc).__name__
        normalized_log_event(
            self._logger,
            f"{kind}.error",
            ctx,
            phase="finalize",
            error_code=code,
            retryable=getattr(exc, "retryable", None),
            status=getattr(exc, "raw_status", None),
            error=str(exc),
        )


__all__ = ["ProviderCallLogMixin"]

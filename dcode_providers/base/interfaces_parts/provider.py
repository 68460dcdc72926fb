"""Provider Protocol (single-class module).

Defines the four-operation contract every adapter satisfies.
"""

from __future__ import annotations

from typing import List, Optional, Protocol, runtime_checkable

from ..cancellation import CancellationToken
from ..models import MessageRequest, MessageResponse
from ..streaming import StreamCallback


@runtime_checkable
class Provider(Protocol):
    """Minimal interface for LLM backends.

    Implementations translate canonical requests to their wire format and
    translate wire responses back; callers only ever see canonical types.
    Failures are raised as :class:`~dcode_providers.base.errors.ClassifiedError`
    (never retried internally); caller cancellation raises
    :class:`~dcode_providers.base.cancellation.CancelledError`.
    """

    @property
    def provider_name(self) -> str:
        """Stable provider id, e.g. ``"groq"`` or ``"google-vertex"``."""
        ...

    def list_models(self, refresh: bool = False) -> List[str]:
        """Supported model ids; ``refresh`` asks the backend where supported."""
        ...

    def create_message(
        self,
        request: MessageRequest,
        *,
        cancel: Optional[CancellationToken] = None,
    ) -> MessageResponse:
        """Perform one blocking request/response round trip."""
        ...

    def stream_message(
        self,
        request: MessageRequest,
        callback: StreamCallback,
        *,
        cancel: Optional[CancellationToken] = None,
    ) -> None:
        """Perform one round trip delivering chunks to ``callback`` in order.

        Returns after ``message_stop`` has been delivered. If ``callback``
        raises, the connection is closed and the exception propagates.
        """
        ...

"""dcode_providers package

Provider-adaptation core of the dcode terminal coding assistant.

Purpose:
    Translate one canonical conversation protocol (messages, content blocks,
    tools, usage, stream chunks) to and from each model vendor's wire format,
    so the orchestration loop never sees vendor payloads. Packaging is
    configured via the repository root ``pyproject.toml``.

Public API (re-exported):
    - Version: ``__version__``
    - Factory: :func:`create`, :class:`ProviderFactory`,
      :class:`UnknownProviderError`
    - Interface: :class:`Provider`
    - Canonical types: :class:`MessageRequest`, :class:`MessageResponse`,
      :class:`Message`, :class:`Tool`, :class:`Usage` and the content blocks
    - Streaming: the chunk types and :func:`accumulate_chunks`
    - Errors: :class:`ClassifiedError`, :class:`ErrorKind`
    - Cancellation: :class:`CancellationToken`, :class:`CancelledError`

Example::

    import dcode_providers as dp

    provider = dp.create("groq")
    request = dp.MessageRequest(
        model=provider.default_model,
        messages=[dp.Message(role="user", content="hello")],
    )
    provider.stream_message(request, print)
"""

from typing import Any

from .base.cancellation import CancellationToken, CancelledError
from .base.errors import ClassifiedError, ErrorKind, classify_exception, classify_status
from .base.factory import ProviderFactory, UnknownProviderError, create_provider
from .base.interfaces import Provider
from .base.models import (
    ContentBlock,
    ImageBlock,
    ImageSource,
    Message,
    MessageRequest,
    MessageResponse,
    TextBlock,
    Tool,
    ToolResultBlock,
    ToolUseBlock,
    Usage,
)
from .base.streaming import (
    ContentBlockDelta,
    ContentBlockStart,
    Delta,
    MessageStop,
    StreamChunk,
    accumulate_chunks,
)

__version__ = "0.1.0"


def create(provider: str, **kwargs: Any) -> Provider:
    """Return a ready adapter for ``provider`` (see :meth:`ProviderFactory.create`)."""
    return ProviderFactory.create(provider, **kwargs)


__all__ = [
    "__version__",
    "create",
    "create_provider",
    "ProviderFactory",
    "UnknownProviderError",
    "Provider",
    "CancellationToken",
    "CancelledError",
    "ClassifiedError",
    "ErrorKind",
    "classify_exception",
    "classify_status",
    "ContentBlock",
    "ImageBlock",
    "ImageSource",
    "Message",
    "MessageRequest",
    "MessageResponse",
    "TextBlock",
    "Tool",
    "ToolResultBlock",
    "ToolUseBlock",
    "Usage",
    "ContentBlockDelta",
    "ContentBlockStart",
    "Delta",
    "MessageStop",
    "StreamChunk",
    "accumulate_chunks",
]

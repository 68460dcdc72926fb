"""Per-call logging context shared by adapter events.

One :class:`LogContext` is created per adapter call and passed to every event
that call emits, so ``chat.start``, mid-stream warnings and ``chat.end`` can be
joined on provider, model and response id.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict, field
from typing import Any, Dict, Optional


@dataclass
class LogContext:
    """Fields attached to every event of one provider call.

    Attributes:
        provider: Provider id (``"groq"``, ``"google-vertex"``).
        model: Model id the call targets.
        operation: Call kind: ``chat``, ``stream`` or ``models``.
        request_id: Caller-supplied correlation id, if any.
        response_id: Vendor response id, filled in once known.
        extra: Additional fields merged into each payload.
    """

    provider: Optional[str] = None
    model: Optional[str] = None
    operation: Optional[str] = None
    request_id: Optional[str] = None
    response_id: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Flatten into a payload mapping; ``None`` values are dropped."""
        data = asdict(self)
        extra = data.pop("extra", {}) or {}
        data.update({k: v for k, v in extra.items() if v is not None})
        return {k: v for k, v in data.items() if v is not None}


__all__ = ["LogContext"]

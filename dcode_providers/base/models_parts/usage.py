"""Token usage counters reported by a backend for one call."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Usage(BaseModel):
    """Non-negative token counts for one request/response round trip.

    Aggregation across a session happens outside this package.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    input_tokens: int = Field(0, ge=0)
    output_tokens: int = Field(0, ge=0)
    cache_read_tokens: int = Field(0, ge=0)

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


__all__ = ["Usage"]

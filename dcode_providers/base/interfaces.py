"""Provider interface public surface.

Re-exports the protocol from ``interfaces_parts`` for a stable import path.
"""

from .interfaces_parts.provider import Provider

__all__ = ["Provider"]

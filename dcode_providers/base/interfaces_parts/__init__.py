"""Interface parts (one protocol per module)."""

from .provider import Provider

__all__ = ["Provider"]

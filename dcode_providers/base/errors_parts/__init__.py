"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `dcode_providers.base.errors` for the stable surface.
"""

from .error_kind import ErrorKind
from .classified_error import ClassifiedError
from .classification import classify_exception, classify_status, is_context_overflow

__all__ = [
    "ErrorKind",
    "ClassifiedError",
    "classify_exception",
    "classify_status",
    "is_context_overflow",
]

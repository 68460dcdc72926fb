"""Unified provider error taxonomy public surface.

This module re-exports the one-class-per-file implementations under
``dcode_providers.base.errors_parts`` so adapters and callers share a single
stable import path.
"""

from .errors_parts.error_kind import ErrorKind
from .errors_parts.classified_error import ClassifiedError
from .errors_parts.classification import (
    classify_exception,
    classify_status,
    is_context_overflow,
)

__all__ = [
    "ErrorKind",
    "ClassifiedError",
    "classify_exception",
    "classify_status",
    "is_context_overflow",
]

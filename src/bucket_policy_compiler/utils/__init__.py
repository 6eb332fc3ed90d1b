"""Utility functions for the Bucket Policy Compiler."""

from .errors import (
    CompilerError,
    FieldError,
    ImmutabilityViolationError,
    ValidationError,
    sanitize_dict,
    sanitize_error_message,
    sanitize_exception,
)

__all__ = [
    "CompilerError",
    "FieldError",
    "ImmutabilityViolationError",
    "ValidationError",
    "sanitize_dict",
    "sanitize_error_message",
    "sanitize_exception",
]

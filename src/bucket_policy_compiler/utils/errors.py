"""Compiler exceptions and sanitization utilities to prevent information leakage."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Iterable


# Patterns that might expose sensitive information
SENSITIVE_PATTERNS = [
    r"arn:aws[a-z-]*:[a-z0-9-]+:[a-z0-9-]*:(\d{12})",
    r"access[_\s]?key[_\s]?id[:\s]+([A-Z0-9]{20})",
    r"secret[_\s]?access[_\s]?key[:\s]+([A-Za-z0-9/+=]{40})",
    r"session[_\s]?token[:\s]+([A-Za-z0-9/+=]+)",
]

# Fields to redact completely
SENSITIVE_FIELDS = {
    "access_key_id",
    "secret_access_key",
    "session_token",
    "password",
    "secret",
    "credentials",
    "token",
}

REDACTED = "[REDACTED]"


@dataclass(frozen=True)
class FieldError:
    """A single violated rule, tied to the offending field path."""

    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


class CompilerError(Exception):
    """Base class for all compiler errors."""


class ValidationError(CompilerError):
    """Configuration fails one or more structural or semantic rules.

    Carries every violation found in a single validation pass; the message
    leads with the first one.
    """

    def __init__(self, errors: Iterable[FieldError]):
        self.errors = tuple(errors)
        if not self.errors:
            raise ValueError("ValidationError requires at least one field error")
        message = str(self.errors[0])
        if len(self.errors) > 1:
            message += f" (and {len(self.errors) - 1} more)"
        super().__init__(message)

    @property
    def fields(self) -> list[str]:
        return [error.field for error in self.errors]


class ImmutabilityViolationError(CompilerError):
    """An applied object-lock configuration would be disabled."""

    def __init__(self, bucket_name: str):
        self.bucket_name = bucket_name
        super().__init__(
            f"Object lock is enabled on bucket {bucket_name} and cannot be disabled"
        )


def _redact_match(match: re.Match[str]) -> str:
    whole = match.group(0)
    start, end = match.span(1)
    offset = match.start(0)
    return whole[: start - offset] + REDACTED + whole[end - offset:]


def sanitize_error_message(message: str) -> str:
    """Sanitize error message to remove sensitive information.

    Args:
        message: Original error message

    Returns:
        Sanitized error message with sensitive data redacted
    """
    sanitized = message

    # Replace sensitive patterns
    for pattern in SENSITIVE_PATTERNS:
        sanitized = re.sub(pattern, _redact_match, sanitized, flags=re.IGNORECASE)

    # Redact common sensitive field names
    for field in SENSITIVE_FIELDS:
        sanitized = re.sub(
            rf"\b{field}[:\s]+([^\s,;\)]+)",
            rf"{field}: [REDACTED]",
            sanitized,
            flags=re.IGNORECASE,
        )

    return sanitized


def sanitize_exception(error: Exception) -> str:
    """Sanitize exception message."""
    return sanitize_error_message(str(error))


def sanitize_dict(data: dict[str, Any], sensitive_keys: set[str] | None = None) -> dict[str, Any]:
    """Sanitize dictionary by redacting sensitive fields.

    Args:
        data: Dictionary to sanitize
        sensitive_keys: Additional keys to redact (merged with SENSITIVE_FIELDS)

    Returns:
        Sanitized dictionary with sensitive values redacted
    """
    if sensitive_keys is None:
        sensitive_keys = set()

    all_sensitive = SENSITIVE_FIELDS | sensitive_keys
    sanitized: dict[str, Any] = {}

    for key, value in data.items():
        key_lower = key.lower()
        if any(sensitive in key_lower for sensitive in all_sensitive):
            sanitized[key] = REDACTED
        elif isinstance(value, dict):
            sanitized[key] = sanitize_dict(value, sensitive_keys)
        elif isinstance(value, str):
            sanitized[key] = sanitize_error_message(value)
        else:
            sanitized[key] = value

    return sanitized

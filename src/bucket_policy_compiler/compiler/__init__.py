"""Validator, statement composer, lifecycle compiler and orchestration."""

from .compiler import compile_config
from .lifecycle import compile_lifecycle
from .statements import compose
from .validator import collect_errors, validate

__all__ = [
    "compile_config",
    "compile_lifecycle",
    "compose",
    "collect_errors",
    "validate",
]

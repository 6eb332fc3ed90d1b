"""Structured logging configuration for the Bucket Policy Compiler."""

from __future__ import annotations

import json
import logging
import sys
from typing import Any, TextIO

from .constants import CONTROLLER
from .utils.errors import sanitize_dict


def setup_structured_logging(level: str = "INFO", stream: TextIO | None = None) -> None:
    """Configure structured JSON logging."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(message)s",
        handlers=[logging.StreamHandler(stream or sys.stdout)],
    )


def log_compile_event(
    logger: logging.Logger,
    bucket_name: str,
    environment: str,
    event: str,
    reason: str,
    message: str,
    level: int = logging.INFO,
    **kwargs: Any,
) -> None:
    """Log a structured compile event."""
    log_data = {
        "controller": CONTROLLER,
        "bucket": bucket_name,
        "environment": environment,
        "event": event,
        "reason": reason,
        "message": message,
    }
    log_data.update(kwargs)
    logger.log(level, json.dumps(sanitize_dict(log_data), sort_keys=True))

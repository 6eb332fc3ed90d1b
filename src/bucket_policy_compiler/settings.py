"""Runtime settings for the Bucket Policy Compiler."""

from __future__ import annotations

import os
from dataclasses import dataclass


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


@dataclass(frozen=True)
class CompilerSettings:
    """Settings controlling compilation strictness and ambient behaviour.

    Attributes:
        strict_object_lock: Reject an object-lock config supplied while object
            lock is disabled instead of ignoring it with a warning
        log_level: Level passed to structured logging setup
        tracing_enabled: Whether OpenTelemetry tracing is initialized
    """

    strict_object_lock: bool = False
    log_level: str = "INFO"
    tracing_enabled: bool = False

    @classmethod
    def from_env(cls) -> CompilerSettings:
        """Build settings from environment variables.

        Environment Variables:
            BUCKET_POLICY_COMPILER_STRICT_OBJECT_LOCK: default false
            BUCKET_POLICY_COMPILER_LOG_LEVEL: default INFO
            OTEL_TRACES_ENABLED: default false
        """
        return cls(
            strict_object_lock=_env_flag("BUCKET_POLICY_COMPILER_STRICT_OBJECT_LOCK"),
            log_level=os.getenv("BUCKET_POLICY_COMPILER_LOG_LEVEL", "INFO").upper(),
            tracing_enabled=_env_flag("OTEL_TRACES_ENABLED"),
        )

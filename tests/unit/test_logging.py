"""Unit tests for structured logging."""

from __future__ import annotations

import json
import logging

import pytest

from bucket_policy_compiler.logging import log_compile_event


class TestLogCompileEvent:
    """Test structured compile events."""

    def test_event_fields(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that events are logged as sorted JSON."""
        logger = logging.getLogger("test.compile")

        with caplog.at_level(logging.INFO, logger="test.compile"):
            log_compile_event(
                logger,
                bucket_name="my-data-bucket",
                environment="prod",
                event="compile",
                reason="CompileSucceeded",
                message="Compiled bucket security configuration",
                statements=3,
            )

        record = caplog.records[-1]
        data = json.loads(record.getMessage())
        assert data == {
            "controller": "bucket-policy-compiler",
            "bucket": "my-data-bucket",
            "environment": "prod",
            "event": "compile",
            "reason": "CompileSucceeded",
            "message": "Compiled bucket security configuration",
            "statements": 3,
        }
        assert list(data) == sorted(data)

    def test_level_and_sanitization(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test the log level and that sensitive values are redacted."""
        logger = logging.getLogger("test.compile")

        with caplog.at_level(logging.WARNING, logger="test.compile"):
            log_compile_event(
                logger,
                bucket_name="my-data-bucket",
                environment="dev",
                event="validate",
                reason="ObjectLockIgnored",
                message="ignored",
                level=logging.WARNING,
                session_token="AQoDYXdz",
            )

        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert json.loads(record.getMessage())["session_token"] == "[REDACTED]"

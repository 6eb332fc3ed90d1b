"""Shared fixtures for unit tests."""

from __future__ import annotations

from typing import Any

import pytest

from bucket_policy_compiler.models import BucketSecurityConfig

KMS_KEY_ID = "arn:aws:kms:us-east-1:123456789012:key/12345678-1234-1234-1234-123456789012"


def _make_config(**overrides: Any) -> BucketSecurityConfig:
    """Build a valid configuration, overriding selected fields."""
    values: dict[str, Any] = {
        "name": "my-data-bucket",
        "environment": "prod",
        "kms_key_id": KMS_KEY_ID,
    }
    values.update(overrides)
    return BucketSecurityConfig(**values)


@pytest.fixture
def kms_key_id() -> str:
    return KMS_KEY_ID


@pytest.fixture
def config() -> BucketSecurityConfig:
    return _make_config()


@pytest.fixture
def make_config():
    """Factory for valid configurations with selected fields overridden."""
    return _make_config

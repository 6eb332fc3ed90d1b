"""Unit tests for the security config builder."""

from __future__ import annotations

import pytest

from bucket_policy_compiler.builders.config import create_lifecycle_rule_from_spec, create_security_config_from_spec
from bucket_policy_compiler.compiler import compile_config
from bucket_policy_compiler.compiler.lifecycle import compile_lifecycle
from bucket_policy_compiler.models import ObjectLockConfig, PrincipalSet, StatementCondition, Transition
from bucket_policy_compiler.utils.errors import ValidationError

KMS_KEY = "arn:aws:kms:us-east-1:123456789012:key/12345678-1234-1234-1234-123456789012"


class TestSecurityConfigBuilder:
    """Test security configuration builder."""

    def test_basic_config(self) -> None:
        """Test creating a basic configuration."""
        spec = {
            "name": "test-bucket",
            "environment": "dev",
            "encryption": {"kmsKeyId": KMS_KEY},
        }
        config = create_security_config_from_spec(spec)

        assert config.name == "test-bucket"
        assert config.environment == "dev"
        assert config.kms_key_id == KMS_KEY
        assert config.object_lock_enabled is False
        assert config.object_lock is None
        assert config.trusted_principals == ()
        assert config.trusted_principal_actions is None
        assert config.lifecycle_rules == ()
        assert config.custom_statements == ()
        assert config.cors_rules == ()
        assert config.tags == {}

    def test_missing_fields_are_carried(self) -> None:
        """Test that missing fields are left for the validator to report."""
        config = create_security_config_from_spec({})

        assert config.name == ""
        assert config.kms_key_id is None

    def test_object_lock_config(self) -> None:
        """Test object lock configuration."""
        spec = {
            "name": "test-bucket",
            "objectLock": {"enabled": True, "mode": "COMPLIANCE", "retentionDays": 2555},
        }
        config = create_security_config_from_spec(spec)

        assert config.object_lock_enabled is True
        assert config.object_lock == ObjectLockConfig(mode="COMPLIANCE", retention_days=2555)

    def test_object_lock_disabled_keeps_settings(self) -> None:
        """Test that settings are kept when object lock is disabled."""
        spec = {"objectLock": {"enabled": False, "mode": "GOVERNANCE", "retentionDays": 30}}
        config = create_security_config_from_spec(spec)

        assert config.object_lock_enabled is False
        assert config.object_lock is not None

    def test_trusted_principals(self) -> None:
        """Test trusted principal configuration."""
        spec = {"trustedPrincipals": {"identifiers": ["role/A"], "actions": ["s3:GetObject"]}}
        config = create_security_config_from_spec(spec)

        assert config.trusted_principals == ("role/A",)
        assert config.trusted_principal_actions == ("s3:GetObject",)

    def test_lifecycle_config(self) -> None:
        """Test lifecycle configuration."""
        spec = {
            "lifecycle": {
                "rules": [
                    {
                        "id": "delete-old-logs",
                        "status": "Enabled",
                        "prefix": "logs/",
                        "expiration": {"days": 30},
                    },
                    {
                        "id": "transition-to-glacier",
                        "enabled": False,
                        "transitions": [{"days": 90, "storageClass": "GLACIER"}],
                        "noncurrentVersionTransitions": [{"days": 30, "storageClass": "STANDARD_IA"}],
                        "noncurrentVersionExpiration": {"days": 365},
                        "abortIncompleteMultipartUpload": {"daysAfterInitiation": 7},
                    },
                ],
            },
        }
        config = create_security_config_from_spec(spec)
        rules = compile_lifecycle(config.lifecycle_rules)

        assert len(rules) == 2
        assert rules[0].id == "delete-old-logs"
        assert rules[0].enabled is True
        assert rules[0].prefix == "logs/"
        assert rules[0].expiration_after_days == 30
        assert rules[1].enabled is False
        assert rules[1].transitions == (Transition(90, "GLACIER"),)
        assert rules[1].noncurrent_transitions == (Transition(30, "STANDARD_IA"),)
        assert rules[1].noncurrent_expiration_after_days == 365
        assert rules[1].abort_incomplete_multipart_upload_days == 7

    def test_disabled_status(self) -> None:
        """Test that a Disabled status disables the rule."""
        spec = {"lifecycle": {"rules": [{"id": "off", "status": "Disabled"}]}}
        config = create_security_config_from_spec(spec)

        assert config.lifecycle_rules[0].enabled is False

    def test_custom_statements(self) -> None:
        """Test custom statement configuration."""
        spec = {
            "policy": {
                "statements": [
                    {
                        "sid": "ReadOnly",
                        "effect": "Allow",
                        "principals": [{"type": "AWS", "identifiers": ["arn:aws:iam::123456789012:root"]}],
                        "actions": ["s3:GetObject"],
                        "resources": "arn:aws:s3:::test-bucket/*",
                        "conditions": [{"test": "Bool", "variable": "aws:MultiFactorAuthPresent", "values": [True]}],
                    }
                ]
            }
        }
        config = create_security_config_from_spec(spec)
        statement = config.custom_statements[0]

        assert statement.sid == "ReadOnly"
        assert statement.principals == (PrincipalSet("AWS", ("arn:aws:iam::123456789012:root",)),)
        assert statement.resources == ("arn:aws:s3:::test-bucket/*",)
        assert statement.conditions == (StatementCondition("Bool", "aws:MultiFactorAuthPresent", ("True",)),)

    def test_cors_and_tags(self) -> None:
        """Test CORS and tags configuration."""
        spec = {
            "cors": {
                "rules": [
                    {
                        "allowedOrigins": ["https://example.com"],
                        "allowedMethods": ["GET", "POST"],
                        "allowedHeaders": ["*"],
                        "maxAgeSeconds": 3600,
                    },
                ],
            },
            "tagging": {"tags": {"Owner": "platform-team"}},
        }
        config = create_security_config_from_spec(spec)

        assert config.cors_rules[0].allowed_origins == ("https://example.com",)
        assert config.cors_rules[0].allowed_methods == ("GET", "POST")
        assert config.cors_rules[0].max_age_seconds == 3600
        assert config.tags == {"Owner": "platform-team"}

    def test_logging_config(self) -> None:
        """Test access logging configuration."""
        spec = {"logging": {"targetBucket": "access-logs", "targetPrefix": "test-bucket/"}}
        config = create_security_config_from_spec(spec)

        assert config.logging_target_bucket == "access-logs"
        assert config.logging_target_prefix == "test-bucket/"


class TestSpecShape:
    """Test handling of null and wrongly shaped sections."""

    def test_null_sections_read_as_empty(self) -> None:
        """Test that null sections fall back to their defaults."""
        spec = {
            "name": "my-bucket",
            "environment": "prod",
            "encryption": None,
            "logging": None,
            "objectLock": None,
            "trustedPrincipals": None,
            "lifecycle": {"rules": None},
            "policy": None,
            "cors": None,
            "tagging": {"tags": None},
        }
        config = create_security_config_from_spec(spec)

        assert config.kms_key_id is None
        assert config.object_lock_enabled is False
        assert config.lifecycle_rules == ()
        assert config.tags == {}

    def test_null_encryption_reported_by_validator(self) -> None:
        """Test that a null encryption section becomes a field error."""
        config = create_security_config_from_spec({"name": "my-bucket", "environment": "prod", "encryption": None})

        with pytest.raises(ValidationError) as exc_info:
            compile_config(config)

        assert exc_info.value.fields == ["kms_key_id"]

    def test_wrongly_shaped_sections(self) -> None:
        """Test that every non-object section is reported at once."""
        spec = {
            "encryption": "arn:aws:kms:us-east-1:123456789012:key/x",
            "objectLock": True,
            "lifecycle": {"rules": [{"id": "a"}, "b", {"id": "c", "expiration": 30}]},
            "policy": {"statements": {"sid": "x"}},
        }

        with pytest.raises(ValidationError) as exc_info:
            create_security_config_from_spec(spec)

        assert exc_info.value.fields == [
            "encryption",
            "objectLock",
            "lifecycle.rules[1]",
            "lifecycle.rules[2].expiration",
            "policy.statements",
        ]

    def test_nested_statement_shape(self) -> None:
        """Test that principals and conditions must be lists of objects."""
        spec = {"policy": {"statements": [{"actions": ["s3:GetObject"], "principals": ["role/A"]}]}}

        with pytest.raises(ValidationError) as exc_info:
            create_security_config_from_spec(spec)

        assert exc_info.value.fields == ["policy.statements[0].principals[0]"]

    def test_rule_helper_raises_on_its_own(self) -> None:
        """Test that the rule helper raises when called without an error list."""
        with pytest.raises(ValidationError) as exc_info:
            create_lifecycle_rule_from_spec({"id": "a", "transitions": "GLACIER"})

        assert exc_info.value.fields == ["rule.transitions"]


class TestEnabledFlags:
    """Test that enable flags are carried without truthiness coercion."""

    def test_string_false_object_lock_rejected(self) -> None:
        """Test that the string "false" never enables object lock."""
        spec = {
            "name": "my-bucket",
            "environment": "prod",
            "encryption": {"kmsKeyId": KMS_KEY},
            "objectLock": {"enabled": "false", "mode": "COMPLIANCE", "retentionDays": 2555},
        }
        config = create_security_config_from_spec(spec)

        assert config.object_lock_enabled == "false"
        with pytest.raises(ValidationError) as exc_info:
            compile_config(config)
        assert exc_info.value.fields == ["object_lock_enabled"]

    def test_unknown_lifecycle_status_rejected(self) -> None:
        """Test that an unknown status is carried and rejected."""
        spec = {
            "name": "my-bucket",
            "environment": "prod",
            "encryption": {"kmsKeyId": KMS_KEY},
            "lifecycle": {"rules": [{"id": "a", "status": "Paused", "expiration": {"days": 30}}]},
        }
        config = create_security_config_from_spec(spec)

        assert config.lifecycle_rules[0].enabled == "Paused"
        with pytest.raises(ValidationError) as exc_info:
            compile_config(config)
        assert exc_info.value.fields == ["lifecycle_rules[0].enabled"]

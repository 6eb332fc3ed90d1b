"""Rendering of compiled artifacts into AWS JSON formats."""

from __future__ import annotations

import hashlib
import json
from typing import Any, Iterable

from .constants import POLICY_VERSION
from .models import (
    CompiledArtifact,
    CorsRule,
    LifecycleRule,
    ObjectLockConfig,
    PolicyStatement,
    PrincipalSet,
    StatementCondition,
)


def _principal_to_aws(principals: tuple[PrincipalSet, ...]) -> Any:
    if len(principals) == 1 and principals[0].is_wildcard:
        return "*"
    aws_principal: dict[str, list[str]] = {}
    for principal in principals:
        aws_principal.setdefault(principal.type, []).extend(principal.identifiers)
    return aws_principal


def _conditions_to_aws(conditions: tuple[StatementCondition, ...]) -> dict[str, dict[str, list[str]]]:
    # Conditions sharing a test are merged under it; repeated keys accumulate values
    aws_condition: dict[str, dict[str, list[str]]] = {}
    for condition in conditions:
        values = aws_condition.setdefault(condition.test, {}).setdefault(condition.variable, [])
        for value in condition.values:
            if value not in values:
                values.append(value)
    return aws_condition


def statement_to_dict(statement: PolicyStatement) -> dict[str, Any]:
    """Convert a statement to AWS policy format."""
    aws_stmt: dict[str, Any] = {}
    if statement.sid is not None:
        aws_stmt["Sid"] = statement.sid
    aws_stmt["Effect"] = statement.effect
    if statement.principals:
        aws_stmt["Principal"] = _principal_to_aws(statement.principals)
    aws_stmt["Action"] = list(statement.actions)
    aws_stmt["Resource"] = list(statement.resources)
    if statement.conditions:
        aws_stmt["Condition"] = _conditions_to_aws(statement.conditions)
    return aws_stmt


def policy_document_to_dict(statements: Iterable[PolicyStatement]) -> dict[str, Any]:
    """Convert an ordered statement list to an AWS bucket policy document."""
    return {
        "Version": POLICY_VERSION,
        "Statement": [statement_to_dict(s) for s in statements],
    }


def lifecycle_rule_to_dict(rule: LifecycleRule) -> dict[str, Any]:
    """Convert a lifecycle rule to AWS lifecycle configuration format."""
    aws_rule: dict[str, Any] = {
        "ID": rule.id,
        "Status": "Enabled" if rule.enabled else "Disabled",
        "Filter": {"Prefix": rule.prefix},
    }
    if rule.transitions:
        aws_rule["Transitions"] = [
            {"Days": t.after_days, "StorageClass": t.storage_class} for t in rule.transitions
        ]
    if rule.expiration_after_days is not None:
        aws_rule["Expiration"] = {"Days": rule.expiration_after_days}
    if rule.noncurrent_transitions:
        aws_rule["NoncurrentVersionTransitions"] = [
            {"NoncurrentDays": t.after_days, "StorageClass": t.storage_class}
            for t in rule.noncurrent_transitions
        ]
    if rule.noncurrent_expiration_after_days is not None:
        aws_rule["NoncurrentVersionExpiration"] = {"NoncurrentDays": rule.noncurrent_expiration_after_days}
    if rule.abort_incomplete_multipart_upload_days is not None:
        aws_rule["AbortIncompleteMultipartUpload"] = {
            "DaysAfterInitiation": rule.abort_incomplete_multipart_upload_days,
        }
    return aws_rule


def lifecycle_rules_to_dict(rules: Iterable[LifecycleRule]) -> dict[str, Any]:
    return {"Rules": [lifecycle_rule_to_dict(r) for r in rules]}


def object_lock_to_dict(object_lock: ObjectLockConfig) -> dict[str, Any]:
    return {
        "ObjectLockEnabled": "Enabled",
        "Rule": {
            "DefaultRetention": {
                "Mode": object_lock.mode,
                "Days": object_lock.retention_days,
            },
        },
    }


def cors_rule_to_dict(rule: CorsRule) -> dict[str, Any]:
    aws_rule: dict[str, Any] = {
        "AllowedOrigins": list(rule.allowed_origins),
        "AllowedMethods": list(rule.allowed_methods),
    }
    if rule.allowed_headers:
        aws_rule["AllowedHeaders"] = list(rule.allowed_headers)
    if rule.expose_headers:
        aws_rule["ExposeHeaders"] = list(rule.expose_headers)
    if rule.max_age_seconds is not None:
        aws_rule["MaxAgeSeconds"] = rule.max_age_seconds
    return aws_rule


def cors_rules_to_dict(rules: Iterable[CorsRule]) -> dict[str, Any]:
    return {"CORSRules": [cors_rule_to_dict(r) for r in rules]}


def artifact_to_dict(artifact: CompiledArtifact) -> dict[str, Any]:
    """Convert a compiled artifact to a plain dict.

    Lifecycle and object-lock sections are omitted when the artifact carries
    none, mirroring what the provisioning layer attaches.
    """
    data: dict[str, Any] = {
        "bucket": artifact.bucket_name,
        "encryption": {"kmsKeyId": artifact.kms_key_id},
        "policy": policy_document_to_dict(artifact.policy_document),
    }
    if artifact.has_lifecycle:
        data["lifecycle"] = lifecycle_rules_to_dict(artifact.lifecycle_rule_set)
    if artifact.object_lock is not None:
        data["objectLock"] = object_lock_to_dict(artifact.object_lock)
    if artifact.logging_target_bucket:
        data["logging"] = {
            "targetBucket": artifact.logging_target_bucket,
            "targetPrefix": artifact.logging_target_prefix or "",
        }
    if artifact.cors_rules:
        data["cors"] = cors_rules_to_dict(artifact.cors_rules)
    return data


def canonical_json(data: Any, indent: int | None = None) -> str:
    """Serialize to JSON with sorted keys so identical input yields identical bytes."""
    if indent is None:
        return json.dumps(data, sort_keys=True, separators=(",", ":"))
    return json.dumps(data, sort_keys=True, indent=indent)


def artifact_fingerprint(artifact: CompiledArtifact) -> str:
    """SHA-256 of the canonical JSON form of an artifact."""
    return hashlib.sha256(canonical_json(artifact_to_dict(artifact)).encode("utf-8")).hexdigest()

"""Validation of bucket security configurations.

Every check runs against the whole configuration and contributes zero or more
field errors, so a single pass reports everything an operator has to fix.
"""

from __future__ import annotations

import logging
import re
from functools import partial
from typing import Any, Callable, Iterable

from ..constants import (
    BUCKET_NAME_MAX_LENGTH,
    BUCKET_NAME_MIN_LENGTH,
    BUCKET_NAME_PATTERN,
    CORS_METHODS,
    EFFECTS,
    ENVIRONMENTS,
    KMS_KEY_ARN_PATTERN,
    OBJECT_LOCK_MODES,
    RESERVED_SIDS,
    SID_CUSTOM_PREFIX,
    STORAGE_CLASSES,
)
from ..logging import log_compile_event
from ..models import BucketSecurityConfig, LifecycleRule, Transition
from ..utils.errors import FieldError, ValidationError

logger = logging.getLogger(__name__)

_BUCKET_NAME_RE = re.compile(BUCKET_NAME_PATTERN)
_KMS_KEY_RE = re.compile(KMS_KEY_ARN_PATTERN)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _check_strings(path: str, values: Iterable[Any], what: str) -> list[FieldError]:
    return [
        FieldError(f"{path}[{idx}]", f"{what} must be a non-empty string, got {value!r}")
        for idx, value in enumerate(values)
        if not isinstance(value, str) or not value
    ]


def check_bucket_name(config: BucketSecurityConfig) -> list[FieldError]:
    name = config.name
    if not isinstance(name, str) or not _BUCKET_NAME_RE.match(name):
        return [FieldError(
            "name",
            f"bucket name {name!r} must match {BUCKET_NAME_PATTERN} "
            "(lowercase letters, digits and hyphens, not starting or ending with a hyphen)",
        )]
    if not BUCKET_NAME_MIN_LENGTH <= len(name) <= BUCKET_NAME_MAX_LENGTH:
        return [FieldError(
            "name",
            f"bucket name must be between {BUCKET_NAME_MIN_LENGTH} and "
            f"{BUCKET_NAME_MAX_LENGTH} characters long",
        )]
    return []


def check_environment(config: BucketSecurityConfig) -> list[FieldError]:
    if config.environment not in ENVIRONMENTS:
        return [FieldError(
            "environment",
            f"environment {config.environment!r} must be one of {', '.join(ENVIRONMENTS)}",
        )]
    return []


def check_encryption_key(config: BucketSecurityConfig) -> list[FieldError]:
    key = config.kms_key_id
    if not key:
        return [FieldError("kms_key_id", "encryption key is required; encryption cannot be disabled")]
    if not isinstance(key, str) or not _KMS_KEY_RE.match(key):
        return [FieldError("kms_key_id", "encryption key must be a KMS key ARN")]
    return []


def check_object_lock(config: BucketSecurityConfig, strict: bool = False) -> list[FieldError]:
    lock = config.object_lock

    if not isinstance(config.object_lock_enabled, bool):
        return [FieldError(
            "object_lock_enabled",
            f"object lock enabled flag must be a boolean, got {config.object_lock_enabled!r}",
        )]

    if not config.object_lock_enabled:
        if lock is None:
            return []
        if strict:
            return [FieldError(
                "object_lock",
                "object lock settings were supplied but object lock is disabled",
            )]
        log_compile_event(
            logger,
            bucket_name=str(config.name),
            environment=str(config.environment),
            event="warning",
            reason="ObjectLockIgnored",
            message="Object lock settings supplied while object lock is disabled; ignoring them",
            level=logging.WARNING,
        )
        return []

    if lock is None:
        return [FieldError("object_lock", "object lock is enabled but no object lock settings were supplied")]

    errors = []
    if lock.mode not in OBJECT_LOCK_MODES:
        errors.append(FieldError(
            "object_lock.mode",
            f"object lock mode {lock.mode!r} must be one of {', '.join(OBJECT_LOCK_MODES)}",
        ))
    if not _is_int(lock.retention_days) or lock.retention_days <= 0:
        errors.append(FieldError(
            "object_lock.retention_days",
            f"retention days must be a positive integer, got {lock.retention_days!r}",
        ))
    return errors


def _check_transitions(
    path: str,
    transitions: Iterable[Transition],
    expiration: Any,
    expiration_path: str,
) -> list[FieldError]:
    errors = []
    previous: int | None = None
    for idx, transition in enumerate(transitions):
        item_path = f"{path}[{idx}]"
        days = transition.after_days
        if not _is_int(days) or days < 0:
            errors.append(FieldError(f"{item_path}.after_days", f"days must be a non-negative integer, got {days!r}"))
            continue
        if transition.storage_class not in STORAGE_CLASSES:
            errors.append(FieldError(
                f"{item_path}.storage_class",
                f"storage class {transition.storage_class!r} must be one of {', '.join(STORAGE_CLASSES)}",
            ))
        if previous is not None and days <= previous:
            errors.append(FieldError(
                f"{item_path}.after_days",
                f"transition days must increase within a rule ({days} follows {previous})",
            ))
        previous = days

    if expiration is not None:
        if not _is_int(expiration) or expiration <= 0:
            errors.append(FieldError(expiration_path, f"expiration days must be a positive integer, got {expiration!r}"))
        elif previous is not None and expiration <= previous:
            errors.append(FieldError(
                expiration_path,
                f"expiration after {expiration} days must come after the last transition ({previous} days)",
            ))
    return errors


def _check_lifecycle_rule(idx: int, rule: LifecycleRule) -> list[FieldError]:
    path = f"lifecycle_rules[{idx}]"
    errors = []
    if not isinstance(rule.id, str) or not rule.id:
        errors.append(FieldError(f"{path}.id", "lifecycle rule id is required"))
    if not isinstance(rule.enabled, bool):
        errors.append(FieldError(
            f"{path}.enabled",
            f"rule status must be a boolean or Enabled/Disabled, got {rule.enabled!r}",
        ))

    errors.extend(_check_transitions(
        f"{path}.transitions",
        rule.transitions,
        rule.expiration_after_days,
        f"{path}.expiration_after_days",
    ))
    errors.extend(_check_transitions(
        f"{path}.noncurrent_transitions",
        rule.noncurrent_transitions,
        rule.noncurrent_expiration_after_days,
        f"{path}.noncurrent_expiration_after_days",
    ))

    abort_days = rule.abort_incomplete_multipart_upload_days
    if abort_days is not None and (not _is_int(abort_days) or abort_days <= 0):
        errors.append(FieldError(
            f"{path}.abort_incomplete_multipart_upload_days",
            f"days must be a positive integer, got {abort_days!r}",
        ))
    return errors


def check_lifecycle_rules(config: BucketSecurityConfig) -> list[FieldError]:
    errors = []
    seen: set[str] = set()
    for idx, rule in enumerate(config.lifecycle_rules):
        errors.extend(_check_lifecycle_rule(idx, rule))
        if not isinstance(rule.id, str) or not rule.id:
            continue
        if rule.id in seen:
            errors.append(FieldError(f"lifecycle_rules[{idx}].id", f"duplicate lifecycle rule id {rule.id!r}"))
        seen.add(rule.id)
    return errors


def check_custom_statements(config: BucketSecurityConfig) -> list[FieldError]:
    errors = []
    seen: set[str] = set()
    for idx, statement in enumerate(config.custom_statements):
        path = f"custom_statements[{idx}]"
        if not statement.actions:
            errors.append(FieldError(f"{path}.actions", "statement actions must not be empty"))
        errors.extend(_check_strings(f"{path}.actions", statement.actions, "action"))
        if not statement.resources:
            errors.append(FieldError(f"{path}.resources", "statement resources must not be empty"))
        errors.extend(_check_strings(f"{path}.resources", statement.resources, "resource"))
        if statement.effect not in EFFECTS:
            errors.append(FieldError(
                f"{path}.effect",
                f"statement effect {statement.effect!r} must be one of {', '.join(EFFECTS)}",
            ))
        for p_idx, principal in enumerate(statement.principals):
            if not principal.type or not principal.identifiers:
                errors.append(FieldError(
                    f"{path}.principals[{p_idx}]",
                    "principals need a type and at least one identifier",
                ))
        # Unnamed statements are emitted as CustomStatement<N>
        sid = statement.sid
        if sid is None:
            sid = f"{SID_CUSTOM_PREFIX}{idx + 1}"
        elif not isinstance(sid, str) or not sid:
            errors.append(FieldError(f"{path}.sid", f"sid must be a non-empty string, got {sid!r}"))
            continue
        if sid in RESERVED_SIDS:
            errors.append(FieldError(f"{path}.sid", f"sid {sid!r} is reserved for a baseline statement"))
        elif sid in seen:
            errors.append(FieldError(f"{path}.sid", f"duplicate statement sid {sid!r}"))
        seen.add(sid)
    return errors


def check_trusted_principals(config: BucketSecurityConfig) -> list[FieldError]:
    errors = []
    for idx, identifier in enumerate(config.trusted_principals):
        if not isinstance(identifier, str) or not identifier:
            errors.append(FieldError(f"trusted_principals[{idx}]", "principal identifier must be a non-empty string"))
    actions = config.trusted_principal_actions
    if actions is not None and not actions:
        errors.append(FieldError(
            "trusted_principal_actions",
            "trusted principal actions must not be empty when given; omit them to use the defaults",
        ))
    errors.extend(_check_strings("trusted_principal_actions", actions or (), "action"))
    return errors


def check_logging(config: BucketSecurityConfig) -> list[FieldError]:
    if config.logging_target_prefix and not config.logging_target_bucket:
        return [FieldError("logging_target_prefix", "a logging prefix requires a logging target bucket")]
    return []


def check_cors_rules(config: BucketSecurityConfig) -> list[FieldError]:
    errors = []
    for idx, rule in enumerate(config.cors_rules):
        path = f"cors_rules[{idx}]"
        if not rule.allowed_origins:
            errors.append(FieldError(f"{path}.allowed_origins", "at least one allowed origin is required"))
        if not rule.allowed_methods:
            errors.append(FieldError(f"{path}.allowed_methods", "at least one allowed method is required"))
        unknown = [m for m in rule.allowed_methods if m not in CORS_METHODS]
        if unknown:
            errors.append(FieldError(
                f"{path}.allowed_methods",
                f"unsupported methods {', '.join(map(str, unknown))}; allowed: {', '.join(CORS_METHODS)}",
            ))
        max_age = rule.max_age_seconds
        if max_age is not None and (not _is_int(max_age) or max_age < 0):
            errors.append(FieldError(f"{path}.max_age_seconds", f"max age must be a non-negative integer, got {max_age!r}"))
    return errors


def collect_errors(config: BucketSecurityConfig, strict_object_lock: bool = False) -> list[FieldError]:
    """Run every check and return all field errors in check order."""
    checks: tuple[Callable[[BucketSecurityConfig], list[FieldError]], ...] = (
        check_bucket_name,
        check_environment,
        check_encryption_key,
        partial(check_object_lock, strict=strict_object_lock),
        check_lifecycle_rules,
        check_custom_statements,
        check_trusted_principals,
        check_logging,
        check_cors_rules,
    )
    errors = []
    for check in checks:
        errors.extend(check(config))
    return errors


def validate(config: BucketSecurityConfig, strict_object_lock: bool = False) -> None:
    """Validate a configuration before any synthesis.

    Args:
        config: Configuration to validate
        strict_object_lock: Reject object-lock settings supplied while object
            lock is disabled instead of ignoring them

    Raises:
        ValidationError: carrying every violated rule
    """
    errors = collect_errors(config, strict_object_lock=strict_object_lock)
    if errors:
        raise ValidationError(errors)

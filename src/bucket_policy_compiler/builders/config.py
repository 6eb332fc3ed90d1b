"""Builder for bucket security configurations."""

from __future__ import annotations

from typing import Any

from ..constants import EFFECT_ALLOW
from ..models import (
    BucketSecurityConfig,
    CorsRule,
    LifecycleRule,
    ObjectLockConfig,
    PolicyStatement,
    PrincipalSet,
    StatementCondition,
    Transition,
)
from ..utils.errors import FieldError, ValidationError

LIFECYCLE_STATUS = {"Enabled": True, "Disabled": False}


def _as_tuple(value: Any) -> tuple[Any, ...]:
    if value is None:
        return ()
    if isinstance(value, (list, tuple)):
        return tuple(value)
    return (value,)


def _section(data: dict[str, Any], key: str, path: str, errors: list[FieldError]) -> dict[str, Any]:
    """Return ``data[key]`` as a dict; null or missing reads as empty."""
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        errors.append(FieldError(path, f"expected an object, got {type(value).__name__}"))
        return {}
    return value


def _items(data: dict[str, Any], key: str, path: str, errors: list[FieldError]) -> list[tuple[str, dict[str, Any]]]:
    """Return the objects in the list ``data[key]`` paired with their paths."""
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        errors.append(FieldError(path, f"expected a list of objects, got {type(value).__name__}"))
        return []
    items = []
    for idx, item in enumerate(value):
        item_path = f"{path}[{idx}]"
        if isinstance(item, dict):
            items.append((item_path, item))
        else:
            errors.append(FieldError(item_path, f"expected an object, got {type(item).__name__}"))
    return items


def _raise_if_any(errors: list[FieldError]) -> None:
    if errors:
        raise ValidationError(errors)


def _transitions_from_spec(
    data: dict[str, Any], key: str, path: str, errors: list[FieldError]
) -> tuple[Transition, ...]:
    return tuple(
        Transition(after_days=item.get("days"), storage_class=item.get("storageClass"))
        for _, item in _items(data, key, path, errors)
    )


def create_lifecycle_rule_from_spec(
    spec: dict[str, Any],
    path: str = "rule",
    errors: list[FieldError] | None = None,
) -> LifecycleRule:
    """Create a lifecycle rule from its spec dict.

    Accepts either ``enabled`` (bool) or ``status`` ("Enabled"/"Disabled").
    Values that are neither are carried as given for the validator to reject.

    Raises:
        ValidationError: If a section has the wrong shape and no error list
            was passed in to collect it
    """
    collected: list[FieldError] = [] if errors is None else errors

    if "enabled" in spec:
        enabled = spec["enabled"]
    else:
        status = spec.get("status", "Enabled")
        enabled = LIFECYCLE_STATUS.get(status, status) if isinstance(status, str) else status

    expiration = _section(spec, "expiration", f"{path}.expiration", collected)
    noncurrent_expiration = _section(
        spec, "noncurrentVersionExpiration", f"{path}.noncurrentVersionExpiration", collected
    )
    abort_multipart = _section(
        spec, "abortIncompleteMultipartUpload", f"{path}.abortIncompleteMultipartUpload", collected
    )

    rule = LifecycleRule(
        id=spec.get("id", ""),
        enabled=enabled,
        prefix=spec.get("prefix") or "",
        transitions=_transitions_from_spec(spec, "transitions", f"{path}.transitions", collected),
        expiration_after_days=expiration.get("days"),
        noncurrent_transitions=_transitions_from_spec(
            spec, "noncurrentVersionTransitions", f"{path}.noncurrentVersionTransitions", collected
        ),
        noncurrent_expiration_after_days=noncurrent_expiration.get("days"),
        abort_incomplete_multipart_upload_days=abort_multipart.get("daysAfterInitiation"),
    )
    if errors is None:
        _raise_if_any(collected)
    return rule


def create_statement_from_spec(
    spec: dict[str, Any],
    path: str = "statement",
    errors: list[FieldError] | None = None,
) -> PolicyStatement:
    """Create a custom policy statement from its spec dict."""
    collected: list[FieldError] = [] if errors is None else errors

    principals = tuple(
        PrincipalSet(type=p.get("type", ""), identifiers=_as_tuple(p.get("identifiers")))
        for _, p in _items(spec, "principals", f"{path}.principals", collected)
    )
    conditions = tuple(
        StatementCondition(
            test=c.get("test", ""),
            variable=c.get("variable", ""),
            values=tuple(str(v) for v in _as_tuple(c.get("values"))),
        )
        for _, c in _items(spec, "conditions", f"{path}.conditions", collected)
    )
    statement = PolicyStatement(
        sid=spec.get("sid"),
        effect=spec.get("effect", EFFECT_ALLOW),
        principals=principals,
        actions=_as_tuple(spec.get("actions")),
        resources=_as_tuple(spec.get("resources")),
        conditions=conditions,
    )
    if errors is None:
        _raise_if_any(collected)
    return statement


def create_cors_rule_from_spec(spec: dict[str, Any]) -> CorsRule:
    """Create a CORS rule from its spec dict."""
    return CorsRule(
        allowed_origins=_as_tuple(spec.get("allowedOrigins")),
        allowed_methods=_as_tuple(spec.get("allowedMethods")),
        allowed_headers=_as_tuple(spec.get("allowedHeaders")),
        expose_headers=_as_tuple(spec.get("exposedHeaders")),
        max_age_seconds=spec.get("maxAgeSeconds"),
    )


def create_security_config_from_spec(spec: dict[str, Any]) -> BucketSecurityConfig:
    """Create a bucket security configuration from a spec dict.

    Values are carried as given so the validator can report every problem in
    one pass. Only the document shape is checked here: a section that is not
    an object, or a rule list that is not a list of objects, cannot be mapped
    onto the model at all.

    Args:
        spec: Bucket security spec in camelCase form

    Returns:
        BucketSecurityConfig ready for compilation

    Raises:
        ValidationError: If any section has the wrong shape
    """
    errors: list[FieldError] = []

    encryption = _section(spec, "encryption", "encryption", errors)
    logging_spec = _section(spec, "logging", "logging", errors)

    # Object lock settings are kept even when disabled; the validator decides
    object_lock_spec = _section(spec, "objectLock", "objectLock", errors)
    object_lock = None
    if "mode" in object_lock_spec or "retentionDays" in object_lock_spec:
        object_lock = ObjectLockConfig(
            mode=object_lock_spec.get("mode"),
            retention_days=object_lock_spec.get("retentionDays"),
        )

    trusted = _section(spec, "trustedPrincipals", "trustedPrincipals", errors)
    trusted_actions = trusted.get("actions")

    lifecycle = _section(spec, "lifecycle", "lifecycle", errors)
    policy = _section(spec, "policy", "policy", errors)
    cors = _section(spec, "cors", "cors", errors)
    tagging = _section(spec, "tagging", "tagging", errors)
    tags = _section(tagging, "tags", "tagging.tags", errors)

    lifecycle_rules = tuple(
        create_lifecycle_rule_from_spec(rule, path, errors)
        for path, rule in _items(lifecycle, "rules", "lifecycle.rules", errors)
    )
    custom_statements = tuple(
        create_statement_from_spec(statement, path, errors)
        for path, statement in _items(policy, "statements", "policy.statements", errors)
    )
    cors_rules = tuple(
        create_cors_rule_from_spec(rule) for _, rule in _items(cors, "rules", "cors.rules", errors)
    )

    _raise_if_any(errors)

    return BucketSecurityConfig(
        name=spec.get("name", ""),
        environment=spec.get("environment", ""),
        kms_key_id=encryption.get("kmsKeyId"),
        logging_target_bucket=logging_spec.get("targetBucket"),
        logging_target_prefix=logging_spec.get("targetPrefix"),
        object_lock_enabled=object_lock_spec.get("enabled", False),
        object_lock=object_lock,
        trusted_principals=_as_tuple(trusted.get("identifiers")),
        trusted_principal_actions=None if trusted_actions is None else _as_tuple(trusted_actions),
        lifecycle_rules=lifecycle_rules,
        custom_statements=custom_statements,
        cors_rules=cors_rules,
        tags=dict(tags),
    )

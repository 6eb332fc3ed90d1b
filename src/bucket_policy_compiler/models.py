"""Models for bucket security configuration and compiled artifacts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from .constants import EFFECT_ALLOW, WILDCARD


@dataclass(frozen=True)
class ObjectLockConfig:
    """Default retention for write-once-read-many buckets."""

    mode: str
    retention_days: int


@dataclass(frozen=True)
class PrincipalSet:
    """Principals of one type referenced by a statement."""

    type: str
    identifiers: tuple[str, ...]

    @property
    def is_wildcard(self) -> bool:
        return self.type == WILDCARD and self.identifiers == (WILDCARD,)


WILDCARD_PRINCIPAL = PrincipalSet(type=WILDCARD, identifiers=(WILDCARD,))


@dataclass(frozen=True)
class StatementCondition:
    """A single condition block entry: test operator, context key and values."""

    test: str
    variable: str
    values: tuple[str, ...]


@dataclass(frozen=True)
class PolicyStatement:
    """One access-control statement."""

    actions: tuple[str, ...]
    resources: tuple[str, ...]
    effect: str = EFFECT_ALLOW
    sid: str | None = None
    principals: tuple[PrincipalSet, ...] = ()
    conditions: tuple[StatementCondition, ...] = ()


@dataclass(frozen=True)
class Transition:
    """Storage class transition after a number of days."""

    after_days: int
    storage_class: str


@dataclass(frozen=True)
class LifecycleRule:
    """Time-based transition and expiration rule for objects and versions."""

    id: str
    enabled: bool = True
    prefix: str = ""
    transitions: tuple[Transition, ...] = ()
    expiration_after_days: int | None = None
    noncurrent_transitions: tuple[Transition, ...] = ()
    noncurrent_expiration_after_days: int | None = None
    abort_incomplete_multipart_upload_days: int | None = None


@dataclass(frozen=True)
class CorsRule:
    """Cross-origin resource sharing rule."""

    allowed_origins: tuple[str, ...]
    allowed_methods: tuple[str, ...]
    allowed_headers: tuple[str, ...] = ()
    expose_headers: tuple[str, ...] = ()
    max_age_seconds: int | None = None


@dataclass(frozen=True)
class BucketSecurityConfig:
    """Desired security posture of a single bucket."""

    name: str
    environment: str
    kms_key_id: str | None
    logging_target_bucket: str | None = None
    logging_target_prefix: str | None = None
    object_lock_enabled: bool = False
    object_lock: ObjectLockConfig | None = None
    trusted_principals: tuple[str, ...] = ()
    trusted_principal_actions: tuple[str, ...] | None = None
    lifecycle_rules: tuple[LifecycleRule, ...] = ()
    custom_statements: tuple[PolicyStatement, ...] = ()
    cors_rules: tuple[CorsRule, ...] = ()
    tags: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class CompiledArtifact:
    """Output bundle handed to the provisioning layer."""

    bucket_name: str
    kms_key_id: str
    policy_document: tuple[PolicyStatement, ...]
    lifecycle_rule_set: tuple[LifecycleRule, ...]
    object_lock: ObjectLockConfig | None = None
    logging_target_bucket: str | None = None
    logging_target_prefix: str | None = None
    cors_rules: tuple[CorsRule, ...] = ()

    @property
    def has_lifecycle(self) -> bool:
        return bool(self.lifecycle_rule_set)


@dataclass(frozen=True)
class PublicAccessConfig:
    """Configuration for public access blocking."""

    block_public_acls: bool = True
    block_public_policy: bool = True
    ignore_public_acls: bool = True
    restrict_public_buckets: bool = True

    def to_aws(self) -> dict[str, Any]:
        return {
            "BlockPublicAcls": self.block_public_acls,
            "BlockPublicPolicy": self.block_public_policy,
            "IgnorePublicAcls": self.ignore_public_acls,
            "RestrictPublicBuckets": self.restrict_public_buckets,
        }

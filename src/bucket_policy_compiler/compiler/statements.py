"""Composition of the bucket policy statement list.

The document is an ordered pipeline of statement rules, each a pure function
of the validated configuration returning zero or one statements. The baseline
rules emit unconditionally; nothing in the configuration can remove them.
"""

from __future__ import annotations

import re
from dataclasses import replace
from typing import Callable, Iterator

from .. import metrics
from ..constants import (
    ACTION_ALL,
    ACTION_PUT_OBJECT,
    COND_KEY_SECURE_TRANSPORT,
    COND_KEY_SSE,
    COND_KEY_SSE_KMS_KEY_ID,
    COND_TEST_BOOL,
    COND_TEST_STRING_NOT_EQUALS,
    COND_TEST_STRING_NOT_EQUALS_IF_EXISTS,
    DEFAULT_PARTITION,
    DEFAULT_TRUSTED_ACTIONS,
    EFFECT_ALLOW,
    EFFECT_DENY,
    KIND_CUSTOM,
    KIND_TRANSPORT,
    KIND_TRUSTED,
    KIND_UNENCRYPTED,
    KIND_WRONG_KEY,
    KMS_KEY_ARN_PATTERN,
    PRINCIPAL_TYPE_AWS,
    SID_ALLOW_TRUSTED_PRINCIPALS,
    SID_CUSTOM_PREFIX,
    SID_DENY_INCORRECT_KEY,
    SID_DENY_INSECURE_TRANSPORT,
    SID_DENY_UNENCRYPTED_UPLOADS,
    SSE_ALGORITHM_KMS,
)
from ..models import (
    WILDCARD_PRINCIPAL,
    BucketSecurityConfig,
    PolicyStatement,
    PrincipalSet,
    StatementCondition,
)

_KMS_KEY_RE = re.compile(KMS_KEY_ARN_PATTERN)


def partition_for(config: BucketSecurityConfig) -> str:
    """Return the ARN partition of the bucket, taken from its KMS key ARN."""
    match = _KMS_KEY_RE.match(config.kms_key_id or "")
    return match.group("partition") if match else DEFAULT_PARTITION


def bucket_arn(config: BucketSecurityConfig) -> str:
    return f"arn:{partition_for(config)}:s3:::{config.name}"


def objects_arn(config: BucketSecurityConfig) -> str:
    return f"{bucket_arn(config)}/*"


def deny_insecure_transport(config: BucketSecurityConfig) -> PolicyStatement:
    return PolicyStatement(
        sid=SID_DENY_INSECURE_TRANSPORT,
        effect=EFFECT_DENY,
        principals=(WILDCARD_PRINCIPAL,),
        actions=(ACTION_ALL,),
        resources=(bucket_arn(config), objects_arn(config)),
        conditions=(StatementCondition(COND_TEST_BOOL, COND_KEY_SECURE_TRANSPORT, ("false",)),),
    )


def allow_trusted_principals(config: BucketSecurityConfig) -> PolicyStatement | None:
    if not config.trusted_principals:
        return None
    actions = config.trusted_principal_actions or DEFAULT_TRUSTED_ACTIONS
    return PolicyStatement(
        sid=SID_ALLOW_TRUSTED_PRINCIPALS,
        effect=EFFECT_ALLOW,
        principals=(PrincipalSet(PRINCIPAL_TYPE_AWS, tuple(config.trusted_principals)),),
        actions=tuple(actions),
        resources=(bucket_arn(config), objects_arn(config)),
    )


def deny_unencrypted_uploads(config: BucketSecurityConfig) -> PolicyStatement:
    # Also fires when the header is absent
    return PolicyStatement(
        sid=SID_DENY_UNENCRYPTED_UPLOADS,
        effect=EFFECT_DENY,
        principals=(WILDCARD_PRINCIPAL,),
        actions=(ACTION_PUT_OBJECT,),
        resources=(objects_arn(config),),
        conditions=(StatementCondition(COND_TEST_STRING_NOT_EQUALS, COND_KEY_SSE, (SSE_ALGORITHM_KMS,)),),
    )


def deny_incorrect_key(config: BucketSecurityConfig) -> PolicyStatement:
    # Only fires when the key header is present and wrong
    return PolicyStatement(
        sid=SID_DENY_INCORRECT_KEY,
        effect=EFFECT_DENY,
        principals=(WILDCARD_PRINCIPAL,),
        actions=(ACTION_PUT_OBJECT,),
        resources=(objects_arn(config),),
        conditions=(
            StatementCondition(
                COND_TEST_STRING_NOT_EQUALS_IF_EXISTS,
                COND_KEY_SSE_KMS_KEY_ID,
                (config.kms_key_id,),
            ),
        ),
    )


def custom_statements(config: BucketSecurityConfig) -> Iterator[PolicyStatement]:
    for position, statement in enumerate(config.custom_statements, start=1):
        if statement.sid is None:
            yield replace(statement, sid=f"{SID_CUSTOM_PREFIX}{position}")
        else:
            yield statement


StatementRule = Callable[[BucketSecurityConfig], "PolicyStatement | None"]

# Fixed emission order
STATEMENT_RULES: tuple[tuple[str, StatementRule], ...] = (
    (KIND_TRANSPORT, deny_insecure_transport),
    (KIND_TRUSTED, allow_trusted_principals),
    (KIND_UNENCRYPTED, deny_unencrypted_uploads),
    (KIND_WRONG_KEY, deny_incorrect_key),
)


def compose(config: BucketSecurityConfig) -> tuple[PolicyStatement, ...]:
    """Build the ordered statement list for a validated configuration.

    Args:
        config: Configuration that already passed validation

    Returns:
        Baseline and conditional statements followed by the custom statements
        in input order
    """
    statements: list[PolicyStatement] = []
    for kind, rule in STATEMENT_RULES:
        statement = rule(config)
        if statement is not None:
            statements.append(statement)
            metrics.statements_emitted_total.labels(kind=kind).inc()

    for statement in custom_statements(config):
        statements.append(statement)
        metrics.statements_emitted_total.labels(kind=KIND_CUSTOM).inc()

    return tuple(statements)

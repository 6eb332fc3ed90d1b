"""Top-level compilation of bucket security configurations."""

from __future__ import annotations

import logging
import re
import time

from .. import metrics
from ..logging import log_compile_event
from ..models import BucketSecurityConfig, CompiledArtifact
from ..serialization import artifact_fingerprint
from ..settings import CompilerSettings
from ..tracing import add_span_attribute, trace_span
from ..utils.errors import ValidationError
from .lifecycle import compile_lifecycle
from .statements import compose
from .validator import validate

logger = logging.getLogger(__name__)

_FIELD_ROOT_RE = re.compile(r"^[a-z_]+")


def _field_root(field: str) -> str:
    match = _FIELD_ROOT_RE.match(field)
    return match.group(0) if match else field


def compile_config(
    config: BucketSecurityConfig,
    settings: CompilerSettings | None = None,
) -> CompiledArtifact:
    """Compile a configuration into a policy document and lifecycle rule set.

    Compilation is all-or-nothing: a validation failure is raised untouched
    and no artifact is produced.

    Args:
        config: Bucket security configuration
        settings: Compiler settings (defaults to CompilerSettings())

    Returns:
        CompiledArtifact for the provisioning layer

    Raises:
        ValidationError: If the configuration violates any rule
    """
    settings = settings or CompilerSettings()
    start_time = time.time()

    with trace_span("compile_bucket_policy", attributes={"bucket.name": str(config.name)}):
        try:
            validate(config, strict_object_lock=settings.strict_object_lock)
        except ValidationError as e:
            metrics.compile_total.labels(result="invalid").inc()
            for error in e.errors:
                metrics.validation_errors_total.labels(field=_field_root(error.field)).inc()
            metrics.compile_duration_seconds.observe(time.time() - start_time)
            raise

        artifact = CompiledArtifact(
            bucket_name=config.name,
            kms_key_id=config.kms_key_id,
            policy_document=compose(config),
            lifecycle_rule_set=compile_lifecycle(config.lifecycle_rules),
            object_lock=config.object_lock if config.object_lock_enabled else None,
            logging_target_bucket=config.logging_target_bucket,
            logging_target_prefix=config.logging_target_prefix,
            cors_rules=tuple(config.cors_rules),
        )

        metrics.compile_duration_seconds.observe(time.time() - start_time)
        fingerprint = artifact_fingerprint(artifact)
        add_span_attribute("artifact.fingerprint", fingerprint)
        metrics.compile_total.labels(result="success").inc()
        log_compile_event(
            logger,
            bucket_name=config.name,
            environment=config.environment,
            event="compiled",
            reason="CompileSucceeded",
            message=f"Compiled policy for bucket {config.name}",
            statements=len(artifact.policy_document),
            lifecycle_rules=len(artifact.lifecycle_rule_set),
            object_lock=artifact.object_lock is not None,
            fingerprint=fingerprint,
        )
        return artifact

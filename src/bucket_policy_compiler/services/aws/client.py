"""AWS S3 applier for compiled artifacts."""

from __future__ import annotations

import logging
from typing import Any, Callable

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from ... import metrics
from ...constants import SSE_ALGORITHM_KMS
from ...models import CompiledArtifact, ObjectLockConfig, PublicAccessConfig
from ...serialization import (
    canonical_json,
    cors_rules_to_dict,
    lifecycle_rules_to_dict,
    object_lock_to_dict,
    policy_document_to_dict,
)
from ...tracing import trace_span
from ...utils.errors import ImmutabilityViolationError, sanitize_exception

logger = logging.getLogger(__name__)

OBJECT_LOCK_NOT_FOUND = "ObjectLockConfigurationNotFoundError"


class BucketArtifactApplier:
    """Applies compiled artifacts to existing S3 buckets.

    Public access blocking and versioning are fixed, always-on settings. The
    lifecycle configuration is attached only when the rule set is non-empty and
    object lock is configured only when the artifact carries it.
    """

    def __init__(self, client: Any, public_access: PublicAccessConfig | None = None) -> None:
        """Initialize the applier.

        Args:
            client: boto3 S3 client
            public_access: Public access block settings (all blocked by default)
        """
        self.client = client
        self.public_access = public_access or PublicAccessConfig()

    @classmethod
    def from_credentials(
        cls,
        region: str,
        endpoint: str | None = None,
        access_key: str | None = None,
        secret_key: str | None = None,
        session_token: str | None = None,
        path_style: bool = False,
    ) -> BucketArtifactApplier:
        """Create an applier with its own boto3 S3 client.

        Args:
            region: AWS region
            endpoint: Optional S3 endpoint URL
            access_key: Access key ID (falls back to the default credential chain)
            secret_key: Secret access key
            session_token: Optional session token for temporary credentials
            path_style: Use path-style addressing
        """
        config = Config(
            signature_version="s3v4",
            s3={"addressing_style": "path" if path_style else "auto"},
        )
        client = boto3.client(
            "s3",
            endpoint_url=endpoint,
            region_name=region,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            aws_session_token=session_token,
            config=config,
        )
        return cls(client)

    def _call(self, operation: str, bucket: str, func: Callable[..., Any], **kwargs: Any) -> Any:
        try:
            response = func(Bucket=bucket, **kwargs)
        except ClientError as e:
            metrics.apply_operations_total.labels(operation=operation, result="failed").inc()
            logger.error(f"Failed to {operation} for bucket {bucket}: {sanitize_exception(e)}")
            raise
        metrics.apply_operations_total.labels(operation=operation, result="success").inc()
        return response

    def get_object_lock(self, name: str) -> ObjectLockConfig | None:
        """Get the default retention currently applied, or None if object lock is off.

        A bucket with object lock enabled but no default retention reports a
        retention of zero days.
        """
        try:
            response = self.client.get_object_lock_configuration(Bucket=name)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") == OBJECT_LOCK_NOT_FOUND:
                return None
            logger.error(f"Failed to get object lock configuration for bucket {name}: {sanitize_exception(e)}")
            raise

        lock_config = response.get("ObjectLockConfiguration", {})
        if lock_config.get("ObjectLockEnabled") != "Enabled":
            return None
        retention = lock_config.get("Rule", {}).get("DefaultRetention", {})
        return ObjectLockConfig(mode=retention.get("Mode", ""), retention_days=retention.get("Days", 0))

    def is_object_lock_enabled(self, name: str) -> bool:
        return self.get_object_lock(name) is not None

    def ensure_object_lock_not_disabled(self, artifact: CompiledArtifact) -> None:
        """Reject artifacts that would turn off object lock on a locked bucket.

        Raises:
            ImmutabilityViolationError: If the bucket is locked and the artifact is not
        """
        if artifact.object_lock is None and self.is_object_lock_enabled(artifact.bucket_name):
            raise ImmutabilityViolationError(artifact.bucket_name)

    def apply(self, artifact: CompiledArtifact) -> None:
        """Apply a compiled artifact to its bucket.

        Raises:
            ImmutabilityViolationError: If the artifact would disable object lock
            ClientError: If any S3 call fails
        """
        name = artifact.bucket_name

        with trace_span("apply_bucket_artifact", attributes={"bucket.name": name}):
            self.ensure_object_lock_not_disabled(artifact)

            self._call(
                "put_public_access_block",
                name,
                self.client.put_public_access_block,
                PublicAccessBlockConfiguration=self.public_access.to_aws(),
            )
            self._call(
                "put_bucket_versioning",
                name,
                self.client.put_bucket_versioning,
                VersioningConfiguration={"Status": "Enabled"},
            )
            self._call(
                "put_bucket_encryption",
                name,
                self.client.put_bucket_encryption,
                ServerSideEncryptionConfiguration={
                    "Rules": [
                        {
                            "ApplyServerSideEncryptionByDefault": {
                                "SSEAlgorithm": SSE_ALGORITHM_KMS,
                                "KMSMasterKeyID": artifact.kms_key_id,
                            },
                            "BucketKeyEnabled": True,
                        }
                    ]
                },
            )
            self._call(
                "put_bucket_policy",
                name,
                self.client.put_bucket_policy,
                Policy=canonical_json(policy_document_to_dict(artifact.policy_document)),
            )

            if artifact.has_lifecycle:
                self._call(
                    "put_bucket_lifecycle_configuration",
                    name,
                    self.client.put_bucket_lifecycle_configuration,
                    LifecycleConfiguration=lifecycle_rules_to_dict(artifact.lifecycle_rule_set),
                )

            if artifact.object_lock is not None:
                self._call(
                    "put_object_lock_configuration",
                    name,
                    self.client.put_object_lock_configuration,
                    ObjectLockConfiguration=object_lock_to_dict(artifact.object_lock),
                )

            if artifact.logging_target_bucket:
                self._call(
                    "put_bucket_logging",
                    name,
                    self.client.put_bucket_logging,
                    BucketLoggingStatus={
                        "LoggingEnabled": {
                            "TargetBucket": artifact.logging_target_bucket,
                            "TargetPrefix": artifact.logging_target_prefix or "",
                        }
                    },
                )

            if artifact.cors_rules:
                self._call(
                    "put_bucket_cors",
                    name,
                    self.client.put_bucket_cors,
                    CORSConfiguration=cors_rules_to_dict(artifact.cors_rules),
                )

            logger.info(f"Applied compiled artifact to bucket {name}")

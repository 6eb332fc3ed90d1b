"""Base provisioning collaborator interface."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ...models import CompiledArtifact, ObjectLockConfig


@runtime_checkable
class BucketProvisioner(Protocol):
    """Protocol for layers that apply compiled artifacts to a bucket."""

    def get_object_lock(self, name: str) -> ObjectLockConfig | None:
        """Get the object-lock retention currently applied to a bucket, if any."""
        ...

    def is_object_lock_enabled(self, name: str) -> bool:
        """Check whether object lock is currently enabled on a bucket."""
        ...

    def apply(self, artifact: CompiledArtifact) -> None:
        """Apply a compiled artifact to its bucket.

        Raises:
            ImmutabilityViolationError: If the artifact would disable object lock
        """
        ...

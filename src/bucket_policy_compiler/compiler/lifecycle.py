"""Lifecycle rule set compilation."""

from __future__ import annotations

from typing import Iterable

from ..models import LifecycleRule


def compile_lifecycle(rules: Iterable[LifecycleRule]) -> tuple[LifecycleRule, ...]:
    """Return the validated lifecycle rules as an ordered rule set.

    An empty rule set is valid and means no lifecycle configuration is
    attached to the bucket.
    """
    return tuple(rules)

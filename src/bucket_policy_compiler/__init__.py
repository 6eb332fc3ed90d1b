"""Compiles bucket security configurations into policy and lifecycle artifacts."""

from .builders import create_security_config_from_spec
from .compiler import compile_config
from .models import BucketSecurityConfig, CompiledArtifact
from .utils.errors import ValidationError

__version__ = "0.1.0"

__all__ = [
    "BucketSecurityConfig",
    "CompiledArtifact",
    "ValidationError",
    "compile_config",
    "create_security_config_from_spec",
]

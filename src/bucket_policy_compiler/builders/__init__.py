"""Builders for compiler models."""

from .config import create_security_config_from_spec

__all__ = ["create_security_config_from_spec"]

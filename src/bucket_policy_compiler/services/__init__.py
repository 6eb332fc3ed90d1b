"""Provisioning collaborator services."""

"""Provisioning collaborator interface."""

"""
exceptions raised while provisioning an environment.
"""

from __future__ import annotations


class ProvisionError(Exception):
    """base class for fatal provisioning errors."""


class DestructiveOperationError(ProvisionError):
    """an existing environment could not be removed."""


class CreationError(ProvisionError):
    """the environment creation command failed."""

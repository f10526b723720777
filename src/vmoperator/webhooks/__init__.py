# src/vmoperator/webhooks/__init__.py
"""Admission validation for vmoperator resources."""

from .resource_policy import (
    FieldError,
    ResourcePolicy,
    ResourcePolicySpec,
    ResourcePolicyValidator,
    ResourcePoolSpec,
    ValidationResponse,
    resource_policy_from_dict,
)

__all__ = [
    "FieldError",
    "ResourcePolicy",
    "ResourcePolicySpec",
    "ResourcePolicyValidator",
    "ResourcePoolSpec",
    "ValidationResponse",
    "resource_policy_from_dict",
]

# src/vmoperator/exceptions.py
"""
Custom exceptions for the vmoperator library.

This module defines a hierarchy of custom exception classes to provide
more specific error information and allow for targeted error handling
by reconcilers and admission webhooks using vmoperator.

Exception Hierarchy:
    VMOperatorError (base)
    ├── ConfigError - Configuration loading or validation failed
    ├── InvalidArgumentError - Caller supplied an unusable argument
    ├── StoreError - Object store failures
    │   ├── RecordNotFoundError - Exact-name lookup missed
    │   └── StoreUnavailableError - Transport failure talking to the store
    ├── ImageResolutionError - Image name could not be resolved
    │   ├── ImageNotFoundError - No image matches the name
    │   └── ImageConflictError - More than one image matches the name
    └── StorageUsageQueueClosedError - Event submitted after shutdown
"""

from typing import Any


class VMOperatorError(Exception):
    """Base class for all vmoperator specific errors."""

    def __init__(self, message: str = "An unspecified error occurred in vmoperator."):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        """Serialize exception to dictionary for logging/API responses."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
        }


class ConfigError(VMOperatorError):
    """Raised for errors related to configuration loading or validation."""

    def __init__(self, message: str = "Configuration error."):
        super().__init__(message)


class InvalidArgumentError(VMOperatorError):
    """Raised when a caller passes an argument the operation cannot use."""

    def __init__(self, message: str = "Invalid argument."):
        super().__init__(message)


class StoreError(VMOperatorError):
    """Base class for errors raised by an object store."""

    def __init__(self, message: str = "Store error."):
        super().__init__(message)


class RecordNotFoundError(StoreError):
    """
    Raised by a store when an exact-name lookup finds nothing.

    Attributes:
        kind: Object kind that was looked up
        namespace: Namespace of the lookup (None for cluster-scoped kinds)
        name: Unique name that was looked up
    """

    def __init__(self, kind: str, name: str, namespace: str | None = None):
        self.kind = kind
        self.name = name
        self.namespace = namespace
        if namespace:
            key = f"{namespace}/{name}"
        else:
            key = name
        super().__init__(f'{kind} "{key}" not found')

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result.update({"kind": self.kind, "name": self.name, "namespace": self.namespace})
        return result


class StoreUnavailableError(StoreError):
    """
    Raised by a store when the backing datastore cannot be reached.

    Resolution code never catches this; it surfaces to the caller unchanged
    so the caller's reconcile loop can apply its own backoff.
    """

    def __init__(self, message: str = "Store unavailable.", cause: Exception | None = None):
        self.cause = cause
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class ImageResolutionError(VMOperatorError):
    """Base class for failures resolving an image name to one record."""

    def __init__(self, name: str, message: str):
        self.name = name
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["name"] = self.name
        return result


class ImageNotFoundError(ImageResolutionError):
    """
    Raised when no image matches a name by unique name or display name.

    Callers treat this like a standard "not found" condition; a reconciler
    may requeue since the image can appear later.
    """

    def __init__(self, name: str):
        super().__init__(name, f'no VM image exists for "{name}" in namespace or cluster scope')


class ImageConflictError(ImageResolutionError):
    """
    Raised when a display name matches more than one image.

    Attributes:
        name: The queried name
        scope: Human-readable description of where the duplicates live
    """

    NAMESPACE_SCOPE = "namespace scope"
    CLUSTER_SCOPE = "cluster scope"
    BOTH_SCOPES = "namespace and cluster scope"

    def __init__(self, name: str, scope: str):
        self.scope = scope
        super().__init__(name, f'multiple VM images exist for "{name}" in {scope}')

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["scope"] = self.scope
        return result


class StorageUsageQueueClosedError(VMOperatorError):
    """Raised when an event is submitted to a storage usage queue that was closed."""

    def __init__(self, message: str = "Storage usage queue is closed."):
        super().__init__(message)


def is_not_found(err: BaseException) -> bool:
    """Return True if err represents a "not found" condition."""
    return isinstance(err, (ImageNotFoundError, RecordNotFoundError))

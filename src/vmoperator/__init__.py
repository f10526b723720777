# src/vmoperator/__init__.py
"""
vmoperator - Decision logic for a Kubernetes VM operator backed by vSphere.

This library holds the pieces of VM reconciliation that do not talk to
vCenter directly:

    - Image name resolution across namespace and cluster scope
    - Hardware version negotiation for a VM being created
    - Predicates over VM specs (PVC volumes, classless, imageless)
    - Storage usage change notifications over a bounded async queue
    - vSphere provider ConfigMap decoding
    - Admission validation of VirtualMachineSetResourcePolicy objects
"""

from importlib.metadata import PackageNotFoundError, version

from .exceptions import (
    ConfigError,
    ImageConflictError,
    ImageNotFoundError,
    ImageResolutionError,
    InvalidArgumentError,
    RecordNotFoundError,
    StorageUsageQueueClosedError,
    StoreError,
    StoreUnavailableError,
    VMOperatorError,
    is_not_found,
)
from .images import (
    ImageRecord,
    ImageResolver,
    ImageScope,
    ImageStatus,
    ImageStore,
    InMemoryImageStore,
    resolve_image_name,
)
from .storage import (
    StorageUsageEvent,
    StorageUsageNotifier,
    StorageUsageQueue,
    create_storage_usage_queue,
    sync_storage_usage_for_namespace,
)
from .vm import (
    ConfigSpec,
    VirtualMachineSpec,
    determine_hardware_version,
    has_pci_passthrough,
    has_pvc,
    is_classless,
    is_imageless,
)

try:
    __version__ = version("vmoperator")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    # Errors
    "ConfigError",
    "ImageConflictError",
    "ImageNotFoundError",
    "ImageResolutionError",
    "InvalidArgumentError",
    "RecordNotFoundError",
    "StorageUsageQueueClosedError",
    "StoreError",
    "StoreUnavailableError",
    "VMOperatorError",
    "is_not_found",
    # Images
    "ImageRecord",
    "ImageResolver",
    "ImageScope",
    "ImageStatus",
    "ImageStore",
    "InMemoryImageStore",
    "resolve_image_name",
    # Storage usage
    "StorageUsageEvent",
    "StorageUsageNotifier",
    "StorageUsageQueue",
    "create_storage_usage_queue",
    "sync_storage_usage_for_namespace",
    # VM
    "ConfigSpec",
    "VirtualMachineSpec",
    "determine_hardware_version",
    "has_pci_passthrough",
    "has_pvc",
    "is_classless",
    "is_imageless",
    "__version__",
]

# src/vmoperator/images/models.py
"""
Data models for VM image records.

Image records live in two disjoint collections:
    - NAMESPACE: VirtualMachineImage objects, unique by name per namespace
    - CLUSTER: ClusterVirtualMachineImage objects, unique by name cluster-wide

Both kinds share one record type tagged with its scope, so that lookup and
resolution code is written once for both collections. The display name
(``status.name``) is a human-facing label and is not unique, neither within
a collection nor across the two.

Example:
    >>> record = ImageRecord.from_dict({
    ...     "kind": "VirtualMachineImage",
    ...     "metadata": {"name": "vmi-1", "namespace": "my-ns"},
    ...     "status": {"name": "ubuntu-22.04", "hardwareVersion": 19},
    ... })
    >>> record.display_name
    'ubuntu-22.04'
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..constants import CLUSTER_IMAGE_KIND, NAMESPACE_IMAGE_KIND
from ..exceptions import InvalidArgumentError


class ImageScope(str, Enum):
    """
    Lookup scope of an image record.

    NAMESPACE: Unique name per namespace
    CLUSTER: Unique name across the whole cluster
    """

    NAMESPACE = "namespace"
    CLUSTER = "cluster"

    @property
    def kind(self) -> str:
        """Get the object kind stored in this scope."""
        return _SCOPE_KINDS[self]

    @classmethod
    def from_kind(cls, kind: str) -> "ImageScope":
        """
        Map an object kind to its scope.

        Raises:
            InvalidArgumentError: If kind is not an image kind
        """
        for scope, scope_kind in _SCOPE_KINDS.items():
            if scope_kind == kind:
                return scope
        raise InvalidArgumentError(f"unsupported image kind: {kind!r}")


_SCOPE_KINDS: dict[ImageScope, str] = {
    ImageScope.NAMESPACE: NAMESPACE_IMAGE_KIND,
    ImageScope.CLUSTER: CLUSTER_IMAGE_KIND,
}


@dataclass
class ImageStatus:
    """
    Observed state of an image.

    Attributes:
        display_name: Human-facing image name, not guaranteed unique
        hardware_version: Hardware version recorded in the image, if known
    """

    display_name: str = ""
    hardware_version: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the API dictionary shape."""
        data: dict[str, Any] = {"name": self.display_name}
        if self.hardware_version is not None:
            data["hardwareVersion"] = self.hardware_version
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ImageStatus":
        """Create from the API dictionary shape."""
        if not isinstance(data, dict):
            raise InvalidArgumentError(f"status must be a mapping, got {type(data).__name__}")
        hw_version = data.get("hardwareVersion")
        if hw_version is not None:
            try:
                hw_version = int(hw_version)
            except (TypeError, ValueError) as e:
                raise InvalidArgumentError(
                    f"status.hardwareVersion must be an integer, got {hw_version!r}"
                ) from e
        return cls(display_name=data.get("name", "") or "", hardware_version=hw_version)


@dataclass
class ImageRecord:
    """
    A VM image from either lookup scope.

    Attributes:
        scope: Which collection the record belongs to
        name: Unique name within the scope
        namespace: Owning namespace; empty for cluster-scoped records
        status: Observed image state including the display name
        labels: Object labels
    """

    scope: ImageScope
    name: str
    namespace: str = ""
    status: ImageStatus = field(default_factory=ImageStatus)
    labels: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.scope == ImageScope.CLUSTER:
            self.namespace = ""

    @property
    def display_name(self) -> str:
        """Get the display name."""
        return self.status.display_name

    @property
    def hardware_version(self) -> int | None:
        """Get the hardware version recorded in the image."""
        return self.status.hardware_version

    @property
    def kind(self) -> str:
        """Get the object kind of the record."""
        return self.scope.kind

    @property
    def key(self) -> tuple[ImageScope, str, str]:
        """Get the (scope, namespace, name) key that identifies the record."""
        return (self.scope, self.namespace, self.name)

    @property
    def is_cluster_scoped(self) -> bool:
        """Check if this is a cluster-scoped record."""
        return self.scope == ImageScope.CLUSTER

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to a Kubernetes-style object dictionary.

        Returns:
            Dictionary with kind, metadata and status
        """
        metadata: dict[str, Any] = {"name": self.name}
        if self.namespace:
            metadata["namespace"] = self.namespace
        if self.labels:
            metadata["labels"] = dict(self.labels)
        return {
            "kind": self.kind,
            "metadata": metadata,
            "status": self.status.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ImageRecord":
        """
        Decode a Kubernetes-style object dictionary.

        Only the two image kinds are accepted; the kind selects the scope.

        Args:
            data: Object dictionary with kind, metadata and status

        Returns:
            ImageRecord instance

        Raises:
            InvalidArgumentError: If the kind is unknown or required fields are missing
        """
        if not isinstance(data, dict):
            raise InvalidArgumentError(f"image object must be a mapping, got {type(data).__name__}")

        scope = ImageScope.from_kind(data.get("kind", ""))
        metadata = data.get("metadata") or {}
        if not isinstance(metadata, dict):
            raise InvalidArgumentError(f"metadata must be a mapping, got {type(metadata).__name__}")
        name = metadata.get("name", "")
        if not name:
            raise InvalidArgumentError("metadata.name is required")

        namespace = metadata.get("namespace", "") or ""
        if scope == ImageScope.NAMESPACE and not namespace:
            raise InvalidArgumentError(f"{scope.kind} {name!r} has no metadata.namespace")

        return cls(
            scope=scope,
            name=name,
            namespace=namespace,
            status=ImageStatus.from_dict(data.get("status") or {}),
            labels=dict(metadata.get("labels") or {}),
        )

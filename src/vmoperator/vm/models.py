# src/vmoperator/vm/models.py
"""
Data models for VM specifications and provisioning config specs.

Only the fields that image resolution and hardware version negotiation read
are modelled. ``from_dict`` decodes the camelCase shape used by the
VirtualMachine API; unknown fields are ignored.

Example:
    >>> spec = VirtualMachineSpec.from_dict({
    ...     "className": "best-effort-small",
    ...     "imageName": "ubuntu-22.04",
    ...     "minHardwareVersion": 15,
    ...     "volumes": [{"name": "data", "persistentVolumeClaim": {"claimName": "pvc-1"}}],
    ... })
    >>> spec.volumes[0].persistent_volume_claim.claim_name
    'pvc-1'
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..exceptions import InvalidArgumentError


@dataclass
class PersistentVolumeClaimSource:
    """
    Reference to a PersistentVolumeClaim backing a volume.

    Attributes:
        claim_name: Name of the claim in the VM's namespace
        read_only: Whether the volume is attached read-only
    """

    claim_name: str = ""
    read_only: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PersistentVolumeClaimSource":
        """Create from the API dictionary shape."""
        return cls(
            claim_name=data.get("claimName", ""),
            read_only=bool(data.get("readOnly", False)),
        )


@dataclass
class VirtualMachineVolume:
    """
    A volume attached to a VM.

    Attributes:
        name: Volume name, unique within the VM
        persistent_volume_claim: Claim source, if the volume is backed by one
    """

    name: str = ""
    persistent_volume_claim: PersistentVolumeClaimSource | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "VirtualMachineVolume":
        """Create from the API dictionary shape."""
        pvc = data.get("persistentVolumeClaim")
        return cls(
            name=data.get("name", ""),
            persistent_volume_claim=PersistentVolumeClaimSource.from_dict(pvc)
            if pvc is not None
            else None,
        )


@dataclass
class VirtualMachineImageRef:
    """
    Structured reference to a VM image.

    Attributes:
        kind: VirtualMachineImage or ClusterVirtualMachineImage
        name: Name of the image
    """

    kind: str = ""
    name: str = ""


@dataclass
class VirtualMachineSpec:
    """
    Desired state of a VM.

    Attributes:
        min_hardware_version: Lowest acceptable hardware version; 0 means no floor
        class_name: VM class; empty for a classless VM
        image: Structured image reference, if any
        image_name: Legacy image name string
        volumes: Attached volumes, in order
        storage_class: Storage class for the VM's disks
    """

    min_hardware_version: int = 0
    class_name: str = ""
    image: VirtualMachineImageRef | None = None
    image_name: str = ""
    volumes: list[VirtualMachineVolume] = field(default_factory=list)
    storage_class: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "VirtualMachineSpec":
        """
        Create from the API dictionary shape.

        Accepts either a bare spec or a whole VirtualMachine object with a
        ``spec`` key.

        Raises:
            InvalidArgumentError: If the spec or its image is not a mapping, or
                minHardwareVersion is not a non-negative integer
        """
        if not isinstance(data, dict):
            raise InvalidArgumentError(f"VM spec must be a mapping, got {type(data).__name__}")
        if "spec" in data and isinstance(data["spec"], dict):
            data = data["spec"]

        min_hw = data.get("minHardwareVersion", 0) or 0
        try:
            min_hw = int(min_hw)
        except (TypeError, ValueError) as e:
            raise InvalidArgumentError(f"minHardwareVersion must be an integer, got {min_hw!r}") from e
        if min_hw < 0:
            raise InvalidArgumentError(f"minHardwareVersion must not be negative, got {min_hw}")

        image = data.get("image")
        if image is not None and not isinstance(image, dict):
            raise InvalidArgumentError(f"image must be a mapping, got {type(image).__name__}")

        return cls(
            min_hardware_version=min_hw,
            class_name=data.get("className", "") or "",
            image=VirtualMachineImageRef(kind=image.get("kind", ""), name=image.get("name", ""))
            if image is not None
            else None,
            image_name=data.get("imageName", "") or "",
            volumes=[VirtualMachineVolume.from_dict(v) for v in data.get("volumes") or []],
            storage_class=data.get("storageClass", "") or "",
        )


class VirtualDeviceType(str, Enum):
    """Virtual device kinds that can appear in a config spec device change."""

    DISK = "disk"
    CDROM = "cdrom"
    ETHERNET_CARD = "ethernet_card"
    PCI_PASSTHROUGH = "pci_passthrough"
    VGPU = "vgpu"
    CONTROLLER = "controller"
    OTHER = "other"


class DeviceChangeOperation(str, Enum):
    """Operation applied to a device in a config spec."""

    ADD = "add"
    EDIT = "edit"
    REMOVE = "remove"


@dataclass
class VirtualDeviceChange:
    """
    A device change in a config spec.

    Attributes:
        device_type: Kind of device being changed
        operation: What is done to the device
        label: Optional device label
    """

    device_type: VirtualDeviceType = VirtualDeviceType.OTHER
    operation: DeviceChangeOperation = DeviceChangeOperation.ADD
    label: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "VirtualDeviceChange":
        """Create from dictionary; unknown device types map to OTHER."""
        try:
            device_type = VirtualDeviceType(data.get("deviceType", "other"))
        except ValueError:
            device_type = VirtualDeviceType.OTHER

        try:
            operation = DeviceChangeOperation(data.get("operation", "add"))
        except ValueError as e:
            raise InvalidArgumentError(f"unknown device change operation: {data.get('operation')!r}") from e

        return cls(device_type=device_type, operation=operation, label=data.get("label", ""))


@dataclass
class ConfigSpec:
    """
    Target virtual hardware configuration used to provision a VM.

    Attributes:
        version: Hardware version token, such as "vmx-19"; may be empty or malformed
        device_changes: Device changes to apply
    """

    version: str = ""
    device_changes: list[VirtualDeviceChange] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ConfigSpec":
        """Create from dictionary."""
        return cls(
            version=data.get("version", "") or "",
            device_changes=[VirtualDeviceChange.from_dict(d) for d in data.get("deviceChange") or []],
        )

# src/vmoperator/vm/inspect.py
"""Pure predicates over VM specs and config specs."""

from .models import (
    ConfigSpec,
    DeviceChangeOperation,
    VirtualDeviceType,
    VirtualMachineSpec,
)


def has_pvc(spec: VirtualMachineSpec) -> bool:
    """Check if any volume is backed by a persistent volume claim."""
    return any(v.persistent_volume_claim is not None for v in spec.volumes)


def is_classless(spec: VirtualMachineSpec) -> bool:
    """Check if the VM has no class."""
    return spec.class_name == ""


def is_imageless(spec: VirtualMachineSpec) -> bool:
    """Check if the VM has neither a structured image reference nor an image name."""
    return spec.image is None and spec.image_name == ""


def has_pci_passthrough(config_spec: ConfigSpec | None) -> bool:
    """Check if the config spec adds or edits a PCI passthrough device."""
    if config_spec is None:
        return False
    return any(
        change.device_type == VirtualDeviceType.PCI_PASSTHROUGH
        and change.operation != DeviceChangeOperation.REMOVE
        for change in config_spec.device_changes
    )

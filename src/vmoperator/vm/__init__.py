# src/vmoperator/vm/__init__.py
"""
VM spec models, predicates and hardware version negotiation.

Basic Usage:
    >>> from vmoperator.vm import VirtualMachineSpec, determine_hardware_version
    >>>
    >>> spec = VirtualMachineSpec.from_dict(vm_object)
    >>> version = determine_hardware_version(spec, config_spec, image.status)
"""

from .hardware import determine_hardware_version, format_hardware_version, parse_hardware_version
from .inspect import has_pci_passthrough, has_pvc, is_classless, is_imageless
from .models import (
    ConfigSpec,
    DeviceChangeOperation,
    PersistentVolumeClaimSource,
    VirtualDeviceChange,
    VirtualDeviceType,
    VirtualMachineImageRef,
    VirtualMachineSpec,
    VirtualMachineVolume,
)

__all__ = [
    # Models
    "ConfigSpec",
    "DeviceChangeOperation",
    "PersistentVolumeClaimSource",
    "VirtualDeviceChange",
    "VirtualDeviceType",
    "VirtualMachineImageRef",
    "VirtualMachineSpec",
    "VirtualMachineVolume",
    # Predicates
    "has_pci_passthrough",
    "has_pvc",
    "is_classless",
    "is_imageless",
    # Hardware version
    "determine_hardware_version",
    "format_hardware_version",
    "parse_hardware_version",
]

# src/vmoperator/vm/hardware.py
"""
Hardware version negotiation.

The hardware version a VM is provisioned with is the highest of several
independent floors. No floor can lower another, so adding a constraint
never decreases the result:

    - spec.minHardwareVersion of the VM
    - the hardware version recorded in the chosen image
    - the version token of the config spec ("vmx-<N>")
    - the minimum for PCI passthrough devices, if the config spec has any
    - the minimum for persistent volume claims, if the VM has any

A missing or malformed version token is not an error; it contributes no
floor.

Example:
    >>> determine_hardware_version(
    ...     VirtualMachineSpec(min_hardware_version=11),
    ...     ConfigSpec(version="vmx-13"),
    ...     None,
    ... )
    13
"""

import logging
import re

from ..constants import HW_VERSION_PREFIX, MIN_HW_VERSION_PCI_PASSTHROUGH, MIN_HW_VERSION_PVC
from ..images.models import ImageStatus
from .inspect import has_pci_passthrough, has_pvc
from .models import ConfigSpec, VirtualMachineSpec

logger = logging.getLogger(__name__)

_HW_VERSION_PATTERN = re.compile(rf"{re.escape(HW_VERSION_PREFIX)}([0-9]+)")


def parse_hardware_version(value: str | None) -> int:
    """
    Parse a "vmx-<N>" token.

    Args:
        value: Version token; may be None or empty

    Returns:
        N, or 0 if value does not match the grammar exactly
    """
    if not value:
        return 0
    match = _HW_VERSION_PATTERN.fullmatch(value)
    if match is None:
        logger.debug(f"Ignoring unparsable hardware version {value!r}")
        return 0
    return int(match.group(1))


def format_hardware_version(version: int) -> str:
    """Format a hardware version as its "vmx-<N>" token."""
    return f"{HW_VERSION_PREFIX}{version}"


def determine_hardware_version(
    vm_spec: VirtualMachineSpec,
    config_spec: ConfigSpec | None,
    image_status: ImageStatus | None,
) -> int:
    """
    Determine the minimum hardware version a VM must be created with.

    Args:
        vm_spec: Spec of the VM being provisioned
        config_spec: Config spec used to provision the VM, if any
        image_status: Status of the image the VM is deployed from, if any

    Returns:
        The required hardware version; 0 when nothing imposes a floor
    """
    floors = {
        "spec": vm_spec.min_hardware_version,
        "image": 0,
        "config_spec": 0,
        "pci_passthrough": 0,
        "pvc": 0,
    }

    if image_status is not None and image_status.hardware_version:
        floors["image"] = image_status.hardware_version

    if config_spec is not None:
        floors["config_spec"] = parse_hardware_version(config_spec.version)

    if has_pci_passthrough(config_spec):
        floors["pci_passthrough"] = MIN_HW_VERSION_PCI_PASSTHROUGH

    if has_pvc(vm_spec):
        floors["pvc"] = MIN_HW_VERSION_PVC

    version = max(floors.values())
    logger.debug(f"Determined hardware version {version} from floors {floors}")
    return version

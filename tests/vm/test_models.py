# tests/vm/test_models.py
"""
Tests for VM spec and config spec models.

Tests cover:
    - Decoding VirtualMachine objects and bare specs
    - Decoding config specs and device changes
"""

from typing import Any

import pytest

from vmoperator.exceptions import InvalidArgumentError
from vmoperator.vm import (
    ConfigSpec,
    DeviceChangeOperation,
    VirtualDeviceChange,
    VirtualDeviceType,
    VirtualMachineSpec,
    has_pvc,
)


class TestVirtualMachineSpec:
    """Tests for VirtualMachineSpec.from_dict."""

    def test_from_object(self, vm_spec_dict: dict[str, Any]):
        spec = VirtualMachineSpec.from_dict(vm_spec_dict)

        assert spec.class_name == "best-effort-small"
        assert spec.image is not None
        assert spec.image.kind == "VirtualMachineImage"
        assert spec.image.name == "vmi-1"
        assert spec.image_name == "image-a"
        assert spec.min_hardware_version == 11
        assert spec.storage_class == "wcp-policy"
        assert [v.name for v in spec.volumes] == ["data", "scratch"]
        assert spec.volumes[0].persistent_volume_claim.claim_name == "pvc-1"
        assert spec.volumes[0].persistent_volume_claim.read_only
        assert spec.volumes[1].persistent_volume_claim is None
        assert has_pvc(spec)

    def test_from_bare_spec(self, vm_spec_dict: dict[str, Any]):
        spec = VirtualMachineSpec.from_dict(vm_spec_dict["spec"])
        assert spec.class_name == "best-effort-small"

    def test_from_empty(self):
        assert VirtualMachineSpec.from_dict({}) == VirtualMachineSpec()

    def test_null_fields(self):
        spec = VirtualMachineSpec.from_dict({"className": None, "volumes": None, "minHardwareVersion": None})
        assert spec == VirtualMachineSpec()

    def test_invalid_min_hardware_version(self):
        with pytest.raises(InvalidArgumentError, match="minHardwareVersion"):
            VirtualMachineSpec.from_dict({"minHardwareVersion": "vmx-13"})

    def test_negative_min_hardware_version(self):
        with pytest.raises(InvalidArgumentError, match="negative"):
            VirtualMachineSpec.from_dict({"minHardwareVersion": -1})

    @pytest.mark.parametrize("image", ["vmi-1", ["vmi-1"]])
    def test_image_must_be_mapping(self, image: Any):
        with pytest.raises(InvalidArgumentError, match="image must be a mapping"):
            VirtualMachineSpec.from_dict({"image": image})

    def test_spec_must_be_mapping(self):
        with pytest.raises(InvalidArgumentError, match="VM spec must be a mapping"):
            VirtualMachineSpec.from_dict("my-vm")  # type: ignore[arg-type]


class TestConfigSpec:
    """Tests for ConfigSpec and VirtualDeviceChange decoding."""

    def test_from_dict(self):
        config_spec = ConfigSpec.from_dict(
            {
                "version": "vmx-19",
                "deviceChange": [
                    {"deviceType": "pci_passthrough", "operation": "add", "label": "gpu-0"},
                    {"deviceType": "disk", "operation": "edit"},
                ],
            }
        )
        assert config_spec.version == "vmx-19"
        assert config_spec.device_changes == [
            VirtualDeviceChange(VirtualDeviceType.PCI_PASSTHROUGH, DeviceChangeOperation.ADD, "gpu-0"),
            VirtualDeviceChange(VirtualDeviceType.DISK, DeviceChangeOperation.EDIT),
        ]

    def test_unknown_device_type(self):
        change = VirtualDeviceChange.from_dict({"deviceType": "serial_port"})
        assert change.device_type == VirtualDeviceType.OTHER
        assert change.operation == DeviceChangeOperation.ADD

    def test_unknown_operation(self):
        with pytest.raises(InvalidArgumentError, match="operation"):
            VirtualDeviceChange.from_dict({"deviceType": "disk", "operation": "replace"})

    def test_from_empty(self):
        assert ConfigSpec.from_dict({}) == ConfigSpec()

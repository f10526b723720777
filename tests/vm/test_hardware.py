# tests/vm/test_hardware.py
"""
Tests for hardware version negotiation.

Tests cover:
    - Parsing and formatting "vmx-<N>" tokens
    - The floors that determine a VM's hardware version
"""

import pytest

from vmoperator.constants import MIN_HW_VERSION_PCI_PASSTHROUGH, MIN_HW_VERSION_PVC
from vmoperator.images import ImageStatus
from vmoperator.vm import (
    ConfigSpec,
    DeviceChangeOperation,
    PersistentVolumeClaimSource,
    VirtualDeviceChange,
    VirtualDeviceType,
    VirtualMachineSpec,
    VirtualMachineVolume,
    determine_hardware_version,
    format_hardware_version,
    parse_hardware_version,
)

PCI_PASSTHROUGH = VirtualDeviceChange(device_type=VirtualDeviceType.PCI_PASSTHROUGH)
PVC_VOLUME = VirtualMachineVolume(name="data", persistent_volume_claim=PersistentVolumeClaimSource("pvc-1"))

# ==============================================================================
# Version Token Tests
# ==============================================================================


class TestHardwareVersionTokens:
    """Tests for parse_hardware_version and format_hardware_version."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("vmx-13", 13),
            ("vmx-21", 21),
            ("vmx-07", 7),
            ("", 0),
            (None, 0),
            ("invalid", 0),
            ("vmx-", 0),
            ("vmx-13a", 0),
            ("VMX-13", 0),
            (" vmx-13", 0),
            ("vmx-13\n", 0),
        ],
    )
    def test_parse(self, value, expected):
        assert parse_hardware_version(value) == expected

    def test_format(self):
        assert format_hardware_version(19) == "vmx-19"

    def test_format_then_parse(self):
        assert parse_hardware_version(format_hardware_version(17)) == 17


# ==============================================================================
# Determine Hardware Version Tests
# ==============================================================================


class TestDetermineHardwareVersion:
    """Tests for determine_hardware_version."""

    @pytest.mark.parametrize(
        "vm_spec,config_spec,image_status,expected",
        [
            pytest.param(VirtualMachineSpec(), ConfigSpec(), ImageStatus(), 0, id="empty inputs"),
            pytest.param(
                VirtualMachineSpec(min_hardware_version=11),
                ConfigSpec(),
                ImageStatus(),
                11,
                id="min hardware version only",
            ),
            pytest.param(
                VirtualMachineSpec(min_hardware_version=11),
                ConfigSpec(version="vmx-13"),
                ImageStatus(),
                13,
                id="config spec version above minimum",
            ),
            pytest.param(
                VirtualMachineSpec(min_hardware_version=11),
                ConfigSpec(version="invalid"),
                ImageStatus(),
                11,
                id="invalid config spec version",
            ),
            pytest.param(
                VirtualMachineSpec(min_hardware_version=11),
                ConfigSpec(device_changes=[PCI_PASSTHROUGH]),
                ImageStatus(),
                MIN_HW_VERSION_PCI_PASSTHROUGH,
                id="pci passthrough",
            ),
            pytest.param(
                VirtualMachineSpec(min_hardware_version=11, volumes=[PVC_VOLUME]),
                ConfigSpec(),
                ImageStatus(),
                MIN_HW_VERSION_PVC,
                id="pvc",
            ),
            pytest.param(
                VirtualMachineSpec(min_hardware_version=11),
                ConfigSpec(device_changes=[PCI_PASSTHROUGH]),
                ImageStatus(hardware_version=20),
                20,
                id="pci passthrough with newer image",
            ),
            pytest.param(
                VirtualMachineSpec(min_hardware_version=11, volumes=[PVC_VOLUME]),
                ConfigSpec(),
                ImageStatus(hardware_version=20),
                20,
                id="pvc with newer image",
            ),
        ],
    )
    def test_floors(self, vm_spec, config_spec, image_status, expected):
        assert determine_hardware_version(vm_spec, config_spec, image_status) == expected

    def test_floor_values(self):
        assert MIN_HW_VERSION_PVC == 15
        assert MIN_HW_VERSION_PCI_PASSTHROUGH == 17

    def test_missing_config_spec_and_image(self):
        spec = VirtualMachineSpec(min_hardware_version=9)
        assert determine_hardware_version(spec, None, None) == 9

    def test_image_unknown_hardware_version(self):
        spec = VirtualMachineSpec(min_hardware_version=9)
        assert determine_hardware_version(spec, None, ImageStatus("image-a")) == 9

    def test_removed_pci_passthrough_adds_no_floor(self):
        """Test removing a PCI passthrough device does not raise the version."""
        config_spec = ConfigSpec(
            device_changes=[
                VirtualDeviceChange(
                    device_type=VirtualDeviceType.PCI_PASSTHROUGH,
                    operation=DeviceChangeOperation.REMOVE,
                )
            ]
        )
        assert determine_hardware_version(VirtualMachineSpec(), config_spec, None) == 0

    def test_minimum_above_every_floor(self):
        spec = VirtualMachineSpec(min_hardware_version=21, volumes=[PVC_VOLUME])
        config_spec = ConfigSpec(version="vmx-19", device_changes=[PCI_PASSTHROUGH])
        assert determine_hardware_version(spec, config_spec, ImageStatus(hardware_version=20)) == 21

    def test_adding_floors_never_lowers_result(self):
        """Test each added constraint leaves the result at least as high."""
        spec = VirtualMachineSpec(min_hardware_version=18)
        base = determine_hardware_version(spec, ConfigSpec(), None)

        spec.volumes.append(PVC_VOLUME)
        with_pvc = determine_hardware_version(spec, ConfigSpec(), None)
        with_pci = determine_hardware_version(spec, ConfigSpec(device_changes=[PCI_PASSTHROUGH]), None)

        assert base == with_pvc == with_pci == 18

# tests/conftest.py
"""
Pytest fixtures shared by the vmoperator test suite.

This module provides fixtures for:
    - Image objects and records in both scopes
    - A populated in-memory image store covering every resolution outcome
    - VM specs and config specs
"""

from typing import Any

import pytest

from vmoperator.images import ImageRecord, ImageScope, ImageStatus, InMemoryImageStore
from vmoperator.vm import ConfigSpec, VirtualMachineSpec

NAMESPACE = "my-namespace"

# ==============================================================================
# Image Fixtures
# ==============================================================================


def namespace_image(name: str, display_name: str, namespace: str = NAMESPACE, **kwargs: Any) -> ImageRecord:
    """Build a namespace-scoped image record."""
    return ImageRecord(
        scope=ImageScope.NAMESPACE,
        name=name,
        namespace=namespace,
        status=ImageStatus(display_name=display_name, **kwargs),
    )


def cluster_image(name: str, display_name: str, **kwargs: Any) -> ImageRecord:
    """Build a cluster-scoped image record."""
    return ImageRecord(
        scope=ImageScope.CLUSTER,
        name=name,
        status=ImageStatus(display_name=display_name, **kwargs),
    )


@pytest.fixture
def namespace() -> str:
    """Namespace the VMs under test live in."""
    return NAMESPACE


@pytest.fixture
def image_records() -> list[ImageRecord]:
    """
    Images laid out so each display name exercises one outcome.

    Namespace scope:
        vmi-1 image-a (unique)
        vmi-2, vmi-3 image-b (duplicate in namespace)
        vmi-4 image-c (also in cluster)
    Cluster scope:
        vmi-5 image-d (unique)
        vmi-6, vmi-7 image-e (duplicate in cluster)
        vmi-8 image-c (also in namespace)
    """
    return [
        namespace_image("vmi-1", "image-a"),
        namespace_image("vmi-2", "image-b"),
        namespace_image("vmi-3", "image-b"),
        namespace_image("vmi-4", "image-c"),
        cluster_image("vmi-5", "image-d"),
        cluster_image("vmi-6", "image-e"),
        cluster_image("vmi-7", "image-e"),
        cluster_image("vmi-8", "image-c"),
    ]


@pytest.fixture
def image_store(image_records: list[ImageRecord]) -> InMemoryImageStore:
    """In-memory store holding image_records."""
    return InMemoryImageStore(image_records)


@pytest.fixture
def empty_store() -> InMemoryImageStore:
    """Empty in-memory store."""
    return InMemoryImageStore()


@pytest.fixture
def namespace_image_dict() -> dict[str, Any]:
    """A VirtualMachineImage object as returned by the API server."""
    return {
        "apiVersion": "vmoperator.vmware.com/v1alpha4",
        "kind": "VirtualMachineImage",
        "metadata": {
            "name": "vmi-0a1b2c3d",
            "namespace": NAMESPACE,
            "labels": {"os": "ubuntu"},
        },
        "status": {"name": "ubuntu-22.04", "hardwareVersion": 19},
    }


@pytest.fixture
def cluster_image_dict() -> dict[str, Any]:
    """A ClusterVirtualMachineImage object as returned by the API server."""
    return {
        "apiVersion": "vmoperator.vmware.com/v1alpha4",
        "kind": "ClusterVirtualMachineImage",
        "metadata": {"name": "vmi-9f8e7d6c"},
        "status": {"name": "photon-5"},
    }


# ==============================================================================
# VM Fixtures
# ==============================================================================


@pytest.fixture
def vm_spec_dict() -> dict[str, Any]:
    """A VirtualMachine object with a class, an image and one PVC volume."""
    return {
        "kind": "VirtualMachine",
        "metadata": {"name": "my-vm", "namespace": NAMESPACE},
        "spec": {
            "className": "best-effort-small",
            "image": {"kind": "VirtualMachineImage", "name": "vmi-1"},
            "imageName": "image-a",
            "minHardwareVersion": 11,
            "storageClass": "wcp-policy",
            "volumes": [
                {"name": "data", "persistentVolumeClaim": {"claimName": "pvc-1", "readOnly": True}},
                {"name": "scratch"},
            ],
        },
    }


@pytest.fixture
def empty_vm_spec() -> VirtualMachineSpec:
    """VM spec with every field unset."""
    return VirtualMachineSpec()


@pytest.fixture
def empty_config_spec() -> ConfigSpec:
    """Config spec with every field unset."""
    return ConfigSpec()

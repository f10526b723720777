# src/vmoperator/constants.py
"""Shared constants for vmoperator."""

# API group of VM operator resources.
VM_OPERATOR_KEY = "vmoperator.vmware.com"

# Minimum virtual hardware version that supports PCI passthrough devices.
MIN_HW_VERSION_PCI_PASSTHROUGH = 17

# Minimum virtual hardware version that supports persistent volume claims.
MIN_HW_VERSION_PVC = 15

# Prefix of the hardware version token in a VM config spec, as in "vmx-19".
HW_VERSION_PREFIX = "vmx-"

# Kinds of the two image record collections.
NAMESPACE_IMAGE_KIND = "VirtualMachineImage"
CLUSTER_IMAGE_KIND = "ClusterVirtualMachineImage"

# examples/reconcile_vm.py
"""
Example walking through the decisions made while creating a VM.

This script shows how to:
1. Load vmoperator configuration and set up logging.
2. Populate an in-memory image store from API-style objects.
3. Resolve the VM's image name, handling not found and conflicts.
4. Determine the hardware version the VM must be created with.
5. Report a storage usage change and consume it on the other side of the queue.

To run this example:
- Install vmoperator (`pip install .` from the project root).
- Optionally set `VMOPERATOR_LOGGING__CONSOLE_LEVEL=DEBUG` to see every resolution step.
"""

import asyncio
import logging

from vmoperator import (
    ConfigSpec,
    ImageConflictError,
    ImageNotFoundError,
    ImageResolver,
    InMemoryImageStore,
    StorageUsageNotifier,
    VirtualMachineSpec,
    create_storage_usage_queue,
    determine_hardware_version,
)
from vmoperator.config import load_config
from vmoperator.logging_config import configure_logging

logger = logging.getLogger("vmoperator.examples")

IMAGES = [
    {
        "kind": "VirtualMachineImage",
        "metadata": {"name": "vmi-0a1b2c3d", "namespace": "my-namespace"},
        "status": {"name": "ubuntu-22.04", "hardwareVersion": 19},
    },
    {
        "kind": "ClusterVirtualMachineImage",
        "metadata": {"name": "vmi-9f8e7d6c"},
        "status": {"name": "photon-5", "hardwareVersion": 13},
    },
    {
        "kind": "ClusterVirtualMachineImage",
        "metadata": {"name": "vmi-11223344"},
        "status": {"name": "ubuntu-22.04"},
    },
]

VM = {
    "metadata": {"name": "my-vm", "namespace": "my-namespace"},
    "spec": {
        "className": "best-effort-small",
        "imageName": "photon-5",
        "storageClass": "wcp-policy",
        "volumes": [{"name": "data", "persistentVolumeClaim": {"claimName": "data-pvc"}}],
    },
}


async def main():
    """Runs the example."""
    config = load_config()
    configure_logging(config=config.logging)

    store = InMemoryImageStore()
    store.load_objects(IMAGES)
    resolver = ImageResolver(store)

    namespace = VM["metadata"]["namespace"]
    vm_spec = VirtualMachineSpec.from_dict(VM)

    # "ubuntu-22.04" exists in both scopes, so it is ambiguous by display name.
    for name in ("photon-5", "ubuntu-22.04", "centos-7"):
        try:
            record = resolver.resolve(namespace, name)
            logger.warning(f"{name!r} resolved to {record.kind} {record.name}")
        except ImageConflictError as e:
            logger.warning(f"Conflict: {e}")
        except ImageNotFoundError as e:
            logger.warning(f"Not found: {e}")

    image = resolver.resolve(namespace, vm_spec.image_name)
    version = determine_hardware_version(vm_spec, ConfigSpec(version="vmx-15"), image.status)
    logger.warning(f"VM {VM['metadata']['name']} needs hardware version {version}")

    queue = create_storage_usage_queue(config.storage_usage)
    notifier = StorageUsageNotifier(queue)
    await notifier.notify(namespace, vm_spec.storage_class)
    queue.close()

    async for event in queue.events():
        logger.warning(f"Reconcile storage usage for {event.namespace}/{event.name}")
        queue.task_done()


if __name__ == "__main__":
    asyncio.run(main())

# src/vmoperator/storage/usage.py
"""
Storage usage change notifications.

When the storage accounted to a namespace changes (a VM with a given
storage class is created, resized or deleted), a StorageUsageEvent for the
(namespace, storage class) pair is submitted to a process-wide queue. A
single consumer drains the queue and triggers reconciliation of storage
quota usage for that pair; this module only produces events.

Design:
    - One bounded queue per process, created at startup and closed at shutdown
    - Many producers, one consumer
    - Submitting blocks while the queue is full (backpressure, never drops)
    - A producer cancelled while blocked delivers no event
    - The queue is passed to producers explicitly rather than looked up from
      an ambient context

Usage:
    queue = create_storage_usage_queue(config.storage_usage)

    # Producer side
    await sync_storage_usage_for_namespace(queue, "my-namespace", "wcp-policy")

    # Consumer side
    async for event in queue.events():
        await reconcile_storage_quota(event.namespace, event.name)
        queue.task_done()
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from ..exceptions import StorageUsageQueueClosedError

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_SIZE = 100


@dataclass(frozen=True)
class StorageUsageEvent:
    """
    A storage usage change for one storage class in one namespace.

    Attributes:
        namespace: Namespace whose usage changed
        name: Storage class name
    """

    namespace: str
    name: str

    def to_dict(self) -> dict[str, Any]:
        """Convert event to dictionary."""
        return {"namespace": self.namespace, "name": self.name}


@runtime_checkable
class StorageUsageSink(Protocol):
    """Anything storage usage events can be submitted to."""

    async def submit(self, event: StorageUsageEvent) -> None: ...


class StorageUsageQueue:
    """
    Bounded queue of StorageUsageEvent with blocking submit.

    Wraps asyncio.Queue. ``submit`` waits while the queue is full; if the
    waiting task is cancelled the event is not enqueued and CancelledError
    propagates to the caller.
    """

    def __init__(self, maxsize: int = DEFAULT_QUEUE_SIZE):
        """
        Initialize the queue.

        Args:
            maxsize: Maximum number of pending events; must be positive
        """
        if maxsize <= 0:
            raise ValueError(f"maxsize must be positive, got {maxsize}")
        self._queue: asyncio.Queue[StorageUsageEvent] = asyncio.Queue(maxsize=maxsize)
        self._maxsize = maxsize
        self._closed = False
        self._submitted = 0

    @property
    def maxsize(self) -> int:
        """Get the queue capacity."""
        return self._maxsize

    @property
    def closed(self) -> bool:
        """Check if the queue was closed."""
        return self._closed

    @property
    def submitted(self) -> int:
        """Get the number of events accepted since creation."""
        return self._submitted

    def qsize(self) -> int:
        """Get the number of pending events."""
        return self._queue.qsize()

    def empty(self) -> bool:
        """Check if no events are pending."""
        return self._queue.empty()

    async def submit(self, event: StorageUsageEvent) -> None:
        """
        Submit an event, waiting for space if the queue is full.

        Raises:
            StorageUsageQueueClosedError: If the queue was closed
            asyncio.CancelledError: If the caller is cancelled before the event is accepted
        """
        if self._closed:
            raise StorageUsageQueueClosedError()

        if self._queue.full():
            logger.debug(f"Storage usage queue full ({self._maxsize}); waiting to submit {event}")

        await self._queue.put(event)
        self._submitted += 1

    async def get(self) -> StorageUsageEvent:
        """Wait for and remove the next event."""
        return await self._queue.get()

    def get_nowait(self) -> StorageUsageEvent:
        """
        Remove the next event without waiting.

        Raises:
            asyncio.QueueEmpty: If no event is pending
        """
        return self._queue.get_nowait()

    def task_done(self) -> None:
        """Mark a previously fetched event as processed."""
        self._queue.task_done()

    async def join(self) -> None:
        """Wait until every fetched event was marked done."""
        await self._queue.join()

    async def events(self) -> AsyncIterator[StorageUsageEvent]:
        """
        Iterate over events as they arrive.

        Stops once the queue is closed and drained.
        """
        while True:
            if self._closed and self._queue.empty():
                return
            try:
                yield await asyncio.wait_for(self._queue.get(), timeout=0.1)
            except asyncio.TimeoutError:
                continue

    def close(self) -> None:
        """
        Stop accepting events.

        Pending events remain available to the consumer. Producers already
        waiting in ``submit`` for space when the queue is closed still deliver
        their event once space frees up; only later calls are rejected.
        """
        if not self._closed:
            self._closed = True
            logger.info(f"Storage usage queue closed ({self.qsize()} pending, {self._submitted} submitted)")


def create_storage_usage_queue(config: Any | None = None) -> StorageUsageQueue:
    """
    Create the process-wide storage usage queue.

    Args:
        config: Object with a ``queue_size`` attribute (StorageUsageConfig), or None

    Returns:
        A new StorageUsageQueue
    """
    maxsize = DEFAULT_QUEUE_SIZE
    if config is not None:
        maxsize = getattr(config, "queue_size", DEFAULT_QUEUE_SIZE)
    logger.debug(f"Creating storage usage queue (maxsize={maxsize})")
    return StorageUsageQueue(maxsize=maxsize)


async def sync_storage_usage_for_namespace(
    sink: StorageUsageSink,
    namespace: str,
    storage_class_name: str,
) -> None:
    """
    Request reconciliation of storage usage for a storage class in a namespace.

    Nothing is submitted if either namespace or storage_class_name is empty.

    Args:
        sink: Queue the event is submitted to
        namespace: Namespace whose usage changed
        storage_class_name: Storage class whose usage changed
    """
    if not namespace or not storage_class_name:
        logger.debug(
            f"Skipping storage usage sync (namespace={namespace!r}, "
            f"storage class={storage_class_name!r})"
        )
        return

    event = StorageUsageEvent(namespace=namespace, name=storage_class_name)
    await sink.submit(event)
    logger.debug(f"Submitted storage usage event for {namespace}/{storage_class_name}")


class StorageUsageNotifier:
    """
    Holds the sink handle for components that report storage usage changes.

    Example:
        >>> notifier = StorageUsageNotifier(queue)
        >>> await notifier.notify("my-namespace", "wcp-policy")
    """

    def __init__(self, sink: StorageUsageSink):
        self._sink = sink

    @property
    def sink(self) -> StorageUsageSink:
        """Get the event sink."""
        return self._sink

    async def notify(self, namespace: str, storage_class_name: str) -> None:
        """See sync_storage_usage_for_namespace."""
        await sync_storage_usage_for_namespace(self._sink, namespace, storage_class_name)

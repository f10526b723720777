# src/vmoperator/storage/__init__.py
"""Namespace storage usage change notifications."""

from .usage import (
    DEFAULT_QUEUE_SIZE,
    StorageUsageEvent,
    StorageUsageNotifier,
    StorageUsageQueue,
    StorageUsageSink,
    create_storage_usage_queue,
    sync_storage_usage_for_namespace,
)

__all__ = [
    "DEFAULT_QUEUE_SIZE",
    "StorageUsageEvent",
    "StorageUsageNotifier",
    "StorageUsageQueue",
    "StorageUsageSink",
    "create_storage_usage_queue",
    "sync_storage_usage_for_namespace",
]

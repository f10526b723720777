# src/vmoperator/images/store.py
"""
Image store abstraction and an in-memory implementation.

The resolver only needs two lookups from whatever backs the image
collections (an API server client, an informer cache, a test fixture):

    - ``get``: exact lookup by unique name within a scope
    - ``list_by_display_name``: all records in a scope whose display name
      matches, optionally restricted to a namespace

InMemoryImageStore keeps a primary map keyed by (scope, namespace, name)
and an explicit secondary index from display name to the set of unique
names, maintained on every add and delete.

Example:
    >>> store = InMemoryImageStore()
    >>> store.add(ImageRecord(ImageScope.CLUSTER, "vmi-5", status=ImageStatus("image-d")))
    >>> [r.name for r in store.list_by_display_name(ImageScope.CLUSTER, None, "image-d")]
    ['vmi-5']
"""

import logging
import threading
from collections.abc import Iterable
from typing import Any, Protocol, runtime_checkable

from ..exceptions import InvalidArgumentError, RecordNotFoundError
from .models import ImageRecord, ImageScope

logger = logging.getLogger(__name__)


@runtime_checkable
class ImageStore(Protocol):
    """Read capability over the namespace and cluster image collections."""

    def get(self, scope: ImageScope, namespace: str | None, name: str) -> ImageRecord:
        """
        Fetch the record with the given unique name.

        Args:
            scope: Collection to look in
            namespace: Namespace for NAMESPACE scope; ignored for CLUSTER
            name: Unique name

        Raises:
            RecordNotFoundError: If no record has that name
            StoreUnavailableError: If the backing store cannot be reached
        """
        ...

    def list_by_display_name(
        self,
        scope: ImageScope,
        namespace: str | None,
        display_name: str,
    ) -> list[ImageRecord]:
        """
        List every record in a scope with the given display name.

        Args:
            scope: Collection to look in
            namespace: Restrict NAMESPACE scope to one namespace; None means all
            display_name: Display name to match

        Raises:
            StoreUnavailableError: If the backing store cannot be reached
        """
        ...


class InMemoryImageStore:
    """
    Thread-safe in-memory ImageStore with a display-name index.

    Attributes:
        _records: Records keyed by (scope, namespace, name)
        _display_index: (scope, namespace) -> display name -> set of unique names
    """

    def __init__(self, records: Iterable[ImageRecord] | None = None):
        """
        Initialize the store.

        Args:
            records: Optional records to add up front
        """
        self._lock = threading.RLock()
        self._records: dict[tuple[ImageScope, str, str], ImageRecord] = {}
        self._display_index: dict[tuple[ImageScope, str], dict[str, set[str]]] = {}

        for record in records or []:
            self.add(record)

    @staticmethod
    def _partition(scope: ImageScope, namespace: str | None) -> tuple[ImageScope, str]:
        if scope == ImageScope.CLUSTER:
            return (scope, "")
        return (scope, namespace or "")

    def _index_add(self, record: ImageRecord) -> None:
        partition = self._partition(record.scope, record.namespace)
        names = self._display_index.setdefault(partition, {})
        names.setdefault(record.display_name, set()).add(record.name)

    def _index_remove(self, record: ImageRecord) -> None:
        partition = self._partition(record.scope, record.namespace)
        names = self._display_index.get(partition)
        if names is None:
            return
        members = names.get(record.display_name)
        if members is None:
            return
        members.discard(record.name)
        if not members:
            del names[record.display_name]
        if not names:
            del self._display_index[partition]

    def add(self, record: ImageRecord) -> None:
        """
        Add a record, replacing any record with the same key.

        Args:
            record: Record to store

        Raises:
            InvalidArgumentError: If a namespace-scoped record has no namespace
        """
        if record.scope == ImageScope.NAMESPACE and not record.namespace:
            raise InvalidArgumentError(f"namespace-scoped image {record.name!r} has no namespace")

        with self._lock:
            previous = self._records.get(record.key)
            if previous is not None:
                self._index_remove(previous)
            self._records[record.key] = record
            self._index_add(record)

        logger.debug(
            f"Stored {record.kind} {record.name!r} "
            f"(namespace={record.namespace or '-'}, display name={record.display_name!r})"
        )

    def delete(self, scope: ImageScope, namespace: str | None, name: str) -> bool:
        """
        Remove a record.

        Returns:
            True if removed, False if not found
        """
        key = (*self._partition(scope, namespace), name)
        with self._lock:
            record = self._records.pop(key, None)
            if record is None:
                return False
            self._index_remove(record)
        logger.debug(f"Deleted {record.kind} {name!r}")
        return True

    def load_objects(self, objects: Iterable[dict[str, Any]]) -> int:
        """
        Decode and add Kubernetes-style image objects.

        Args:
            objects: Object dictionaries of either image kind

        Returns:
            Number of records added
        """
        count = 0
        for obj in objects:
            self.add(ImageRecord.from_dict(obj))
            count += 1
        return count

    def get(self, scope: ImageScope, namespace: str | None, name: str) -> ImageRecord:
        key = (*self._partition(scope, namespace), name)
        with self._lock:
            record = self._records.get(key)
        if record is None:
            raise RecordNotFoundError(scope.kind, name, key[1] or None)
        return record

    def list_by_display_name(
        self,
        scope: ImageScope,
        namespace: str | None,
        display_name: str,
    ) -> list[ImageRecord]:
        with self._lock:
            if scope == ImageScope.NAMESPACE and namespace is None:
                partitions = [p for p in self._display_index if p[0] == scope]
            else:
                partitions = [self._partition(scope, namespace)]

            result = []
            for partition in partitions:
                names = self._display_index.get(partition, {}).get(display_name, set())
                for name in sorted(names):
                    result.append(self._records[(*partition, name)])
        return result

    def list_images(
        self,
        scope: ImageScope | None = None,
        namespace: str | None = None,
    ) -> list[ImageRecord]:
        """
        List records with optional filtering.

        Args:
            scope: Only return records in this scope
            namespace: Only return namespace-scoped records in this namespace

        Returns:
            Records sorted by scope, namespace and name
        """
        with self._lock:
            records = list(self._records.values())

        result = []
        for record in records:
            if scope is not None and record.scope != scope:
                continue
            if namespace is not None and record.namespace != namespace:
                continue
            result.append(record)

        result.sort(key=lambda r: (r.scope.value, r.namespace, r.name))
        return result

    def clear(self) -> None:
        """Remove all records."""
        with self._lock:
            self._records.clear()
            self._display_index.clear()

    @property
    def count(self) -> int:
        """Get the number of stored records."""
        with self._lock:
            return len(self._records)

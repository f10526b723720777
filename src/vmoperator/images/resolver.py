# src/vmoperator/images/resolver.py
"""
Image name resolution.

A VM refers to its image by a single name, which may be either the unique
name of an image object or its display name. Resolution turns that name
into exactly one ImageRecord.

Resolution Strategy:
    1. Exact lookup by unique name: namespace scope first, then cluster
       scope. The first hit is returned.
    2. Display-name lookup in both scopes. Exactly one match overall is
       returned; none is ImageNotFoundError; more than one is
       ImageConflictError naming where the duplicates are.

Store transport errors (StoreUnavailableError) are not caught and reach the
caller unchanged. There is no retry.

Example:
    >>> resolver = ImageResolver(store)
    >>> record = resolver.resolve("my-namespace", "ubuntu-22.04")
    >>> print(record.name)  # vmi-0a1b2c3d
"""

import logging

from ..exceptions import (
    ImageConflictError,
    ImageNotFoundError,
    InvalidArgumentError,
    RecordNotFoundError,
)
from .models import ImageRecord, ImageScope
from .store import ImageStore

logger = logging.getLogger(__name__)


def _get_by_unique_name(store: ImageStore, namespace: str, name: str) -> ImageRecord | None:
    """Return the record whose unique name is name, namespace scope first."""
    try:
        return store.get(ImageScope.NAMESPACE, namespace, name)
    except RecordNotFoundError:
        pass

    try:
        return store.get(ImageScope.CLUSTER, None, name)
    except RecordNotFoundError:
        return None


def resolve_image_name(store: ImageStore, namespace: str, name: str) -> ImageRecord:
    """
    Resolve an image name to a single namespace or cluster-scoped image.

    Args:
        store: Image store to look up records in
        namespace: Namespace of the VM referring to the image
        name: Unique name or display name of the image

    Returns:
        The single matching ImageRecord

    Raises:
        InvalidArgumentError: If name is empty
        ImageNotFoundError: If no image matches name in either scope
        ImageConflictError: If name matches more than one image by display name
        StoreUnavailableError: If the store cannot be reached
    """
    if not name:
        raise InvalidArgumentError("name is empty")

    record = _get_by_unique_name(store, namespace, name)
    if record is not None:
        logger.debug(f"Resolved image {name!r} by unique name to {record.kind} {record.name!r}")
        return record

    ns_matches = store.list_by_display_name(ImageScope.NAMESPACE, namespace, name)
    cl_matches = store.list_by_display_name(ImageScope.CLUSTER, None, name)
    ns_count, cl_count = len(ns_matches), len(cl_matches)

    logger.debug(
        f"Display name {name!r} matched {ns_count} image(s) in namespace {namespace!r} "
        f"and {cl_count} cluster image(s)"
    )

    if ns_count == 0 and cl_count == 0:
        raise ImageNotFoundError(name)

    if ns_count > 0 and cl_count > 0:
        scope = ImageConflictError.BOTH_SCOPES
    elif ns_count > 1:
        scope = ImageConflictError.NAMESPACE_SCOPE
    elif cl_count > 1:
        scope = ImageConflictError.CLUSTER_SCOPE
    else:
        record = ns_matches[0] if ns_count else cl_matches[0]
        logger.debug(f"Resolved image {name!r} by display name to {record.kind} {record.name!r}")
        return record

    logger.warning(f"Image name {name!r} is ambiguous in {scope} (namespace {namespace!r})")
    raise ImageConflictError(name, scope)


class ImageResolver:
    """
    Resolver bound to one image store.

    Stateless apart from the store reference; safe to share between
    threads as long as the store is.

    Example:
        >>> resolver = ImageResolver(InMemoryImageStore())
        >>> resolver.try_resolve("ns", "missing") is None
        True
    """

    def __init__(self, store: ImageStore):
        """
        Initialize the resolver.

        Args:
            store: Image store for lookups
        """
        self._store = store

    @property
    def store(self) -> ImageStore:
        """Get the image store."""
        return self._store

    def resolve(self, namespace: str, name: str) -> ImageRecord:
        """Resolve name as seen from namespace. See resolve_image_name."""
        return resolve_image_name(self._store, namespace, name)

    def try_resolve(self, namespace: str, name: str) -> ImageRecord | None:
        """
        Resolve name, returning None when no image exists.

        Conflicts and invalid arguments still raise.
        """
        try:
            return self.resolve(namespace, name)
        except ImageNotFoundError:
            return None

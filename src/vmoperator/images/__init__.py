# src/vmoperator/images/__init__.py
"""
VM Image records and name resolution.

This package provides:

    - **Models**: ImageRecord, a single record type tagged with its scope
    - **Store**: The lookup capability the resolver needs, plus an
      in-memory implementation with a display-name index
    - **Resolver**: Unique-name then display-name resolution of an image
      reference to exactly one record

Basic Usage:
    >>> from vmoperator.images import InMemoryImageStore, ImageResolver
    >>>
    >>> store = InMemoryImageStore()
    >>> store.load_objects(objects_from_api_server)
    >>> record = ImageResolver(store).resolve("my-namespace", "ubuntu-22.04")
"""

from .models import ImageRecord, ImageScope, ImageStatus
from .resolver import ImageResolver, resolve_image_name
from .store import ImageStore, InMemoryImageStore

__all__ = [
    # Models
    "ImageRecord",
    "ImageScope",
    "ImageStatus",
    # Store
    "ImageStore",
    "InMemoryImageStore",
    # Resolver
    "ImageResolver",
    "resolve_image_name",
]

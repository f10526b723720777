# tests/images/test_store.py
"""
Tests for the InMemoryImageStore class.

Tests cover:
    - Exact lookups in each scope
    - The display-name index across add, replace and delete
    - Listing and loading API objects
"""

from typing import Any

import pytest

from tests.conftest import cluster_image, namespace_image
from vmoperator.exceptions import InvalidArgumentError, RecordNotFoundError, is_not_found
from vmoperator.images import ImageScope, ImageStore, InMemoryImageStore

# ==============================================================================
# Lookup Tests
# ==============================================================================


class TestStoreGet:
    """Tests for exact-name lookups."""

    def test_satisfies_protocol(self, empty_store: InMemoryImageStore):
        assert isinstance(empty_store, ImageStore)

    def test_get_namespace_image(self, image_store: InMemoryImageStore, namespace: str):
        record = image_store.get(ImageScope.NAMESPACE, namespace, "vmi-1")
        assert record.display_name == "image-a"

    def test_get_cluster_image(self, image_store: InMemoryImageStore):
        record = image_store.get(ImageScope.CLUSTER, None, "vmi-5")
        assert record.display_name == "image-d"

    def test_cluster_lookup_ignores_namespace(self, image_store: InMemoryImageStore):
        record = image_store.get(ImageScope.CLUSTER, "anything", "vmi-5")
        assert record.name == "vmi-5"

    def test_get_missing(self, image_store: InMemoryImageStore, namespace: str):
        with pytest.raises(RecordNotFoundError) as exc_info:
            image_store.get(ImageScope.NAMESPACE, namespace, "vmi-5")
        assert is_not_found(exc_info.value)
        assert exc_info.value.kind == "VirtualMachineImage"
        assert str(exc_info.value) == 'VirtualMachineImage "my-namespace/vmi-5" not found'

    def test_get_wrong_namespace(self, image_store: InMemoryImageStore):
        with pytest.raises(RecordNotFoundError):
            image_store.get(ImageScope.NAMESPACE, "other-namespace", "vmi-1")


# ==============================================================================
# Display Name Index Tests
# ==============================================================================


class TestDisplayNameIndex:
    """Tests for list_by_display_name and index maintenance."""

    def test_list_namespace_duplicates(self, image_store: InMemoryImageStore, namespace: str):
        records = image_store.list_by_display_name(ImageScope.NAMESPACE, namespace, "image-b")
        assert [r.name for r in records] == ["vmi-2", "vmi-3"]

    def test_list_cluster_duplicates(self, image_store: InMemoryImageStore):
        records = image_store.list_by_display_name(ImageScope.CLUSTER, None, "image-e")
        assert [r.name for r in records] == ["vmi-6", "vmi-7"]

    def test_list_is_scoped(self, image_store: InMemoryImageStore, namespace: str):
        """Test each scope only sees its own records."""
        ns = image_store.list_by_display_name(ImageScope.NAMESPACE, namespace, "image-c")
        cl = image_store.list_by_display_name(ImageScope.CLUSTER, None, "image-c")
        assert [r.name for r in ns] == ["vmi-4"]
        assert [r.name for r in cl] == ["vmi-8"]

    def test_list_other_namespace_is_empty(self, image_store: InMemoryImageStore):
        assert image_store.list_by_display_name(ImageScope.NAMESPACE, "other", "image-a") == []

    def test_list_all_namespaces(self, image_store: InMemoryImageStore):
        image_store.add(namespace_image("vmi-9", "image-a", namespace="other"))
        records = image_store.list_by_display_name(ImageScope.NAMESPACE, None, "image-a")
        assert sorted(r.name for r in records) == ["vmi-1", "vmi-9"]

    def test_replace_moves_index_entry(self, image_store: InMemoryImageStore, namespace: str):
        """Test re-adding a record under a new display name updates the index."""
        image_store.add(namespace_image("vmi-1", "image-z"))

        assert image_store.list_by_display_name(ImageScope.NAMESPACE, namespace, "image-a") == []
        records = image_store.list_by_display_name(ImageScope.NAMESPACE, namespace, "image-z")
        assert [r.name for r in records] == ["vmi-1"]
        assert image_store.count == 8

    def test_delete_updates_index(self, image_store: InMemoryImageStore):
        assert image_store.delete(ImageScope.CLUSTER, None, "vmi-6")
        records = image_store.list_by_display_name(ImageScope.CLUSTER, None, "image-e")
        assert [r.name for r in records] == ["vmi-7"]

    def test_delete_missing(self, image_store: InMemoryImageStore):
        assert not image_store.delete(ImageScope.CLUSTER, None, "vmi-404")


# ==============================================================================
# Management Tests
# ==============================================================================


class TestStoreManagement:
    """Tests for adding, listing, loading and clearing."""

    def test_add_requires_namespace(self, empty_store: InMemoryImageStore):
        with pytest.raises(InvalidArgumentError):
            empty_store.add(namespace_image("vmi-1", "image-a", namespace=""))

    def test_count(self, image_store: InMemoryImageStore):
        assert image_store.count == 8

    def test_list_images_by_scope(self, image_store: InMemoryImageStore):
        cluster = image_store.list_images(scope=ImageScope.CLUSTER)
        assert [r.name for r in cluster] == ["vmi-5", "vmi-6", "vmi-7", "vmi-8"]

    def test_list_images_by_namespace(self, image_store: InMemoryImageStore, namespace: str):
        records = image_store.list_images(namespace=namespace)
        assert [r.name for r in records] == ["vmi-1", "vmi-2", "vmi-3", "vmi-4"]

    def test_load_objects(
        self,
        empty_store: InMemoryImageStore,
        namespace_image_dict: dict[str, Any],
        cluster_image_dict: dict[str, Any],
    ):
        assert empty_store.load_objects([namespace_image_dict, cluster_image_dict]) == 2
        assert empty_store.get(ImageScope.CLUSTER, None, "vmi-9f8e7d6c").display_name == "photon-5"

    def test_clear(self, image_store: InMemoryImageStore):
        image_store.clear()
        assert image_store.count == 0
        assert image_store.list_by_display_name(ImageScope.CLUSTER, None, "image-d") == []

    def test_initial_records(self):
        store = InMemoryImageStore([cluster_image("vmi-1", "image-a")])
        assert store.count == 1

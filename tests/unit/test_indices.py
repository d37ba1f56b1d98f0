"""Tests for the index registry."""

import pytest

from elasticsearcher.errors import DuplicateIndexError, UnknownIndexError
from elasticsearcher.search.indices import Index, IndicesManager


class TestIndicesManager:
    """Test registering and resolving indices."""

    def test_register_and_get(self):
        """Test get_registered returns the registered index."""
        manager = IndicesManager()
        products = Index("products", types=("lamp",))

        manager.register(products)

        assert manager.get_registered("products") is products
        assert manager.is_registered("products")
        assert manager.registered() == {"products": products}

    def test_register_same_index_twice(self):
        """Test re-registering an equal index is a no-op."""
        manager = IndicesManager()
        manager.register(Index("products"))
        manager.register(Index("products"))

        assert len(manager.registered()) == 1

    def test_register_conflicting_index(self):
        """Test a different index under a taken name."""
        manager = IndicesManager().register(Index("products"))

        with pytest.raises(DuplicateIndexError) as exc_info:
            manager.register(Index("products", types=("lamp",)))

        assert exc_info.value.name == "products"

    def test_register_indices(self):
        """Test bulk registration."""
        manager = IndicesManager().register_indices([Index("a"), Index("b")])

        assert sorted(manager.registered()) == ["a", "b"]

    def test_unknown_index(self):
        """Test UnknownIndexError for lookups and removal."""
        manager = IndicesManager()

        with pytest.raises(UnknownIndexError):
            manager.get_registered("missing")

        with pytest.raises(UnknownIndexError):
            manager.unregister("missing")

    def test_unregister(self):
        """Test removing an index."""
        manager = IndicesManager().register(Index("products"))

        manager.unregister("products")

        assert not manager.is_registered("products")

    def test_registered_returns_copy(self):
        """Test callers cannot change the registry through registered()."""
        manager = IndicesManager().register(Index("products"))

        manager.registered().clear()

        assert manager.is_registered("products")

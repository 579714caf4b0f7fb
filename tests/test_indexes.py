"""Tests for the HNSW index variants."""

import numpy as np
import pytest

from annbench.core.types import SearchResult
from annbench.datasets.utils import make_dataset, normalize
from annbench.indexes import make_index


def _unit_dataset(n, d=16, seed=42):
    rng = np.random.default_rng(seed)
    dataset = make_dataset((f"v{i}" for i in range(n)), rng.standard_normal((n, d)))
    normalize(dataset)
    return dataset


class TestCosineIndex:
    """Test the cosine variant end to end."""

    def test_round_trip(self):
        """Insert 1000 unit vectors, remove 100, index stays consistent."""
        index = make_index("cosine", max_links=8, ef_construction=40, seed=0)
        dataset = _unit_dataset(1000)

        for key, vector in dataset:
            index.insert(key, vector)
        assert index.size() == 1000

        for key, _ in dataset[:100]:
            index.remove(key)

        assert index.size() == 900
        assert len(index) == 900
        assert index.check() is True

    def test_search_single_entry(self):
        """A lone vector is its own nearest neighbor at distance ~0."""
        index = make_index("cosine")
        vector = np.array([0.3, -1.2, 2.5, 0.7], dtype=np.float32)

        index.insert("a", vector)
        results = index.search(vector, 1)

        assert len(results) == 1
        assert results[0].key == "a"
        assert results[0].distance == pytest.approx(0.0, abs=1e-5)

    def test_results_sorted_and_bounded(self):
        index = make_index("cosine", max_links=8, ef_construction=40, seed=1)
        dataset = _unit_dataset(200)
        for key, vector in dataset:
            index.insert(key, vector)

        results = index.search(dataset[0][1], 10)

        assert len(results) == 10
        assert all(isinstance(r, SearchResult) for r in results)
        distances = [r.distance for r in results]
        assert distances == sorted(distances)
        assert results[0].key == dataset[0][0]

    def test_k_larger_than_size(self):
        index = make_index("cosine")
        for key, vector in _unit_dataset(3):
            index.insert(key, vector)

        assert len(index.search(np.ones(16, dtype=np.float32), 10)) == 3

    def test_search_does_not_mutate(self):
        index = make_index("cosine", max_links=8, ef_construction=40, seed=2)
        dataset = _unit_dataset(100)
        for key, vector in dataset:
            index.insert(key, vector)

        index.search(dataset[5][1], 5)

        assert index.size() == 100
        assert index.check()

    def test_invalid_k(self):
        index = make_index("cosine")
        index.insert("a", np.ones(4, dtype=np.float32))
        with pytest.raises(ValueError):
            index.search(np.ones(4, dtype=np.float32), 0)

    def test_empty_index(self):
        index = make_index("cosine")
        assert index.size() == 0
        assert index.search(np.ones(4, dtype=np.float32), 5) == []
        assert index.check()


class TestMutation:
    """Test insert/remove semantics shared by all variants."""

    @pytest.mark.parametrize("metric", ["cosine", "dot_product"])
    def test_remove_absent_key_is_noop(self, metric):
        index = make_index(metric)
        index.insert("a", np.ones(4, dtype=np.float32))

        index.remove("missing")

        assert index.size() == 1
        assert index.check()

    @pytest.mark.parametrize("metric", ["cosine", "dot_product"])
    def test_insert_existing_key_updates(self, metric):
        index = make_index(metric)
        old = np.array([1.0, 0.0, 0.0], dtype=np.float32)
        new = np.array([0.0, 1.0, 0.0], dtype=np.float32)
        other = np.array([0.0, 0.0, 1.0], dtype=np.float32)

        index.insert("a", old)
        index.insert("b", other)
        index.insert("a", new)

        assert index.size() == 2
        assert index.search(new, 1)[0].key == "a"
        assert index.check()

    @pytest.mark.parametrize("remove_method", ["no_link", "compensate_incoming_links"])
    @pytest.mark.parametrize("insert_method", ["link_nearest", "link_diverse"])
    def test_strategies_stay_consistent(self, insert_method, remove_method):
        index = make_index(
            "cosine",
            max_links=6,
            ef_construction=30,
            insert_method=insert_method,
            remove_method=remove_method,
            seed=3,
        )
        dataset = _unit_dataset(300, d=8, seed=4)
        for key, vector in dataset:
            index.insert(key, vector)
        for key, _ in dataset[::3]:
            index.remove(key)

        assert index.size() == 200
        assert index.check()

    def test_remove_everything(self):
        index = make_index("dot_product", max_links=4, ef_construction=10, seed=5)
        dataset = _unit_dataset(50, d=4)
        for key, vector in dataset:
            index.insert(key, vector)
        for key, _ in dataset:
            index.remove(key)

        assert index.size() == 0
        assert index.check()
        assert index.search(dataset[0][1], 3) == []


class TestDotProductIndex:
    """Test the raw dot product variant."""

    def test_signed_distance(self):
        """Raw vectors are not normalized, so distances can be negative."""
        index = make_index("dot_product")
        vector = np.array([2.0, 0.0], dtype=np.float32)

        index.insert("a", vector)
        results = index.search(vector, 1)

        assert results[0].key == "a"
        assert results[0].distance == pytest.approx(1.0 - 4.0)

    def test_repr(self):
        index = make_index("dot_product")
        assert "hnsw_dot_product" in repr(index)
        assert "size=0" in repr(index)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

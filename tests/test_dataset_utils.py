"""Tests for dataset preparation utilities."""

import numpy as np
import pytest

from annbench.datasets.utils import (
    dataset_to_array,
    get_control_size,
    make_dataset,
    normalize,
    shuffle,
    split_dataset,
)


def _random_dataset(n, d=8, seed=0):
    rng = np.random.default_rng(seed)
    vectors = rng.standard_normal((n, d)).astype(np.float32)
    return make_dataset((f"k{i}" for i in range(n)), vectors)


def _keys(dataset):
    return [key for key, _ in dataset]


class TestShuffle:
    """Test deterministic shuffling."""

    def test_same_seed_same_order(self):
        """Two equal datasets shuffled with the same seed end up identical."""
        first = _random_dataset(200)
        second = _random_dataset(200)

        shuffle(first, np.random.default_rng(7))
        shuffle(second, np.random.default_rng(7))

        assert _keys(first) == _keys(second)

    def test_int_seed_matches_generator(self):
        """An int seed behaves like a generator built from it."""
        first = _random_dataset(50)
        second = _random_dataset(50)

        shuffle(first, 3)
        shuffle(second, np.random.default_rng(3))

        assert _keys(first) == _keys(second)

    def test_is_permutation_in_place(self):
        """Shuffling keeps every entry and mutates the list object itself."""
        dataset = _random_dataset(100)
        original = _keys(dataset)
        same_list = dataset

        shuffle(dataset, np.random.default_rng(1))

        assert same_list is dataset
        assert sorted(_keys(dataset)) == sorted(original)
        assert _keys(dataset) != original

    def test_vectors_follow_keys(self):
        """Vectors stay paired with their keys."""
        dataset = _random_dataset(30)
        by_key = {key: vector.copy() for key, vector in dataset}

        shuffle(dataset, np.random.default_rng(5))

        for key, vector in dataset:
            np.testing.assert_array_equal(vector, by_key[key])


class TestNormalize:
    """Test in-place L2 normalization."""

    def test_unit_norm(self):
        dataset = _random_dataset(50)
        normalize(dataset)

        for _, vector in dataset:
            assert np.linalg.norm(vector) == pytest.approx(1.0, abs=1e-5)

    def test_idempotent(self):
        """Normalizing twice keeps unit norm and direction."""
        dataset = _random_dataset(50)
        normalize(dataset)
        once = [vector.copy() for _, vector in dataset]

        normalize(dataset)

        for before, (_, after) in zip(once, dataset):
            assert np.linalg.norm(after) == pytest.approx(1.0, abs=1e-5)
            np.testing.assert_allclose(after, before, atol=1e-6)

    def test_in_place(self):
        """Vector arrays are scaled in place, not replaced."""
        dataset = [("a", np.array([3.0, 4.0], dtype=np.float32))]
        vector = dataset[0][1]

        normalize(dataset)

        assert dataset[0][1] is vector
        np.testing.assert_allclose(vector, [0.6, 0.8], atol=1e-6)


class TestControlSize:
    """Test control set sizing."""

    @pytest.mark.parametrize("n", [1, 5, 99, 100, 150, 1000, 12345])
    def test_default_bounds(self, n):
        size = get_control_size(_random_dataset(n, d=2))
        assert 1 <= size <= n

    def test_default_is_one_percent(self):
        assert get_control_size(_random_dataset(1000, d=2)) == 10
        assert get_control_size(_random_dataset(250, d=2)) == 2

    def test_explicit_size(self):
        dataset = _random_dataset(100, d=2)
        assert get_control_size(dataset, 37) == 37
        assert get_control_size(dataset, 0) == 0

    def test_empty_dataset(self):
        assert get_control_size([]) == 0


class TestSplitDataset:
    """Test main/control splitting."""

    @pytest.mark.parametrize("control_size", [0, 1, 10, 99, 100])
    def test_split_completeness(self, control_size):
        """control ++ main recovers the original order."""
        main = _random_dataset(100)
        original = _keys(main)
        control = []

        split_dataset(main, control, control_size)

        assert len(control) == control_size
        assert len(main) == 100 - control_size
        assert _keys(control) + _keys(main) == original

    def test_control_replaced(self):
        """Existing control entries are discarded."""
        main = _random_dataset(10)
        control = _random_dataset(3, seed=9)

        split_dataset(main, control, 2)

        assert _keys(control) == ["k0", "k1"]

    def test_out_of_range(self):
        main = _random_dataset(5)
        with pytest.raises(ValueError):
            split_dataset(main, [], 6)


class TestDatasetConstruction:
    """Test dataset building helpers."""

    def test_make_dataset_copies_rows(self):
        vectors = np.ones((3, 4), dtype=np.float32)
        dataset = make_dataset(["a", "b", "c"], vectors)

        normalize(dataset)

        np.testing.assert_array_equal(vectors, np.ones((3, 4)))

    def test_make_dataset_length_mismatch(self):
        with pytest.raises(ValueError):
            make_dataset(["a"], np.zeros((2, 3), dtype=np.float32))

    def test_dataset_to_array(self):
        dataset = _random_dataset(7, d=5)
        matrix = dataset_to_array(dataset)

        assert matrix.shape == (7, 5)
        assert matrix.dtype == np.float32
        np.testing.assert_array_equal(matrix[3], dataset[3][1])


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

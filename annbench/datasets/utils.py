"""
Dataset preparation utilities.

A dataset is a list of (key, vector) pairs. Every function here works in
place on lists owned by the caller.
"""

import math
from typing import Iterable, Optional, Sequence, Union

import numpy as np
from numpy.typing import NDArray

from annbench.core.types import Dataset
from annbench.hnsw.distance import dot_product


def shuffle(dataset: Dataset, rng: Union[np.random.Generator, int]) -> None:
    """
    Permute a dataset in place.

    Args:
        dataset: Dataset to shuffle
        rng: Random generator, or a seed to build one from. The same seed
            always yields the same permutation.
    """
    if not isinstance(rng, np.random.Generator):
        rng = np.random.default_rng(rng)

    order = rng.permutation(len(dataset))
    dataset[:] = [dataset[i] for i in order]


def normalize(dataset: Dataset) -> None:
    """
    Scale every vector of a dataset to unit L2 norm, in place.

    The dataset must not contain zero vectors.
    """
    for _, vector in dataset:
        vector *= 1.0 / math.sqrt(dot_product(vector, vector))


def get_control_size(dataset: Dataset, explicit_size: Optional[int] = None) -> int:
    """
    Size of the control set carved out of a dataset.

    Args:
        dataset: Dataset to split
        explicit_size: Size requested by the caller, returned unchanged

    Returns:
        explicit_size if given, otherwise 1% of the dataset, at least one
        entry and at most the whole dataset
    """
    if explicit_size is not None:
        return explicit_size
    return min(len(dataset), max(1, len(dataset) // 100))


def split_dataset(main: Dataset, control: Dataset, control_size: int) -> None:
    """
    Move the first control_size entries of main into control.

    Both lists are modified in place: control is replaced by the prefix and
    main keeps the remaining suffix, in order.

    Raises:
        ValueError: If control_size is negative or larger than main
    """
    if control_size < 0 or control_size > len(main):
        raise ValueError(
            f"Control size {control_size} out of range for a dataset of {len(main)} entries"
        )

    control[:] = main[:control_size]
    del main[:control_size]


def make_dataset(keys: Iterable[str], vectors: NDArray[np.float32]) -> Dataset:
    """
    Build a dataset from keys and a (n, d) matrix.

    Each entry owns a copy of its row, so normalizing the dataset does not
    touch the source matrix.
    """
    keys = list(keys)
    if len(keys) != len(vectors):
        raise ValueError(f"Got {len(keys)} keys for {len(vectors)} vectors")
    return [(key, np.array(row, dtype=np.float32)) for key, row in zip(keys, vectors)]


def dataset_to_array(dataset: Sequence) -> NDArray[np.float32]:
    """Stack the vectors of a dataset into a (n, d) float32 matrix."""
    if not dataset:
        return np.zeros((0, 0), dtype=np.float32)
    return np.stack([vector for _, vector in dataset]).astype(np.float32, copy=False)

"""
Dataset preparation and loading.

Supported sources:
    - .fvecs / .fbin vector files (keyed by row number)
    - .tsv keyed text files
    - Random synthetic vectors
"""

from annbench.datasets.loaders import generate_dataset, load_dataset, read_fbin, read_fvecs, write_fbin
from annbench.datasets.utils import (
    dataset_to_array,
    get_control_size,
    make_dataset,
    normalize,
    shuffle,
    split_dataset,
)

__all__ = [
    "dataset_to_array",
    "generate_dataset",
    "get_control_size",
    "load_dataset",
    "make_dataset",
    "normalize",
    "read_fbin",
    "read_fvecs",
    "shuffle",
    "split_dataset",
    "write_fbin",
]

"""
Index variants for the benchmarking harness.

This module provides:
    - dot_product: HNSW over raw inner product
    - cosine: HNSW over unit-normalized vectors
"""

from annbench.indexes.factory import (
    IndexFactory,
    list_available_indexes,
    make_index,
    make_index_from_config,
    register_index,
)

__all__ = [
    "IndexFactory",
    "list_available_indexes",
    "make_index",
    "make_index_from_config",
    "register_index",
]

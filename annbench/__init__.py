"""
annbench: Benchmarking harness for HNSW approximate nearest neighbor indexes

Drives pluggable index variants through a repeatable workload (insert,
remove, search, consistency check) and reports timing and recall.

Supported Index Variants:
    - dot_product (raw inner product)
    - cosine (inner product over unit-normalized vectors)

Supported Datasets:
    - .fvecs / .fbin vector files
    - .tsv keyed text files
    - Random (synthetic)

Reference Benchmarks:
    - ANN-Benchmarks (https://ann-benchmarks.com)
"""

__version__ = "1.0.0"
__license__ = "MIT"

from annbench.core.base import VectorIndex
from annbench.core.config import Config, load_config
from annbench.core.errors import ConfigurationError
from annbench.core.types import (
    BenchmarkResult,
    DatasetInfo,
    DistanceMetric,
    IndexConfig,
    SearchResult,
)
from annbench.indexes import make_index

__all__ = [
    "VectorIndex",
    "Config",
    "load_config",
    "ConfigurationError",
    "BenchmarkResult",
    "DatasetInfo",
    "DistanceMetric",
    "IndexConfig",
    "SearchResult",
    "make_index",
]

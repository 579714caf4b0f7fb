"""Core module containing base classes, types, and configuration utilities."""

from annbench.core.base import VectorIndex
from annbench.core.config import Config, load_config
from annbench.core.errors import ConfigurationError
from annbench.core.types import (
    BenchmarkResult,
    Dataset,
    DatasetEntry,
    DatasetInfo,
    DistanceMetric,
    IndexConfig,
    InsertMethod,
    MetricsResult,
    RemoveMethod,
    SearchResult,
)

__all__ = [
    "VectorIndex",
    "Config",
    "load_config",
    "ConfigurationError",
    "BenchmarkResult",
    "Dataset",
    "DatasetEntry",
    "DatasetInfo",
    "DistanceMetric",
    "IndexConfig",
    "InsertMethod",
    "MetricsResult",
    "RemoveMethod",
    "SearchResult",
]

"""
Type definitions shared across the benchmarking harness.

Contains the enumerations used to configure an index, the dataset type
aliases, and the dataclasses carrying search results and benchmark metrics.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
from numpy.typing import NDArray


# =============================================================================
# Enumerations
# =============================================================================


class DistanceMetric(str, Enum):
    """Distance metric selector for an index variant."""

    DOT_PRODUCT = "dot_product"
    COSINE = "cosine"


class InsertMethod(str, Enum):
    """Strategy used to pick the links of a newly inserted node."""

    LINK_NEAREST = "link_nearest"
    LINK_DIVERSE = "link_diverse"


class RemoveMethod(str, Enum):
    """Strategy used to repair the graph after a node is removed."""

    NO_LINK = "no_link"
    COMPENSATE_INCOMING_LINKS = "compensate_incoming_links"


# =============================================================================
# Dataset Types
# =============================================================================

Vector = NDArray[np.float32]
DatasetEntry = Tuple[str, Vector]
Dataset = List[DatasetEntry]


@dataclass
class DatasetInfo:
    """Description of a loaded dataset."""

    name: str
    num_vectors: int
    dimensions: int
    source: str = "synthetic"
    description: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)


# =============================================================================
# Index Types
# =============================================================================


@dataclass
class IndexConfig:
    """
    Symbolic index configuration.

    Optional fields left as None fall back to the wrapped index defaults.
    """

    metric: DistanceMetric
    max_links: Optional[int] = None
    ef_construction: Optional[int] = None
    insert_method: Optional[InsertMethod] = None
    remove_method: Optional[RemoveMethod] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "metric": self.metric.value,
            "max_links": self.max_links,
            "ef_construction": self.ef_construction,
            "insert_method": self.insert_method.value if self.insert_method else None,
            "remove_method": self.remove_method.value if self.remove_method else None,
        }


@dataclass(frozen=True)
class SearchResult:
    """A single neighbor returned by a query."""

    key: str
    distance: float

    def __iter__(self):
        # Allows `key, distance = result` unpacking
        return iter((self.key, self.distance))


# =============================================================================
# Metrics Types
# =============================================================================


@dataclass
class QualityMetrics:
    """Search quality measured on the control set."""

    recall_at_1: float = 0.0
    recall_at_k: float = 0.0
    k: int = 10


@dataclass
class PerformanceMetrics:
    """Search latency and throughput."""

    latency_p50: float = 0.0
    latency_p99: float = 0.0
    latency_mean: float = 0.0
    qps_single_thread: float = 0.0
    latencies_ms: List[float] = field(default_factory=list, repr=False)


@dataclass
class OperationalMetrics:
    """Index mutation timings."""

    insert_time_sec: float = 0.0
    insert_throughput: float = 0.0
    remove_time_sec: float = 0.0
    remove_throughput: float = 0.0
    num_inserted: int = 0
    num_removed: int = 0
    check_time_sec: float = 0.0


@dataclass
class ResourceMetrics:
    """Memory usage during index construction."""

    ram_bytes_peak: int = 0
    cpu_time_sec: float = 0.0


@dataclass
class MetricsResult:
    """All metrics gathered for a single run."""

    quality: QualityMetrics = field(default_factory=QualityMetrics)
    performance: PerformanceMetrics = field(default_factory=PerformanceMetrics)
    operational: OperationalMetrics = field(default_factory=OperationalMetrics)
    resource: ResourceMetrics = field(default_factory=ResourceMetrics)


@dataclass
class BenchmarkResult:
    """Outcome of one harness run over a single index configuration."""

    experiment_name: str
    index_config: IndexConfig
    dataset_info: DatasetInfo
    hardware_info: Dict[str, Any] = field(default_factory=dict)
    metrics: MetricsResult = field(default_factory=MetricsResult)
    main_size: int = 0
    control_size: int = 0
    final_size: int = 0
    check_passed: bool = False
    seed: int = 42
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        metrics = asdict(self.metrics)
        metrics["performance"].pop("latencies_ms", None)
        return {
            "experiment_name": self.experiment_name,
            "index_config": self.index_config.to_dict(),
            "dataset": asdict(self.dataset_info),
            "hardware": self.hardware_info,
            "metrics": metrics,
            "main_size": self.main_size,
            "control_size": self.control_size,
            "final_size": self.final_size,
            "check_passed": self.check_passed,
            "seed": self.seed,
            "timestamp": self.timestamp.isoformat(),
        }

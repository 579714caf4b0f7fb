"""
HNSW index variants.

Each variant pairs a distance kernel with the dataset preprocessing the
kernel needs:

    - dot_product: raw inner product, vectors used as they are
    - cosine: vectors normalized to unit length before population
"""

from typing import List, Optional

from annbench.core.base import VectorIndex
from annbench.core.types import Dataset, DistanceMetric, IndexConfig, SearchResult, Vector
from annbench.datasets.utils import normalize
from annbench.hnsw import CosineDistance, Distance, DotProductDistance, HNSWGraph, IndexOptions, KeyMapper
from annbench.indexes.factory import register_index


class HNSWIndex(VectorIndex):
    """
    Index backed by a key-mapped HNSW graph.

    Subclasses pick the distance kernel and whether `prepare_dataset`
    normalizes.
    """

    distance_metric: DistanceMetric
    distance_class = Distance
    normalize_dataset: bool = False

    def __init__(
        self,
        config: IndexConfig,
        options: Optional[IndexOptions] = None,
        seed: Optional[int] = None,
    ):
        super().__init__(config)
        self.options = options or IndexOptions()
        self.wrapped = KeyMapper(HNSWGraph(self.distance_class(), self.options, seed=seed))

    @property
    def name(self) -> str:
        return f"hnsw_{self.distance_metric.value}"

    @property
    def metric(self) -> DistanceMetric:
        return self.distance_metric

    def insert(self, key: str, vector: Vector) -> None:
        self.wrapped.insert(key, vector)

    def remove(self, key: str) -> None:
        self.wrapped.remove(key)

    def search(self, target: Vector, k: int) -> List[SearchResult]:
        return [SearchResult(key, dist) for key, dist in self.wrapped.search(target, k)]

    def check(self) -> bool:
        return self.wrapped.check()

    def size(self) -> int:
        return len(self.wrapped)

    def prepare_dataset(self, dataset: Dataset) -> None:
        if self.normalize_dataset:
            normalize(dataset)


@register_index("dot_product")
class DotProductIndex(HNSWIndex):
    """Raw inner product; no preprocessing."""

    distance_metric = DistanceMetric.DOT_PRODUCT
    distance_class = DotProductDistance
    normalize_dataset = False


@register_index("cosine")
class CosineIndex(HNSWIndex):
    """Cosine similarity over unit-normalized vectors."""

    distance_metric = DistanceMetric.COSINE
    distance_class = CosineDistance
    normalize_dataset = True

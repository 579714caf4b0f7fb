"""
In-memory HNSW graph index.

The harness only reaches this package through the index variants in
`annbench.indexes`.
"""

from annbench.hnsw.distance import CosineDistance, Distance, DotProductDistance
from annbench.hnsw.graph import HNSWGraph
from annbench.hnsw.key_mapper import KeyMapper
from annbench.hnsw.options import IndexOptions

__all__ = [
    "CosineDistance",
    "Distance",
    "DotProductDistance",
    "HNSWGraph",
    "IndexOptions",
    "KeyMapper",
]

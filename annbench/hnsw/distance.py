"""
Distance kernels used by the HNSW graph.

Both kernels return smaller values for closer vectors. `batch` computes the
distance from one vector to every row of a matrix and is what the graph
uses on its hot paths.
"""

import numpy as np
from numpy.typing import NDArray


class Distance:
    """Base class for distance kernels."""

    name: str = ""

    def __call__(self, a: NDArray[np.float32], b: NDArray[np.float32]) -> float:
        return float(self.batch(a, b.reshape(1, -1))[0])

    def batch(self, query: NDArray[np.float32], matrix: NDArray[np.float32]) -> NDArray[np.float32]:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class DotProductDistance(Distance):
    """1 - a.b; signed when the vectors are not unit length."""

    name = "dot_product"

    def batch(self, query: NDArray[np.float32], matrix: NDArray[np.float32]) -> NDArray[np.float32]:
        return 1.0 - matrix @ query


class CosineDistance(Distance):
    """1 - cos(a, b); in [0, 2]."""

    name = "cosine"

    def batch(self, query: NDArray[np.float32], matrix: NDArray[np.float32]) -> NDArray[np.float32]:
        norms = np.linalg.norm(matrix, axis=1) * np.linalg.norm(query)
        norms[norms == 0] = 1  # Zero vectors end up at distance 1 from everything
        return 1.0 - (matrix @ query) / norms


def dot_product(a: NDArray[np.float32], b: NDArray[np.float32]) -> float:
    return float(np.dot(a, b))

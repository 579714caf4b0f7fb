"""
Abstract base class for benchmarked vector indexes.

This module defines the common interface that every index variant must
implement, enabling the harness to drive any variant through the same
insert/remove/search/check sequence.
"""

from abc import ABC, abstractmethod
from typing import List

from annbench.core.types import Dataset, DistanceMetric, IndexConfig, SearchResult, Vector


class VectorIndex(ABC):
    """
    Abstract base class for index variants.

    A variant binds a distance metric and the dataset preprocessing that
    metric requires. Callers never normalize data themselves; they hand the
    raw dataset to `prepare_dataset` of the index they are about to populate.

    Attributes:
        config: Resolved configuration the index was built from
    """

    def __init__(self, config: IndexConfig):
        """
        Initialize the index.

        Args:
            config: Index configuration
        """
        self.config = config

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the name of the index variant."""
        pass

    @property
    @abstractmethod
    def metric(self) -> DistanceMetric:
        """Return the distance metric used by the variant."""
        pass

    # =========================================================================
    # Mutation
    # =========================================================================

    @abstractmethod
    def insert(self, key: str, vector: Vector) -> None:
        """
        Add an entry, or replace the vector of an existing key.

        Args:
            key: Unique entry key
            vector: 1D vector of the dataset dimensionality
        """
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """
        Delete the entry for a key.

        Removing a key that is not present is a no-op.

        Args:
            key: Entry key
        """
        pass

    # =========================================================================
    # Queries
    # =========================================================================

    @abstractmethod
    def search(self, target: Vector, k: int) -> List[SearchResult]:
        """
        Search for the k nearest entries.

        Args:
            target: Query vector
            k: Maximum number of results

        Returns:
            Up to k results ordered by increasing distance

        Raises:
            ValueError: If k <= 0
        """
        pass

    @abstractmethod
    def check(self) -> bool:
        """
        Run the internal consistency check.

        Returns:
            True if every structural invariant holds
        """
        pass

    @abstractmethod
    def size(self) -> int:
        """Return the number of distinct entries."""
        pass

    # =========================================================================
    # Dataset Preprocessing
    # =========================================================================

    @abstractmethod
    def prepare_dataset(self, dataset: Dataset) -> None:
        """
        Apply the metric-specific preprocessing to a raw dataset in place.

        Must be called once on the dataset before it is used to populate
        or query the index.

        Args:
            dataset: Dataset to preprocess
        """
        pass

    # =========================================================================
    # Utility Methods
    # =========================================================================

    def __len__(self) -> int:
        return self.size()

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"{self.__class__.__name__}("
            f"name={self.name}, "
            f"metric={self.metric.value}, "
            f"size={self.size()})"
        )

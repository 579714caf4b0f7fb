"""
Factory for creating index variants.

This module provides a centralized way to instantiate an index from a
symbolic configuration: a distance metric name plus optional construction
parameters. Unknown tokens are rejected before any index is built.
"""

import importlib
from typing import Any, Callable, Dict, List, Optional, Type, TYPE_CHECKING, Union

from annbench.core.base import VectorIndex
from annbench.core.errors import ConfigurationError
from annbench.core.types import DistanceMetric, IndexConfig, InsertMethod, RemoveMethod
from annbench.hnsw.options import IndexOptions

if TYPE_CHECKING:
    from annbench.core.config import IndexSettings


# Registry of index variants, keyed by distance metric name
_INDEX_REGISTRY: Dict[str, Type[VectorIndex]] = {}

_INDEX_MODULES = ["annbench.indexes.hnsw_index"]


def register_index(metric: str) -> Callable:
    """
    Decorator to register an index variant for a distance metric.

    Example:
        @register_index("cosine")
        class CosineIndex(HNSWIndex):
            ...
    """

    def decorator(cls: Type[VectorIndex]) -> Type[VectorIndex]:
        _INDEX_REGISTRY[metric.lower()] = cls
        return cls

    return decorator


def _resolve(enum_cls, value, field: str):
    if value is None:
        return None
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        raise ConfigurationError(
            field, value, f"make_index: unknown {field.replace('_', ' ')}: {value}"
        ) from None


def make_index(
    metric: Union[str, DistanceMetric],
    max_links: Optional[int] = None,
    ef_construction: Optional[int] = None,
    insert_method: Optional[Union[str, InsertMethod]] = None,
    remove_method: Optional[Union[str, RemoveMethod]] = None,
    seed: Optional[int] = None,
) -> VectorIndex:
    """
    Build an index variant from a symbolic configuration.

    Args:
        metric: Distance metric name ("dot_product" or "cosine")
        max_links: Maximum links per node; None keeps the default
        ef_construction: Construction-time search breadth; None keeps the default
        insert_method: "link_nearest" or "link_diverse"; None keeps the default
        remove_method: "no_link" or "compensate_incoming_links"; None keeps the default
        seed: Seed for the graph's level generator

    Returns:
        Empty index ready for population

    Raises:
        ConfigurationError: If the metric, insert method or remove method is unknown
    """
    overrides: Dict[str, Any] = {}

    if max_links is not None:
        overrides["max_links"] = max_links

    if ef_construction is not None:
        overrides["ef_construction"] = ef_construction

    resolved_insert = _resolve(InsertMethod, insert_method, "insert_method")
    if resolved_insert is not None:
        overrides["insert_method"] = resolved_insert

    resolved_remove = _resolve(RemoveMethod, remove_method, "remove_method")
    if resolved_remove is not None:
        overrides["remove_method"] = resolved_remove

    metric_name = metric.value if isinstance(metric, DistanceMetric) else metric
    index_class = _get_index_class(metric_name)

    options = IndexOptions(**overrides)

    config = IndexConfig(
        metric=index_class.distance_metric,
        max_links=max_links,
        ef_construction=ef_construction,
        insert_method=resolved_insert,
        remove_method=resolved_remove,
    )
    return index_class(config, options, seed=seed)


def make_index_from_config(settings: "IndexSettings", seed: Optional[int] = None) -> VectorIndex:
    """Build an index from the `index` section of a run configuration."""
    return make_index(
        settings.metric,
        max_links=settings.max_links,
        ef_construction=settings.ef_construction,
        insert_method=settings.insert_method,
        remove_method=settings.remove_method,
        seed=seed,
    )


def list_available_indexes() -> List[str]:
    """
    List all registered index variants.

    Returns:
        Sorted list of distance metric names
    """
    _import_all_indexes()
    return sorted(_INDEX_REGISTRY.keys())


def _get_index_class(metric: Any) -> Type[VectorIndex]:
    _import_all_indexes()

    name = metric.lower() if isinstance(metric, str) else metric
    if name not in _INDEX_REGISTRY:
        raise ConfigurationError(
            "metric", metric, f"make_index: unknown index type: {metric}"
        )
    return _INDEX_REGISTRY[name]


def _import_all_indexes() -> None:
    """Import all modules that register index variants."""
    for module_name in _INDEX_MODULES:
        importlib.import_module(module_name)


class IndexFactory:
    """
    Factory class for creating indexes.

    This provides an object-oriented interface to the factory functions,
    useful when a run builds several indexes from shared defaults.

    Example:
        factory = IndexFactory(seed=42)
        index = factory.create("cosine", max_links=16)
    """

    def __init__(self, seed: Optional[int] = None):
        """
        Initialize the factory.

        Args:
            seed: Seed passed to every index it creates
        """
        self.seed = seed
        self._instances: Dict[str, VectorIndex] = {}

    def create(
        self,
        metric: Union[str, DistanceMetric],
        cache: bool = False,
        **params: Any,
    ) -> VectorIndex:
        """
        Create an index.

        Args:
            metric: Distance metric name
            cache: Whether to cache and reuse the instance under its metric name
            **params: Optional make_index parameters

        Returns:
            Index instance
        """
        name = metric.value if isinstance(metric, DistanceMetric) else metric
        if cache and name in self._instances:
            return self._instances[name]

        instance = make_index(name, seed=self.seed, **params)

        if cache:
            self._instances[name] = instance

        return instance

    def get_cached(self, metric: str) -> Optional[VectorIndex]:
        """Get a cached index instance, or None."""
        return self._instances.get(metric)

    def clear_cache(self) -> None:
        """Drop all cached index instances."""
        self._instances.clear()

    @staticmethod
    def list_available() -> List[str]:
        """List available index variants."""
        return list_available_indexes()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.clear_cache()
        return False

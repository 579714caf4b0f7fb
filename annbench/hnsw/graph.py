"""
Hierarchical Navigable Small World graph.

Nodes are addressed by non-negative integer ids; vectors are kept in a
growable matrix whose row index is the node id, so ids should be dense
(see `KeyMapper`, which recycles freed ids).

Reference: Malkov & Yashunin, "Efficient and robust approximate nearest
neighbor search using Hierarchical Navigable Small World graphs" (2016).
"""

import heapq
import logging
import math
from typing import Dict, Iterable, List, Optional, Set, Tuple

import numpy as np
from numpy.typing import NDArray

from annbench.core.types import InsertMethod, RemoveMethod
from annbench.hnsw.distance import Distance
from annbench.hnsw.options import IndexOptions

logger = logging.getLogger(__name__)

# (distance, node id) pairs, sorted by increasing distance unless stated otherwise
Candidates = List[Tuple[float, int]]


class HNSWGraph:
    """
    Multi-layer proximity graph supporting insertion, removal and k-NN search.

    Attributes:
        distance: Distance kernel
        options: Construction options
        entry_point: Id of the node search starts from (highest layer)
    """

    def __init__(
        self,
        distance: Distance,
        options: Optional[IndexOptions] = None,
        seed: Optional[int] = None,
        initial_capacity: int = 1024,
    ):
        self.distance = distance
        self.options = options or IndexOptions()
        self.entry_point: Optional[int] = None

        self._rng = np.random.default_rng(seed)
        self._level_mult = 1.0 / math.log(self.options.max_links)
        self._capacity = initial_capacity
        self._data: Optional[NDArray[np.float32]] = None

        self._levels: Dict[int, int] = {}
        self._links: Dict[int, List[Set[int]]] = {}
        self._incoming: Dict[int, List[Set[int]]] = {}

    def __len__(self) -> int:
        return len(self._levels)

    def __contains__(self, node: int) -> bool:
        return node in self._levels

    @property
    def dimensions(self) -> Optional[int]:
        return None if self._data is None else self._data.shape[1]

    @property
    def max_level(self) -> int:
        return -1 if self.entry_point is None else self._levels[self.entry_point]

    def vector(self, node: int) -> NDArray[np.float32]:
        return self._data[node]

    def links(self, node: int, layer: int = 0) -> Set[int]:
        return set(self._links[node][layer])

    # =========================================================================
    # Mutation
    # =========================================================================

    def insert(self, node: int, vector: NDArray[np.float32]) -> None:
        """
        Insert a node.

        Args:
            node: Non-negative node id, not currently in the graph
            vector: 1D vector

        Raises:
            ValueError: If the id is taken, negative, or the vector has the wrong shape
        """
        if node < 0:
            raise ValueError(f"Node ids must be non-negative, got {node}")
        if node in self._levels:
            raise ValueError(f"Node {node} is already in the graph")

        self._store(node, vector)
        vector = self._data[node]

        level = self._random_level()
        self._levels[node] = level
        self._links[node] = [set() for _ in range(level + 1)]
        self._incoming[node] = [set() for _ in range(level + 1)]

        if self.entry_point is None:
            self.entry_point = node
            return

        top = self.max_level
        entry = [self.entry_point]

        for layer in range(top, level, -1):
            entry = [self._search_layer(vector, entry, 1, layer)[0][1]]

        for layer in range(min(level, top), -1, -1):
            candidates = self._search_layer(vector, entry, self.options.ef_construction, layer)
            bound = self.options.links_on_layer(layer)

            for neighbor in self._select_neighbors(vector, candidates, bound):
                self._connect(node, neighbor, layer)
                self._connect(neighbor, node, layer)
                if len(self._links[neighbor][layer]) > bound:
                    self._relink(neighbor, layer)

            entry = [n for _, n in candidates]

        if level > top:
            self.entry_point = node

    def remove(self, node: int) -> None:
        """
        Remove a node; unknown ids are ignored.

        With `compensate_incoming_links` every node that linked to the
        removed one is offered the removed node's own links instead.
        """
        if node not in self._levels:
            return

        compensate = self.options.remove_method == RemoveMethod.COMPENSATE_INCOMING_LINKS

        for layer in range(self._levels[node] + 1):
            outgoing = set(self._links[node][layer])
            incoming = set(self._incoming[node][layer])

            for target in outgoing:
                self._disconnect(node, target, layer)
            for source in incoming:
                self._disconnect(source, node, layer)

            if compensate:
                for source in incoming:
                    self._relink(source, layer, outgoing - {source})

        del self._levels[node]
        del self._links[node]
        del self._incoming[node]

        if self.entry_point == node:
            self.entry_point = max(self._levels, key=self._levels.get, default=None)

    # =========================================================================
    # Search
    # =========================================================================

    def search(
        self,
        vector: NDArray[np.float32],
        k: int,
        ef: Optional[int] = None,
    ) -> List[Tuple[int, float]]:
        """
        Approximate k nearest neighbor search.

        Args:
            vector: Query vector
            k: Number of neighbors
            ef: Candidate list size (defaults to k, never less than k)

        Returns:
            List of (node, distance) sorted by increasing distance
        """
        if k <= 0:
            raise ValueError(f"k must be positive, got {k}")
        if self.entry_point is None:
            return []

        query = self._as_query(vector)
        entry = [self.entry_point]

        for layer in range(self.max_level, 0, -1):
            entry = [self._search_layer(query, entry, 1, layer)[0][1]]

        found = self._search_layer(query, entry, max(ef or k, k), 0)
        return [(node, float(dist)) for dist, node in found[:k]]

    # =========================================================================
    # Consistency
    # =========================================================================

    def check(self) -> bool:
        """
        Verify the structural invariants of the graph.

        Returns:
            True if the graph is consistent; the first violation found is logged
        """
        if (self.entry_point is None) != (len(self._levels) == 0):
            logger.warning("Entry point %s inconsistent with %d nodes", self.entry_point, len(self._levels))
            return False

        if self.entry_point is not None:
            if self.entry_point not in self._levels:
                logger.warning("Entry point %d is not a node", self.entry_point)
                return False
            if self.max_level != max(self._levels.values()):
                logger.warning("Entry point %d is not on the top layer", self.entry_point)
                return False

        for node, level in self._levels.items():
            if len(self._links[node]) != level + 1 or len(self._incoming[node]) != level + 1:
                logger.warning("Node %d has link lists for the wrong number of layers", node)
                return False

            for layer, targets in enumerate(self._links[node]):
                if len(targets) > self.options.links_on_layer(layer):
                    logger.warning("Node %d has %d links on layer %d", node, len(targets), layer)
                    return False

                for target in targets:
                    if target == node:
                        logger.warning("Node %d links to itself on layer %d", node, layer)
                        return False
                    if target not in self._levels or self._levels[target] < layer:
                        logger.warning("Node %d links to missing node %d on layer %d", node, target, layer)
                        return False
                    if node not in self._incoming[target][layer]:
                        logger.warning("Link %d -> %d missing from incoming index", node, target)
                        return False

            for layer, sources in enumerate(self._incoming[node]):
                for source in sources:
                    source_links = self._links.get(source, [])
                    if layer >= len(source_links) or node not in source_links[layer]:
                        logger.warning("Stale incoming link %d -> %d on layer %d", source, node, layer)
                        return False

        return True

    # =========================================================================
    # Internals
    # =========================================================================

    def _store(self, node: int, vector: NDArray[np.float32]) -> None:
        vector = np.asarray(vector, dtype=np.float32)
        if vector.ndim != 1:
            raise ValueError(f"Vector must be 1D, got {vector.ndim}D")

        if self._data is None:
            self._capacity = max(self._capacity, node + 1)
            self._data = np.zeros((self._capacity, vector.shape[0]), dtype=np.float32)
        elif vector.shape[0] != self._data.shape[1]:
            raise ValueError(
                f"Vector dimensions mismatch: expected {self._data.shape[1]}, got {vector.shape[0]}"
            )

        if node >= self._capacity:
            while node >= self._capacity:
                self._capacity *= 2
            grown = np.zeros((self._capacity, self._data.shape[1]), dtype=np.float32)
            grown[: self._data.shape[0]] = self._data
            self._data = grown

        self._data[node] = vector

    def _as_query(self, vector: NDArray[np.float32]) -> NDArray[np.float32]:
        query = np.asarray(vector, dtype=np.float32)
        if query.shape != (self._data.shape[1],):
            raise ValueError(
                f"Query dimensions mismatch: expected {self._data.shape[1]}, got {query.shape}"
            )
        return query

    def _random_level(self) -> int:
        return int(-math.log(1.0 - self._rng.random()) * self._level_mult)

    def _connect(self, source: int, target: int, layer: int) -> None:
        self._links[source][layer].add(target)
        self._incoming[target][layer].add(source)

    def _disconnect(self, source: int, target: int, layer: int) -> None:
        self._links[source][layer].discard(target)
        self._incoming[target][layer].discard(source)

    def _distances(self, query: NDArray[np.float32], nodes: List[int]) -> NDArray[np.float32]:
        return self.distance.batch(query, self._data[nodes])

    def _search_layer(
        self,
        query: NDArray[np.float32],
        entry: List[int],
        ef: int,
        layer: int,
    ) -> Candidates:
        visited = set(entry)
        candidates: Candidates = [(float(d), n) for d, n in zip(self._distances(query, entry), entry)]
        heapq.heapify(candidates)
        # Max-heap of the best ef nodes so far, stored as (-distance, node)
        found = [(-d, n) for d, n in candidates]
        heapq.heapify(found)
        while len(found) > ef:
            heapq.heappop(found)

        while candidates:
            dist, current = heapq.heappop(candidates)
            if dist > -found[0][0] and len(found) >= ef:
                break

            neighbors = [n for n in self._links[current][layer] if n not in visited]
            if not neighbors:
                continue
            visited.update(neighbors)

            for neighbor_dist, neighbor in zip(self._distances(query, neighbors), neighbors):
                neighbor_dist = float(neighbor_dist)
                if len(found) < ef or neighbor_dist < -found[0][0]:
                    heapq.heappush(candidates, (neighbor_dist, neighbor))
                    heapq.heappush(found, (-neighbor_dist, neighbor))
                    if len(found) > ef:
                        heapq.heappop(found)

        return sorted((-d, n) for d, n in found)

    def _select_neighbors(
        self,
        vector: NDArray[np.float32],
        candidates: Candidates,
        bound: int,
    ) -> List[int]:
        if self.options.insert_method == InsertMethod.LINK_NEAREST or len(candidates) <= bound:
            return [n for _, n in candidates[:bound]]

        # Keep a candidate only if it is closer to the base vector than to
        # every neighbor selected so far, then top up with the nearest rejects.
        selected: List[int] = []
        rejected: List[int] = []
        for dist, candidate in candidates:
            if len(selected) >= bound:
                break
            if not selected or self._distances(self._data[candidate], selected).min() > dist:
                selected.append(candidate)
            else:
                rejected.append(candidate)

        selected.extend(rejected[: bound - len(selected)])
        return selected

    def _relink(self, node: int, layer: int, extra: Iterable[int] = ()) -> None:
        """Recompute the links of a node from its current links plus `extra`."""
        pool = list((self._links[node][layer] | set(extra)) - {node})
        if not pool:
            return

        vector = self._data[node]
        candidates = sorted(zip(self._distances(vector, pool).tolist(), pool))
        keep = set(self._select_neighbors(vector, candidates, self.options.links_on_layer(layer)))

        for target in self._links[node][layer] - keep:
            self._disconnect(node, target, layer)
        for target in keep - self._links[node][layer]:
            self._connect(node, target, layer)

"""String-key facade over an HNSW graph."""

import logging
from typing import Dict, List, Optional, Tuple

import numpy as np
from numpy.typing import NDArray

from annbench.hnsw.graph import HNSWGraph

logger = logging.getLogger(__name__)


class KeyMapper:
    """
    Maps arbitrary string keys to the dense integer ids of the wrapped graph.

    Inserting an existing key replaces its vector. Removing an unknown key
    does nothing. Ids of removed keys are recycled so the graph's vector
    storage stays compact.
    """

    def __init__(self, index: HNSWGraph):
        self.index = index
        self._key_to_id: Dict[str, int] = {}
        self._id_to_key: Dict[int, str] = {}
        self._free_ids: List[int] = []
        self._next_id = 0

    def __len__(self) -> int:
        return len(self._key_to_id)

    def __contains__(self, key: str) -> bool:
        return key in self._key_to_id

    def insert(self, key: str, vector: NDArray[np.float32]) -> None:
        node = self._key_to_id.get(key)
        if node is None:
            node = self._allocate()
            try:
                self.index.insert(node, vector)
            except ValueError:
                self._release(key, node)
                raise
        else:
            previous = self.index.vector(node).copy()
            self.index.remove(node)
            try:
                self.index.insert(node, vector)
            except ValueError:
                # Put the old entry back so a failed update leaves the key intact
                self.index.insert(node, previous)
                raise

        self._key_to_id[key] = node
        self._id_to_key[node] = key

    def remove(self, key: str) -> None:
        node = self._key_to_id.get(key)
        if node is None:
            logger.debug("Ignoring removal of unknown key %r", key)
            return

        self.index.remove(node)
        self._release(key, node)

    def search(
        self,
        vector: NDArray[np.float32],
        k: int,
        ef: Optional[int] = None,
    ) -> List[Tuple[str, float]]:
        return [(self._id_to_key[node], dist) for node, dist in self.index.search(vector, k, ef)]

    def check(self) -> bool:
        if len(self._key_to_id) != len(self._id_to_key) or len(self._key_to_id) != len(self.index):
            logger.warning(
                "Key mapping holds %d keys but the graph holds %d nodes",
                len(self._key_to_id),
                len(self.index),
            )
            return False

        for key, node in self._key_to_id.items():
            if self._id_to_key.get(node) != key or node not in self.index:
                logger.warning("Key %r maps to missing node %d", key, node)
                return False

        return self.index.check()

    def _allocate(self) -> int:
        if self._free_ids:
            return self._free_ids.pop()
        node = self._next_id
        self._next_id += 1
        return node

    def _release(self, key: str, node: int) -> None:
        self._key_to_id.pop(key, None)
        self._id_to_key.pop(node, None)
        self._free_ids.append(node)

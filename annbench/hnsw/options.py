"""Construction options of the HNSW graph."""

from dataclasses import dataclass

from annbench.core.types import InsertMethod, RemoveMethod


@dataclass
class IndexOptions:
    """
    Tunable parameters of an HNSW graph.

    Attributes:
        max_links: Maximum number of links per node on upper layers
            (layer 0 allows twice as many)
        ef_construction: Candidate list size used while inserting
        insert_method: How the links of a new node are chosen
        remove_method: How the graph is repaired after a removal
    """

    max_links: int = 32
    ef_construction: int = 200
    insert_method: InsertMethod = InsertMethod.LINK_NEAREST
    remove_method: RemoveMethod = RemoveMethod.COMPENSATE_INCOMING_LINKS

    def __post_init__(self):
        if self.max_links < 2:
            raise ValueError(f"max_links must be at least 2, got {self.max_links}")
        if self.ef_construction < 1:
            raise ValueError(f"ef_construction must be positive, got {self.ef_construction}")

    def links_on_layer(self, layer: int) -> int:
        """Return the link bound for a layer."""
        return self.max_links * 2 if layer == 0 else self.max_links

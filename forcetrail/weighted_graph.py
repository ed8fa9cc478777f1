import logging
from typing import Generic, Hashable, Iterator, List, Optional, Protocol, Tuple, TypeVar

import networkx as nx

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
W = TypeVar("W")


class HasKey(Protocol[K]):
    """Anything stored in a WeightedGraph must expose its key."""

    @property
    def key(self) -> K: ...


N = TypeVar("N", bound=HasKey)


class MissingNodeError(KeyError):
    """Raised when an edge operation names a node that is not in the graph."""


class WeightedGraph(Generic[K, N, W]):
    """
    An undirected, complete graph with weighted edges.

    Every pair of distinct nodes is connected. Pairs whose weight was never
    set carry `default_weight`, so "no edge" and "default edge" are the same
    thing. Only explicitly set weights are stored in the underlying
    networkx graph; networkx keeps both directions of an edge in sync.
    """

    def __init__(self, default_weight=0.0):
        self.default_weight = default_weight
        self._g = nx.Graph()

    def add_node(self, node: N) -> None:
        """Add a node, replacing any existing node with the same key (its edges are kept)."""
        key = node.key
        if key in self._g:
            self._g.nodes[key]["value"] = node
        else:
            self._g.add_node(key, value=node)

    def get_node(self, key: K) -> Optional[N]:
        if key not in self._g:
            return None
        return self._g.nodes[key]["value"]

    # Nodes are mutable objects, so the same lookup hands out a mutable reference.
    get_node_mut = get_node

    def nodes(self) -> Iterator[N]:
        for _, value in self._g.nodes(data="value"):
            yield value

    def node_count(self) -> int:
        return self._g.number_of_nodes()

    def __len__(self):
        return self.node_count()

    def __contains__(self, key):
        return key in self._g

    def set_weight(self, a: K, b: K, weight: W) -> W:
        """
        Set the weight between `a` and `b` and return the previous weight.

        Both nodes must already exist; naming a missing node is a programming
        error and raises MissingNodeError.
        """
        for key in (a, b):
            if key not in self._g:
                raise MissingNodeError(f"cannot set weight {a!r}-{b!r}: node {key!r} is not in the graph")
        if a == b:
            # a node has no spring to itself
            logger.debug(f"Ignoring self weight on {a!r}")
            return self.default_weight
        previous = self.get_weight(a, b)
        self._g.add_edge(a, b, weight=weight)
        logger.debug(f"Weight {a!r}-{b!r}: {previous!r} -> {weight!r}")
        return previous

    def get_weight(self, a: K, b: K) -> W:
        """Weight between `a` and `b`; the default weight for any pair that was never set."""
        data = self._g.get_edge_data(a, b)
        if data is None:
            return self.default_weight
        return data["weight"]

    def edges(self, key: K) -> List[Tuple[N, W]]:
        """Every other node in the graph, paired with its weight to `key`."""
        adjacent = self._g.adj[key] if key in self._g else {}
        result = []
        for other, value in self._g.nodes(data="value"):
            if other == key:
                continue
            data = adjacent.get(other)
            result.append((value, self.default_weight if data is None else data["weight"]))
        return result

    def remove_node(self, key: K) -> Optional[N]:
        """Remove a node and every edge touching it. Returns the node, or None if absent."""
        if key not in self._g:
            return None
        node = self._g.nodes[key]["value"]
        # networkx drops the incident edges from both endpoints
        self._g.remove_node(key)
        return node

    def weighted_pairs(self):
        """Yield `(a, b, weight)` for every pair whose weight was set explicitly."""
        yield from self._g.edges(data="weight")

import logging
import random

from .graph_engine import LayoutEngine, SimNode
from .weighted_graph import WeightedGraph

logger = logging.getLogger(__name__)

# Solarized accents, used for nodes that arrive without a colour
PALETTE = [
    (181, 137, 0),
    (203, 75, 22),
    (220, 50, 47),
    (211, 54, 130),
    (108, 113, 196),
    (38, 139, 210),
    (42, 161, 152),
    (133, 153, 0),
]


def parse_colour(value):
    """Accept an RGB triple or a '#rrggbb' string; None passes through."""
    if value is None or not isinstance(value, str):
        return value
    value = value.lstrip("#")
    if len(value) != 6:
        raise ValueError(f"expected a #rrggbb colour, got {value!r}")
    return tuple(int(value[i:i + 2], 16) for i in (0, 2, 4))


class Simulation:
    """
    Owns a weighted graph, steps it with a LayoutEngine and reports every
    change to the attached observers (trajectory recorders, renderers).

    Node jitter is drawn from `rng`; pass `seed` (or your own
    `random.Random`) for reproducible runs.
    """

    def __init__(self, engine=None, seed=None, rng=None, observers=()):
        self.graph = WeightedGraph(default_weight=0.0)
        self.engine = engine or LayoutEngine()
        self.rng = rng or random.Random(seed)
        self.observers = list(observers)
        self.steps = 0

    def attach(self, observer):
        self.observers.append(observer)
        return observer

    def add_node(self, uid, colour=None):
        if colour is None:
            colour = PALETTE[self.graph.node_count() % len(PALETTE)]
        node = SimNode.spawn(uid, colour, self.rng)
        self.graph.add_node(node)
        logger.info(f"Added node {uid!r} at step {self.steps}")
        for observer in self.observers:
            observer.node_added(node)
        return uid

    def remove_node(self, uid):
        node = self.graph.remove_node(uid)
        if node is None:
            logger.warning(f"Tried to remove unknown node {uid!r}")
            return None
        logger.info(f"Removed node {uid!r} at step {self.steps}")
        for observer in self.observers:
            observer.node_removed(node)
        return node

    def set_weight(self, a, b, weight):
        return self.graph.set_weight(a, b, weight)

    def get_weight(self, a, b):
        return self.graph.get_weight(a, b)

    def get_node(self, uid):
        return self.graph.get_node(uid)

    def step(self):
        moved = self.engine.step(self.graph)
        for node in moved:
            for observer in self.observers:
                observer.node_moved(node)
        self.steps += 1
        for observer in self.observers:
            observer.tick_finished(self.steps)

    def many_steps(self, count):
        for _ in range(count):
            self.step()
        logger.debug(f"Ran {count} steps, now at step {self.steps}")

    def load_from_networkx(self, nx_graph):
        """
        Add every node and edge of a networkx graph.

        Node colours come from a `colour` attribute (RGB triple or hex string), edge
        weights from a `weight` attribute (default 1.0). Edge direction is
        ignored.
        """
        for n, data in nx_graph.nodes(data=True):
            self.add_node(n, parse_colour(data.get("colour")))

        for u, v, data in nx_graph.edges(data=True):
            if u == v:
                continue
            self.set_weight(u, v, float(data.get("weight", 1.0)))

        logger.info(f"Loaded {nx_graph.number_of_nodes()} nodes and {nx_graph.number_of_edges()} edges")

import math

from .vec2d import Vec2d

# Physics defaults
SPRING_CONSTANT = 0.01
TARGET_DENSITY = 150.0
MIN_SPRING_LENGTH = 10.0
DAMPING = 0.9

# Canvas
SIZE = 1000.0
STARTING_JITTER = 5.0


class SimNode:
    def __init__(self, uid, position, colour=None):
        self.id = uid
        self.position = position
        self.velocity = Vec2d(0.0, 0.0)
        self.colour = colour

    @property
    def key(self):
        return self.id

    @classmethod
    def spawn(cls, uid, colour, rng, center=None, jitter=STARTING_JITTER):
        """New node near `center`, nudged by a random unit vector so no two nodes start coincident."""
        if center is None:
            center = Vec2d(SIZE / 2, SIZE / 2)
        return cls(uid, center + Vec2d.random_unit(rng) * jitter, colour)

    def __repr__(self):
        return f"SimNode({self.id!r}, pos=({self.position.x:.2f}, {self.position.y:.2f}))"


class LayoutEngine:
    """
    Spring layout over a complete WeightedGraph of SimNodes.

    Every pair of nodes is joined by a spring. A heavier edge shortens the
    spring's rest length, pulling the pair closer; unweighted pairs rest at
    the global spacing, which grows with the square root of the node count.
    The engine keeps no per-graph state, so one engine can drive any number
    of graphs.
    """

    def __init__(self, spring_constant=SPRING_CONSTANT, target_density=TARGET_DENSITY,
                 min_spring_length=MIN_SPRING_LENGTH, damping=DAMPING):
        if not 0 < damping < 1:
            raise ValueError(f"damping must lie strictly between 0 and 1, got {damping}")
        self.spring_constant = spring_constant
        self.target_density = target_density
        self.min_spring_length = min_spring_length
        self.damping = damping

    def max_distance(self, graph):
        return math.sqrt(graph.node_count()) * self.target_density

    def spring_length(self, graph, weight):
        return max(self.max_distance(graph) - weight, self.min_spring_length)

    def node_acceleration(self, graph, node):
        accel = Vec2d(0.0, 0.0)
        for sibling, weight in graph.edges(node.id):
            dist = node.position.distance(sibling.position)
            if dist == 0:
                # No direction to push along; the pair sits out this tick.
                continue
            force = self.spring_constant * (dist - self.spring_length(graph, weight))
            direction = (sibling.position - node.position).as_unit()
            accel = accel + direction * force
        return accel

    def step(self, graph):
        """
        Advance every node by one tick and return the moved nodes.

        All accelerations are computed before any node moves, since each one
        depends on the positions of every other node.
        """
        nodes = list(graph.nodes())
        accels = [self.node_acceleration(graph, node) for node in nodes]

        for node, accel in zip(nodes, accels):
            node.velocity = (node.velocity + accel) * self.damping
            node.position = node.position + node.velocity
        return nodes

    def many_steps(self, graph, count):
        for _ in range(count):
            self.step(graph)

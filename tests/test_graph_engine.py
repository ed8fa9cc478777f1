import math
import random

import pytest

from forcetrail.graph_engine import SIZE, STARTING_JITTER, LayoutEngine, SimNode
from forcetrail.vec2d import Vec2d
from forcetrail.weighted_graph import WeightedGraph


def graph_with(*nodes):
    graph = WeightedGraph()
    for node in nodes:
        graph.add_node(node)
    return graph


def test_spawn_jitters_around_centre():
    rng = random.Random(3)
    node = SimNode.spawn(1, (1, 2, 3), rng)
    centre = Vec2d(SIZE / 2, SIZE / 2)
    assert node.position.distance(centre) == pytest.approx(STARTING_JITTER)
    assert node.velocity == Vec2d(0.0, 0.0)
    assert node.key == 1


def test_spawn_is_reproducible_with_same_seed():
    a = SimNode.spawn(1, None, random.Random(11))
    b = SimNode.spawn(1, None, random.Random(11))
    assert a.position == b.position


def test_damping_must_be_between_zero_and_one():
    for damping in (0.0, 1.0, 1.5, -0.1):
        with pytest.raises(ValueError):
            LayoutEngine(damping=damping)


def test_spring_length_shrinks_with_weight_down_to_floor():
    engine = LayoutEngine()
    graph = graph_with(SimNode(1, Vec2d(0, 0)), SimNode(2, Vec2d(10, 0)), SimNode(3, Vec2d(0, 10)), SimNode(4, Vec2d(5, 5)))
    # four nodes: sqrt(4) * 150
    assert engine.max_distance(graph) == pytest.approx(300.0)
    assert engine.spring_length(graph, 0.0) == pytest.approx(300.0)
    assert engine.spring_length(graph, 100.0) == pytest.approx(200.0)
    assert engine.spring_length(graph, 5000.0) == engine.min_spring_length


def test_two_nodes_converge_monotonically_when_overdamped():
    engine = LayoutEngine(damping=0.5)
    a = SimNode("A", Vec2d(0.0, 0.0))
    b = SimNode("B", Vec2d(1000.0, 0.0))
    graph = graph_with(a, b)
    target = engine.spring_length(graph, graph.get_weight("A", "B"))

    previous = a.position.distance(b.position)
    for _ in range(600):
        engine.step(graph)
        distance = a.position.distance(b.position)
        assert distance < previous
        assert distance > target - 1e-6
        previous = distance

    assert previous == pytest.approx(target, abs=0.01)
    assert a.velocity.length() < 1e-3
    assert b.velocity.length() < 1e-3


def test_two_nodes_settle_at_target_with_default_constants():
    engine = LayoutEngine()
    a = SimNode("A", Vec2d(100.0, 500.0))
    b = SimNode("B", Vec2d(900.0, 500.0))
    graph = graph_with(a, b)
    target = engine.spring_length(graph, 0.0)
    engine.many_steps(graph, 500)
    assert a.position.distance(b.position) == pytest.approx(target, abs=1e-3)


def test_heavier_weight_pulls_pair_closer():
    engine = LayoutEngine()
    graph = graph_with(SimNode(1, Vec2d(400, 500)), SimNode(2, Vec2d(600, 500)))
    graph.set_weight(1, 2, 150.0)
    engine.many_steps(graph, 500)
    distance = graph.get_node(1).position.distance(graph.get_node(2).position)
    assert distance == pytest.approx(math.sqrt(2) * 150 - 150, abs=1e-3)


def test_step_uses_one_snapshot_regardless_of_insertion_order():
    positions = {1: Vec2d(0, 0), 2: Vec2d(300, 40), 3: Vec2d(-50, 200)}

    def run(order):
        graph = graph_with(*(SimNode(k, positions[k]) for k in order))
        graph.set_weight(1, 2, 80.0)
        LayoutEngine().step(graph)
        return {k: graph.get_node(k).position for k in order}

    assert run([1, 2, 3]) == run([3, 1, 2]) == run([2, 3, 1])


def test_step_returns_moved_nodes_in_graph_order():
    graph = graph_with(SimNode(1, Vec2d(0, 0)), SimNode(2, Vec2d(50, 0)))
    moved = LayoutEngine().step(graph)
    assert [node.id for node in moved] == [1, 2]


def test_coincident_nodes_do_not_push_each_other():
    graph = graph_with(SimNode(1, Vec2d(5, 5)), SimNode(2, Vec2d(5, 5)))
    LayoutEngine().step(graph)
    for key in (1, 2):
        node = graph.get_node(key)
        assert node.position == Vec2d(5, 5)
        assert all(math.isfinite(c) for c in node.position)


def test_lone_node_velocity_decays_by_damping():
    node = SimNode(1, Vec2d(0, 0))
    node.velocity = Vec2d(10.0, 0.0)
    graph = graph_with(node)
    engine = LayoutEngine(damping=0.5)
    speeds = []
    for _ in range(5):
        engine.step(graph)
        speeds.append(node.velocity.length())
    assert speeds == pytest.approx([5.0, 2.5, 1.25, 0.625, 0.3125])


def test_speed_is_non_increasing_once_settling():
    engine = LayoutEngine(damping=0.5)
    a = SimNode("A", Vec2d(0.0, 0.0))
    b = SimNode("B", Vec2d(1000.0, 0.0))
    graph = graph_with(a, b)
    engine.many_steps(graph, 100)
    previous = a.velocity.length()
    for _ in range(200):
        engine.step(graph)
        assert a.velocity.length() <= previous
        previous = a.velocity.length()


def test_spring_pulls_along_unit_direction():
    assert Vec2d(3.0, -4.0).as_unit() == Vec2d(0.6, -0.8)
    engine = LayoutEngine()
    graph = graph_with(SimNode(1, Vec2d(0, 0)), SimNode(2, Vec2d(30, 40)))
    accel = engine.node_acceleration(graph, graph.get_node(1))
    force = engine.spring_constant * (50 - engine.spring_length(graph, 0.0))
    assert accel.x == pytest.approx(0.6 * force)
    assert accel.y == pytest.approx(0.8 * force)

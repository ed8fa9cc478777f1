import json

import networkx as nx
import pytest

from forcetrail.events import Observer
from forcetrail.main import main
from forcetrail.scenario import DEMO_SCRIPT, ScriptPlayer, total_ticks
from forcetrail.simulation import PALETTE, Simulation, parse_colour
from forcetrail.trajectory import TrajectoryRecorder
from forcetrail.weighted_graph import MissingNodeError


class EventLog(Observer):
    def __init__(self):
        self.events = []

    def node_added(self, node):
        self.events.append(("added", node.id))

    def node_moved(self, node):
        self.events.append(("moved", node.id))

    def node_removed(self, node):
        self.events.append(("removed", node.id))

    def tick_finished(self, step):
        self.events.append(("tick", step))


def test_events_arrive_in_tick_order():
    log = EventLog()
    sim = Simulation(seed=1, observers=[log])
    sim.add_node(1, (1, 1, 1))
    sim.add_node(2, (2, 2, 2))
    sim.step()
    sim.remove_node(1)
    sim.step()
    assert log.events == [
        ("added", 1), ("added", 2),
        ("moved", 1), ("moved", 2), ("tick", 1),
        ("removed", 1),
        ("moved", 2), ("tick", 2),
    ]


def test_remove_unknown_node_is_a_no_op():
    log = EventLog()
    sim = Simulation(observers=[log])
    assert sim.remove_node(42) is None
    assert log.events == []


def test_set_weight_requires_both_nodes():
    sim = Simulation()
    sim.add_node(1)
    with pytest.raises(MissingNodeError):
        sim.set_weight(1, 2, 10.0)


def test_nodes_without_colour_take_palette_colours():
    sim = Simulation()
    sim.add_node("a")
    sim.add_node("b")
    assert sim.get_node("a").colour == PALETTE[0]
    assert sim.get_node("b").colour == PALETTE[1]


def test_same_seed_gives_identical_trajectories():
    def run():
        sim = Simulation(seed=1234)
        recorder = sim.attach(TrajectoryRecorder())
        ScriptPlayer(sim, DEMO_SCRIPT[:12]).run()
        positions = {node.id: node.position.as_tuple() for node in sim.graph.nodes()}
        return positions, recorder.render().as_json()

    assert run() == run()


def test_script_player_interleaves_edits_and_ticks():
    sim = Simulation(seed=0)
    script = [("add", 1, (0, 0, 0)), ("steps", 2), ("add", 2, (9, 9, 9)), ("weight", 1, 2, 30.0), ("steps", 3)]
    player = ScriptPlayer(sim, script)
    assert player.advance()
    assert sim.steps == 1 and sim.graph.node_count() == 1
    assert player.run() == 4
    assert sim.steps == total_ticks(script) == 5
    assert sim.get_weight(2, 1) == 30.0
    assert not player.advance()


def test_script_rejects_unknown_operations():
    player = ScriptPlayer(Simulation(), [("explode", 1)])
    with pytest.raises(ValueError):
        player.advance()


def test_parse_colour():
    assert parse_colour("#ff8000") == (255, 128, 0)
    assert parse_colour("00ff00") == (0, 255, 0)
    assert parse_colour((1, 2, 3)) == (1, 2, 3)
    assert parse_colour(None) is None
    with pytest.raises(ValueError):
        parse_colour("#fff")


def test_load_from_networkx():
    g = nx.Graph()
    g.add_node("a", colour="#102030")
    g.add_node("b")
    g.add_node("c")
    g.add_edge("a", "b", weight=25)
    g.add_edge("b", "c")
    g.add_edge("c", "c")

    sim = Simulation(seed=2)
    sim.load_from_networkx(g)
    assert sim.graph.node_count() == 3
    assert sim.get_node("a").colour == (16, 32, 48)
    assert sim.get_weight("b", "a") == 25.0
    assert sim.get_weight("c", "b") == 1.0
    assert sim.get_weight("a", "c") == 0.0


def test_cli_lays_out_graphml_file(tmp_path):
    g = nx.Graph()
    g.add_node("x", colour="#ff0000")
    g.add_node("y", colour="#00ff00")
    g.add_node("z", colour="#0000ff")
    g.add_edge("x", "y", weight=80.0)
    source = tmp_path / "graph.graphml"
    nx.write_graphml(g, str(source))
    out = tmp_path / "out.json"

    assert main(["--graph", str(source), "--ticks", "20", "--seed", "3", "-o", str(out)]) == 0

    doc = json.loads(out.read_text())
    assert doc["op"] == 20
    assert len(doc["layers"]) == 3
    for layer in doc["layers"]:
        assert (layer["ip"], layer["op"]) == (0, 20)
        assert layer["shapes"][0]["ty"] == "el"


def test_cli_tolerance_policy_writes_to_stdout(tmp_path, capsys):
    g = nx.path_graph(3)
    source = tmp_path / "path.graphml"
    nx.write_graphml(g, str(source))

    main(["--graph", str(source), "--ticks", "5", "--policy", "tolerance"])

    doc = json.loads(capsys.readouterr().out)
    assert doc["op"] == 5
    assert len(doc["layers"]) == 3

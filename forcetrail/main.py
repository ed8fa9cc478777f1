import argparse
import logging
import sys

import networkx as nx

from .graph_engine import DAMPING, MIN_SPRING_LENGTH, SPRING_CONSTANT, TARGET_DENSITY, LayoutEngine
from .scenario import DEMO_SCRIPT, ScriptPlayer
from .simulation import Simulation
from .trajectory import TolerancePolicy, TrajectoryRecorder, TruncatePolicy

logger = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(
        prog="forcetrail",
        description="Spring layout of a weighted graph, exported as a Lottie animation.",
    )
    parser.add_argument("--graph", help="GraphML file to lay out instead of the built-in demo")
    parser.add_argument("--ticks", type=int, default=1000, help="ticks to run when --graph is given")
    parser.add_argument("--seed", type=int, default=None, help="seed for the starting jitter")
    parser.add_argument("--spring-constant", type=float, default=SPRING_CONSTANT)
    parser.add_argument("--target-density", type=float, default=TARGET_DENSITY)
    parser.add_argument("--min-spring-length", type=float, default=MIN_SPRING_LENGTH)
    parser.add_argument("--damping", type=float, default=DAMPING)
    parser.add_argument("--policy", choices=["truncate", "tolerance"], default="truncate",
                        help="when a recorded position counts as unchanged")
    parser.add_argument("-o", "--output", help="write the Lottie JSON here instead of stdout")
    parser.add_argument("--png-dir", help="also write every tick as a PNG into this directory")
    parser.add_argument("--gif", help="also write a palette GIF of the run")
    parser.add_argument("--view", action="store_true", help="watch the run in a window")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def build_simulation(args):
    engine = LayoutEngine(
        spring_constant=args.spring_constant,
        target_density=args.target_density,
        min_spring_length=args.min_spring_length,
        damping=args.damping,
    )
    policy = TolerancePolicy() if args.policy == "tolerance" else TruncatePolicy()
    sim = Simulation(engine=engine, seed=args.seed)
    recorder = sim.attach(TrajectoryRecorder(policy))

    gif = None
    if args.png_dir:
        from .ui.raster import RasterRenderer
        sim.attach(RasterRenderer(args.png_dir, weight_of=sim.get_weight))
    if args.gif:
        from .ui.palette_gif import PaletteGifEncoder
        gif = sim.attach(PaletteGifEncoder())
    return sim, recorder, gif


def load_script(args, sim):
    if not args.graph:
        return DEMO_SCRIPT
    sim.load_from_networkx(nx.read_graphml(args.graph))
    return [("steps", args.ticks)]


def run_with_view(player):
    from PyQt6.QtWidgets import QApplication, QMainWindow
    from .ui.graph_widget import GraphWidget

    app = QApplication(sys.argv)
    window = QMainWindow()
    window.setWindowTitle("forcetrail")
    window.resize(1000, 1000)
    widget = GraphWidget(player.simulation, stepper=player.advance)
    widget.tickAdvanced.connect(lambda step: window.statusBar().showMessage(f"step {step}"))
    widget.finished.connect(lambda: window.statusBar().showMessage(f"finished at step {player.simulation.steps}"))
    window.setCentralWidget(widget)
    window.show()
    return app.exec()


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    sim, recorder, gif = build_simulation(args)
    player = ScriptPlayer(sim, load_script(args, sim))

    if args.view:
        run_with_view(player)
    else:
        player.run()

    animation = recorder.render()
    if args.output:
        animation.save(args.output)
        logger.info(f"Wrote {len(animation.layers)} layers to {args.output}")
    else:
        sys.stdout.write(animation.as_json() + "\n")

    if gif is not None:
        gif.save(args.gif)
    return 0


if __name__ == "__main__":
    sys.exit(main())

from .events import Observer
from .graph_engine import LayoutEngine, SimNode
from .simulation import Simulation
from .trajectory import Record, TolerancePolicy, TrajectoryRecorder, TruncatePolicy, UnknownNodeError
from .vec2d import Vec2d
from .weighted_graph import MissingNodeError, WeightedGraph

__version__ = "0.1.0"

import logging
import math

from .events import Observer
from .graph_engine import SIZE
from .lottie import Animation, Colour, Ellipse, Fill, Layer, Animated, Static

logger = logging.getLogger(__name__)

NODE_SIZE = 20
FRAME_RATE = 60
DEFAULT_COLOUR = (128, 128, 128)


class UnknownNodeError(KeyError):
    """Raised when the recorder is told about a node it has no open record for."""


class TruncatePolicy:
    """Positions snap to the integer pixel grid; a frame continues while the snapped position is unchanged."""

    def quantize(self, pos):
        x, y = pos
        return (math.floor(x), math.floor(y))

    def same(self, recorded, pos):
        return recorded == self.quantize(pos)


class TolerancePolicy:
    """
    Positions are kept as given; a frame continues while both axis offsets
    from its recorded position lie in [-band, band).
    """

    def __init__(self, band=1.0):
        if band <= 0:
            raise ValueError(f"band must be positive, got {band}")
        self.band = band

    def quantize(self, pos):
        x, y = pos
        return (x, y)

    def same(self, recorded, pos):
        x, y = pos
        dx = x - recorded[0]
        dy = y - recorded[1]
        return -self.band <= dx < self.band and -self.band <= dy < self.band


class Frame:
    __slots__ = ("position", "length")

    def __init__(self, position, length=1):
        self.position = position
        self.length = length

    def __repr__(self):
        return f"Frame({self.position!r}, {self.length})"


class Record:
    def __init__(self, uid, start, colour):
        self.id = uid
        self.start = start
        self.colour = colour
        self.frames = []

    @property
    def length(self):
        return sum(frame.length for frame in self.frames)

    @property
    def end(self):
        return self.start + self.length

    def push_position(self, pos, policy):
        if self.frames:
            last = self.frames[-1]
            if policy.same(last.position, pos):
                last.length += 1
                return
        self.frames.append(Frame(policy.quantize(pos)))

    def keyframes(self):
        time = self.start
        for frame in self.frames:
            yield time, frame.position
            time += frame.length

    def render(self):
        colour = self.colour if isinstance(self.colour, Colour) else Colour.from_rgb8(self.colour or DEFAULT_COLOUR)
        return Layer(self.start, self.end, [
            Ellipse(center=Animated(self.keyframes()), size=Static((NODE_SIZE, NODE_SIZE))),
            Fill(colour=Static(colour), opacity=Static(100)),
        ])


class TrajectoryRecorder(Observer):
    """
    Run-length compressed history of every node's position.

    A node that stays put for any number of ticks costs a single frame, so
    output grows with the number of visible moves rather than with elapsed
    ticks. Records of removed nodes are kept so their animation survives.
    """

    def __init__(self, policy=None):
        self.policy = policy or TruncatePolicy()
        self.open = {}
        self.closed = []
        self.step = 0

    def add_node(self, uid, colour):
        if uid in self.open:
            logger.warning(f"Node {uid!r} registered twice; closing its previous record")
            self.closed.append(self.open.pop(uid))
        self.open[uid] = Record(uid, self.step, colour)

    def set_position(self, uid, pos):
        record = self.open.get(uid)
        if record is None:
            raise UnknownNodeError(f"no open record for node {uid!r}")
        record.push_position(pos, self.policy)

    def next_step(self):
        self.step += 1

    def remove_node(self, uid):
        record = self.open.pop(uid, None)
        if record is None:
            raise UnknownNodeError(f"no open record for node {uid!r}")
        self.closed.append(record)

    def records(self):
        yield from self.closed
        yield from self.open.values()

    def frame_count(self):
        return sum(len(record.frames) for record in self.records())

    def render(self, frame_rate=FRAME_RATE, width=SIZE, height=SIZE):
        layers = [record.render() for record in self.records()]
        logger.debug(f"Rendered {len(layers)} layers, {self.frame_count()} keyframes over {self.step} ticks")
        return Animation(frame_rate, int(width), int(height), self.step, layers)

    # Observer interface

    def node_added(self, node):
        self.add_node(node.id, node.colour)

    def node_moved(self, node):
        self.set_position(node.id, node.position)

    def node_removed(self, node):
        self.remove_node(node.id)

    def tick_finished(self, step):
        self.next_step()

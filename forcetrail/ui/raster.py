import logging
import math
import os

from PyQt6.QtCore import QPointF, QRectF, Qt
from PyQt6.QtGui import QBrush, QColor, QImage, QPainter, QPen

from ..events import Observer
from ..graph_engine import SIZE

logger = logging.getLogger(__name__)

WEIGHT_DISPLAY_THRESHOLD = 1.0
WEIGHT_COLOUR_START = 5.0
WEIGHT_COLOUR_END = 15.0
NODE_RADIUS = 10.0
EDGE_WIDTH = 1.0
BACKGROUND_COLOUR = (238, 232, 213)


def weight_colour(weight):
    """Blue for light edges through to red for heavy ones, on a log2 scale."""
    t = math.log2(weight)
    t = min(max(t, WEIGHT_COLOUR_START), WEIGHT_COLOUR_END)
    t = (t - WEIGHT_COLOUR_START) / (WEIGHT_COLOUR_END - WEIGHT_COLOUR_START)
    return QColor.fromRgbF(t, 0.0, 1.0 - t, 1.0)


class RasterRenderer(Observer):
    """
    Draws every finished tick into a QImage and writes it as a PNG.

    Edges are drawn only when `weight_of` is given (usually
    `simulation.get_weight`) and the pair's weight reaches
    WEIGHT_DISPLAY_THRESHOLD.
    """

    def __init__(self, out_dir, weight_of=None, size=SIZE):
        self.out_dir = out_dir
        self.weight_of = weight_of
        self.size = int(size)
        self.nodes = {}  # uid -> (position, QColor)
        self.frames_written = 0
        os.makedirs(out_dir, exist_ok=True)

    def node_added(self, node):
        r, g, b = node.colour
        self.nodes[node.id] = (node.position, QColor(r, g, b))

    def node_moved(self, node):
        _, colour = self.nodes[node.id]
        self.nodes[node.id] = (node.position, colour)

    def node_removed(self, node):
        self.nodes.pop(node.id, None)

    def tick_finished(self, step):
        image = self.render_frame()
        path = os.path.join(self.out_dir, f"frame{step:04d}.png")
        if not image.save(path, "PNG"):
            raise OSError(f"could not write {path}")
        self.frames_written += 1

    def render_frame(self):
        image = QImage(self.size, self.size, QImage.Format.Format_RGB32)
        image.fill(QColor(*BACKGROUND_COLOUR))

        painter = QPainter(image)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)

        # Draw Edges
        if self.weight_of is not None:
            keys = list(self.nodes)
            for i, a in enumerate(keys):
                for b in keys[i + 1:]:
                    weight = self.weight_of(a, b)
                    if weight < WEIGHT_DISPLAY_THRESHOLD:
                        continue
                    painter.setPen(QPen(weight_colour(weight), EDGE_WIDTH))
                    p1, _ = self.nodes[a]
                    p2, _ = self.nodes[b]
                    painter.drawLine(QPointF(p1.x, p1.y), QPointF(p2.x, p2.y))

        # Draw Nodes
        painter.setPen(Qt.PenStyle.NoPen)
        for pos, colour in self.nodes.values():
            painter.setBrush(QBrush(colour))
            painter.drawEllipse(QRectF(pos.x - NODE_RADIUS, pos.y - NODE_RADIUS,
                                       NODE_RADIUS * 2, NODE_RADIUS * 2))
        painter.end()
        return image

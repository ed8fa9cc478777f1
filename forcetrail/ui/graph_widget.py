from PyQt6.QtWidgets import QWidget
from PyQt6.QtCore import QTimer, Qt, QPointF, QRectF, pyqtSignal
from PyQt6.QtGui import QPainter, QColor, QPen, QBrush, QTransform

from ..graph_engine import SIZE
from ..vec2d import Vec2d
from .raster import BACKGROUND_COLOUR, NODE_RADIUS, WEIGHT_DISPLAY_THRESHOLD, weight_colour


class GraphWidget(QWidget):
    """Live view of a Simulation: steps it on a timer and paints the result."""

    nodeClicked = pyqtSignal(object)
    tickAdvanced = pyqtSignal(int)
    finished = pyqtSignal()

    def __init__(self, simulation, stepper=None, interval_ms=16, parent=None):
        super().__init__(parent)
        self.simulation = simulation
        # stepper advances the simulation by one tick and returns False once there is nothing left to run
        self.stepper = stepper or self.step_forever

        # Rendering settings
        self.node_radius = NODE_RADIUS
        self.bg_color = QColor(*BACKGROUND_COLOUR)

        # Camera
        self.offset_x = 0
        self.offset_y = 0
        self.scale = 1.0
        self.min_scale = 0.1
        self.max_scale = 5.0

        # Interaction
        self.dragging_node = None
        self.panning = False
        self.last_mouse_pos = QPointF()

        # Physics Timer
        self.timer = QTimer(self)
        self.timer.timeout.connect(self.physics_loop)
        self.timer.start(interval_ms)

        self.setMouseTracking(True)

    def step_forever(self):
        self.simulation.step()
        return True

    def physics_loop(self):
        if not self.stepper():
            self.timer.stop()
            self.finished.emit()
            return
        self.tickAdvanced.emit(self.simulation.steps)
        self.update()

    def world_transform(self):
        transform = QTransform()
        transform.translate(self.width() / 2 + self.offset_x, self.height() / 2 + self.offset_y)
        transform.scale(self.scale, self.scale)
        # Simulation coordinates are centred on the canvas midpoint
        transform.translate(-SIZE / 2, -SIZE / 2)
        return transform

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.fillRect(self.rect(), self.bg_color)
        painter.setTransform(self.world_transform())

        graph = self.simulation.graph

        # Draw Edges (only explicitly weighted pairs can reach the threshold)
        for a, b, weight in graph.weighted_pairs():
            if weight < WEIGHT_DISPLAY_THRESHOLD:
                continue
            n1 = graph.get_node(a)
            n2 = graph.get_node(b)
            painter.setPen(QPen(weight_colour(weight), 1))
            painter.drawLine(QPointF(n1.position.x, n1.position.y), QPointF(n2.position.x, n2.position.y))

        # Draw Nodes
        painter.setPen(Qt.PenStyle.NoPen)
        for node in graph.nodes():
            r, g, b = node.colour
            painter.setBrush(QBrush(QColor(r, g, b)))
            rect = QRectF(node.position.x - self.node_radius, node.position.y - self.node_radius,
                          self.node_radius * 2, self.node_radius * 2)
            painter.drawEllipse(rect)
        painter.end()

    def node_at(self, world_pos):
        point = Vec2d(world_pos.x(), world_pos.y())
        for node in self.simulation.graph.nodes():
            if node.position.distance(point) <= self.node_radius:
                return node
        return None

    def screen_to_world(self, screen_pos):
        inverse, _ = self.world_transform().inverted()
        return inverse.map(screen_pos)

    def pan_by(self, dx, dy):
        self.offset_x += dx
        self.offset_y += dy
        self.update()

    def zoom_by(self, factor):
        """Scale the view by `factor`, refusing steps that leave [min_scale, max_scale]."""
        scale = self.scale * factor
        if not self.min_scale <= scale <= self.max_scale:
            return False
        self.scale = scale
        self.update()
        return True

    def drag_to(self, screen_pos):
        world_pos = self.screen_to_world(screen_pos)
        self.dragging_node.position = Vec2d(world_pos.x(), world_pos.y())
        # a dragged node starts from rest when released
        self.dragging_node.velocity = Vec2d(0.0, 0.0)
        self.update()

    def mousePressEvent(self, event):
        pos = event.position()
        button = event.button()
        if button == Qt.MouseButton.RightButton:
            self.panning = True
            self.last_mouse_pos = pos
            self.setCursor(Qt.CursorShape.ClosedHandCursor)
        elif button == Qt.MouseButton.LeftButton:
            self.dragging_node = self.node_at(self.screen_to_world(pos))
            if self.dragging_node is not None:
                self.setCursor(Qt.CursorShape.PointingHandCursor)
                self.nodeClicked.emit(self.dragging_node.id)

    def mouseMoveEvent(self, event):
        pos = event.position()
        if self.panning:
            delta = pos - self.last_mouse_pos
            self.last_mouse_pos = pos
            self.pan_by(delta.x(), delta.y())
        elif self.dragging_node is not None:
            self.drag_to(pos)

    def mouseReleaseEvent(self, event):
        self.dragging_node = None
        self.panning = False
        self.setCursor(Qt.CursorShape.ArrowCursor)

    def wheelEvent(self, event):
        self.zoom_by(1.1 if event.angleDelta().y() > 0 else 0.9)

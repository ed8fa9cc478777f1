import logging
from concurrent.futures import ThreadPoolExecutor

from PIL import Image, ImageDraw

from ..events import Observer
from ..graph_engine import SIZE

logger = logging.getLogger(__name__)

NODE_RADIUS = 10
BACKGROUND_COLOUR = (238, 232, 213)
FRAME_DELAY_MS = 20
MAX_PALETTE = 256


class PaletteGifEncoder(Observer):
    """
    Frame-by-frame animated GIF with one palette entry per node colour.

    Index 0 is the background. Each tick only records `(index, position)`
    pairs; images are drawn when `save` is called.
    """

    def __init__(self, size=SIZE, workers=None):
        self.size = int(size)
        self.workers = workers
        self.palette = [BACKGROUND_COLOUR]
        self.indices = {}  # uid -> palette index
        self.positions = {}  # uid -> (x, y)
        self.frames = []

    def palette_index(self, colour):
        colour = tuple(colour)
        if colour in self.palette:
            return self.palette.index(colour)
        if len(self.palette) >= MAX_PALETTE:
            raise ValueError(f"GIF palette is full ({MAX_PALETTE} colours)")
        self.palette.append(colour)
        return len(self.palette) - 1

    def node_added(self, node):
        self.indices[node.id] = self.palette_index(node.colour)
        self.positions[node.id] = tuple(node.position)

    def node_moved(self, node):
        self.positions[node.id] = tuple(node.position)

    def node_removed(self, node):
        self.indices.pop(node.id, None)
        self.positions.pop(node.id, None)

    def tick_finished(self, step):
        self.frames.append([(self.indices[uid], pos) for uid, pos in self.positions.items()])

    def draw_frame(self, frame):
        image = Image.new("P", (self.size, self.size), 0)
        image.putpalette([c for colour in self.palette for c in colour])
        draw = ImageDraw.Draw(image)
        for index, (x, y) in frame:
            draw.ellipse([x - NODE_RADIUS, y - NODE_RADIUS, x + NODE_RADIUS, y + NODE_RADIUS], fill=index)
        return image

    def save(self, path):
        if not self.frames:
            raise ValueError("no frames recorded")
        # Recorded frames never change, so they can be drawn in any order.
        with ThreadPoolExecutor(max_workers=self.workers) as pool:
            images = list(pool.map(self.draw_frame, self.frames))
        images[0].save(path, save_all=True, append_images=images[1:], duration=FRAME_DELAY_MS, loop=0)
        logger.info(f"Wrote {len(images)} frames to {path}")

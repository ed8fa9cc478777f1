"""
A small scene description that can be written out as Lottie JSON.

Only the handful of Lottie features this project draws with are covered:
ellipses, rectangles, straight line paths, fills and strokes, each property
either static or keyframed. Nothing is ever parsed back.

Every element has two encodings: `to_dict()` is a neutral description with
readable keys, `to_lottie()` uses the terse Lottie keys. Coordinates are
plain `(x, y)` tuples; colours use `Colour` with components in 0-1.
"""
import json
from collections import namedtuple

Keyframe = namedtuple("Keyframe", ["time", "value"])


class Colour:
    def __init__(self, r, g, b):
        self.r = r
        self.g = g
        self.b = b

    @classmethod
    def from_rgb8(cls, rgb):
        r, g, b = rgb
        return cls(r / 255, g / 255, b / 255)

    def to_json(self):
        return [round(self.r, 3), round(self.g, 3), round(self.b, 3)]

    def __eq__(self, other):
        if not isinstance(other, Colour):
            return NotImplemented
        return (self.r, self.g, self.b) == (other.r, other.g, other.b)

    def __repr__(self):
        return f"Colour({self.r:.3f}, {self.g:.3f}, {self.b:.3f})"


class Segment:
    """An open path with two points and no curvature."""

    def __init__(self, start, end):
        self.start = start
        self.end = end

    def to_json(self):
        # zero in/out tangents keep the path straight
        return {
            "c": False,
            "v": [list(self.start), list(self.end)],
            "i": [[0, 0], [0, 0]],
            "o": [[0, 0], [0, 0]],
        }


def _encode(value):
    if hasattr(value, "to_json"):
        return value.to_json()
    if isinstance(value, (tuple, list)):
        return list(value)
    return value


def _keyframe_value(value):
    # Animated properties always hold arrays, even for scalar values.
    encoded = _encode(value)
    if not isinstance(encoded, list):
        encoded = [encoded]
    return encoded


class Static:
    animated = False

    def __init__(self, value):
        self.value = value

    def to_dict(self):
        return {"animated": False, "value": _encode(self.value)}

    def to_lottie(self):
        return {"a": 0, "k": _encode(self.value)}


class Animated:
    animated = True

    def __init__(self, keyframes):
        self.keyframes = [Keyframe(*kf) for kf in keyframes]

    def to_dict(self):
        return {
            "animated": True,
            "keyframes": [{"time": kf.time, "value": _keyframe_value(kf.value)} for kf in self.keyframes],
        }

    def to_lottie(self):
        return {
            "a": 1,
            "k": [
                {"t": kf.time, "i": {"x": 1, "y": 1}, "o": {"x": 0, "y": 0}, "s": _keyframe_value(kf.value)}
                for kf in self.keyframes
            ],
        }


def _prop(value):
    if isinstance(value, (Static, Animated)):
        return value
    return Static(value)


class Shape:
    """
    Base for anything listed in a layer's shapes.

    In Lottie "shape" covers both geometry and the styles painted onto it.
    Subclasses list their properties as (attribute, neutral key, Lottie key).
    """

    TYPE = None
    LOTTIE_TYPE = None
    FIELDS = ()

    def to_dict(self):
        d = {"type": self.TYPE}
        for attr, name, _ in self.FIELDS:
            d[name] = getattr(self, attr).to_dict()
        return d

    def to_lottie(self):
        d = {"ty": self.LOTTIE_TYPE}
        for attr, _, key in self.FIELDS:
            d[key] = getattr(self, attr).to_lottie()
        return d


class Ellipse(Shape):
    TYPE = "ellipse"
    LOTTIE_TYPE = "el"
    FIELDS = (("center", "position", "p"), ("size", "size", "s"))

    def __init__(self, center, size):
        self.center = _prop(center)
        self.size = _prop(size)


class Rectangle(Shape):
    TYPE = "rect"
    LOTTIE_TYPE = "rc"
    FIELDS = (("center", "position", "p"), ("size", "size", "s"), ("roundness", "roundness", "r"))

    def __init__(self, center, size, roundness=0):
        self.center = _prop(center)
        self.size = _prop(size)
        self.roundness = _prop(roundness)


class Line(Shape):
    TYPE = "line"
    LOTTIE_TYPE = "sh"
    FIELDS = (("segment", "path", "ks"),)

    def __init__(self, segment):
        self.segment = _prop(segment)


class Fill(Shape):
    TYPE = "fill"
    LOTTIE_TYPE = "fl"
    FIELDS = (("opacity", "opacity", "o"), ("colour", "colour", "c"))

    def __init__(self, colour, opacity=100):
        self.colour = _prop(colour)
        # percentage, 0-100
        self.opacity = _prop(opacity)


class Stroke(Shape):
    TYPE = "stroke"
    LOTTIE_TYPE = "st"
    FIELDS = (("opacity", "opacity", "o"), ("colour", "colour", "c"), ("width", "width", "w"))

    def __init__(self, colour, opacity=100, width=1):
        self.colour = _prop(colour)
        self.opacity = _prop(opacity)
        self.width = _prop(width)


class Layer:
    """
    A shape layer visible from frame `start` up to `end`.

    `start` is the Lottie in point; the layer's start time is always 0.
    """

    def __init__(self, start, end, shapes):
        self.start = start
        self.end = end
        self.shapes = list(shapes)

    def to_dict(self):
        return {
            "inPoint": self.start,
            "outPoint": self.end,
            "startTime": 0,
            "shapes": [shape.to_dict() for shape in self.shapes],
        }

    def to_lottie(self):
        return {
            "ip": self.start,
            "op": self.end,
            "st": 0,
            "ks": {},
            "ty": 4,
            "shapes": [shape.to_lottie() for shape in self.shapes],
        }


class Animation:
    """A complete animation. Layers are ordered top to bottom."""

    def __init__(self, frame_rate, width, height, length, layers):
        self.frame_rate = frame_rate
        self.width = width
        self.height = height
        self.length = length
        self.layers = list(layers)

    def to_dict(self):
        return {
            "frameRate": self.frame_rate,
            "startFrame": 0,
            "endFrame": self.length,
            "width": self.width,
            "height": self.height,
            "layers": [layer.to_dict() for layer in self.layers],
        }

    def to_lottie(self):
        return {
            "fr": self.frame_rate,
            "ip": 0,
            "op": self.length,
            "w": self.width,
            "h": self.height,
            "layers": [layer.to_lottie() for layer in self.layers],
        }

    def as_json(self):
        return json.dumps(self.to_lottie(), separators=(",", ":"))

    def save(self, path):
        with open(path, "w") as f:
            f.write(self.as_json())

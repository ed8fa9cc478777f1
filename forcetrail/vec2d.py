import math


class Vec2d:
    """A 2-D float vector. Instances are treated as values; operators return new vectors."""

    __slots__ = ("x", "y")

    def __init__(self, x=0.0, y=0.0):
        self.x = x
        self.y = y

    @classmethod
    def random_unit(cls, rng):
        """Random unit vector drawn from `rng` (a `random.Random`)."""
        x = rng.uniform(-1.0, 1.0)
        y = math.sqrt(1.0 - x * x)
        return cls(x, y)

    def length(self):
        return math.hypot(self.x, self.y)

    def distance(self, other):
        return (self - other).length()

    def as_unit(self):
        return self / self.length()

    def as_tuple(self):
        return (self.x, self.y)

    def __add__(self, other):
        return Vec2d(self.x + other.x, self.y + other.y)

    def __sub__(self, other):
        return Vec2d(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar):
        return Vec2d(self.x * scalar, self.y * scalar)

    def __truediv__(self, scalar):
        return Vec2d(self.x / scalar, self.y / scalar)

    def __eq__(self, other):
        if not isinstance(other, Vec2d):
            return NotImplemented
        return self.x == other.x and self.y == other.y

    def __hash__(self):
        return hash((self.x, self.y))

    def __iter__(self):
        yield self.x
        yield self.y

    def __repr__(self):
        return f"Vec2d({self.x!r}, {self.y!r})"

"""Core geometric types for the toolpath geometry engine.

This module defines the fundamental types every other layer builds on:
- EPSILON: The single tolerance used for approximate comparisons
- Point: An immutable 2D coordinate with vector arithmetic
- Edge: A directed segment between two distinct points
- Slope: Classification of an edge's direction
- Turning: Which side of an edge a point lies on
"""

import math
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any

from contourcam.exceptions import DegenerateEdgeError

EPSILON = 1e-4


def feq(a: float, b: float) -> bool:
    """Compare two scalars within EPSILON."""
    return abs(a - b) < EPSILON


def points_equal(p: "Point", q: "Point") -> bool:
    """Compare two points axis by axis within EPSILON."""
    return feq(p.x, q.x) and feq(p.y, q.y)


class Slope(Enum):
    """Direction class of an edge, used to pick a line-solving branch."""

    VERTICAL = auto()
    HORIZONTAL = auto()
    GENERAL = auto()


class Turning(Enum):
    """Side of a directed edge's line that a point falls on.

    LEFT and RIGHT are as seen walking from the edge start to its end.
    """

    LEFT = auto()
    RIGHT = auto()
    COLLINEAR = auto()


@dataclass(frozen=True, slots=True)
class Point:
    """A point (or free vector) in 2D space.

    Immutable and hashable. Exact equality compares coordinates bit for bit;
    use points_equal() for tolerant comparison.

    Attributes:
        x: X coordinate in working units
        y: Y coordinate in working units
    """

    x: float
    y: float

    def __add__(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Point") -> "Point":
        return Point(self.x - other.x, self.y - other.y)

    def __mul__(self, factor: float) -> "Point":
        return Point(self.x * factor, self.y * factor)

    __rmul__ = __mul__

    def __truediv__(self, divisor: float) -> "Point":
        return Point(self.x / divisor, self.y / divisor)

    def __neg__(self) -> "Point":
        return Point(-self.x, -self.y)

    def dot(self, other: "Point") -> float:
        return self.x * other.x + self.y * other.y

    def cross(self, other: "Point") -> float:
        """Z component of the 3D cross product of the two vectors."""
        return self.x * other.y - self.y * other.x

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def normalized(self) -> "Point":
        """Return the unit vector in the same direction.

        Raises:
            ZeroDivisionError: If the vector has zero length
        """
        length = self.length()
        return Point(self.x / length, self.y / length)

    def rotated(self, angle: float) -> "Point":
        """Rotate counter-clockwise by angle radians around the origin."""
        c = math.cos(angle)
        s = math.sin(angle)
        return Point(self.x * c - self.y * s, self.x * s + self.y * c)

    def distance_to(self, other: "Point") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def midpoint(self, other: "Point") -> "Point":
        return Point((self.x + other.x) / 2, (self.y + other.y) / 2)

    def to_tuple(self) -> tuple[float, float]:
        """Convert to simple (x, y) tuple.

        Returns:
            Tuple of (x, y) coordinates
        """
        return (self.x, self.y)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC.

        Returns:
            Dictionary with x and y fields
        """
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Point":
        """Deserialize from dictionary.

        Args:
            data: Dictionary with x and y fields

        Returns:
            Point instance
        """
        return cls(x=float(data["x"]), y=float(data["y"]))


@dataclass(frozen=True, slots=True)
class Edge:
    """A directed segment from start to end.

    The two points must differ by more than EPSILON; anything shorter has no
    direction and no normals, so it is rejected at construction.

    Attributes:
        start: First point of the segment
        end: Last point of the segment

    Raises:
        DegenerateEdgeError: If start and end coincide
    """

    start: Point
    end: Point

    def __post_init__(self) -> None:
        if points_equal(self.start, self.end):
            raise DegenerateEdgeError(self.start.x, self.start.y)

    @property
    def vector(self) -> Point:
        return self.end - self.start

    @property
    def direction(self) -> Point:
        """Unit vector from start to end."""
        return self.vector.normalized()

    @property
    def length(self) -> float:
        return self.start.distance_to(self.end)

    @property
    def midpoint(self) -> Point:
        return self.start.midpoint(self.end)

    @property
    def slope(self) -> Slope:
        v = self.vector
        if abs(v.x) < EPSILON:
            return Slope.VERTICAL
        if abs(v.y) < EPSILON:
            return Slope.HORIZONTAL
        return Slope.GENERAL

    def left(self) -> Point:
        """Unit normal pointing to the left of the direction of travel."""
        d = self.direction
        return Point(-d.y, d.x)

    def right(self) -> Point:
        """Unit normal pointing to the right of the direction of travel."""
        d = self.direction
        return Point(d.y, -d.x)

    def translate_right(self, distance: float) -> "Edge":
        """Return a parallel edge moved distance units to the right."""
        shift = self.right() * distance
        return Edge(self.start + shift, self.end + shift)

    def reversed(self) -> "Edge":
        return Edge(self.end, self.start)

    def to_dict(self) -> dict[str, Any]:
        return {"start": self.start.to_dict(), "end": self.end.to_dict()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Edge":
        return cls(Point.from_dict(data["start"]), Point.from_dict(data["end"]))


def dedup_points(points: list[Point], closed: bool = False) -> list[Point]:
    """Drop consecutive points that are equal within EPSILON.

    Args:
        points: Input point sequence
        closed: Also drop a last point equal to the first one

    Returns:
        New list without repeated neighbours
    """
    result: list[Point] = []
    for p in points:
        if not result or not points_equal(result[-1], p):
            result.append(p)
    if closed:
        while len(result) > 1 and points_equal(result[0], result[-1]):
            result.pop()
    return result


def loop_edges(points: list[Point]) -> list[Edge]:
    """Build the edges of a closed loop, last point joining the first."""
    n = len(points)
    edges = []
    for i in range(n):
        a = points[i]
        b = points[(i + 1) % n]
        if not points_equal(a, b):
            edges.append(Edge(a, b))
    return edges

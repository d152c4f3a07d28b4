"""Shape model: thick lines, convex polygons and circles.

Every shape variant carries its own tessellation resolution and exposes the
same capabilities:
- grow(offset): Inflate the shape uniformly by a tool-compensation offset
- boundary(): Closed CCW loop of points approximating the outline
- contains(point): Point containment against the exact shape

The variant set is closed; code that needs to tell shapes apart matches on
the `kind` attribute or the concrete class.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from contourcam.core.geometry import (
    crosses,
    distance_to_segment,
    find_arc,
    find_intersection,
    signed_area,
    touches,
    turning,
)
from contourcam.domain import EPSILON, Edge, Point, Turning, dedup_points, loop_edges
from contourcam.exceptions import ShapeConstructionError


class ShapeKind(Enum):
    """Shape variant tag."""

    LINE = "line"
    CONVEX_POLYGON = "convex_polygon"
    CIRCLE = "circle"


def _check_resolution(shape: str, resolution: float) -> None:
    if resolution <= 0:
        raise ShapeConstructionError(shape, f"resolution must be positive, got {resolution}")


def _check_offset(shape: str, offset: float) -> None:
    if offset < 0:
        raise ShapeConstructionError(shape, f"cannot grow by a negative offset ({offset})")


@dataclass
class Line:
    """A thick stroke along an open polyline (a capsule chain).

    Attributes:
        points: Polyline vertices, at least two distinct ones
        thickness: Stroke diameter
        resolution: Maximum arc length per tessellated segment

    Raises:
        ShapeConstructionError: On too few points or a non-positive thickness
    """

    points: list[Point]
    thickness: float
    resolution: float

    kind = ShapeKind.LINE

    def __post_init__(self) -> None:
        self.points = dedup_points(list(self.points))
        if len(self.points) < 2:
            raise ShapeConstructionError(
                "line", f"needs at least 2 distinct points, got {len(self.points)}"
            )
        if self.thickness <= 0:
            raise ShapeConstructionError("line", f"thickness must be positive, got {self.thickness}")
        _check_resolution("line", self.resolution)

    def grow(self, offset: float) -> None:
        _check_offset("line", offset)
        self.thickness += 2 * offset

    def _cap(self, points: list[Point]) -> list[Point]:
        # Half turn around points[0], from the right of the backward edge
        # to the right of the forward edge.
        return find_arc(
            Edge(points[1], points[0]),
            Edge(points[0], points[1]),
            self.thickness / 2,
            self.resolution,
        )

    def _rail(self, points: list[Point]) -> list[Point]:
        radius = self.thickness / 2
        rail: list[Point] = []
        for a, b, c in zip(points, points[1:], points[2:]):
            incoming = Edge(a, b)
            outgoing = Edge(b, c)
            o1 = incoming.translate_right(radius)
            o2 = outgoing.translate_right(radius)
            if crosses(o1, o2) or touches(o1, o2):
                rail.append(find_intersection(o1, o2))
            else:
                rail.extend(find_arc(incoming, outgoing, radius, self.resolution))
        return rail

    def boundary(self) -> list[Point]:
        """Tessellate the stroke outline.

        Walks the start cap, the right rail, the end cap and then the right
        rail of the reversed polyline, which is the left rail.

        Returns:
            Closed CCW loop, without a repeated closing point
        """
        backward = self.points[::-1]
        loop = self._cap(self.points) + self._rail(self.points) + self._cap(backward) + self._rail(backward)
        return dedup_points(loop, closed=True)

    def contains(self, point: Point) -> bool:
        limit = self.thickness / 2 + EPSILON
        return any(
            distance_to_segment(point, Edge(a, b)) <= limit
            for a, b in zip(self.points, self.points[1:])
        )

    def endpoints(self) -> tuple[Point, Point]:
        return self.points[0], self.points[-1]

    def can_join(self, other: "Line") -> bool:
        """Check whether two strokes of equal thickness share an endpoint."""
        if abs(self.thickness - other.thickness) >= EPSILON:
            return False
        return any(
            p.distance_to(q) < EPSILON for p in self.endpoints() for q in other.endpoints()
        )

    def join(self, other: "Line") -> "Line":
        """Concatenate two strokes at their shared endpoint.

        Args:
            other: Stroke sharing an endpoint with this one

        Returns:
            New stroke running through both polylines

        Raises:
            ShapeConstructionError: If the strokes cannot be joined
        """
        if not self.can_join(other):
            raise ShapeConstructionError("line", "strokes do not share an endpoint")

        mine = self.points
        theirs = other.points
        if mine[-1].distance_to(theirs[0]) < EPSILON:
            points = mine + theirs[1:]
        elif mine[-1].distance_to(theirs[-1]) < EPSILON:
            points = mine + theirs[-2::-1]
        elif mine[0].distance_to(theirs[-1]) < EPSILON:
            points = theirs + mine[1:]
        else:
            points = theirs[::-1] + mine[1:]
        return Line(points=points, thickness=self.thickness, resolution=self.resolution)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "points": [p.to_dict() for p in self.points],
            "thickness": self.thickness,
            "resolution": self.resolution,
        }


@dataclass
class ConvexPolygon:
    """A closed convex polygon, stored counter-clockwise.

    Clockwise input is reversed; a repeated closing point is dropped.

    Attributes:
        points: Polygon vertices in CCW order
        resolution: Maximum arc length per tessellated segment of grown corners

    Raises:
        ShapeConstructionError: On too few points, zero area, or a boundary
            that still turns right after CCW correction
    """

    points: list[Point]
    resolution: float

    kind = ShapeKind.CONVEX_POLYGON

    def __post_init__(self) -> None:
        _check_resolution("polygon", self.resolution)
        points = dedup_points(list(self.points), closed=True)
        if len(points) < 3:
            raise ShapeConstructionError(
                "polygon", f"needs at least 3 distinct points, got {len(points)}"
            )

        area = signed_area(points)
        if abs(area) < EPSILON:
            raise ShapeConstructionError("polygon", "points are collinear")
        if area < 0:
            points.reverse()

        n = len(points)
        for i in range(n):
            edge = Edge(points[i - 1], points[i])
            if turning(edge, points[(i + 1) % n]) is Turning.RIGHT:
                p = points[i]
                raise ShapeConstructionError(
                    "polygon", f"not convex at vertex ({p.x:g}, {p.y:g})"
                )

        self.points = points

    def grow(self, offset: float) -> None:
        """Move every edge outward by offset and round the corners.

        Each vertex is replaced by the arc joining its two neighbouring
        translated edges. Offsets wider than the smallest feature are not
        guarded against.
        """
        _check_offset("polygon", offset)
        if offset == 0:
            return

        edges = loop_edges(self.points)
        grown: list[Point] = []
        for i in range(len(edges)):
            grown.extend(find_arc(edges[i - 1], edges[i], offset, self.resolution))
        self.points = dedup_points(grown, closed=True)

    def boundary(self) -> list[Point]:
        return list(self.points)

    def contains(self, point: Point) -> bool:
        return all(turning(edge, point) is not Turning.RIGHT for edge in loop_edges(self.points))

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "points": [p.to_dict() for p in self.points],
            "resolution": self.resolution,
        }


@dataclass
class Circle:
    """A full circle.

    Attributes:
        center: Circle center
        radius: Circle radius
        resolution: Maximum arc length per tessellated segment

    Raises:
        ShapeConstructionError: On a non-positive radius
    """

    center: Point
    radius: float
    resolution: float

    kind = ShapeKind.CIRCLE

    def __post_init__(self) -> None:
        if self.radius <= 0:
            raise ShapeConstructionError("circle", f"radius must be positive, got {self.radius}")
        _check_resolution("circle", self.resolution)

    def grow(self, offset: float) -> None:
        _check_offset("circle", offset)
        self.radius += offset

    def boundary(self) -> list[Point]:
        """Tessellate the circle starting at its top, turning CCW."""
        count = max(3, math.ceil(math.tau * self.radius / self.resolution))
        top = Point(0.0, self.radius)
        return [self.center + top.rotated(math.tau * k / count) for k in range(count)]

    def contains(self, point: Point) -> bool:
        return self.center.distance_to(point) <= self.radius + EPSILON

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "center": self.center.to_dict(),
            "radius": self.radius,
            "resolution": self.resolution,
        }


Shape = Union[Line, ConvexPolygon, Circle]


def shape_from_dict(data: dict[str, Any]) -> Shape:
    """Rebuild a shape from its to_dict() form.

    Raises:
        ShapeConstructionError: If the stored kind is unknown or the data is invalid
    """
    kind = data.get("kind")
    if kind == ShapeKind.LINE.value:
        return Line(
            points=[Point.from_dict(p) for p in data["points"]],
            thickness=data["thickness"],
            resolution=data["resolution"],
        )
    if kind == ShapeKind.CONVEX_POLYGON.value:
        return ConvexPolygon(
            points=[Point.from_dict(p) for p in data["points"]],
            resolution=data["resolution"],
        )
    if kind == ShapeKind.CIRCLE.value:
        return Circle(
            center=Point.from_dict(data["center"]),
            radius=data["radius"],
            resolution=data["resolution"],
        )
    raise ShapeConstructionError("shape", f"unknown kind {kind!r}")

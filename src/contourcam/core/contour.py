"""Contours: merged boundary loops together with the shapes behind them.

A Contour starts out as the tessellated boundary of a single shape and
grows by merging with overlapping or touching contours. It keeps the
original shapes so that containment is answered exactly, independent of
tessellation.
"""

from dataclasses import dataclass, field
from typing import Any

from contourcam.core.geometry import (
    BoundingBox,
    bounding_box,
    point_in_polygon,
    signed_area,
)
from contourcam.core.shape import Shape, shape_from_dict
from contourcam.domain import Edge, Point, loop_edges


@dataclass
class Contour:
    """A closed boundary plus the shapes whose union it approximates.

    Attributes:
        boundary: Outer loop, counter-clockwise, no repeated closing point
        shapes: Constituent shapes, in the order they were merged
        holes: Interior loops left over by merges, clockwise
    """

    boundary: list[Point]
    shapes: list[Shape]
    holes: list[list[Point]] = field(default_factory=list)
    _cached_bbox: BoundingBox | None = field(default=None, repr=False, init=False)

    @classmethod
    def from_shape(cls, shape: Shape) -> "Contour":
        """Build the initial contour of a single (already grown) shape."""
        return cls(boundary=shape.boundary(), shapes=[shape])

    def loops(self) -> list[list[Point]]:
        return [self.boundary, *self.holes]

    def edges(self) -> list[Edge]:
        """All directed edges of the outer loop followed by those of the holes."""
        return [edge for loop in self.loops() for edge in loop_edges(loop)]

    def contains(self, point: Point) -> bool:
        """Check whether any constituent shape contains the point."""
        return any(shape.contains(point) for shape in self.shapes)

    def encloses(self, point: Point) -> bool:
        """Check the point against the tessellated loops, even-odd rule.

        Unlike contains(), this answers for the polygon actually drawn by the
        boundary, which is what edge-level merge decisions must agree with.
        """
        inside = False
        for loop in self.loops():
            if point_in_polygon(point, loop):
                inside = not inside
        return inside

    def bounding_box(self) -> BoundingBox:
        """Calculate bounding box of the outer loop.

        Result is cached for efficiency.

        Returns:
            Tuple of (min_x, min_y, max_x, max_y)
        """
        if self._cached_bbox is None:
            self._cached_bbox = bounding_box(self.boundary)
        return self._cached_bbox

    def signed_area(self) -> float:
        """Area enclosed by the outer loop minus the holes."""
        return sum(signed_area(loop) for loop in self.loops())

    def svg_path(self) -> str:
        """Export every loop as closed SVG path data."""
        parts = []
        for loop in self.loops():
            if not loop:
                continue
            head, *tail = loop
            commands = [f"M {head.x:g} {head.y:g}"]
            commands.extend(f"L {p.x:g} {p.y:g}" for p in tail)
            commands.append("Z")
            parts.append(" ".join(commands))
        return " ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC.

        Returns:
            Dictionary representation of the contour
        """
        return {
            "boundary": [p.to_dict() for p in self.boundary],
            "shapes": [s.to_dict() for s in self.shapes],
            "holes": [[p.to_dict() for p in hole] for hole in self.holes],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Contour":
        """Deserialize from dictionary.

        Args:
            data: Dictionary representation of a contour

        Returns:
            Contour instance
        """
        return cls(
            boundary=[Point.from_dict(p) for p in data["boundary"]],
            shapes=[shape_from_dict(s) for s in data["shapes"]],
            holes=[[Point.from_dict(p) for p in hole] for hole in data.get("holes", [])],
        )

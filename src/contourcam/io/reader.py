"""SVG reader for loading vector artwork.

This module provides the SvgReader class for loading SVG files with
svgelements and turning their elements into primitives the geometry engine
can build shapes from:

- <circle> elements become circles (and drilling/boring holes)
- Closed subpaths become convex polygons
- Open subpaths become thick strokes using the resolved stroke-width

Group styles and transforms are resolved by svgelements before elements are
read, so primitives are in document user units.
"""

from dataclasses import dataclass, field
from pathlib import Path as FilePath
from xml.etree.ElementTree import ParseError

import structlog
from svgelements import (
    SVG,
    Arc,
    Close,
    CubicBezier,
    Move,
    Path,
    QuadraticBezier,
    Shape,
)
from svgelements import Circle as SvgCircle
from svgelements import Line as SvgLine

from contourcam.core.shape import Circle, ConvexPolygon, Line, Shape as GeometryShape
from contourcam.domain import EPSILON, Hole, Point
from contourcam.exceptions import ShapeConstructionError, SvgElementError, SvgLoadError
from contourcam.io._bezier import flatten_cubic, flatten_quadratic

logger = structlog.get_logger(__name__)


@dataclass
class StrokePrimitive:
    """An open polyline drawn with a stroke width."""

    points: list[Point]
    thickness: float
    source: str


@dataclass
class PolygonPrimitive:
    """A closed polyline."""

    points: list[Point]
    source: str


@dataclass
class CirclePrimitive:
    """A circle element."""

    center: Point
    radius: float
    source: str


@dataclass
class SvgPrimitives:
    """Everything read from one SVG document.

    Attributes:
        strokes: Open subpaths with their stroke widths
        polygons: Closed subpaths
        circles: Circle elements
        errors: (element, reason) pairs for elements that were skipped
    """

    strokes: list[StrokePrimitive] = field(default_factory=list)
    polygons: list[PolygonPrimitive] = field(default_factory=list)
    circles: list[CirclePrimitive] = field(default_factory=list)
    errors: list[tuple[str, str]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.strokes) + len(self.polygons) + len(self.circles)

    def holes(self) -> list[Hole]:
        """Every circle as a hole."""
        return [Hole(center=c.center, radius=c.radius) for c in self.circles]

    def shapes(self, resolution: float) -> tuple[list[GeometryShape], list[tuple[str, str]]]:
        """Build geometry shapes from the primitives.

        Strokes of equal width that share an endpoint are joined into one
        polyline first. A primitive that cannot be built is reported and
        skipped; the others are still returned.

        Args:
            resolution: Tessellation resolution for every shape

        Returns:
            Tuple of (shapes, errors) where errors lists (source, reason)
        """
        shapes: list[GeometryShape] = []
        errors: list[tuple[str, str]] = []

        lines: list[Line] = []
        for stroke in self.strokes:
            try:
                lines.append(Line(stroke.points, stroke.thickness, resolution))
            except ShapeConstructionError as e:
                errors.append((stroke.source, str(e)))
        shapes.extend(join_lines(lines))

        for polygon in self.polygons:
            try:
                shapes.append(ConvexPolygon(polygon.points, resolution))
            except ShapeConstructionError as e:
                errors.append((polygon.source, str(e)))

        for circle in self.circles:
            try:
                shapes.append(Circle(circle.center, circle.radius, resolution))
            except ShapeConstructionError as e:
                errors.append((circle.source, str(e)))

        return shapes, errors


def join_lines(lines: list[Line]) -> list[Line]:
    """Join strokes that continue one another until none can be joined."""
    lines = list(lines)
    joined = True
    while joined:
        joined = False
        for i in range(len(lines)):
            for j in range(i + 1, len(lines)):
                if lines[i].can_join(lines[j]):
                    lines[i] = lines[i].join(lines[j])
                    del lines[j]
                    joined = True
                    break
            if joined:
                break
    return lines


def _point(p: object) -> Point:
    return Point(float(p.x), float(p.y))  # type: ignore[attr-defined]


class SvgReader:
    """Loads an SVG file and extracts geometry primitives.

    Example:
        reader = SvgReader(Path("panel.svg"))
        primitives = reader.load()
        shapes, errors = primitives.shapes(resolution=0.1)
    """

    def __init__(self, svg_path: FilePath, curve_tolerance: float = 0.01) -> None:
        """Initialize the SVG reader.

        Args:
            svg_path: Path to the SVG file
            curve_tolerance: Maximum deviation when flattening Bezier curves
        """
        self._svg_path = svg_path
        self._curve_tolerance = curve_tolerance

    def load(self) -> SvgPrimitives:
        """Parse the file and read every drawable element.

        Returns:
            SvgPrimitives with per-element errors collected in `errors`

        Raises:
            SvgLoadError: If the file is missing or is not valid SVG
        """
        if not self._svg_path.exists():
            raise SvgLoadError(str(self._svg_path), "file not found")

        try:
            svg = SVG.parse(str(self._svg_path), reify=True)
        except (OSError, ParseError, ValueError) as e:
            raise SvgLoadError(str(self._svg_path), str(e)) from e

        primitives = SvgPrimitives()
        for index, element in enumerate(svg.elements()):
            if not isinstance(element, Shape):
                continue
            if element.values.get("visibility") == "hidden":
                continue

            source = element.id or f"{type(element).__name__.lower()}#{index}"
            try:
                self._read_element(element, source, primitives)
            except SvgElementError as e:
                logger.error("Skipping SVG element", element=source, reason=e.reason)
                primitives.errors.append((source, e.reason))

        logger.info(
            "SVG loaded",
            path=str(self._svg_path),
            strokes=len(primitives.strokes),
            polygons=len(primitives.polygons),
            circles=len(primitives.circles),
            errors=len(primitives.errors),
        )
        return primitives

    def _read_element(self, element: Shape, source: str, primitives: SvgPrimitives) -> None:
        if isinstance(element, SvgCircle) and abs(element.rx - element.ry) < EPSILON:
            primitives.circles.append(
                CirclePrimitive(
                    center=Point(float(element.cx), float(element.cy)),
                    radius=float(element.rx),
                    source=source,
                )
            )
            return

        path = element if isinstance(element, Path) else Path(element)
        for points, closed in self._subpaths(path, source):
            if len(points) < 2:
                continue
            if closed:
                primitives.polygons.append(PolygonPrimitive(points=points, source=source))
            else:
                thickness = self._stroke_width(element, source)
                primitives.strokes.append(
                    StrokePrimitive(points=points, thickness=thickness, source=source)
                )

    def _stroke_width(self, element: Shape, source: str) -> float:
        if element.values.get("stroke-width") is None:
            raise SvgElementError(source, "open path without a stroke-width")
        return float(element.stroke_width)

    def _subpaths(self, path: Path, source: str) -> list[tuple[list[Point], bool]]:
        """Split a path into (points, closed) subpaths with curves flattened."""
        subpaths: list[tuple[list[Point], bool]] = []
        current: list[Point] = []

        for segment in path:
            if isinstance(segment, Move):
                if current:
                    subpaths.append((current, False))
                current = [_point(segment.end)]
                continue

            if isinstance(segment, Close):
                if current:
                    subpaths.append((current, True))
                current = []
                continue

            if not current and segment.start is not None:
                current = [_point(segment.start)]

            if isinstance(segment, SvgLine):
                current.append(_point(segment.end))
            elif isinstance(segment, QuadraticBezier):
                control = [_point(segment.start), _point(segment.control), _point(segment.end)]
                current.extend(flatten_quadratic(control, self._curve_tolerance)[1:])
            elif isinstance(segment, CubicBezier):
                control = [
                    _point(segment.start),
                    _point(segment.control1),
                    _point(segment.control2),
                    _point(segment.end),
                ]
                current.extend(flatten_cubic(control, self._curve_tolerance)[1:])
            elif isinstance(segment, Arc):
                logger.warning("Elliptical arc replaced with a straight line", element=source)
                current.append(_point(segment.end))
            else:
                raise SvgElementError(source, f"unsupported path segment {type(segment).__name__}")

        if current:
            subpaths.append((current, False))
        return subpaths

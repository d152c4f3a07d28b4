"""Geometric predicates and helpers for edges, arcs and polygons.

This module provides the low-level operations the shape model and the
contour merge are built on:
- Turning direction of a point relative to an edge
- Crossing vs. touching classification of two edges
- Line intersection with explicit slope branches
- Tessellated arcs joining offset edges
- Segment distance, signed area and point-in-polygon tests

All functions are pure, stateless, and compare through the single EPSILON
tolerance of contourcam.domain.primitives.
"""

import math

from contourcam.domain import EPSILON, Edge, Point, Slope, Turning, points_equal
from contourcam.exceptions import IntersectionError

BoundingBox = tuple[float, float, float, float]


def turning(edge: Edge, point: Point) -> Turning:
    """Classify which side of an edge's line a point lies on.

    Uses the signed distance of the point from the infinite line through the
    edge, measured along the edge's left normal from the edge's end point.

    Args:
        edge: Directed reference edge
        point: Point to classify

    Returns:
        LEFT or RIGHT when the point is farther than EPSILON from the line,
        COLLINEAR otherwise

    Examples:
        >>> e = Edge(Point(0.0, 0.0), Point(0.0, 1.0))
        >>> turning(e, Point(-1.0, -1.0))
        <Turning.LEFT: 1>
        >>> turning(e, Point(1.0, 1.0))
        <Turning.RIGHT: 2>
    """
    distance = edge.left().dot(point - edge.end)
    if distance > EPSILON:
        return Turning.LEFT
    if distance < -EPSILON:
        return Turning.RIGHT
    return Turning.COLLINEAR


def _straddles(edge: Edge, other: Edge) -> bool:
    sides = {turning(edge, other.start), turning(edge, other.end)}
    return sides == {Turning.LEFT, Turning.RIGHT}


def crosses(e1: Edge, e2: Edge) -> bool:
    """Check for a proper transversal intersection.

    Each edge must have its two endpoints strictly on opposite sides of the
    other edge; any collinear endpoint rules out a crossing.
    """
    return _straddles(e1, e2) and _straddles(e2, e1)


def point_on_segment(point: Point, edge: Edge) -> bool:
    """Check whether a point lies on a segment, endpoints included, within EPSILON."""
    if turning(edge, point) is not Turning.COLLINEAR:
        return False
    t = (point - edge.start).dot(edge.direction)
    return -EPSILON <= t <= edge.length + EPSILON


def touches(e1: Edge, e2: Edge) -> bool:
    """Check whether two edges meet without crossing.

    Covers shared vertices, T-junctions and collinear overlaps: some endpoint
    of either edge lies on the other segment. Collinear edges whose intervals
    are disjoint do not touch.
    """
    if crosses(e1, e2):
        return False
    return (
        point_on_segment(e2.start, e1)
        or point_on_segment(e2.end, e1)
        or point_on_segment(e1.start, e2)
        or point_on_segment(e1.end, e2)
    )


def nearest_point_on_segment(point: Point, seg_start: Point, seg_end: Point) -> tuple[Point, float]:
    """Find the closest point on a line segment to a given point.

    Projects the point onto the infinite line, then clamps to the segment endpoints.

    Args:
        point: The point to project
        seg_start: Start point of line segment
        seg_end: End point of line segment

    Returns:
        Tuple of (nearest_point, distance) where nearest_point is the closest
        point on the segment and distance is the Euclidean distance to it

    Examples:
        >>> p = Point(1.0, 1.0)
        >>> nearest, dist = nearest_point_on_segment(p, Point(0.0, 0.0), Point(2.0, 0.0))
        >>> nearest, dist
        (Point(x=1.0, y=0.0), 1.0)
    """
    d = seg_end - seg_start

    # Zero-length segment
    segment_length_sq = d.dot(d)
    if segment_length_sq < EPSILON * EPSILON:
        return seg_start, point.distance_to(seg_start)

    t = (point - seg_start).dot(d) / segment_length_sq
    t = max(0.0, min(1.0, t))

    nearest = seg_start + d * t
    return nearest, point.distance_to(nearest)


def distance_to_segment(point: Point, edge: Edge) -> float:
    """Euclidean distance from a point to the closest point of an edge."""
    _, distance = nearest_point_on_segment(point, edge.start, edge.end)
    return distance


def _closest_endpoints_midpoint(e1: Edge, e2: Edge) -> Point:
    pairs = [(p, q) for p in (e1.start, e1.end) for q in (e2.start, e2.end)]
    p, q = min(pairs, key=lambda pair: pair[0].distance_to(pair[1]))
    return p.midpoint(q)


def _y_at(edge: Edge, x: float) -> float:
    v = edge.vector
    return edge.start.y + (x - edge.start.x) / v.x * v.y


def _x_at(edge: Edge, y: float) -> float:
    v = edge.vector
    return edge.start.x + (y - edge.start.y) / v.y * v.x


def find_intersection(e1: Edge, e2: Edge) -> Point:
    """Find where the infinite lines through two edges meet.

    Only meaningful once crosses() or touches() holds for the pair. Vertical
    and horizontal edges are solved by direct substitution; two general
    lines are solved from their slope-intercept forms. Collinear lines have
    no single intersection, so the midpoint between the closest pair of
    endpoints stands in for it.

    Args:
        e1: First edge
        e2: Second edge

    Returns:
        Intersection point

    Raises:
        IntersectionError: If the lines are parallel and distinct
    """
    if abs(e1.direction.cross(e2.direction)) < EPSILON:
        if turning(e1, e2.start) is Turning.COLLINEAR:
            return _closest_endpoints_midpoint(e1, e2)
        raise IntersectionError(f"Parallel edges never meet: {e1} and {e2}")

    s1 = e1.slope
    s2 = e2.slope

    if s1 is Slope.VERTICAL:
        x = e1.start.x
        return Point(x, _y_at(e2, x))
    if s2 is Slope.VERTICAL:
        x = e2.start.x
        return Point(x, _y_at(e1, x))
    if s1 is Slope.HORIZONTAL:
        y = e1.start.y
        return Point(_x_at(e2, y), y)
    if s2 is Slope.HORIZONTAL:
        y = e2.start.y
        return Point(_x_at(e1, y), y)

    m1 = e1.vector.y / e1.vector.x
    m2 = e2.vector.y / e2.vector.x
    b1 = e1.start.y - m1 * e1.start.x
    b2 = e2.start.y - m2 * e2.start.x
    x = (b2 - b1) / (m1 - m2)
    return Point(x, m1 * x + b1)


def find_arc(e1: Edge, e2: Edge, radius: float, resolution: float) -> list[Point]:
    """Tessellate the arc joining the offset images of two consecutive edges.

    The arc pivots around the shared vertex (e1.end, which is also e2.start)
    and runs from the end of e1 moved right by radius to the start of e2
    moved right by radius. It turns clockwise when e2 turns right off e1 and
    counter-clockwise otherwise, which also covers a full reversal (the half
    circle of a stroke end cap).

    Args:
        e1: Incoming edge
        e2: Outgoing edge
        radius: Offset distance, which is the arc radius
        resolution: Maximum arc length per generated segment

    Returns:
        Arc points from start to end inclusive; a single point when the
        edges continue straight on
    """
    pivot = e1.end
    start = pivot + e1.right() * radius
    end = pivot + e2.right() * radius

    if points_equal(start, end):
        return [start]

    a0 = math.atan2(start.y - pivot.y, start.x - pivot.x)
    a1 = math.atan2(end.y - pivot.y, end.x - pivot.x)

    if turning(e1, e2.end) is Turning.RIGHT:
        sweep = -((a0 - a1) % math.tau)
    else:
        sweep = (a1 - a0) % math.tau

    segments = max(1, math.ceil(abs(sweep) * radius / resolution))

    points = [start]
    for k in range(1, segments):
        angle = a0 + sweep * k / segments
        points.append(Point(pivot.x + radius * math.cos(angle), pivot.y + radius * math.sin(angle)))
    points.append(end)
    return points


def signed_area(points: list[Point]) -> float:
    """Calculate signed area of a polygon using the shoelace formula.

    The sign of the area indicates winding direction:
    - Positive area: counter-clockwise winding
    - Negative area: clockwise winding

    Args:
        points: List of points forming the polygon boundary

    Returns:
        Signed area in square units. Returns 0.0 for degenerate polygons.

    Examples:
        >>> square = [Point(0.0, 0.0), Point(1.0, 0.0), Point(1.0, 1.0), Point(0.0, 1.0)]
        >>> signed_area(square)  # CCW square
        1.0
        >>> signed_area(square[::-1])  # CW square
        -1.0
    """
    n = len(points)
    if n < 3:
        return 0.0

    area = 0.0
    for i in range(n):
        j = (i + 1) % n
        area += points[i].x * points[j].y
        area -= points[j].x * points[i].y

    return area / 2.0


def point_in_polygon(point: Point, polygon: list[Point]) -> bool:
    """Determine if a point is inside a polygon using ray casting algorithm.

    Casts a horizontal ray from the point to the right and counts intersections
    with polygon edges. Odd number of intersections = inside, even = outside.

    Args:
        point: The point to test
        polygon: List of points forming the polygon boundary

    Returns:
        True if point is inside polygon, False otherwise
    """
    n = len(polygon)
    if n < 3:
        return False

    inside = False
    x, y = point.x, point.y
    j = n - 1

    for i in range(n):
        xi, yi = polygon[i].x, polygon[i].y
        xj, yj = polygon[j].x, polygon[j].y

        # Check if ray from point intersects edge (j, i)
        if ((yi > y) != (yj > y)) and (x < (xj - xi) * (y - yi) / (yj - yi) + xi):
            inside = not inside

        j = i

    return inside


def bounding_box(points: list[Point]) -> BoundingBox:
    """Axis-aligned bounds of a point set as (min_x, min_y, max_x, max_y)."""
    if not points:
        return (0.0, 0.0, 0.0, 0.0)
    xs = [p.x for p in points]
    ys = [p.y for p in points]
    return (min(xs), min(ys), max(xs), max(ys))


def boxes_overlap(a: BoundingBox, b: BoundingBox) -> bool:
    """Check whether two bounding boxes overlap or touch within EPSILON."""
    return not (
        a[2] < b[0] - EPSILON
        or b[2] < a[0] - EPSILON
        or a[3] < b[1] - EPSILON
        or b[3] < a[1] - EPSILON
    )

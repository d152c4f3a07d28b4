"""Internal Bezier curve flattening for SVG ingestion.

This is an internal module used by the SVG reader to turn curved path
segments into polylines. Not intended for public use.
"""

from contourcam.core.geometry import nearest_point_on_segment
from contourcam.domain import Point

# Subdivision stops here even if the curve is not yet flat enough.
_MAX_DEPTH = 16


def flatten_quadratic(points: list[Point], tolerance: float, depth: int = 0) -> list[Point]:
    """Flatten a quadratic Bezier curve using recursive subdivision.

    Args:
        points: List of 3 control points [p0, p1, p2]
        tolerance: Maximum distance from true curve
        depth: Current recursion depth

    Returns:
        List of points approximating the curve, both ends included
    """
    p0, p1, p2 = points

    # Curve point at t=0.5 against the chord midpoint
    curve_mid = p0 * 0.25 + p1 * 0.5 + p2 * 0.25
    if depth >= _MAX_DEPTH or curve_mid.distance_to(p0.midpoint(p2)) <= tolerance:
        return [p0, p2]

    left = flatten_quadratic([p0, p0.midpoint(p1), curve_mid], tolerance, depth + 1)
    right = flatten_quadratic([curve_mid, p1.midpoint(p2), p2], tolerance, depth + 1)
    return left[:-1] + right


def flatten_cubic(points: list[Point], tolerance: float, depth: int = 0) -> list[Point]:
    """Flatten a cubic Bezier curve using recursive subdivision.

    Uses De Casteljau's algorithm for subdivision.

    Args:
        points: List of 4 control points [p0, p1, p2, p3]
        tolerance: Maximum distance from true curve
        depth: Current recursion depth

    Returns:
        List of points approximating the curve, both ends included
    """
    p0, p1, p2, p3 = points

    q0 = p0.midpoint(p1)
    q1 = p1.midpoint(p2)
    q2 = p2.midpoint(p3)
    r0 = q0.midpoint(q1)
    r1 = q1.midpoint(q2)
    mid = r0.midpoint(r1)

    # Flat when both control points lie within tolerance of the chord
    _, d1 = nearest_point_on_segment(p1, p0, p3)
    _, d2 = nearest_point_on_segment(p2, p0, p3)
    if depth >= _MAX_DEPTH or max(d1, d2) <= tolerance:
        return [p0, p3]

    left = flatten_cubic([p0, q0, r0, mid], tolerance, depth + 1)
    right = flatten_cubic([mid, r1, q2, p3], tolerance, depth + 1)
    return left[:-1] + right

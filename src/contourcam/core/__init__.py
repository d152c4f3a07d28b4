"""Core geometry engine for contourcam.

This module contains the core algorithms for:

- Geometry predicates (turning, crossing, touching, intersections, arcs)
- Shape model (thick lines, convex polygons, circles) with growth
- Contour merging (break, stitch) and the contour repository
- Motion state machine and toolpath planning

Job orchestration lives in contourcam.core.processor, which also depends on
contourcam.io and is imported from there directly.

Key functions:
- turning: Classify a point against a directed edge
- crosses: Test whether two edges properly cross
- touches: Test whether two edges share a point without crossing
- find_intersection: Intersection point of two crossing edges
- find_arc: Tessellated arc around the joint of two edges
- depth_schedule: Split a cut into passes

Key classes:
- Line, ConvexPolygon, Circle: Shape variants
- Contour: Merged boundary with its constituent shapes
- ContourMerger: Mergeability, absorption and merge of two contours
- ContourRepository: Contours merged to a fixed point
- MotionStateMachine: Validated machine command log
"""

from contourcam.core.contour import Contour
from contourcam.core.geometry import (
    crosses,
    find_arc,
    find_intersection,
    point_in_polygon,
    signed_area,
    touches,
    turning,
)
from contourcam.core.merger import ContourMerger, MergeResult
from contourcam.core.motion import MotionStateMachine
from contourcam.core.repository import ContourRepository
from contourcam.core.shape import Circle, ConvexPolygon, Line, Shape, ShapeKind
from contourcam.core.toolpath import (
    depth_schedule,
    plan_boring,
    plan_contours,
    plan_drilling,
)

__all__ = [
    # Shapes
    "Circle",
    # Contours
    "Contour",
    "ContourMerger",
    "ContourRepository",
    "ConvexPolygon",
    "Line",
    "MergeResult",
    # Motion
    "MotionStateMachine",
    "Shape",
    "ShapeKind",
    # Geometry functions
    "crosses",
    "depth_schedule",
    "find_arc",
    "find_intersection",
    "plan_boring",
    "plan_contours",
    "plan_drilling",
    "point_in_polygon",
    "signed_area",
    "touches",
    "turning",
]

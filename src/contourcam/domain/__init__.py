"""Domain types for contourcam.

This module contains the plain data types shared by every layer:

- Immutable where possible (using frozen dataclasses)
- Serializable for inter-process communication (parallel job processing)
- Free of any algorithm beyond basic vector arithmetic

Key classes:
- Point: A 2D point with vector arithmetic
- Edge: A directed, non-degenerate segment
- Turning: Side of an edge a point lies on
- MotionCommand: One entry of a machine command log
- Hole: A drilling or boring target
"""

from contourcam.domain.motion import (
    CommandKind,
    Hole,
    MotionCommand,
    MotionState,
    SpindleDirection,
)
from contourcam.domain.primitives import (
    EPSILON,
    Edge,
    Point,
    Slope,
    Turning,
    dedup_points,
    feq,
    loop_edges,
    points_equal,
)

__all__: list[str] = [
    "EPSILON",
    # Enums
    "CommandKind",
    "MotionState",
    "Slope",
    "SpindleDirection",
    "Turning",
    # Core types
    "Edge",
    "Hole",
    "MotionCommand",
    "Point",
    # Helpers
    "dedup_points",
    "feq",
    "loop_edges",
    "points_equal",
]

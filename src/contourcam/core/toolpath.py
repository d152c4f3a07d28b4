"""Toolpath planning from merged loops and holes.

Each planner drives a MotionStateMachine and returns its finished command
log. Loops and holes are visited nearest-next, starting from the machine
origin.
"""

import math

from contourcam.core.motion import MotionStateMachine
from contourcam.domain import EPSILON, Hole, MotionCommand, Point, SpindleDirection

ORIGIN = Point(0.0, 0.0)


def depth_schedule(depth: float, depth_per_pass: float) -> list[float]:
    """Split a cut into passes no deeper than depth_per_pass.

    Args:
        depth: Final cutting depth (positive, below the surface)
        depth_per_pass: Maximum material removed per pass

    Returns:
        Increasing pass depths, the last one exactly depth

    Raises:
        ValueError: If either value is not positive

    Examples:
        >>> depth_schedule(2.5, 1.0)
        [1.0, 2.0, 2.5]
    """
    if depth <= 0 or depth_per_pass <= 0:
        raise ValueError(f"depth and depth per pass must be positive, got {depth}, {depth_per_pass}")
    passes = max(1, math.ceil(depth / depth_per_pass - EPSILON))
    return [depth_per_pass * (k + 1) for k in range(passes - 1)] + [depth]


def _nearest_index(starts: list[Point], now: Point) -> int:
    return min(range(len(starts)), key=lambda k: (starts[k] - now).dot(starts[k] - now))


def order_loops(loops: list[list[Point]], start: Point = ORIGIN) -> list[list[Point]]:
    """Order loops greedily, always moving to the closest loop start."""
    remaining = [loop for loop in loops if loop]
    ordered = []
    now = start
    while remaining:
        loop = remaining.pop(_nearest_index([candidate[0] for candidate in remaining], now))
        ordered.append(loop)
        now = loop[0]
    return ordered


def order_holes(holes: list[Hole], start: Point = ORIGIN) -> list[Hole]:
    """Order holes greedily, always moving to the closest hole center."""
    remaining = list(holes)
    ordered = []
    now = start
    while remaining:
        hole = remaining.pop(_nearest_index([h.center for h in remaining], now))
        ordered.append(hole)
        now = hole.center
    return ordered


def plan_contours(
    loops: list[list[Point]],
    depths: list[float],
    feed: float,
    rpm: float,
    safe_height: float,
) -> list[MotionCommand]:
    """Walk every loop once per depth pass.

    For each loop and pass: rapid to the loop start, engage, plunge to the
    pass depth, cut around the loop back to its start, and retract.

    Args:
        loops: Closed loops, without repeated closing points
        depths: Pass depths, as returned by depth_schedule()
        feed: Cutting feed rate
        rpm: Spindle speed
        safe_height: Retract height above the work

    Returns:
        Finished motion command log
    """
    machine = MotionStateMachine(feed, rpm, safe_height)
    machine.spindle_start(SpindleDirection.CLOCKWISE)

    for loop in order_loops(loops):
        first = loop[0]
        for depth in depths:
            machine.rapid(first.x, first.y)
            machine.engage()
            machine.plunge(-depth)
            for p in loop[1:]:
                machine.linear(p.x, p.y)
            machine.linear(first.x, first.y)
            machine.disengage()

    machine.spindle_stop()
    return machine.finish()


def plan_drilling(
    holes: list[Hole],
    depth: float,
    feed: float,
    rpm: float,
    safe_height: float,
) -> list[MotionCommand]:
    """Plunge straight down at every hole center."""
    machine = MotionStateMachine(feed, rpm, safe_height)
    machine.spindle_start(SpindleDirection.CLOCKWISE)

    for hole in order_holes(holes):
        machine.rapid(hole.center.x, hole.center.y)
        machine.engage()
        machine.plunge(-depth)
        machine.disengage()

    machine.spindle_stop()
    return machine.finish()


def plan_boring(
    holes: list[Hole],
    depth: float,
    depth_per_turn: float,
    bit_radius: float,
    feed: float,
    rpm: float,
    safe_height: float,
) -> list[MotionCommand]:
    """Helix down around every hole, then clean up with one full circle.

    The bit center travels on a circle of radius (hole radius - bit radius)
    starting east of the hole center, with the spindle turning
    counter-clockwise.

    Raises:
        ValueError: If a hole is not wider than the bit or depth_per_turn
            is not positive
    """
    if depth_per_turn <= 0:
        raise ValueError(f"depth per turn must be positive, got {depth_per_turn}")
    turns = max(1, math.ceil(depth / depth_per_turn - EPSILON))

    machine = MotionStateMachine(feed, rpm, safe_height)
    machine.spindle_start(SpindleDirection.COUNTER_CLOCKWISE)

    for hole in order_holes(holes):
        offset = hole.radius - bit_radius
        if offset <= EPSILON:
            raise ValueError(
                f"hole of radius {hole.radius:g} is too small for a bit of radius {bit_radius:g}"
            )
        x = hole.center.x + offset
        y = hole.center.y

        machine.rapid(x, y)
        machine.engage()
        machine.helix(x, y, -depth, -offset, 0.0, turns)
        machine.arc(x, y, -offset, 0.0)
        machine.disengage()

    machine.spindle_stop()
    return machine.finish()

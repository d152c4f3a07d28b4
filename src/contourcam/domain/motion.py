"""Motion command types shared by the planner and the G-code writer.

This module defines:
- MotionState: Spindle/tool states of the motion state machine
- SpindleDirection: Rotation direction of the spindle
- CommandKind: The kinds of machine command the planner can issue
- MotionCommand: One entry in a motion command log
- Hole: A round target for drilling or boring
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from contourcam.domain.primitives import Point


class MotionState(Enum):
    """State of the spindle and tool."""

    STOPPED = "stopped"
    SPINNING_DISENGAGED = "spinning disengaged"
    SPINNING_ENGAGED = "spinning engaged"


class SpindleDirection(Enum):
    """Spindle rotation as viewed from above the work."""

    CLOCKWISE = "cw"
    COUNTER_CLOCKWISE = "ccw"


class CommandKind(Enum):
    """Kind of a motion command."""

    SETUP_ABSOLUTE = "setup_absolute"
    SET_FEED = "set_feed"
    SET_SPEED = "set_speed"
    SPINDLE_ON = "spindle_on"
    SPINDLE_OFF = "spindle_off"
    RAPID = "rapid"
    LINEAR = "linear"
    ARC = "arc"
    HELICAL = "helical"
    PROGRAM_END = "program_end"


@dataclass(frozen=True, slots=True)
class MotionCommand:
    """A single machine command.

    Only the fields meaningful for the command kind are set; the others stay
    None. Arcs and helices are counter-clockwise, with (i, j) the center
    offset from the current position.

    Attributes:
        kind: What the machine should do
        x: Target X coordinate
        y: Target Y coordinate
        z: Target Z coordinate
        i: Arc center X offset
        j: Arc center Y offset
        turns: Full turns of a helical move
        value: Feed or speed value
        direction: Spindle direction for SPINDLE_ON
    """

    kind: CommandKind
    x: float | None = None
    y: float | None = None
    z: float | None = None
    i: float | None = None
    j: float | None = None
    turns: int | None = None
    value: float | None = None
    direction: SpindleDirection | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"kind": self.kind.value}
        for name in ("x", "y", "z", "i", "j", "turns", "value"):
            field_value = getattr(self, name)
            if field_value is not None:
                data[name] = field_value
        if self.direction is not None:
            data["direction"] = self.direction.value
        return data


@dataclass(frozen=True, slots=True)
class Hole:
    """A circular hole to drill or bore.

    Attributes:
        center: Hole center
        radius: Hole radius
    """

    center: Point
    radius: float

    def to_dict(self) -> dict[str, Any]:
        return {"center": self.center.to_dict(), "radius": self.radius}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Hole":
        return cls(center=Point.from_dict(data["center"]), radius=float(data["radius"]))

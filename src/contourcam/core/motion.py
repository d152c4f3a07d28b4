"""Motion state machine that sequences spindle and tool moves safely.

The machine moves through three states:

    STOPPED --spindle_start--> SPINNING_DISENGAGED --engage--> SPINNING_ENGAGED
    STOPPED <--spindle_stop--- SPINNING_DISENGAGED <-disengage- SPINNING_ENGAGED

Rapid positioning is only allowed while the tool is clear of the work and
cutting moves only while it is engaged. Any call made in the wrong state
raises MotionStateError; that is always an ordering bug in the caller, never
a user input problem.
"""

from contourcam.domain import CommandKind, MotionCommand, MotionState, SpindleDirection
from contourcam.exceptions import MotionStateError


class MotionStateMachine:
    """Records a machine command log while enforcing the state protocol.

    The log always opens with absolute positioning, the feed and spindle
    speed, and a rapid move to the safe height.

    Example:
        machine = MotionStateMachine(feed=300, rpm=12000, safe_height=5)
        machine.spindle_start(SpindleDirection.CLOCKWISE)
        machine.rapid(0, 0)
        machine.engage()
        machine.plunge(-1)
        machine.linear(10, 0)
        machine.disengage()
        machine.spindle_stop()
        commands = machine.finish()
    """

    def __init__(self, feed: float, rpm: float, safe_height: float) -> None:
        self.safe_height = safe_height
        self._state = MotionState.STOPPED
        self._finished = False
        self._commands: list[MotionCommand] = [
            MotionCommand(CommandKind.SETUP_ABSOLUTE),
            MotionCommand(CommandKind.SET_FEED, value=feed),
            MotionCommand(CommandKind.SET_SPEED, value=rpm),
            MotionCommand(CommandKind.RAPID, z=safe_height),
        ]

    @property
    def state(self) -> MotionState:
        return self._state

    @property
    def commands(self) -> list[MotionCommand]:
        return list(self._commands)

    def _require(self, command: str, *allowed: MotionState) -> None:
        if self._finished:
            raise MotionStateError(command, "the program is finished")
        if self._state not in allowed:
            raise MotionStateError(command, self._state.value)

    def spindle_start(self, direction: SpindleDirection) -> None:
        self._require("start the spindle", MotionState.STOPPED)
        self._commands.append(MotionCommand(CommandKind.SPINDLE_ON, direction=direction))
        self._state = MotionState.SPINNING_DISENGAGED

    def spindle_stop(self) -> None:
        self._require("stop the spindle", MotionState.SPINNING_DISENGAGED)
        self._commands.append(MotionCommand(CommandKind.SPINDLE_OFF))
        self._state = MotionState.STOPPED

    def engage(self) -> None:
        """Feed the tool down to the work surface (Z = 0)."""
        self._require("engage", MotionState.SPINNING_DISENGAGED)
        self._commands.append(MotionCommand(CommandKind.LINEAR, z=0.0))
        self._state = MotionState.SPINNING_ENGAGED

    def disengage(self) -> None:
        """Retract the tool to the safe height."""
        self._require("disengage", MotionState.SPINNING_ENGAGED)
        self._commands.append(MotionCommand(CommandKind.LINEAR, z=self.safe_height))
        self._state = MotionState.SPINNING_DISENGAGED

    def rapid(self, x: float, y: float) -> None:
        self._require("move rapidly", MotionState.STOPPED, MotionState.SPINNING_DISENGAGED)
        self._commands.append(MotionCommand(CommandKind.RAPID, x=x, y=y))

    def linear(self, x: float, y: float) -> None:
        self._require("cut", MotionState.SPINNING_ENGAGED)
        self._commands.append(MotionCommand(CommandKind.LINEAR, x=x, y=y))

    def plunge(self, z: float) -> None:
        self._require("plunge", MotionState.SPINNING_ENGAGED)
        self._commands.append(MotionCommand(CommandKind.LINEAR, z=z))

    def arc(self, x: float, y: float, i: float, j: float) -> None:
        """Counter-clockwise arc in the XY plane around current + (i, j)."""
        self._require("cut an arc", MotionState.SPINNING_ENGAGED)
        self._commands.append(MotionCommand(CommandKind.ARC, x=x, y=y, i=i, j=j))

    def helix(self, x: float, y: float, z: float, i: float, j: float, turns: int) -> None:
        """Counter-clockwise helix around current + (i, j), ending at depth z."""
        self._require("cut a helix", MotionState.SPINNING_ENGAGED)
        self._commands.append(
            MotionCommand(CommandKind.HELICAL, x=x, y=y, z=z, i=i, j=j, turns=turns)
        )

    def finish(self) -> list[MotionCommand]:
        """Close the program and hand out the command log.

        Returns:
            The complete command log, ending with PROGRAM_END

        Raises:
            MotionStateError: If the spindle is not stopped or the program
                was already finished
        """
        self._require("finish the program", MotionState.STOPPED)
        self._commands.append(MotionCommand(CommandKind.PROGRAM_END))
        self._finished = True
        return list(self._commands)

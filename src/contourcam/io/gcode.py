"""G-code writer for motion command logs.

This module renders the command log produced by the motion state machine
into plain-text G-code, one block per line.
"""

from pathlib import Path

from contourcam.domain import CommandKind, MotionCommand, SpindleDirection


def format_number(value: float) -> str:
    """Format a coordinate compactly: no trailing zeros, no negative zero.

    Examples:
        >>> format_number(5.0)
        '5'
        >>> format_number(-0.25)
        '-0.25'
    """
    text = f"{value:.4f}".rstrip("0").rstrip(".")
    if text in ("-0", ""):
        return "0"
    return text


def _words(command: MotionCommand, names: str) -> str:
    parts = []
    for name in names:
        value = getattr(command, name.lower())
        if value is not None:
            parts.append(f"{name}{format_number(value)}")
    return " ".join(parts)


class GCodeWriter:
    """Renders motion commands as G-code.

    Example:
        writer = GCodeWriter()
        text = writer.render(commands)
        writer.save(commands, Path("job.nc"))
    """

    def render_command(self, command: MotionCommand) -> list[str]:
        """Render one command as one or more G-code blocks.

        Raises:
            ValueError: If the command kind has no G-code rendering
        """
        kind = command.kind
        if kind is CommandKind.SETUP_ABSOLUTE:
            return ["G90"]
        if kind is CommandKind.SET_FEED:
            return [f"F{format_number(command.value or 0.0)}"]
        if kind is CommandKind.SET_SPEED:
            return [f"S{format_number(command.value or 0.0)}"]
        if kind is CommandKind.SPINDLE_ON:
            return ["M4" if command.direction is SpindleDirection.COUNTER_CLOCKWISE else "M3"]
        if kind is CommandKind.SPINDLE_OFF:
            return ["M5"]
        if kind is CommandKind.RAPID:
            return [f"G0 {_words(command, 'XYZ')}"]
        if kind is CommandKind.LINEAR:
            return [f"G1 {_words(command, 'XYZ')}"]
        if kind is CommandKind.ARC:
            return ["G17", f"G3 {_words(command, 'XYIJ')}"]
        if kind is CommandKind.HELICAL:
            return ["G17", f"G3 {_words(command, 'XYZIJ')} P{command.turns}"]
        if kind is CommandKind.PROGRAM_END:
            return ["M2"]
        raise ValueError(f"No G-code for command {kind}")

    def render(self, commands: list[MotionCommand]) -> str:
        """Render a full command log, newline separated."""
        return "\n".join(line for command in commands for line in self.render_command(command))

    def save(self, commands: list[MotionCommand], output_path: Path) -> None:
        """Write the rendered program to a file, creating parent directories."""
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(self.render(commands) + "\n", encoding="utf-8")

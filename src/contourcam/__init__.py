"""contourcam - Turn 2D vector artwork into CNC toolpaths.

contourcam is a CLI tool that reads SVG artwork (strokes, closed shapes and
circles), grows every shape by the tool-compensation offset, merges the
overlapping results into disjoint boundary loops and emits G-code for
engraving, cutting, drilling and boring jobs.

Example:
    $ contourcam run board.yaml

This will write one G-code program and one SVG preview per job into the
output directory named in board.yaml.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]

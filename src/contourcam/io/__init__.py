"""Artwork and machine-program I/O for contourcam.

This module handles reading SVG artwork with svgelements and writing the
results of a job. It keeps third-party representations out of the
geometry engine.

Key responsibilities:
- Load SVG files and resolve styles and transforms
- Convert paths and circles to geometry primitives
- Render motion command logs as G-code
- Render an SVG preview of merged contours and problem edges

Key classes:
- SvgReader: Load SVG files into primitives
- SvgPrimitives: Strokes, polygons and circles read from a document
- GCodeWriter: Render and save G-code programs
"""

from contourcam.io.gcode import GCodeWriter, format_number
from contourcam.io.preview import render_preview, save_preview
from contourcam.io.reader import SvgPrimitives, SvgReader, join_lines

__all__ = [
    "GCodeWriter",
    "SvgPrimitives",
    "SvgReader",
    "format_number",
    "join_lines",
    "render_preview",
    "save_preview",
]

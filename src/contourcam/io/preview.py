"""SVG preview of a job's geometry.

The preview overlays, in drawing order:
- the original (un-grown) shape outlines in translucent gray
- the merged contour loops in black
- drill and bore holes
- unstitched problem edges in red, so failed merges stand out
- a small axis gizmo at the origin
"""

import xml.etree.ElementTree as ET
from collections.abc import Iterable
from pathlib import Path

from contourcam.core.contour import Contour
from contourcam.core.geometry import bounding_box
from contourcam.domain import Edge, Hole, Point

SVG_NS = "http://www.w3.org/2000/svg"
MARGIN = 5.0
GIZMO_LENGTH = 5.0


def _path_data(loop: list[Point]) -> str:
    head, *tail = loop
    commands = [f"M {head.x:g} {head.y:g}"]
    commands.extend(f"L {p.x:g} {p.y:g}" for p in tail)
    commands.append("Z")
    return " ".join(commands)


def _group(parent: ET.Element, **attributes: str) -> ET.Element:
    return ET.SubElement(parent, "g", {k.replace("_", "-"): v for k, v in attributes.items()})


def render_preview(
    contours: Iterable[Contour],
    problems: Iterable[Edge] = (),
    originals: Iterable[list[Point]] = (),
    holes: Iterable[Hole] = (),
) -> str:
    """Build the preview document.

    Args:
        contours: Merged contours to draw
        problems: Unstitched edges to highlight
        originals: Outlines of the shapes before growth
        holes: Drilling or boring targets

    Returns:
        Serialized SVG document
    """
    contours = list(contours)
    problems = list(problems)
    originals = [loop for loop in originals if loop]
    holes = list(holes)

    points: list[Point] = [Point(0.0, 0.0)]
    for contour in contours:
        points.extend(contour.boundary)
    for loop in originals:
        points.extend(loop)
    for edge in problems:
        points.extend((edge.start, edge.end))
    for hole in holes:
        points.append(hole.center + Point(hole.radius, hole.radius))
        points.append(hole.center - Point(hole.radius, hole.radius))
    min_x, min_y, max_x, max_y = bounding_box(points)

    root = ET.Element(
        "svg",
        {
            "xmlns": SVG_NS,
            "viewBox": (
                f"{min_x - MARGIN:g} {min_y - MARGIN:g} "
                f"{max_x - min_x + 2 * MARGIN:g} {max_y - min_y + 2 * MARGIN:g}"
            ),
        },
    )

    g_originals = _group(root, fill="gray", opacity="0.5", stroke="none")
    for loop in originals:
        ET.SubElement(g_originals, "path", {"d": _path_data(loop)})

    g_contours = _group(root, fill="none", stroke="black", stroke_width="1")
    for contour in contours:
        for loop in contour.loops():
            if loop:
                ET.SubElement(
                    g_contours,
                    "path",
                    {"d": _path_data(loop), "vector-effect": "non-scaling-stroke"},
                )

    g_holes = _group(root, fill="#89356644", stroke="none")
    for hole in holes:
        ET.SubElement(
            g_holes,
            "circle",
            {"cx": f"{hole.center.x:g}", "cy": f"{hole.center.y:g}", "r": f"{hole.radius:g}"},
        )

    g_problems = _group(root, stroke="red", stroke_width="2", fill="none")
    for edge in problems:
        ET.SubElement(
            g_problems,
            "line",
            {
                "x1": f"{edge.start.x:g}",
                "y1": f"{edge.start.y:g}",
                "x2": f"{edge.end.x:g}",
                "y2": f"{edge.end.y:g}",
                "vector-effect": "non-scaling-stroke",
            },
        )

    g_gizmo = _group(root, stroke_width="1", fill="none")
    ET.SubElement(
        g_gizmo, "line", {"x1": "0", "y1": "0", "x2": f"{GIZMO_LENGTH:g}", "y2": "0", "stroke": "red"}
    )
    ET.SubElement(
        g_gizmo, "line", {"x1": "0", "y1": "0", "x2": "0", "y2": f"{GIZMO_LENGTH:g}", "stroke": "green"}
    )

    return ET.tostring(root, encoding="unicode")


def save_preview(document: str, output_path: Path) -> None:
    """Write a rendered preview, creating parent directories."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(document, encoding="utf-8")

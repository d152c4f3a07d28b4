"""Tests for SVG reading, G-code rendering and preview output."""

import xml.etree.ElementTree as ET
from pathlib import Path

import pytest

from contourcam.core.contour import Contour
from contourcam.core.shape import Circle, ConvexPolygon, Line
from contourcam.domain import CommandKind, Edge, Hole, MotionCommand, Point, SpindleDirection
from contourcam.exceptions import SvgLoadError
from contourcam.io import GCodeWriter, SvgReader, format_number, join_lines, render_preview, save_preview
from contourcam.io._bezier import flatten_cubic, flatten_quadratic

SVG_NS = "{http://www.w3.org/2000/svg}"


def write_svg(tmp_path: Path, body: str, name: str = "art.svg") -> Path:
    """Write an SVG document with the given body."""
    path = tmp_path / name
    path.write_text(
        '<svg xmlns="http://www.w3.org/2000/svg" width="100" height="100" '
        f'viewBox="0 0 100 100">{body}</svg>',
        encoding="utf-8",
    )
    return path


class TestSvgReader:
    """Tests for SvgReader."""

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test that a missing file raises SvgLoadError."""
        with pytest.raises(SvgLoadError):
            SvgReader(tmp_path / "missing.svg").load()

    def test_invalid_file(self, tmp_path: Path) -> None:
        """Test that broken XML raises SvgLoadError."""
        path = tmp_path / "broken.svg"
        path.write_text("<svg><path", encoding="utf-8")
        with pytest.raises(SvgLoadError):
            SvgReader(path).load()

    def test_circle(self, tmp_path: Path) -> None:
        """Test that circles are read as circles and holes."""
        path = write_svg(tmp_path, '<circle id="c1" cx="10" cy="20" r="5"/>')
        primitives = SvgReader(path).load()
        assert len(primitives.circles) == 1
        circle = primitives.circles[0]
        assert circle.center == Point(10.0, 20.0)
        assert circle.radius == 5.0
        assert circle.source == "c1"
        assert primitives.holes() == [Hole(Point(10.0, 20.0), 5.0)]

    def test_closed_path_is_polygon(self, tmp_path: Path) -> None:
        """Test that a closed path becomes a polygon."""
        path = write_svg(tmp_path, '<path d="M 0 0 L 10 0 L 10 10 L 0 10 Z"/>')
        primitives = SvgReader(path).load()
        assert len(primitives.polygons) == 1
        assert primitives.polygons[0].points[:4] == [
            Point(0, 0),
            Point(10, 0),
            Point(10, 10),
            Point(0, 10),
        ]

    def test_rect_is_polygon(self, tmp_path: Path) -> None:
        """Test that basic shapes are converted through paths."""
        path = write_svg(tmp_path, '<rect x="1" y="2" width="3" height="4"/>')
        primitives = SvgReader(path).load()
        assert len(primitives.polygons) == 1
        shapes, errors = primitives.shapes(resolution=0.5)
        assert errors == []
        assert isinstance(shapes[0], ConvexPolygon)
        assert len(shapes[0].boundary()) == 4

    def test_open_path_is_stroke(self, tmp_path: Path) -> None:
        """Test that an open path becomes a stroke with its width."""
        path = write_svg(tmp_path, '<path d="M 0 0 L 10 0" stroke="black" stroke-width="2"/>')
        primitives = SvgReader(path).load()
        assert len(primitives.strokes) == 1
        stroke = primitives.strokes[0]
        assert stroke.points == [Point(0, 0), Point(10, 0)]
        assert stroke.thickness == 2.0

    def test_open_path_without_width_is_error(self, tmp_path: Path) -> None:
        """Test that strokes need an explicit width."""
        path = write_svg(
            tmp_path,
            '<path id="bare" d="M 0 0 L 10 0"/><circle cx="50" cy="50" r="3"/>',
        )
        primitives = SvgReader(path).load()
        assert primitives.strokes == []
        assert len(primitives.circles) == 1
        assert primitives.errors[0][0] == "bare"

    def test_curves_are_flattened(self, tmp_path: Path) -> None:
        """Test that a cubic curve becomes several points."""
        path = write_svg(
            tmp_path,
            '<path d="M 0 0 C 0 10 10 10 10 0" stroke="black" stroke-width="1"/>',
        )
        primitives = SvgReader(path, curve_tolerance=0.01).load()
        points = primitives.strokes[0].points
        assert len(points) > 4
        assert points[0] == Point(0, 0)
        assert points[-1] == Point(10, 0)

    def test_hidden_elements_skipped(self, tmp_path: Path) -> None:
        """Test that hidden elements are ignored."""
        path = write_svg(tmp_path, '<circle cx="10" cy="10" r="5" visibility="hidden"/>')
        assert len(SvgReader(path).load()) == 0

    def test_shapes_report_bad_primitives(self, tmp_path: Path) -> None:
        """Test that a non-convex polygon is reported and skipped."""
        path = write_svg(
            tmp_path,
            '<path id="dart" d="M 0 0 L 20 0 L 10 10 L 20 20 L 0 20 Z"/>'
            '<circle cx="50" cy="50" r="3"/>',
        )
        shapes, errors = SvgReader(path).load().shapes(resolution=0.5)
        assert len(shapes) == 1
        assert isinstance(shapes[0], Circle)
        assert errors[0][0] == "dart"


class TestJoinLines:
    """Tests for stroke joining."""

    def test_chain_joined(self) -> None:
        """Test that three continuing strokes become one."""
        lines = [
            Line([Point(0, 0), Point(1, 0)], 1.0, 0.1),
            Line([Point(2, 1), Point(1, 1)], 1.0, 0.1),
            Line([Point(1, 0), Point(1, 1)], 1.0, 0.1),
        ]
        joined = join_lines(lines)
        assert len(joined) == 1
        assert joined[0].points == [Point(0, 0), Point(1, 0), Point(1, 1), Point(2, 1)]

    def test_different_widths_kept(self) -> None:
        """Test that strokes of different widths are not joined."""
        lines = [
            Line([Point(0, 0), Point(1, 0)], 1.0, 0.1),
            Line([Point(1, 0), Point(1, 1)], 2.0, 0.1),
        ]
        assert len(join_lines(lines)) == 2


class TestBezier:
    """Tests for curve flattening."""

    def test_straight_quadratic_is_one_segment(self) -> None:
        """Test that a flat curve is not subdivided."""
        points = flatten_quadratic([Point(0, 0), Point(1, 0), Point(2, 0)], 0.01)
        assert points == [Point(0, 0), Point(2, 0)]

    def test_cubic_stays_within_hull(self) -> None:
        """Test that flattened points stay inside the control hull."""
        points = flatten_cubic([Point(0, 0), Point(0, 10), Point(10, 10), Point(10, 0)], 0.01)
        assert len(points) > 2
        assert all(0 <= p.x <= 10 and 0 <= p.y <= 10 for p in points)


class TestGCodeWriter:
    """Tests for G-code rendering."""

    @pytest.fixture
    def writer(self) -> GCodeWriter:
        """Create a G-code writer."""
        return GCodeWriter()

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(5.0, "5"), (-0.25, "-0.25"), (1.23456, "1.2346"), (-0.00001, "0"), (0.0, "0")],
    )
    def test_format_number(self, value: float, expected: str) -> None:
        """Test compact number formatting."""
        assert format_number(value) == expected

    def test_render_program(self, writer: GCodeWriter) -> None:
        """Test a small program block by block."""
        commands = [
            MotionCommand(CommandKind.SETUP_ABSOLUTE),
            MotionCommand(CommandKind.SET_FEED, value=300.0),
            MotionCommand(CommandKind.SET_SPEED, value=12000.0),
            MotionCommand(CommandKind.RAPID, z=5.0),
            MotionCommand(CommandKind.SPINDLE_ON, direction=SpindleDirection.CLOCKWISE),
            MotionCommand(CommandKind.RAPID, x=1.0, y=2.0),
            MotionCommand(CommandKind.LINEAR, z=0.0),
            MotionCommand(CommandKind.LINEAR, x=3.5, y=2.0),
            MotionCommand(CommandKind.SPINDLE_OFF),
            MotionCommand(CommandKind.PROGRAM_END),
        ]
        assert writer.render(commands).splitlines() == [
            "G90",
            "F300",
            "S12000",
            "G0 Z5",
            "M3",
            "G0 X1 Y2",
            "G1 Z0",
            "G1 X3.5 Y2",
            "M5",
            "M2",
        ]

    def test_render_arcs(self, writer: GCodeWriter) -> None:
        """Test arc and helix blocks."""
        assert writer.render_command(
            MotionCommand(CommandKind.ARC, x=12.0, y=10.0, i=-2.0, j=0.0)
        ) == ["G17", "G3 X12 Y10 I-2 J0"]
        assert writer.render_command(
            MotionCommand(CommandKind.HELICAL, x=12.0, y=10.0, z=-2.0, i=-2.0, j=0.0, turns=4)
        ) == ["G17", "G3 X12 Y10 Z-2 I-2 J0 P4"]

    def test_counter_clockwise_spindle(self, writer: GCodeWriter) -> None:
        """Test M4 for a counter-clockwise spindle."""
        cmd = MotionCommand(CommandKind.SPINDLE_ON, direction=SpindleDirection.COUNTER_CLOCKWISE)
        assert writer.render_command(cmd) == ["M4"]

    def test_save(self, writer: GCodeWriter, tmp_path: Path) -> None:
        """Test writing a program to a nested path."""
        output = tmp_path / "out" / "job.nc"
        writer.save([MotionCommand(CommandKind.PROGRAM_END)], output)
        assert output.read_text(encoding="utf-8") == "M2\n"


class TestPreview:
    """Tests for the SVG preview."""

    def test_preview_layers(self, tmp_path: Path) -> None:
        """Test that every layer is present and the file parses."""
        square = ConvexPolygon([Point(0, 0), Point(10, 0), Point(10, 10), Point(0, 10)], 0.1)
        contour = Contour.from_shape(square)
        document = render_preview(
            [contour],
            problems=[Edge(Point(0, 0), Point(5, 5))],
            originals=[square.boundary()],
            holes=[Hole(Point(20, 20), 2.0)],
        )
        output = tmp_path / "preview.svg"
        save_preview(document, output)

        root = ET.parse(output).getroot()
        assert root.tag == f"{SVG_NS}svg"
        assert root.get("viewBox") == "-5 -5 32 32"
        paths = root.findall(f".//{SVG_NS}path")
        assert len(paths) == 2
        assert root.find(f".//{SVG_NS}circle").get("r") == "2"
        lines = root.findall(f".//{SVG_NS}line")
        # one problem edge plus the two gizmo axes
        assert len(lines) == 3

    def test_empty_preview(self) -> None:
        """Test a preview with nothing in it."""
        root = ET.fromstring(render_preview([]))
        assert root.get("viewBox") == "-5 -5 10 10"

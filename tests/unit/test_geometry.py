"""Tests for geometric predicates and helpers."""

import math

import pytest

from contourcam.core.geometry import (
    bounding_box,
    boxes_overlap,
    crosses,
    distance_to_segment,
    find_arc,
    find_intersection,
    nearest_point_on_segment,
    point_in_polygon,
    signed_area,
    touches,
    turning,
)
from contourcam.domain import Edge, Point, Turning, points_equal
from contourcam.exceptions import IntersectionError


def _edge(x1: float, y1: float, x2: float, y2: float) -> Edge:
    return Edge(Point(x1, y1), Point(x2, y2))


class TestTurning:
    """Tests for turning classification."""

    @pytest.fixture
    def north(self) -> Edge:
        """Edge from the origin pointing north."""
        return _edge(0, 0, 0, 1)

    def test_left(self, north: Edge) -> None:
        """Test a point west of a northbound edge."""
        assert turning(north, Point(-1.0, -1.0)) is Turning.LEFT

    def test_collinear(self, north: Edge) -> None:
        """Test a point on the edge's line beyond its end."""
        assert turning(north, Point(0.0, 2.0)) is Turning.COLLINEAR

    def test_right(self, north: Edge) -> None:
        """Test a point east of a northbound edge."""
        assert turning(north, Point(1.0, 1.0)) is Turning.RIGHT

    def test_within_tolerance_is_collinear(self, north: Edge) -> None:
        """Test that tiny offsets from the line count as collinear."""
        assert turning(north, Point(0.00001, 5.0)) is Turning.COLLINEAR


class TestCrossesAndTouches:
    """Tests for crossing and touching classification."""

    def test_x_crossing(self) -> None:
        """Test two diagonals of a square."""
        a = _edge(0, 0, 2, 2)
        b = _edge(0, 2, 2, 0)
        assert crosses(a, b)
        assert not touches(a, b)

    def test_t_junction_touches(self) -> None:
        """Test an edge ending on the middle of another."""
        a = _edge(0, 0, 2, 0)
        b = _edge(1, 0, 1, 1)
        assert not crosses(a, b)
        assert touches(a, b)
        assert touches(b, a)

    def test_shared_vertex_touches(self) -> None:
        """Test two edges meeting at an endpoint."""
        assert touches(_edge(0, 0, 1, 0), _edge(1, 0, 1, 1))

    def test_collinear_overlap_touches(self) -> None:
        """Test overlapping collinear edges."""
        assert touches(_edge(0, 0, 2, 0), _edge(1, 0, 3, 0))

    def test_collinear_disjoint_does_not_touch(self) -> None:
        """Test collinear edges with a gap between them."""
        a = _edge(0, 0, 1, 0)
        b = _edge(2, 0, 3, 0)
        assert not crosses(a, b)
        assert not touches(a, b)

    def test_separate_edges(self) -> None:
        """Test edges far apart."""
        a = _edge(0, 0, 1, 0)
        b = _edge(0, 1, 1, 2)
        assert not crosses(a, b)
        assert not touches(a, b)


class TestFindIntersection:
    """Tests for line intersection."""

    def test_vertical_and_horizontal(self) -> None:
        """Test the vertical branch."""
        p = find_intersection(_edge(0, -1, 0, 1), _edge(-1, 0, 1, 0))
        assert points_equal(p, Point(0.0, 0.0))

    def test_horizontal_and_general(self) -> None:
        """Test the horizontal branch."""
        p = find_intersection(_edge(0, 1, 4, 1), _edge(0, 0, 2, 2))
        assert points_equal(p, Point(1.0, 1.0))

    def test_general_lines(self) -> None:
        """Test the slope-intercept branch."""
        p = find_intersection(_edge(0, 0, 2, 2), _edge(0, 2, 2, 0))
        assert points_equal(p, Point(1.0, 1.0))

    def test_collinear_uses_closest_endpoints(self) -> None:
        """Test that collinear edges meet halfway between their closest ends."""
        p = find_intersection(_edge(0, 0, 1, 0), _edge(2, 0, 3, 0))
        assert points_equal(p, Point(1.5, 0.0))

    def test_parallel_raises(self) -> None:
        """Test that distinct parallel lines are rejected."""
        with pytest.raises(IntersectionError):
            find_intersection(_edge(0, 0, 1, 0), _edge(0, 1, 1, 1))


class TestFindArc:
    """Tests for offset arc tessellation."""

    def test_straight_continuation_is_single_point(self) -> None:
        """Test that collinear edges need no arc."""
        points = find_arc(_edge(0, 0, 1, 0), _edge(1, 0, 2, 0), 1.0, 0.1)
        assert len(points) == 1
        assert points_equal(points[0], Point(1.0, -1.0))

    def test_left_corner_quarter_circle(self) -> None:
        """Test the outer arc of a CCW corner."""
        points = find_arc(_edge(0, 0, 1, 0), _edge(1, 0, 1, 1), 1.0, 0.1)
        # quarter circle of radius 1 in segments of at most 0.1
        assert len(points) == math.ceil(math.pi / 2 / 0.1) + 1
        assert points_equal(points[0], Point(1.0, -1.0))
        assert points_equal(points[-1], Point(2.0, 0.0))
        for p in points:
            assert p.distance_to(Point(1.0, 0.0)) == pytest.approx(1.0)
        # swept counter-clockwise, so the middle point is south-east of the pivot
        middle = points[len(points) // 2]
        assert middle.x > 1.0
        assert middle.y < 0.0

    def test_reversal_is_half_circle(self) -> None:
        """Test the end cap produced by a full reversal."""
        points = find_arc(_edge(0, 1, 0, 0), _edge(0, 0, 0, 1), 1.0, 0.1)
        assert points_equal(points[0], Point(-1.0, 0.0))
        assert points_equal(points[-1], Point(1.0, 0.0))
        assert all(p.y <= 1e-9 for p in points)

    def test_coarse_resolution_keeps_both_ends(self) -> None:
        """Test that at least one segment is produced."""
        points = find_arc(_edge(0, 1, 0, 0), _edge(0, 0, 0, 1), 0.5, 5.0)
        assert len(points) == 2


class TestPolygonHelpers:
    """Tests for area, containment and bounds helpers."""

    @pytest.fixture
    def square(self) -> list[Point]:
        """Unit square, counter-clockwise."""
        return [Point(0, 0), Point(1, 0), Point(1, 1), Point(0, 1)]

    def test_signed_area_orientation(self, square: list[Point]) -> None:
        """Test signed area sign for both orientations."""
        assert signed_area(square) == 1.0
        assert signed_area(square[::-1]) == -1.0

    def test_point_in_polygon(self, square: list[Point]) -> None:
        """Test ray casting containment."""
        assert point_in_polygon(Point(0.5, 0.5), square)
        assert not point_in_polygon(Point(1.5, 0.5), square)

    def test_nearest_point_on_segment_clamps(self) -> None:
        """Test projection clamping to the segment."""
        nearest, dist = nearest_point_on_segment(Point(3.0, 1.0), Point(0, 0), Point(2, 0))
        assert nearest == Point(2.0, 0.0)
        assert dist == pytest.approx(math.sqrt(2))

    def test_distance_to_segment(self) -> None:
        """Test perpendicular distance."""
        assert distance_to_segment(Point(1.0, 1.0), _edge(0, 0, 2, 0)) == pytest.approx(1.0)

    def test_bounding_boxes(self, square: list[Point]) -> None:
        """Test bounds and overlap, touching counts as overlap."""
        box = bounding_box(square)
        assert box == (0, 0, 1, 1)
        assert boxes_overlap(box, (1, 1, 2, 2))
        assert not boxes_overlap(box, (1.5, 0, 2, 1))

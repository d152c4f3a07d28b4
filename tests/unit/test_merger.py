"""Tests for contour merging."""

import pytest

from contourcam.core.contour import Contour
from contourcam.core.geometry import signed_area
from contourcam.core.merger import ContourMerger
from contourcam.core.shape import Circle, ConvexPolygon, Line
from contourcam.domain import Point


def square_contour(x: float, y: float, size: float = 1.0) -> Contour:
    """Contour of an axis-aligned square with its lower-left corner at (x, y)."""
    polygon = ConvexPolygon(
        [Point(x, y), Point(x + size, y), Point(x + size, y + size), Point(x, y + size)],
        resolution=0.1,
    )
    return Contour.from_shape(polygon)


@pytest.fixture
def merger() -> ContourMerger:
    """Create a contour merger."""
    return ContourMerger()


class TestMergeability:
    """Tests for is_mergeable and is_superset_of."""

    def test_shared_edge_is_mergeable(self, merger: ContourMerger) -> None:
        """Test squares sharing an edge."""
        assert merger.is_mergeable(square_contour(0, 0), square_contour(1, 0))

    def test_corner_touch_is_mergeable(self, merger: ContourMerger) -> None:
        """Test squares touching at one corner."""
        assert merger.is_mergeable(square_contour(0, 0), square_contour(1, 1))

    def test_disjoint_is_not_mergeable(self, merger: ContourMerger) -> None:
        """Test squares with a gap between them."""
        assert not merger.is_mergeable(square_contour(0, 0), square_contour(2, 0))

    @pytest.mark.parametrize(
        "offset",
        [(1, 0), (1, 1), (0.5, 0.5), (2, 0), (0.25, 3)],
    )
    def test_mergeability_is_symmetric(
        self, merger: ContourMerger, offset: tuple[float, float]
    ) -> None:
        """Test that argument order does not matter."""
        a = square_contour(0, 0)
        b = square_contour(*offset)
        assert merger.is_mergeable(a, b) == merger.is_mergeable(b, a)

    def test_nested_is_superset_not_mergeable(self, merger: ContourMerger) -> None:
        """Test a small square inside a large one."""
        big = square_contour(0, 0, size=3.0)
        small = square_contour(1, 1)
        assert not merger.is_mergeable(big, small)
        assert merger.is_superset_of(big, small)
        assert not merger.is_superset_of(small, big)

    def test_covered_caps_are_not_a_superset(self, merger: ContourMerger) -> None:
        """Test a crossbar whose ends sit inside the legs of an A."""
        legs = Contour.from_shape(
            Line([Point(0, 0), Point(5, 10), Point(10, 0)], thickness=1.0, resolution=0.1)
        )
        bar = Contour.from_shape(
            Line([Point(2.5, 5), Point(7.5, 5)], thickness=1.0, resolution=0.1)
        )
        # every vertex of the bar sits on one of its end caps
        assert all(legs.contains(p) for p in bar.boundary)
        assert not merger.is_superset_of(legs, bar)
        assert merger.is_mergeable(legs, bar)


class TestMerge:
    """Tests for the merge itself."""

    def test_shared_edge_merge_has_six_vertices(self, merger: ContourMerger) -> None:
        """Test that the shared seam disappears."""
        a = square_contour(0, 0)
        b = square_contour(1, 0)
        result = merger.merge(a, b)
        assert result.succeeded
        assert result.problems == []
        merged = result.contours[0]
        assert len(merged.boundary) == 6
        assert merged.holes == []
        assert signed_area(merged.boundary) == pytest.approx(2.0)

    def test_corner_touch_merge_has_eight_vertices(self, merger: ContourMerger) -> None:
        """Test a figure-eight loop through the shared corner."""
        result = merger.merge(square_contour(0, 0), square_contour(1, 1))
        assert result.succeeded
        merged = result.contours[0]
        assert len(merged.boundary) == 8
        assert signed_area(merged.boundary) == pytest.approx(2.0)

    def test_overlapping_squares(self, merger: ContourMerger) -> None:
        """Test the union outline of two overlapping squares."""
        result = merger.merge(square_contour(0, 0, 2.0), square_contour(1, 1, 2.0))
        assert result.succeeded
        merged = result.contours[0]
        assert len(merged.boundary) == 8
        assert signed_area(merged.boundary) == pytest.approx(7.0)
        assert Point(2.0, 1.0) in merged.boundary
        assert Point(1.0, 2.0) in merged.boundary

    def test_merged_contour_keeps_shapes(self, merger: ContourMerger) -> None:
        """Test that both shape lists are carried over in order."""
        a = square_contour(0, 0)
        b = square_contour(1, 0)
        merged = merger.merge(a, b).contours[0]
        assert merged.shapes == [*a.shapes, *b.shapes]
        assert merged.contains(Point(0.5, 0.5))
        assert merged.contains(Point(1.5, 0.5))

    def test_overlapping_circles(self, merger: ContourMerger) -> None:
        """Test merging two tessellated circles."""
        a = Contour.from_shape(Circle(Point(0, 0), 1.0, resolution=0.1))
        b = Contour.from_shape(Circle(Point(1.5, 0), 1.0, resolution=0.1))
        assert merger.is_mergeable(a, b)
        result = merger.merge(a, b)
        assert result.succeeded
        merged = result.contours[0]
        area = signed_area(merged.boundary)
        assert signed_area(a.boundary) < area < signed_area(a.boundary) + signed_area(b.boundary)
        assert merged.encloses(Point(-0.9, 0.0))
        assert merged.encloses(Point(2.4, 0.0))
        bbox = merged.bounding_box()
        assert bbox[0] == pytest.approx(-1.0, abs=0.01)
        assert bbox[2] == pytest.approx(2.5, abs=0.01)

    def test_circles_crossing_near_a_vertex(self, merger: ContourMerger) -> None:
        """Test circles whose crossing leaves a very short piece of the smaller one."""
        a = Contour.from_shape(Circle(Point(9.4245, 7.3990), 2.345, resolution=0.2))
        b = Contour.from_shape(Circle(Point(9.8242, 8.7241), 1.079, resolution=0.2))
        assert merger.is_mergeable(a, b)
        result = merger.merge(a, b)
        assert result.succeeded
        assert result.problems == []
        merged = result.contours[0]
        assert merged.holes == []
        assert merged.encloses(Point(9.4245, 7.3990))
        # inside the small circle only
        assert merged.encloses(Point(9.8242, 9.7241))
        assert signed_area(merged.boundary) > signed_area(a.boundary)


class TestContour:
    """Tests for the contour container."""

    def test_svg_path(self) -> None:
        """Test SVG path export of a single loop."""
        contour = square_contour(0, 0)
        assert contour.svg_path() == "M 0 0 L 1 0 L 1 1 L 0 1 Z"

    def test_encloses_respects_holes(self) -> None:
        """Test even-odd containment with a hole."""
        outer = square_contour(0, 0, 4.0)
        contour = Contour(
            boundary=outer.boundary,
            shapes=outer.shapes,
            holes=[[Point(1, 1), Point(1, 3), Point(3, 3), Point(3, 1)]],
        )
        assert contour.encloses(Point(0.5, 0.5))
        assert not contour.encloses(Point(2, 2))
        assert contour.signed_area() == pytest.approx(12.0)

    def test_serialization(self) -> None:
        """Test contour serialization and deserialization."""
        contour = square_contour(0, 0)
        restored = Contour.from_dict(contour.to_dict())
        assert restored.boundary == contour.boundary
        assert restored.shapes == contour.shapes

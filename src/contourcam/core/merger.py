"""Contour union by boundary breaking and stitching.

Two overlapping or touching contours are merged in two steps:

1. Break: every edge of each contour is split wherever the other contour's
   boundary crosses or touches it. Pieces that run inside the other
   contour, or along a seam shared with it, are dropped. Survivors are
   tagged with the contour they came from.
2. Stitch: surviving pieces are chained end to start into closed loops,
   switching to the other contour's pieces wherever possible so the walk
   follows the outside of the union.

Key classes:
- ContourMerger: Mergeability and superset tests plus the merge itself
- MergeResult: The merged contour (if any) and the unstitched fragments
"""

import math
from dataclasses import dataclass, field
from enum import Enum

import structlog

from contourcam.core.contour import Contour
from contourcam.core.geometry import (
    BoundingBox,
    bounding_box,
    boxes_overlap,
    crosses,
    find_intersection,
    point_on_segment,
    signed_area,
    touches,
)
from contourcam.domain import EPSILON, Edge, Point, dedup_points, points_equal

logger = structlog.get_logger(__name__)


class Owner(Enum):
    """Which input contour a piece of boundary came from."""

    A = "a"
    B = "b"


@dataclass(frozen=True, slots=True)
class TaggedEdge:
    """A boundary piece labelled with its source contour."""

    edge: Edge
    owner: Owner


@dataclass
class MergeResult:
    """Outcome of a single merge attempt.

    Attributes:
        contours: The merged contour, or nothing if no loop could be closed
        problems: Pieces left over by a stitch that could not be closed
    """

    contours: list[Contour] = field(default_factory=list)
    problems: list[Edge] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return bool(self.contours)


def _edge_box(edge: Edge) -> BoundingBox:
    return bounding_box([edge.start, edge.end])


def _split(edge: Edge, cuts: list[Point]) -> list[Edge]:
    """Split an edge at the given points, ordered by distance from its start."""
    direction = edge.direction
    interior = [
        p for p in cuts if not points_equal(p, edge.start) and not points_equal(p, edge.end)
    ]
    interior.sort(key=lambda p: (p - edge.start).dot(direction))
    chain = dedup_points([edge.start, *interior, edge.end])
    return [Edge(p, q) for p, q in zip(chain, chain[1:])]


def _turn_angle(incoming: Point, outgoing: Point) -> float:
    """Signed turn from one direction to the next; negative turns right."""
    angle = math.atan2(incoming.cross(outgoing), incoming.dot(outgoing))
    # A full reversal is the least preferred turn either way.
    if angle < -math.pi + EPSILON:
        angle = math.pi
    return angle


class ContourMerger:
    """Merges pairs of contours into their union.

    Example:
        merger = ContourMerger()
        if merger.is_mergeable(a, b):
            result = merger.merge(a, b)
    """

    def is_mergeable(self, a: Contour, b: Contour) -> bool:
        """Check whether any edge of a crosses or touches any edge of b.

        Args:
            a: First contour
            b: Second contour

        Returns:
            True if the boundaries meet anywhere; symmetric in a and b
        """
        if not boxes_overlap(a.bounding_box(), b.bounding_box()):
            return False

        b_edges = [(eb, _edge_box(eb)) for eb in b.edges()]
        for ea in a.edges():
            box_a = _edge_box(ea)
            for eb, box_b in b_edges:
                if boxes_overlap(box_a, box_b) and (crosses(ea, eb) or touches(ea, eb)):
                    return True
        return False

    def is_superset_of(self, a: Contour, b: Contour) -> bool:
        """Check whether a contains every boundary vertex and edge midpoint of b.

        Vertices alone are not enough: a stroke whose end caps are covered
        can still span open space between them. Containment goes through
        a's shapes, so b is covered even where it pokes past a's
        tessellation by less than the chord error.
        """
        return all(
            a.contains(edge.start) and a.contains(edge.midpoint) for edge in b.edges()
        )

    def merge(self, a: Contour, b: Contour) -> MergeResult:
        """Merge two mergeable contours, neither a superset of the other.

        The largest counter-clockwise loop closed by the stitch becomes the
        merged boundary; every other closed loop is kept as a hole. The
        merged contour lists a's shapes followed by b's.

        Args:
            a: First contour
            b: Second contour

        Returns:
            MergeResult holding the merged contour, or only problems if no
            outer loop could be closed
        """
        pieces = self._break(a, b)
        loops, problems = self._stitch(pieces)
        logger.debug(
            "Contours stitched",
            pieces=len(pieces),
            loops=len(loops),
            problems=len(problems),
        )

        outer = max(
            (loop for loop in loops if signed_area(loop) > 0),
            key=signed_area,
            default=None,
        )
        if outer is None:
            logger.debug("No outer loop closed", pieces=len(pieces))
            return MergeResult(problems=problems or [p.edge for p in pieces])

        holes = [loop for loop in loops if loop is not outer]
        merged = Contour(boundary=outer, shapes=[*a.shapes, *b.shapes], holes=holes)
        return MergeResult(contours=[merged], problems=problems)

    def _break(self, a: Contour, b: Contour) -> list[TaggedEdge]:
        edges_a = a.edges()
        edges_b = b.edges()
        boxes_b = [_edge_box(eb) for eb in edges_b]
        cuts_a: list[list[Point]] = [[] for _ in edges_a]
        cuts_b: list[list[Point]] = [[] for _ in edges_b]

        for i, ea in enumerate(edges_a):
            box_a = _edge_box(ea)
            for j, eb in enumerate(edges_b):
                if not boxes_overlap(box_a, boxes_b[j]):
                    continue
                if crosses(ea, eb):
                    p = find_intersection(ea, eb)
                    cuts_a[i].append(p)
                    cuts_b[j].append(p)
                elif touches(ea, eb):
                    cuts_a[i].extend(q for q in (eb.start, eb.end) if point_on_segment(q, ea))
                    cuts_b[j].extend(q for q in (ea.start, ea.end) if point_on_segment(q, eb))

        pieces: list[TaggedEdge] = []
        for owner, edges, cuts, other, other_edges in (
            (Owner.A, edges_a, cuts_a, b, edges_b),
            (Owner.B, edges_b, cuts_b, a, edges_a),
        ):
            for edge, edge_cuts in zip(edges, cuts):
                for piece in _split(edge, edge_cuts):
                    if self._keeps(piece, owner, other, other_edges):
                        pieces.append(TaggedEdge(piece, owner))
        return pieces

    def _keeps(self, piece: Edge, owner: Owner, other: Contour, other_edges: list[Edge]) -> bool:
        """Decide whether a piece belongs on the union's boundary.

        A piece running along one of the other contour's edges (both ends on
        it, parallel to it) is part of a shared stretch: kept once (from a)
        when both run the same way, dropped when they run against each other.
        Any other piece survives iff its midpoint is outside the other
        contour. Short pieces next to a crossing lie within EPSILON of the
        other boundary without running along it, so nearness alone is not a
        seam.
        """
        direction = piece.direction
        for other_edge in other_edges:
            if (
                abs(direction.cross(other_edge.direction)) <= EPSILON
                and point_on_segment(piece.start, other_edge)
                and point_on_segment(piece.end, other_edge)
            ):
                return owner is Owner.A and direction.dot(other_edge.direction) > 0
        return not other.encloses(piece.midpoint)

    def _stitch(self, pieces: list[TaggedEdge]) -> tuple[list[list[Point]], list[Edge]]:
        """Chain pieces into closed loops in a single pass.

        Returns:
            Tuple of (closed loops, problems). On the first chain that cannot
            be continued, that chain and every unconsumed piece become
            problems and stitching stops.
        """
        unused = list(range(len(pieces)))
        loops: list[list[Point]] = []

        while unused:
            seed = self._pick_seed(pieces, unused)
            unused.remove(seed)
            chain = [pieces[seed]]
            origin = pieces[seed].edge.start

            while not points_equal(chain[-1].edge.end, origin):
                following = self._next_piece(pieces, unused, chain[-1])
                if following is None:
                    problems = [p.edge for p in chain] + [pieces[k].edge for k in unused]
                    return loops, problems
                unused.remove(following)
                chain.append(pieces[following])

            loops.append([p.edge.start for p in chain])

        return loops, []

    def _pick_seed(self, pieces: list[TaggedEdge], unused: list[int]) -> int:
        """Prefer a piece whose start is not shared with another piece."""
        for k in unused:
            start = pieces[k].edge.start
            sharing = sum(1 for m in unused if points_equal(pieces[m].edge.start, start))
            if sharing == 1:
                return k
        return unused[0]

    def _next_piece(
        self, pieces: list[TaggedEdge], unused: list[int], current: TaggedEdge
    ) -> int | None:
        end = current.edge.end
        candidates = [k for k in unused if points_equal(pieces[k].edge.start, end)]
        if not candidates:
            return None

        switching = [k for k in candidates if pieces[k].owner is not current.owner]
        pool = switching or candidates
        incoming = current.edge.direction
        return min(pool, key=lambda k: _turn_angle(incoming, pieces[k].edge.direction))

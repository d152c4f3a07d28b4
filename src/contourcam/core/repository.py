"""Working set of contours merged down to a fixed point."""

from collections.abc import Iterator

import structlog

from contourcam.core.contour import Contour
from contourcam.core.merger import ContourMerger, MergeResult
from contourcam.domain import Edge

logger = structlog.get_logger(__name__)


class ContourRepository:
    """Holds contours and merges them until no pair overlaps.

    Contours are owned by the repository: a merge replaces its two inputs by
    the merged contour, and a contour found inside another is dropped.
    Fragments from merges that could not close a loop are collected in
    `problems`; such a pair is never retried.

    Example:
        repo = ContourRepository()
        for shape in shapes:
            repo.add(Contour.from_shape(shape))
        repo.merge_all()
        for contour in repo:
            ...
    """

    def __init__(self, merger: ContourMerger | None = None) -> None:
        self._merger = merger or ContourMerger()
        self._contours: list[Contour] = []
        self._failed: list[tuple[Contour, Contour]] = []
        self.problems: list[Edge] = []

    @property
    def contours(self) -> list[Contour]:
        return list(self._contours)

    def __len__(self) -> int:
        return len(self._contours)

    def __iter__(self) -> Iterator[Contour]:
        return iter(list(self._contours))

    def add(self, contour: Contour) -> None:
        """Add a contour, absorbing or merging it where possible.

        The contour is discarded if an existing contour already covers it,
        replaces an existing contour it covers, merges with the first
        existing contour it meets, and is otherwise inserted as is.
        """
        for existing in self._contours:
            if self._merger.is_superset_of(existing, contour):
                logger.debug("Contour absorbed on add", shapes=len(contour.shapes))
                return

        for index, existing in enumerate(self._contours):
            if self._merger.is_superset_of(contour, existing):
                self._contours[index] = contour
                return
            if self._merger.is_mergeable(existing, contour):
                result = self._merger.merge(existing, contour)
                self._record(result, existing, contour)
                if result.succeeded:
                    self._contours[index] = result.contours[0]
                else:
                    self._contours.append(contour)
                return

        self._contours.append(contour)

    def merge_all(self) -> int:
        """Merge and absorb contours until a fixed point is reached.

        Each round scans unordered pairs and applies the first change found:
        dropping a contour covered by another, or merging a mergeable pair.
        The scan restarts after every change and stops when a full scan
        changes nothing.

        Returns:
            Number of changes applied
        """
        changes = 0
        while self._merge_step():
            changes += 1
        logger.debug(
            "Contours merged",
            changes=changes,
            contours=len(self._contours),
            problems=len(self.problems),
        )
        return changes

    def _merge_step(self) -> bool:
        contours = self._contours
        for i in range(len(contours)):
            for j in range(i + 1, len(contours)):
                a = contours[i]
                b = contours[j]
                if self._has_failed(a, b):
                    continue

                if self._merger.is_superset_of(a, b):
                    del contours[j]
                    return True
                if self._merger.is_superset_of(b, a):
                    del contours[i]
                    return True

                if not self._merger.is_mergeable(a, b):
                    continue

                result = self._merger.merge(a, b)
                self._record(result, a, b)
                if result.succeeded:
                    contours[i] = result.contours[0]
                    del contours[j]
                    return True
        return False

    def _has_failed(self, a: Contour, b: Contour) -> bool:
        return any(
            (x is a and y is b) or (x is b and y is a) for x, y in self._failed
        )

    def _record(self, result: MergeResult, a: Contour, b: Contour) -> None:
        if result.problems:
            logger.warning(
                "Merge left unstitched edges",
                problems=len(result.problems),
                closed=result.succeeded,
            )
            self.problems.extend(result.problems)
        if not result.succeeded:
            self._failed.append((a, b))

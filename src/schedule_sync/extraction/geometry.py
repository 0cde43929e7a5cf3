"""Rectangle arithmetic for deciding which glyphs, words and columns belong together.

All three overlap measures share one normalized form::

    (U - (A + B)) / (U + A + B)

where ``U`` is the size of the union and ``A``/``B`` the sizes of the two
inputs. The result is negative when the boxes share extent, positive when
there is a visible gap, and exactly 0 when they touch.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from functools import reduce


@dataclass(frozen=True)
class Box:
    """Axis-aligned rectangle in PDF user space (origin bottom-left, y up)."""

    left: float
    bottom: float
    right: float
    top: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.top - self.bottom


def union(a: Box, b: Box) -> Box:
    """Smallest box containing both ``a`` and ``b``."""
    return Box(
        left=min(a.left, b.left),
        bottom=min(a.bottom, b.bottom),
        right=max(a.right, b.right),
        top=max(a.top, b.top),
    )


def union_all(boxes: Iterable[Box]) -> Box:
    """Union of a non-empty iterable of boxes."""
    return reduce(union, boxes)


def area(box: Box) -> float:
    return abs(box.width * box.height)


def _normalized_gap(union_size: float, size_a: float, size_b: float) -> float:
    total = size_a + size_b
    denominator = union_size + total
    if denominator == 0:
        return 0.0
    return (union_size - total) / denominator


def overlap(a: Box, b: Box) -> float:
    """Area-based overlap, used to group glyphs into words."""
    return _normalized_gap(area(union(a, b)), area(a), area(b))


def line_overlap(a: Box, b: Box) -> float:
    """Overlap of the vertical extents: do the boxes sit on the same text line?"""
    return _normalized_gap(
        abs(union(a, b).height), abs(a.height), abs(b.height)
    )


def column_overlap(a: Box, b: Box) -> float:
    """Overlap of the horizontal extents: do the boxes sit in the same column?"""
    return _normalized_gap(abs(union(a, b).width), abs(a.width), abs(b.width))

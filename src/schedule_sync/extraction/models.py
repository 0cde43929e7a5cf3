"""Data models for positioned text and the tables built from it."""

from dataclasses import dataclass, field
from functools import cached_property

from .geometry import Box, union_all

# Overlay kinds recorded while segmenting a page, in drawing order
MARKUP_KINDS = ("marks", "words", "lines", "columns")


@dataclass(frozen=True)
class GlyphMark:
    """A single positioned character reported by the PDF text extractor."""

    text: str
    box: Box


@dataclass(frozen=True)
class Word:
    """Contiguous glyph marks; text is their concatenation."""

    marks: tuple[GlyphMark, ...]

    @cached_property
    def text(self) -> str:
        return "".join(mark.text for mark in self.marks)

    @cached_property
    def box(self) -> Box:
        return union_all(mark.box for mark in self.marks)


@dataclass(frozen=True)
class Line:
    """Words on one horizontal band, ordered left-to-right."""

    words: tuple[Word, ...]

    @cached_property
    def box(self) -> Box:
        return union_all(word.box for word in self.words)


@dataclass(frozen=True)
class Column:
    """Words sharing one vertical band of the table."""

    words: tuple[Word, ...]

    @cached_property
    def box(self) -> Box:
        return union_all(word.box for word in self.words)


@dataclass
class Markup:
    """Rectangles collected while segmenting one page, grouped by kind.

    Each call to ``add`` appends one group; the overlay writer draws every
    group of a kind in that kind's color.
    """

    page_number: int = 1
    groups: dict[str, list[list[Box]]] = field(default_factory=dict)

    def add(self, kind: str, boxes: list[Box]) -> None:
        if kind not in MARKUP_KINDS:
            raise ValueError(f"Unknown markup kind: {kind!r}")
        self.groups.setdefault(kind, []).append(list(boxes))

    def boxes(self, kind: str) -> list[Box]:
        """All boxes recorded for ``kind``, flattened across groups."""
        return [box for group in self.groups.get(kind, []) for box in group]


@dataclass
class TableExtraction:
    """A schedule table extracted from one page, with its segmentation overlay."""

    table: list[list[str]]
    markup: Markup
    labels: list[str] = field(default_factory=list)
    dates: list[str] = field(default_factory=list)

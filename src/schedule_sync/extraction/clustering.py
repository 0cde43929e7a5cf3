"""Cluster words into text lines and table columns."""

from collections.abc import Callable, Iterable

from ..logger import logger
from .geometry import Box, column_overlap, line_overlap
from .models import Column, Line, Markup, Word


def _best_match(
    box: Box, anchors: list[Box], measure: Callable[[Box, Box], float]
) -> int | None:
    """Index of the anchor with the most negative ``measure``, or None.

    Only strictly negative values count as a match. On ties the earliest
    anchor wins.
    """
    best_index = None
    best_value = 0.0
    for index, anchor in enumerate(anchors):
        value = measure(box, anchor)
        if value < best_value:
            best_index = index
            best_value = value
    return best_index


def cluster_lines(words: Iterable[Word], markup: Markup | None = None) -> list[Line]:
    """Group words that share a horizontal band into lines.

    Each word is compared with the first word of every existing line and
    joins the best match by ``line_overlap``; otherwise it starts a new line.

    Returns:
        Lines sorted top-to-bottom, each with its words sorted left-to-right.
    """
    groups: list[list[Word]] = []
    anchors: list[Box] = []

    for word in words:
        index = _best_match(word.box, anchors, line_overlap)
        if index is None:
            groups.append([word])
            anchors.append(word.box)
        else:
            groups[index].append(word)

    # PDF y grows upward, so the top line has the largest bottom coordinate
    groups.sort(key=lambda group: -group[0].box.bottom)
    lines = [
        Line(words=tuple(sorted(group, key=lambda word: word.box.left)))
        for group in groups
    ]

    if markup is not None:
        markup.add("lines", [line.box for line in lines])

    logger.debug("clustered lines", lines=len(lines))
    return lines


def cluster_columns(lines: Iterable[Line], markup: Markup | None = None) -> list[Column]:
    """Find the table's columns from the words of multi-word lines.

    Single-word lines carry no grid information and are skipped. Each word
    joins the column candidate whose first word has the most negative
    ``column_overlap``; otherwise it starts a new candidate. Candidates are
    sorted left-to-right and neighbours that touch or overlap are merged.

    Returns:
        Columns ordered left-to-right.
    """
    groups: list[list[Word]] = []
    anchors: list[Box] = []

    for line in lines:
        if len(line.words) < 2:
            continue
        for word in line.words:
            index = _best_match(word.box, anchors, column_overlap)
            if index is None:
                groups.append([word])
                anchors.append(word.box)
            else:
                groups[index].append(word)

    candidates = sorted(
        (Column(words=tuple(group)) for group in groups),
        key=lambda column: column.box.left,
    )
    columns = _merge_touching(candidates)

    if markup is not None:
        markup.add("columns", [column.box for column in columns])

    logger.debug(
        "clustered columns", candidates=len(candidates), columns=len(columns)
    )
    return columns


def _merge_touching(columns: list[Column]) -> list[Column]:
    merged: list[Column] = []
    for column in columns:
        if merged and column_overlap(merged[-1].box, column.box) <= 0:
            merged[-1] = Column(words=merged[-1].words + column.words)
        else:
            merged.append(column)
    return merged

"""Project clustered words onto the column grid and serialize the result."""

import csv
import io
from collections.abc import Sequence

from ..logger import logger
from .geometry import column_overlap
from .header import DATE_RE, ExtractionError, find_date_row, normalize_cell
from .models import Column, Line


class TableShapeError(ExtractionError):
    """Raised when a table row does not have the header row's width."""

    pass


def assemble_grid(lines: Sequence[Line], columns: Sequence[Column]) -> list[list[str]]:
    """Build one row of cell strings per line.

    Every word goes to the column it overlaps best (most negative
    ``column_overlap``, leftmost on ties). Words landing in the same cell
    are concatenated in line order.

    Raises:
        ExtractionError: If no columns were found.
    """
    if not columns:
        raise ExtractionError("No table columns found on page")

    grid = []
    for line in lines:
        cells = [""] * len(columns)
        for word in line.words:
            index = min(
                range(len(columns)),
                key=lambda i: column_overlap(word.box, columns[i].box),
            )
            cells[index] += word.text
        grid.append([normalize_cell(cell) for cell in cells])
    return grid


def build_schedule_table(
    labels: Sequence[str], dates: Sequence[str], grid: Sequence[Sequence[str]]
) -> list[list[str]]:
    """Cut the schedule out of the page grid and label it.

    The first grid row carrying dates is the header line; rows after it are
    the data rows and column 0 holds their employee labels. Header cells are
    reduced to their dates. When Friday and Saturday share a column the
    merged cell keeps both dates (space separated) for the repair layer.
    The text labels and dates only cross-check the grid; they are never
    inserted into the table.

    Args:
        labels: Employee labels read from the page text.
        dates: Date header read from the page text (placeholder first).
        grid: Output of ``assemble_grid``.

    Returns:
        The schedule table, header row first.

    Raises:
        ExtractionError: If the grid has no date line, or its dates differ
            from the ones in the page text.
    """
    header_index = find_date_row(grid)
    if header_index is None:
        raise ExtractionError("No date header line found in table grid")

    header_line = grid[header_index]
    found = [date for cell in header_line for date in DATE_RE.findall(cell)]
    if found != list(dates[1:]):
        raise ExtractionError(
            f"Grid header dates {found} do not match page text dates {list(dates[1:])}"
        )

    header = [""] + [" ".join(DATE_RE.findall(cell)) for cell in header_line[1:]]
    table = [header]

    known_labels = {_squash(label) for label in labels}
    for row in grid[header_index + 1 :]:
        label = row[0]
        if label and _squash(label) not in known_labels:
            logger.warn("row label not found in page text", label=label)
        table.append(list(row))

    return table


def _squash(text: str) -> str:
    return "".join(text.split())


def to_csv(table: Sequence[Sequence[str]]) -> str:
    """Serialize ``table`` as comma-separated text.

    Raises:
        TableShapeError: If any row's width differs from the first row's.
            Nothing is written in that case.
    """
    if not table:
        return ""

    width, height = len(table[0]), len(table)
    for index, row in enumerate(table):
        if len(row) != width:
            raise TableShapeError(
                f"table = {width} x {height} row[{index}]={len(row)} {list(row)!r}"
            )

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerows(table)
    return buffer.getvalue()


def from_csv(text: str) -> list[list[str]]:
    """Parse comma-separated text produced by ``to_csv``."""
    return list(csv.reader(io.StringIO(text)))

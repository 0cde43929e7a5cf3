"""Read the employee labels and week dates from the raw page text.

In content order the schedule PDF carries its employee labels first, then
the day headers (``"Tuesday 10/10/2023"``), then the shift cells. PyMuPDF
splits these into many text blocks, so blank lines between blocks carry no
meaning here. This module pulls the two lists out of the text stream so the
table assembler can check the grid against them.
"""

import re
import unicodedata
from collections.abc import Sequence

DATE_RE = re.compile(r"\d\d?/\d\d?/\d\d\d\d")

# One blank placeholder above the label column, then Monday..Sunday
EXPECTED_DATE_COUNT = 8

WEEKDAY_NAMES = frozenset(
    {"monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"}
)


class ExtractionError(RuntimeError):
    """Raised when the schedule table cannot be extracted from the document."""

    pass


def normalize_cell(text: str) -> str:
    """NFKC-normalize ``text`` and collapse runs of whitespace to one space."""
    return " ".join(unicodedata.normalize("NFKC", text).split())


def _is_weekday(token: str) -> bool:
    return token.lower() in WEEKDAY_NAMES


def extract_header(text: str) -> tuple[list[str], list[str]]:
    """Split the page text into employee labels and the date header row.

    The date run starts at the first line carrying a date and continues
    through lines that carry dates or are bare weekday names; the first
    other line ends it. Every non-empty line before the run is a label.
    Blank lines are ignored throughout.

    Args:
        text: Page text in content order.

    Returns:
        Tuple of (labels, dates). ``dates`` starts with an empty placeholder
        for the label column and holds one ``M/D/YYYY`` string per day.

    Raises:
        ExtractionError: If the date run does not yield exactly 8 entries.
    """
    tokens = [token for token in map(normalize_cell, text.splitlines()) if token]

    start = next(
        (index for index, token in enumerate(tokens) if DATE_RE.search(token)),
        len(tokens),
    )
    # A weekday split from its date by the PDF layout is not a label
    labels = [token for token in tokens[:start] if not _is_weekday(token)]

    dates = [""]
    for token in tokens[start:]:
        found = DATE_RE.findall(token)
        if found:
            dates.extend(found)
        elif not _is_weekday(token):
            break

    if len(dates) != EXPECTED_DATE_COUNT:
        raise ExtractionError(
            "Did not extract correct date row information from pdf. "
            f"Expected {EXPECTED_DATE_COUNT} dates, got: {len(dates)}"
        )
    return labels, dates


def find_date_row(rows: Sequence[Sequence[str]]) -> int | None:
    """Index of the first row with a date in any cell, or None."""
    for index, row in enumerate(rows):
        if any(DATE_RE.search(cell) for cell in row):
            return index
    return None

"""Repair schedule tables whose Friday and Saturday columns were merged.

When the Friday and Saturday columns touch on the page, clustering folds
them into one column and every row comes out one field short. The merged
cell still holds both days' content back to back (``"3:45pm5:00pm"``), so
it can be split apart again by pattern.
"""

import re
from collections.abc import Sequence

from ..extraction.header import DATE_RE, find_date_row
from ..logger import logger

EXPECTED_WIDTH = 8
# Friday; Saturday follows it
REPAIRABLE_INDEX = 5
MERGED_DAY_LABELS = ("Friday", "Saturday")

MERGED_CELL_RE = re.compile(r"(\d\d?:\d\d[pam]{2})|(oncall)|(REQUESTOFF)|(SHIFT|LEAD)")
ON_CALL = "oncall"


class IrreparableTableError(ValueError):
    """Raised when a malformed table does not match the known merge pattern."""

    pass


def needs_repair(records: Sequence[Sequence[str]]) -> bool:
    return any(len(row) != EXPECTED_WIDTH for row in records)


def split_merged_cell(cell: str) -> list[str]:
    """Split a merged Friday/Saturday cell into its two halves.

    - no recognized token: both halves empty
    - one am/pm time: Friday only
    - one "oncall": copied to both days
    - any other single token: both halves empty
    - two or more tokens: the first two, in order
    """
    matches = [match.group(0) for match in MERGED_CELL_RE.finditer(cell)]
    if len(matches) >= 2:
        return matches[:2]
    if not matches:
        return ["", ""]

    match = matches[0]
    if match == ON_CALL:
        return [match, match]
    if "am" in match or "pm" in match:
        return [match, ""]
    return ["", ""]


def is_ambiguous_split(cell: str) -> bool:
    """True when a single token could belong to either merged day."""
    matches = [match.group(0) for match in MERGED_CELL_RE.finditer(cell)]
    return len(matches) == 1 and (matches[0] == ON_CALL or "pm" in matches[0])


def repair_records(records: Sequence[Sequence[str]]) -> list[list[str]]:
    """Rebuild a table whose Friday and Saturday columns were merged.

    Args:
        records: Parsed CSV rows, at least one of which is not 8 wide.

    Returns:
        The table with the merged column split back into two.

    Raises:
        IrreparableTableError: If the date row shows a merge anywhere but the
            Friday column, shows no merge at all, or a row has a width the
            merge cannot explain.
    """
    header_index = find_date_row(records)
    if header_index is None:
        raise IrreparableTableError("No date row found; cannot locate merged columns")

    header = records[header_index]
    merged = [
        index for index, cell in enumerate(header) if len(DATE_RE.findall(cell)) > 1
    ]
    if not merged:
        raise IrreparableTableError(
            f"Rows are not {EXPECTED_WIDTH} wide but no merged date column was found"
        )
    if merged != [REPAIRABLE_INDEX]:
        raise IrreparableTableError(
            f"Merged date column at index {merged} cannot be repaired; "
            f"only index {REPAIRABLE_INDEX} is supported"
        )

    logger.info(
        "repairing merged schedule columns",
        rows=len(records),
        merged_index=REPAIRABLE_INDEX,
    )

    repaired = []
    for row_index, row in enumerate(records):
        if len(row) == EXPECTED_WIDTH:
            repaired.append(list(row))
            continue
        if len(row) != EXPECTED_WIDTH - 1:
            raise IrreparableTableError(
                f"Row {row_index} has {len(row)} fields; expected {EXPECTED_WIDTH - 1} "
                f"or {EXPECTED_WIDTH}"
            )

        cell = row[REPAIRABLE_INDEX]
        if row_index == header_index:
            halves = DATE_RE.findall(cell)[:2]
        elif all(day in cell for day in MERGED_DAY_LABELS):
            halves = list(MERGED_DAY_LABELS)
        else:
            halves = split_merged_cell(cell)
            if is_ambiguous_split(cell):
                logger.warn(
                    "ambiguous merged cell",
                    row=row_index,
                    cell=cell,
                    friday=halves[0],
                    saturday=halves[1],
                )

        repaired.append(
            list(row[:REPAIRABLE_INDEX]) + halves + list(row[REPAIRABLE_INDEX + 1 :])
        )

    return repaired

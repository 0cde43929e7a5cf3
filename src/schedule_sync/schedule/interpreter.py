"""Turn the schedule table into one employee's shifts."""

from collections.abc import Sequence
from datetime import datetime, tzinfo
from zoneinfo import ZoneInfo

from ..extraction.header import find_date_row
from ..extraction.table import from_csv
from ..logger import logger
from .models import Shift, Weekday, WeeklySchedule
from .repair import needs_repair, repair_records

DEFAULT_TIMEZONE = "America/New_York"

# "10/14/2023 8:30am"
TIMESTAMP_FORMAT = "%m/%d/%Y %I:%M%p"

# Start label -> end label. 5:00pm depends on the day, see end_label_for
SHIFT_END_LABELS = {
    "8:30am": "3:00pm",
    "11:00am": "4:00pm",
    "3:45pm": "10:00pm",
    "4:00pm": "10:00pm",
}
LATE_START_LABEL = "5:00pm"
LATE_END_WEEKEND = "11:30pm"
LATE_END_WEEKDAY = "10:15pm"


class EmployeeNotFoundError(LookupError):
    """Raised when no row of the schedule carries the employee's key."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Could not find the employee in the schedule. Looking for: {key}")


class ShiftTimeError(ValueError):
    """Raised when a shift's start or end time cannot be determined."""

    pass


def is_on_call(cell: str) -> bool:
    """On-call designations are not shifts."""
    return cell.replace(" ", "").lower() == "oncall"


def end_label_for(start_label: str, day: Weekday) -> str | None:
    """End-time label for a shift starting at ``start_label``, if known."""
    if start_label == LATE_START_LABEL:
        if day in (Weekday.FRIDAY, Weekday.SATURDAY):
            return LATE_END_WEEKEND
        return LATE_END_WEEKDAY
    return SHIFT_END_LABELS.get(start_label)


def parse_timestamp(date_label: str, time_label: str, tz: tzinfo) -> datetime:
    try:
        naive = datetime.strptime(f"{date_label} {time_label}", TIMESTAMP_FORMAT)
    except ValueError as e:
        raise ShiftTimeError(
            f"Could not parse shift time {time_label!r} on {date_label!r}"
        ) from e
    return naive.replace(tzinfo=tz)


def build_shift(start_label: str, date_label: str, tz: tzinfo | None = None) -> Shift:
    """Build a shift from its start label and the column's date.

    Raises:
        ShiftTimeError: If the start cannot be parsed or no end time is known
            for the start label.
    """
    tz = tz or ZoneInfo(DEFAULT_TIMEZONE)
    # "3:45 pm" and "3:45pm" both appear
    start_label = start_label.replace(" ", "").lower()

    start = parse_timestamp(date_label, start_label, tz)
    day = Weekday.from_date(start.date())

    end_label = end_label_for(start_label, day)
    if end_label is None:
        raise ShiftTimeError(
            f"No end time known for shift starting {start_label!r} on {date_label!r}"
        )
    end = parse_timestamp(date_label, end_label, tz)

    return Shift(day=day, start_time=start, end_time=end)


def interpret_schedule(
    records: Sequence[Sequence[str]], employee_key: str, tz: tzinfo | None = None
) -> WeeklySchedule:
    """Collect the shifts of one employee from the schedule table.

    The employee owns two rows: the one labelled with ``employee_key`` and
    the row right after it. Every non-empty cell in those rows is a start
    time for the date at the top of its column.
    If several rows carry the key, the first one is used.

    Args:
        records: Schedule table, date row first.
        employee_key: Row label in "Last,First" form.
        tz: Timezone of the schedule's wall-clock times.

    Returns:
        WeeklySchedule with shifts in row-major order.

    Raises:
        EmployeeNotFoundError: If no row is labelled ``employee_key``.
        ShiftTimeError: If any shift cannot be built. No partial week is
            returned.
    """
    header_index = find_date_row(records)
    if header_index is None:
        header_index = 0
    dates = dict(enumerate(records[header_index])) if records else {}

    employee_index = next(
        (
            index
            for index, row in enumerate(records)
            if index != header_index and row and row[0] == employee_key
        ),
        None,
    )
    if employee_index is None:
        raise EmployeeNotFoundError(employee_key)

    shifts = []
    for row in records[employee_index : employee_index + 2]:
        for column, cell in enumerate(row[1:], start=1):
            if not cell or is_on_call(cell):
                continue
            shift = build_shift(cell, dates.get(column, ""), tz)
            logger.debug(
                "shift built",
                day=shift.day.name,
                start=shift.start_time.isoformat(),
                end=shift.end_time.isoformat(),
            )
            shifts.append(shift)

    logger.info("schedule interpreted", employee=employee_key, shifts=len(shifts))
    return WeeklySchedule(employee=employee_key, shifts=shifts)


def read_schedule_csv(text: str) -> list[list[str]]:
    return from_csv(text)


def parse_schedule_csv(
    text: str, employee_key: str, tz: tzinfo | None = None
) -> WeeklySchedule:
    """Read a schedule CSV, repair merged columns if needed, and interpret it.

    Raises:
        IrreparableTableError: If the table is malformed beyond repair.
        EmployeeNotFoundError: If the employee's row is missing.
        ShiftTimeError: If a shift time cannot be parsed.
    """
    records = read_schedule_csv(text)
    if needs_repair(records):
        records = repair_records(records)
    return interpret_schedule(records, employee_key, tz)

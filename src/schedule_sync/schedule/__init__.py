from .models import Shift, Weekday, WeeklySchedule
from .names import schedule_name
from .repair import (
    IrreparableTableError,
    needs_repair,
    repair_records,
    split_merged_cell,
)
from .interpreter import (
    EmployeeNotFoundError,
    ShiftTimeError,
    build_shift,
    end_label_for,
    interpret_schedule,
    parse_schedule_csv,
    read_schedule_csv,
)

__all__ = [
    # Models
    "Shift",
    "Weekday",
    "WeeklySchedule",
    # Names
    "schedule_name",
    # Repair
    "needs_repair",
    "repair_records",
    "split_merged_cell",
    "IrreparableTableError",
    # Interpretation
    "build_shift",
    "end_label_for",
    "interpret_schedule",
    "parse_schedule_csv",
    "read_schedule_csv",
    "EmployeeNotFoundError",
    "ShiftTimeError",
]

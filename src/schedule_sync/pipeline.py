"""The weekly run: email -> PDF -> CSV -> shifts -> calendar events."""

import time
from datetime import date
from pathlib import Path

from pydantic import BaseModel, Field

from .clients.calendar import CalendarClient, EventConfirmation
from .clients.gmail import GmailScheduleClient, SearchCriteria, attachment_basename
from .config import Settings
from .extraction import extract_schedule_table, to_csv
from .logger import log_context, logger, set_context
from .schedule import Shift, parse_schedule_csv, schedule_name


class RunResult(BaseModel):
    """Outcome of one weekly sync."""

    message_id: str
    attachment: str
    employee: str
    shifts: list[Shift] = Field(default_factory=list)
    events: list[EventConfirmation] = Field(default_factory=list)
    pdf_path: Path | None = None
    csv_path: Path | None = None
    dry_run: bool = False


def save_artifacts(
    output_dir: Path, basename: str, pdf_bytes: bytes, csv_text: str
) -> tuple[Path, Path]:
    """Write the PDF and its CSV under ``output_dir/pdf`` and ``output_dir/csv``."""
    pdf_dir = output_dir / "pdf"
    csv_dir = output_dir / "csv"
    pdf_dir.mkdir(parents=True, exist_ok=True)
    csv_dir.mkdir(parents=True, exist_ok=True)

    pdf_path = pdf_dir / f"{basename}.pdf"
    csv_path = csv_dir / f"{basename}.csv"
    pdf_path.write_bytes(pdf_bytes)
    csv_path.write_text(csv_text)
    logger.debug("artifacts saved", pdf_path=str(pdf_path), csv_path=str(csv_path))
    return pdf_path, csv_path


def run_weekly_sync(
    settings: Settings,
    gmail: GmailScheduleClient,
    calendar: CalendarClient,
    after: date | None = None,
    before: date | None = None,
    dry_run: bool = False,
) -> RunResult:
    """Find this week's schedule email and put the employee's shifts on the calendar.

    Args:
        settings: Run settings; employee name and sender are required.
        gmail: Client used to find and download the schedule.
        calendar: Client used to create the events.
        after: Only consider mail after this date (default yesterday).
        before: Only consider mail before this date.
        dry_run: Interpret the schedule without creating events.

    Returns:
        RunResult describing the email, the shifts, and any events created.

    Raises:
        ValueError: If required settings are missing.
        ScheduleEmailNotFoundError: If no schedule email is found.
        ExtractionError: If the PDF cannot be turned into a table.
        IrreparableTableError: If the table cannot be repaired.
        EmployeeNotFoundError: If the employee is not on the schedule.
        ShiftTimeError: If a shift time cannot be interpreted.
        CalendarWriteError: If an event cannot be created.
    """
    settings.require_run_fields()
    employee_key = schedule_name(settings.employee_name)
    start = time.perf_counter()

    with log_context(employee=employee_key):
        criteria = SearchCriteria.for_window(
            sender_email=settings.sender_email,
            subject=settings.email_subject,
            after=after,
            before=before,
            attachment_name_pattern=settings.attachment_pattern,
        )
        summary = gmail.find_schedule_email(criteria)
        attachment = summary.attachments[0]
        set_context(message_id=summary.id)

        pdf_bytes = gmail.download_attachment(summary.id, attachment.attachment_id)
        extraction = extract_schedule_table(pdf_bytes)
        csv_text = to_csv(extraction.table)

        pdf_path = csv_path = None
        if settings.output_dir is not None:
            pdf_path, csv_path = save_artifacts(
                settings.output_dir,
                attachment_basename(attachment.filename),
                pdf_bytes,
                csv_text,
            )

        # Interpret from the CSV text so saved artifacts reproduce the run
        schedule = parse_schedule_csv(csv_text, employee_key, settings.tzinfo)

        events = []
        if dry_run:
            logger.info("dry run, skipping calendar", shifts=len(schedule.shifts))
        else:
            events = calendar.add_weekly_schedule(
                schedule, settings.event_title, settings.event_location
            )

        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "weekly sync complete",
            shifts=len(schedule.shifts),
            events=len(events),
            duration_ms=round(duration_ms, 2),
        )
        return RunResult(
            message_id=summary.id,
            attachment=attachment.filename,
            employee=employee_key,
            shifts=schedule.shifts,
            events=events,
            pdf_path=pdf_path,
            csv_path=csv_path,
            dry_run=dry_run,
        )

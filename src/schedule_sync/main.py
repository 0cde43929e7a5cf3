"""Entry point for the schedule-sync CLI."""

import argparse
import logging
import sys
from datetime import date
from pathlib import Path

from google.auth.exceptions import TransportError
from googleapiclient.errors import HttpError
from httplib2 import HttpLib2Error
from pydantic import ValidationError

from .clients import (
    CalendarClient,
    CalendarWriteError,
    CredentialsError,
    GmailScheduleClient,
    ScheduleEmailNotFoundError,
    build_service,
    load_credentials,
)
from .config import Settings
from .extraction import ExtractionError, extract_schedule_table, save_markup, to_csv
from .logger import logger
from .pipeline import run_weekly_sync
from .schedule import (
    EmployeeNotFoundError,
    IrreparableTableError,
    ShiftTimeError,
    parse_schedule_csv,
    schedule_name,
)

# Most specific first; the first match names the failing stage
STAGE_ERRORS: list[tuple[type[Exception], str]] = [
    (CredentialsError, "auth"),
    (ScheduleEmailNotFoundError, "email"),
    (HttpError, "email"),
    (ExtractionError, "extraction"),
    (FileNotFoundError, "extraction"),
    (TransportError, "network"),
    (HttpLib2Error, "network"),
    (OSError, "network"),
    (IrreparableTableError, "repair"),
    (EmployeeNotFoundError, "interpretation"),
    (ShiftTimeError, "interpretation"),
    (CalendarWriteError, "calendar"),
    (ValidationError, "config"),
    (ValueError, "config"),
]


def stage_for(error: Exception) -> str:
    return next(
        (stage for error_type, stage in STAGE_ERRORS if isinstance(error, error_type)),
        "unknown",
    )


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid date {value!r}, use YYYY-MM-DD") from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schedule-sync",
        description="Put the weekly work schedule on Google Calendar",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    run = commands.add_parser("run", help="Email -> PDF -> shifts -> calendar events")
    run.add_argument("--after", type=_parse_date, help="Search mail after YYYY-MM-DD (default: yesterday)")
    run.add_argument("--before", type=_parse_date, help="Search mail before YYYY-MM-DD")
    run.add_argument("--dry-run", action="store_true", help="Interpret without creating events")

    extract = commands.add_parser("extract", help="Extract the schedule table from a PDF")
    extract.add_argument("pdf", type=Path, help="Schedule PDF")
    extract.add_argument("--csv-out", type=Path, help="Write CSV here instead of stdout")
    extract.add_argument("--markup-out", type=Path, help="Save a PDF with segmentation boxes drawn")

    interpret = commands.add_parser("interpret", help="Print one employee's shifts from a CSV")
    interpret.add_argument("csv", type=Path, help="Schedule CSV")
    interpret.add_argument("--name", required=True, help='Employee name, e.g. "Conor Ney"')

    return parser


def _cmd_run(args: argparse.Namespace, settings: Settings) -> None:
    settings.require_run_fields()
    creds = load_credentials(settings.token_path)
    gmail = GmailScheduleClient(build_service("gmail", "v1", creds))
    calendar = CalendarClient(
        build_service("calendar", "v3", creds),
        calendar_id=settings.calendar_id,
        time_zone=settings.timezone,
    )
    result = run_weekly_sync(
        settings,
        gmail,
        calendar,
        after=args.after,
        before=args.before,
        dry_run=args.dry_run,
    )
    print(result.model_dump_json(indent=2))


def _cmd_extract(args: argparse.Namespace, settings: Settings) -> None:
    extraction = extract_schedule_table(args.pdf)
    csv_text = to_csv(extraction.table)
    if args.csv_out:
        args.csv_out.write_text(csv_text)
        logger.info("csv written", path=str(args.csv_out), rows=len(extraction.table))
    else:
        sys.stdout.write(csv_text)
    if args.markup_out:
        save_markup(args.pdf, extraction.markup, args.markup_out)


def _cmd_interpret(args: argparse.Namespace, settings: Settings) -> None:
    schedule = parse_schedule_csv(
        args.csv.read_text(), schedule_name(args.name), settings.tzinfo
    )
    print(schedule.model_dump_json(indent=2))


COMMANDS = {
    "run": _cmd_run,
    "extract": _cmd_extract,
    "interpret": _cmd_interpret,
}


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    # stdout carries the command output
    previous_stream = logger.set_stream(sys.stderr)

    try:
        settings = Settings.from_env()
        if args.debug or settings.debug:
            logger.set_level(logging.DEBUG)
        COMMANDS[args.command](args, settings)
    except (
        CredentialsError,
        ScheduleEmailNotFoundError,
        HttpError,
        ExtractionError,
        FileNotFoundError,
        TransportError,
        HttpLib2Error,
        OSError,
        IrreparableTableError,
        EmployeeNotFoundError,
        ShiftTimeError,
        CalendarWriteError,
        ValueError,
    ) as e:
        logger.exception(
            "schedule sync failed", command=args.command, stage=stage_for(e)
        )
        return 1
    finally:
        logger.set_stream(previous_stream)
    return 0


if __name__ == "__main__":
    sys.exit(main())

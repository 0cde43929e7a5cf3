"""Environment-driven settings."""

import os
from collections.abc import Mapping
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, field_validator

from .clients.gmail import DEFAULT_ATTACHMENT_PATTERN, DEFAULT_SUBJECT
from .schedule.interpreter import DEFAULT_TIMEZONE

_TRUE_VALUES = {"1", "t", "true", "yes", "on"}
_FALSE_VALUES = {"", "0", "f", "false", "no", "off"}


def parse_bool(value: str | None) -> bool:
    """Parse a boolean flag from the environment; unset means False."""
    if value is None:
        return False
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ValueError(f"Invalid boolean value: {value!r}")


class Settings(BaseModel):
    employee_name: str | None = None
    sender_email: str | None = None
    email_subject: str = DEFAULT_SUBJECT
    attachment_pattern: str = DEFAULT_ATTACHMENT_PATTERN
    timezone: str = DEFAULT_TIMEZONE
    event_title: str = "Work"
    event_location: str = ""
    calendar_id: str = "primary"
    token_path: Path = Path("token.json")
    output_dir: Path | None = None
    debug: bool = False

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {value}") from e
        return value

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ``.

        Raises:
            ValueError: If ``DEBUG`` is not a boolean or the timezone is unknown.
        """
        env = os.environ if environ is None else environ
        output_dir = env.get("SCHEDULE_OUTPUT_DIR")
        return cls(
            employee_name=env.get("SCHEDULE_EMPLOYEE_NAME") or None,
            sender_email=env.get("SCHEDULE_SENDER_EMAIL") or None,
            email_subject=env.get("SCHEDULE_EMAIL_SUBJECT", DEFAULT_SUBJECT),
            attachment_pattern=env.get(
                "SCHEDULE_ATTACHMENT_PATTERN", DEFAULT_ATTACHMENT_PATTERN
            ),
            timezone=env.get("SCHEDULE_TIMEZONE", DEFAULT_TIMEZONE),
            event_title=env.get("SCHEDULE_EVENT_TITLE", "Work"),
            event_location=env.get("SCHEDULE_EVENT_LOCATION", ""),
            calendar_id=env.get("SCHEDULE_CALENDAR_ID", "primary"),
            token_path=Path(env.get("GOOGLE_TOKEN_PATH", "token.json")),
            output_dir=Path(output_dir) if output_dir else None,
            debug=parse_bool(env.get("DEBUG")),
        )

    def require_run_fields(self) -> None:
        """Check the fields a full run needs.

        Raises:
            ValueError: Naming the missing environment variables.
        """
        missing = []
        if not self.employee_name:
            missing.append("SCHEDULE_EMPLOYEE_NAME")
        if not self.sender_email:
            missing.append("SCHEDULE_SENDER_EMAIL")
        if missing:
            raise ValueError(f"Missing required settings: {', '.join(missing)}")

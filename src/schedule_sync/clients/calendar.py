"""Google Calendar event creation for scheduled shifts."""

from datetime import datetime
from typing import Any

from googleapiclient.errors import HttpError
from pydantic import BaseModel

from ..logger import logger
from ..schedule.models import WeeklySchedule


class CalendarWriteError(RuntimeError):
    """Raised when an event cannot be added to the calendar."""

    pass


class EventConfirmation(BaseModel):
    event_id: str
    html_link: str = ""


class CalendarClient:
    """Writes shifts to a Google Calendar."""

    def __init__(
        self,
        service: Any,
        calendar_id: str = "primary",
        time_zone: str | None = None,
    ):
        """Initialize the client.

        Args:
            service: A Calendar v3 API resource from ``build_service``.
            calendar_id: Calendar to write to.
            time_zone: Optional IANA zone name sent with each event.
        """
        self._service = service
        self._calendar_id = calendar_id
        self._time_zone = time_zone

    def make_event(
        self, start: datetime, end: datetime, title: str, location: str = ""
    ) -> dict:
        start_field = {"dateTime": start.isoformat()}
        end_field = {"dateTime": end.isoformat()}
        if self._time_zone:
            start_field["timeZone"] = self._time_zone
            end_field["timeZone"] = self._time_zone

        event = {"summary": title, "start": start_field, "end": end_field}
        if location:
            event["location"] = location
        return event

    def create_event(
        self, start: datetime, end: datetime, title: str, location: str = ""
    ) -> EventConfirmation:
        """Insert one event.

        Raises:
            CalendarWriteError: If the Calendar API rejects the request.
        """
        event = self.make_event(start, end, title, location)
        try:
            created = (
                self._service.events()
                .insert(calendarId=self._calendar_id, body=event)
                .execute()
            )
        except HttpError as e:
            raise CalendarWriteError(f"Unable to add event to calendar: {e}") from e

        confirmation = EventConfirmation(
            event_id=created.get("id", ""), html_link=created.get("htmlLink", "")
        )
        logger.info(
            "event created",
            event_id=confirmation.event_id,
            html_link=confirmation.html_link,
            start=event["start"]["dateTime"],
        )
        return confirmation

    def add_weekly_schedule(
        self, schedule: WeeklySchedule, title: str, location: str = ""
    ) -> list[EventConfirmation]:
        """Create one event per shift, stopping at the first failure.

        Raises:
            CalendarWriteError: Naming the start time of the shift that failed.
        """
        confirmations = []
        for shift in schedule.shifts:
            try:
                confirmations.append(
                    self.create_event(shift.start_time, shift.end_time, title, location)
                )
            except CalendarWriteError as e:
                raise CalendarWriteError(
                    f"Couldn't add shift to calendar: Start Time: "
                    f"{shift.start_time.isoformat()} Err: {e}"
                ) from e
        logger.info(
            "weekly schedule added",
            employee=schedule.employee,
            events=len(confirmations),
        )
        return confirmations

"""Tests for the Calendar client with a mocked API service."""

from datetime import datetime
from unittest.mock import MagicMock
from zoneinfo import ZoneInfo

import pytest
from googleapiclient.errors import HttpError

from schedule_sync.clients.calendar import CalendarClient, CalendarWriteError
from schedule_sync.schedule.models import Shift, Weekday, WeeklySchedule

NEW_YORK = ZoneInfo("America/New_York")
START = datetime(2023, 10, 14, 8, 30, tzinfo=NEW_YORK)
END = datetime(2023, 10, 14, 15, 0, tzinfo=NEW_YORK)


def _http_error() -> HttpError:
    return HttpError(resp=MagicMock(status=403, reason="Forbidden"), content=b"denied")


def _schedule() -> WeeklySchedule:
    return WeeklySchedule(
        employee="Ney,Conor",
        shifts=[
            Shift(day=Weekday.SATURDAY, start_time=START, end_time=END),
            Shift(
                day=Weekday.SUNDAY,
                start_time=datetime(2023, 10, 15, 17, 0, tzinfo=NEW_YORK),
                end_time=datetime(2023, 10, 15, 22, 15, tzinfo=NEW_YORK),
            ),
        ],
    )


class TestMakeEvent:
    def test_rfc3339_times(self):
        event = CalendarClient(MagicMock()).make_event(START, END, "Work", "LMNO")
        assert event == {
            "summary": "Work",
            "location": "LMNO",
            "start": {"dateTime": "2023-10-14T08:30:00-04:00"},
            "end": {"dateTime": "2023-10-14T15:00:00-04:00"},
        }

    def test_time_zone_and_no_location(self):
        client = CalendarClient(MagicMock(), time_zone="America/New_York")
        event = client.make_event(START, END, "Work")
        assert "location" not in event
        assert event["start"]["timeZone"] == "America/New_York"


class TestCalendarClient:
    """Tests for event creation."""

    def test_create_event(self):
        service = MagicMock()
        service.events.return_value.insert.return_value.execute.return_value = {
            "id": "evt1",
            "htmlLink": "https://calendar.google.com/event?eid=evt1",
        }

        confirmation = CalendarClient(service, calendar_id="work").create_event(
            START, END, "Work"
        )

        assert confirmation.event_id == "evt1"
        assert confirmation.html_link.endswith("evt1")
        kwargs = service.events.return_value.insert.call_args.kwargs
        assert kwargs["calendarId"] == "work"
        assert kwargs["body"]["summary"] == "Work"

    def test_create_event_error(self):
        service = MagicMock()
        service.events.return_value.insert.return_value.execute.side_effect = _http_error()
        with pytest.raises(CalendarWriteError, match="Unable to add event"):
            CalendarClient(service).create_event(START, END, "Work")

    def test_add_weekly_schedule(self):
        service = MagicMock()
        service.events.return_value.insert.return_value.execute.side_effect = [
            {"id": "evt1", "htmlLink": "link1"},
            {"id": "evt2", "htmlLink": "link2"},
        ]

        confirmations = CalendarClient(service).add_weekly_schedule(_schedule(), "Work")

        assert [c.event_id for c in confirmations] == ["evt1", "evt2"]

    def test_stops_at_first_failure(self):
        service = MagicMock()
        insert = service.events.return_value.insert
        insert.return_value.execute.side_effect = [_http_error(), {"id": "evt2"}]

        with pytest.raises(CalendarWriteError, match="Start Time: 2023-10-14T08:30:00-04:00"):
            CalendarClient(service).add_weekly_schedule(_schedule(), "Work")
        assert insert.call_count == 1

    def test_empty_schedule(self):
        service = MagicMock()
        confirmations = CalendarClient(service).add_weekly_schedule(
            WeeklySchedule(employee="Ney,Conor"), "Work"
        )
        assert confirmations == []
        service.events.assert_not_called()

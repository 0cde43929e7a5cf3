from .auth import CredentialsError, build_service, load_credentials
from .gmail import (
    AttachmentRef,
    GmailScheduleClient,
    MessageSummary,
    ScheduleEmailNotFoundError,
    SearchCriteria,
    attachment_basename,
)
from .calendar import CalendarClient, CalendarWriteError, EventConfirmation

__all__ = [
    # Auth
    "load_credentials",
    "build_service",
    "CredentialsError",
    # Gmail
    "SearchCriteria",
    "MessageSummary",
    "AttachmentRef",
    "GmailScheduleClient",
    "attachment_basename",
    "ScheduleEmailNotFoundError",
    # Calendar
    "CalendarClient",
    "EventConfirmation",
    "CalendarWriteError",
]

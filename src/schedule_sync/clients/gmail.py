"""Gmail search for schedule emails and attachment download."""

import base64
import re
from collections.abc import Iterator
from datetime import date, timedelta
from typing import Any

from googleapiclient.errors import HttpError
from pydantic import BaseModel, Field

from ..logger import logger

DEFAULT_SUBJECT = "Server Schedule"
DEFAULT_ATTACHMENT_PATTERN = r"^Server Schedule"


class ScheduleEmailNotFoundError(LookupError):
    """Raised when no email (or no matching attachment) fits the search."""

    pass


class SearchCriteria(BaseModel):
    """What to look for in the inbox."""

    sender_email: str
    subject: str = DEFAULT_SUBJECT
    date_after: date
    date_before: date | None = None
    has_attachment: bool = True
    # Not part of the Gmail query; confirms which attachment is the schedule
    attachment_name_pattern: str = DEFAULT_ATTACHMENT_PATTERN

    @classmethod
    def for_window(
        cls,
        sender_email: str,
        subject: str = DEFAULT_SUBJECT,
        after: date | None = None,
        before: date | None = None,
        attachment_name_pattern: str = DEFAULT_ATTACHMENT_PATTERN,
    ) -> "SearchCriteria":
        """Criteria for a date window; without ``after`` search since yesterday."""
        if after is None:
            after = date.today() - timedelta(days=1)
        return cls(
            sender_email=sender_email,
            subject=subject,
            date_after=after,
            date_before=before,
            attachment_name_pattern=attachment_name_pattern,
        )

    def to_query(self) -> str:
        """Gmail search string, e.g.
        ``from:(a@b.com) subject:(Server Schedule) has:attachment after:2023/10/8``.
        """
        parts = [f"from:({self.sender_email})", f"subject:({self.subject})"]
        if self.has_attachment:
            parts.append("has:attachment")
        parts.append(f"after:{_gmail_date(self.date_after)}")
        if self.date_before is not None:
            parts.append(f"before:{_gmail_date(self.date_before)}")
        return " ".join(parts)

    def matches_attachment(self, filename: str) -> bool:
        return re.search(self.attachment_name_pattern, filename) is not None


class AttachmentRef(BaseModel):
    filename: str
    attachment_id: str


class MessageSummary(BaseModel):
    id: str
    date: str = ""
    subject: str = ""
    snippet: str = ""
    attachments: list[AttachmentRef] = Field(default_factory=list)


def _gmail_date(value: date) -> str:
    return f"{value.year}/{value.month}/{value.day}"


def attachment_basename(filename: str) -> str:
    """Filename without spaces or the .pdf suffix, for saved artifacts."""
    return filename.replace(" ", "").replace(".pdf", "")


def _walk_parts(payload: dict) -> Iterator[dict]:
    for part in payload.get("parts", []) or []:
        yield part
        yield from _walk_parts(part)


def _header(headers: list[dict], name: str) -> str:
    return next((h.get("value", "") for h in headers if h.get("name") == name), "")


class GmailScheduleClient:
    """Finds schedule emails and downloads their PDF attachments."""

    def __init__(self, service: Any, user_id: str = "me"):
        """Initialize the client.

        Args:
            service: A Gmail v1 API resource from ``build_service``.
            user_id: Mailbox to search; "me" is the authorized user.
        """
        self._service = service
        self._user_id = user_id

    def _list_message_ids(self, query: str, max_results: int | None = None) -> list[str]:
        ids: list[str] = []
        page_token = None
        while True:
            params = {"userId": self._user_id, "q": query}
            if page_token:
                params["pageToken"] = page_token
            if max_results:
                params["maxResults"] = max_results
            resp = self._service.users().messages().list(**params).execute()
            ids.extend(m["id"] for m in resp.get("messages", []))
            page_token = resp.get("nextPageToken")
            if not page_token or (max_results and len(ids) >= max_results):
                break
        return ids

    def get_message(self, message_id: str, criteria: SearchCriteria) -> MessageSummary:
        """Fetch one message, keeping only attachments that match ``criteria``."""
        msg = (
            self._service.users()
            .messages()
            .get(userId=self._user_id, id=message_id, format="full")
            .execute()
        )
        payload = msg.get("payload", {})
        headers = payload.get("headers", [])

        attachments = []
        for part in _walk_parts(payload):
            filename = part.get("filename", "")
            attachment_id = part.get("body", {}).get("attachmentId")
            if filename and attachment_id and criteria.matches_attachment(filename):
                attachments.append(
                    AttachmentRef(filename=filename, attachment_id=attachment_id)
                )

        return MessageSummary(
            id=msg.get("id", message_id),
            date=_header(headers, "Date"),
            subject=_header(headers, "Subject"),
            snippet=msg.get("snippet", ""),
            attachments=attachments,
        )

    def search(self, criteria: SearchCriteria) -> list[MessageSummary]:
        """List every message matching ``criteria``.

        Messages that fail to load are logged and skipped.
        """
        query = criteria.to_query()
        ids = self._list_message_ids(query)
        logger.info("processing messages", query=query, count=len(ids))

        summaries = []
        for message_id in ids:
            try:
                summaries.append(self.get_message(message_id, criteria))
            except HttpError as e:
                logger.error(
                    "unable to retrieve message", message_id=message_id, error=str(e)
                )
        return summaries

    def find_schedule_email(self, criteria: SearchCriteria) -> MessageSummary:
        """Return the newest message matching ``criteria`` with a schedule attachment.

        Raises:
            ScheduleEmailNotFoundError: If nothing matches or the newest match
                has no attachment matching the name pattern.
            HttpError: If the Gmail API call fails.
        """
        query = criteria.to_query()
        ids = self._list_message_ids(query, max_results=1)
        if not ids:
            raise ScheduleEmailNotFoundError(f"No schedule email found for query: {query}")

        summary = self.get_message(ids[0], criteria)
        if not summary.attachments:
            raise ScheduleEmailNotFoundError(
                f"Message {summary.id} has no attachment matching "
                f"{criteria.attachment_name_pattern!r}"
            )

        logger.info(
            "schedule email found",
            message_id=summary.id,
            date=summary.date,
            attachment=summary.attachments[0].filename,
        )
        return summary

    def download_attachment(self, message_id: str, attachment_id: str) -> bytes:
        """Fetch an attachment's decoded bytes.

        Raises:
            HttpError: If the Gmail API call fails.
        """
        body = (
            self._service.users()
            .messages()
            .attachments()
            .get(userId=self._user_id, messageId=message_id, id=attachment_id)
            .execute()
        )
        data = body.get("data", "")
        # Gmail may drop base64url padding
        decoded = base64.urlsafe_b64decode(data + "=" * (-len(data) % 4))
        logger.info("attachment downloaded", message_id=message_id, size=len(decoded))
        return decoded

"""Load an existing Google OAuth token and build API services.

Only previously authorized tokens are supported; there is no consent flow.
"""

from pathlib import Path
from typing import Any

from google.auth.exceptions import RefreshError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build

from ..logger import logger

GMAIL_READONLY_SCOPE = "https://www.googleapis.com/auth/gmail.readonly"
CALENDAR_EVENTS_SCOPE = "https://www.googleapis.com/auth/calendar.events"
DEFAULT_SCOPES = [GMAIL_READONLY_SCOPE, CALENDAR_EVENTS_SCOPE]


class CredentialsError(RuntimeError):
    """Raised when no usable Google token is available."""

    pass


def load_credentials(
    token_path: str | Path, scopes: list[str] | None = None
) -> Credentials:
    """Load an authorized-user token, refreshing it when expired.

    A refreshed token is written back to ``token_path``.

    Args:
        token_path: Path to the authorized-user JSON token.
        scopes: OAuth scopes the token must cover.

    Returns:
        Valid Google credentials.

    Raises:
        CredentialsError: If the token is missing, malformed, or cannot be
            refreshed.
    """
    token_path = Path(token_path)
    if not token_path.exists():
        raise CredentialsError(f"Google token not found: {token_path}")

    try:
        creds = Credentials.from_authorized_user_file(
            str(token_path), scopes or DEFAULT_SCOPES
        )
    except ValueError as e:
        raise CredentialsError(f"Unable to read Google token {token_path}: {e}") from e

    if creds.valid:
        return creds

    if creds.expired and creds.refresh_token:
        try:
            creds.refresh(Request())
        except RefreshError as e:
            raise CredentialsError(f"Unable to refresh Google token: {e}") from e
        token_path.write_text(creds.to_json())
        logger.info("google token refreshed", token_path=str(token_path))
        return creds

    raise CredentialsError(
        f"Google token {token_path} is invalid and has no refresh token"
    )


def build_service(api: str, version: str, credentials: Credentials) -> Any:
    """Build a Google API client, e.g. ``build_service("gmail", "v1", creds)``."""
    return build(api, version, credentials=credentials, cache_discovery=False)

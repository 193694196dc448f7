"""
User notification channels.

``notify_user`` reaches the person who started a run while they are still
present (the synchronous channel). ``notify_async`` reaches them later by
email, for runs that finish in a scheduled continuation.
"""

import asyncio
import base64
import logging
from collections.abc import Callable
from email.mime.text import MIMEText
from typing import Any

from core.errors import MissingConfigurationError

logger = logging.getLogger(__name__)

# Identity of the authenticated account itself; resolved by the notifier.
SELF_IDENTITY = "me"


def _prepare_raw_message(to: str, subject: str, body: str, from_email: str | None = None) -> str:
    """
    Build a base64url encoded RFC 2822 message for the Gmail API.

    Args:
        to: Recipient email address
        subject: Email subject
        body: Plain text body
        from_email: Optional sender address

    Returns:
        The raw message string expected by ``users.messages.send``
    """
    message = MIMEText(body, "plain")
    message["Subject"] = subject
    message["To"] = to
    if from_email:
        message["From"] = from_email
    return base64.urlsafe_b64encode(message.as_bytes()).decode()


class LoggingNotifier:
    """Notifier that writes to the log and keeps every message for inspection."""

    def __init__(self) -> None:
        self.messages: list[str] = []
        self.emails: list[tuple[str, str, str]] = []

    def notify_user(self, message: str) -> None:
        self.messages.append(message)
        logger.info(f"[notify_user] {message}")

    async def notify_async(self, identity: str, subject: str, body: str) -> None:
        self.emails.append((identity, subject, body))
        logger.info(f"[notify_async] To={identity}, Subject='{subject}'")


class GmailNotifier:
    """
    Sends asynchronous notifications through the Gmail API.

    The synchronous channel is delegated to ``show_message`` (for instance a
    UI alert callback); without one, messages go to the log.
    """

    def __init__(self, gmail_service: Any, show_message: Callable[[str], None] | None = None) -> None:
        self._service = gmail_service
        self._show_message = show_message

    def notify_user(self, message: str) -> None:
        if self._show_message is None:
            logger.info(f"[notify_user] {message}")
            return
        self._show_message(message)

    async def _resolve_identity(self, identity: str) -> str:
        if identity != SELF_IDENTITY:
            return identity
        profile = await asyncio.to_thread(self._service.users().getProfile(userId="me").execute)
        address = profile.get("emailAddress")
        if not address:
            raise MissingConfigurationError(
                "Cannot resolve the completion email recipient. Set USER_GOOGLE_EMAIL."
            )
        return address

    async def notify_async(self, identity: str, subject: str, body: str) -> None:
        identity = await self._resolve_identity(identity)
        raw_message = _prepare_raw_message(to=identity, subject=subject, body=body)
        sent = await asyncio.to_thread(
            self._service.users().messages().send(userId="me", body={"raw": raw_message}).execute
        )
        logger.info(f"Sent completion email to {identity}. Message ID: {sent.get('id')}")

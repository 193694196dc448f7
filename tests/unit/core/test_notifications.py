"""Tests for notification channels."""

import base64
from email import message_from_bytes
from unittest.mock import MagicMock

import pytest

from core.errors import MissingConfigurationError
from core.notifications import SELF_IDENTITY, GmailNotifier, LoggingNotifier, _prepare_raw_message


class TestPrepareRawMessage:
    def test_headers_and_body(self):
        raw = _prepare_raw_message(to="user@example.com", subject="Done", body="All good", from_email="me@example.com")
        message = message_from_bytes(base64.urlsafe_b64decode(raw))
        assert message["To"] == "user@example.com"
        assert message["Subject"] == "Done"
        assert message["From"] == "me@example.com"
        assert message.get_payload(decode=True).decode() == "All good"


class TestLoggingNotifier:
    @pytest.mark.asyncio
    async def test_records_messages(self):
        notifier = LoggingNotifier()
        notifier.notify_user("hello")
        await notifier.notify_async("user@example.com", "Subject", "Body")
        assert notifier.messages == ["hello"]
        assert notifier.emails == [("user@example.com", "Subject", "Body")]


class TestGmailNotifier:
    @pytest.mark.asyncio
    async def test_sends_via_gmail(self):
        service = MagicMock()
        send = service.users.return_value.messages.return_value.send
        send.return_value.execute.return_value = {"id": "msg1"}

        await GmailNotifier(service).notify_async("user@example.com", "Formatting Complete: Doc", "Body")

        send.assert_called_once()
        assert send.call_args.kwargs["userId"] == "me"
        raw = send.call_args.kwargs["body"]["raw"]
        message = message_from_bytes(base64.urlsafe_b64decode(raw))
        assert message["Subject"] == "Formatting Complete: Doc"

    def test_notify_user_uses_callback(self):
        shown = []
        GmailNotifier(MagicMock(), show_message=shown.append).notify_user("in progress")
        assert shown == ["in progress"]

    @pytest.mark.asyncio
    async def test_self_identity_resolved_from_profile(self):
        service = MagicMock()
        service.users.return_value.getProfile.return_value.execute.return_value = {"emailAddress": "owner@example.com"}
        send = service.users.return_value.messages.return_value.send
        send.return_value.execute.return_value = {"id": "msg2"}

        await GmailNotifier(service).notify_async(SELF_IDENTITY, "Formatting Complete: Doc", "Body")

        service.users.return_value.getProfile.assert_called_once_with(userId="me")
        message = message_from_bytes(base64.urlsafe_b64decode(send.call_args.kwargs["body"]["raw"]))
        assert message["To"] == "owner@example.com"

    @pytest.mark.asyncio
    async def test_unresolvable_self_identity_raises(self):
        service = MagicMock()
        service.users.return_value.getProfile.return_value.execute.return_value = {}

        with pytest.raises(MissingConfigurationError, match="USER_GOOGLE_EMAIL"):
            await GmailNotifier(service).notify_async(SELF_IDENTITY, "Subject", "Body")

        service.users.return_value.messages.return_value.send.assert_not_called()

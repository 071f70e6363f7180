"""
Unit tests for the contact form service.
"""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from jobsphere.core.config import settings
from jobsphere.modules.contact.schemas import ContactRequest
from jobsphere.modules.contact.service import (
    ContactDeliveryError,
    ContactNotConfiguredError,
    contact_recipient,
    submit_contact_message,
)


@pytest.fixture
def message():
    return ContactRequest(name=" Sam ", email="sam@x.com", message="Hello there")


@pytest.fixture
def configured():
    with (
        patch.object(settings, "contact_to", "inbox@x.com"),
        patch.object(settings, "admin_email", "admin@x.com"),
    ):
        yield


@pytest.fixture
def mock_notify():
    with patch(
        "jobsphere.modules.contact.service.send_contact_notification",
        new_callable=AsyncMock,
        return_value=True,
    ) as notify:
        yield notify


@pytest.fixture
def mock_reply():
    with patch(
        "jobsphere.modules.contact.service.send_contact_auto_reply",
        new_callable=AsyncMock,
        return_value=True,
    ) as reply:
        yield reply


class TestContactRecipient:
    def test_prefers_contact_to(self, configured):
        assert contact_recipient() == "inbox@x.com"

    def test_falls_back_to_admin_email(self):
        with (
            patch.object(settings, "contact_to", None),
            patch.object(settings, "admin_email", "admin@x.com"),
        ):
            assert contact_recipient() == "admin@x.com"


class TestSubmitContactMessage:
    @pytest.mark.asyncio
    async def test_forwards_and_acknowledges(self, configured, mock_notify, mock_reply, message):
        await submit_contact_message(message)

        mock_notify.assert_awaited_once_with(
            to_email="inbox@x.com", name="Sam", sender_email="sam@x.com", message="Hello there"
        )
        mock_reply.assert_awaited_once_with(to_email="sam@x.com", name="Sam")

    @pytest.mark.asyncio
    async def test_not_configured(self, mock_notify, mock_reply, message):
        with (
            patch.object(settings, "contact_to", None),
            patch.object(settings, "admin_email", None),
        ):
            with pytest.raises(ContactNotConfiguredError) as exc_info:
                await submit_contact_message(message)

        assert exc_info.value.status_code == 500
        mock_notify.assert_not_called()

    @pytest.mark.asyncio
    async def test_notification_failure(self, configured, mock_notify, mock_reply, message):
        mock_notify.return_value = False

        with pytest.raises(ContactDeliveryError) as exc_info:
            await submit_contact_message(message)

        assert exc_info.value.status_code == 502
        mock_reply.assert_not_called()

    @pytest.mark.asyncio
    async def test_notification_exception(self, configured, mock_notify, mock_reply, message):
        mock_notify.side_effect = RuntimeError("smtp down")

        with pytest.raises(ContactDeliveryError):
            await submit_contact_message(message)

    @pytest.mark.asyncio
    async def test_notification_timeout(self, configured, mock_reply, message):
        async def slow_notify(**kwargs):
            await asyncio.sleep(5)
            return True

        with (
            patch("jobsphere.modules.contact.service.send_contact_notification", side_effect=slow_notify),
            patch.object(settings, "email_send_timeout_seconds", 0.01),
        ):
            with pytest.raises(ContactDeliveryError):
                await submit_contact_message(message)

    @pytest.mark.asyncio
    async def test_auto_reply_failure_is_tolerated(
        self, configured, mock_notify, mock_reply, message
    ):
        mock_reply.side_effect = RuntimeError("bounced")

        await submit_contact_message(message)

        mock_notify.assert_awaited_once()

    def test_blank_message_rejected(self):
        with pytest.raises(ValueError):
            ContactRequest(name="Sam", email="sam@x.com", message="   ")

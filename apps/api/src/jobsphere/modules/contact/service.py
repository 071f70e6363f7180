"""
Contact Service

Forwards public contact form messages to the site administrator and
acknowledges them to the sender. The forward must succeed; the
acknowledgement is best effort.
"""

import asyncio
import logging

from jobsphere.core.config import settings
from jobsphere.core.email import send_contact_auto_reply, send_contact_notification
from jobsphere.modules.contact.schemas import ContactRequest
from jobsphere.modules.shared import ServiceError

logger = logging.getLogger(__name__)


class ContactNotConfiguredError(ServiceError):
    def __init__(self):
        super().__init__(
            message="Contact email is not configured.",
            error_code="CONTACT_NOT_CONFIGURED",
            status_code=500,
        )


class ContactDeliveryError(ServiceError):
    def __init__(self):
        super().__init__(
            message="Unable to send message right now.",
            error_code="CONTACT_DELIVERY_FAILED",
            status_code=502,
        )


def contact_recipient() -> str | None:
    """Where contact messages go: CONTACT_TO, else ADMIN_EMAIL."""
    return settings.contact_to or settings.admin_email or None


async def submit_contact_message(data: ContactRequest) -> None:
    """
    Deliver a contact form message.

    Raises:
        ContactNotConfiguredError: If no recipient is configured
        ContactDeliveryError: If the message could not be forwarded
    """
    recipient = contact_recipient()
    if not recipient:
        logger.error("Contact form submitted but no recipient is configured")
        raise ContactNotConfiguredError()

    timeout = settings.email_send_timeout_seconds
    try:
        delivered = await asyncio.wait_for(
            send_contact_notification(
                to_email=recipient,
                name=data.name,
                sender_email=data.email,
                message=data.message,
            ),
            timeout=timeout,
        )
    except Exception as e:
        logger.error(f"Contact notification failed: {e!r}")
        raise ContactDeliveryError() from e

    if not delivered:
        raise ContactDeliveryError()

    try:
        replied = await asyncio.wait_for(
            send_contact_auto_reply(to_email=data.email, name=data.name),
            timeout=timeout,
        )
        if not replied:
            logger.warning(f"Contact auto-reply to {data.email} was not sent")
    except Exception as e:
        logger.warning(f"Contact auto-reply to {data.email} failed: {e!r}")

    logger.info("Contact message forwarded")

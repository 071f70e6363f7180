"""
Email Service using Resend

Handles sending account verification and contact form emails.
"""

import asyncio
import logging
from html import escape

import resend

from jobsphere.core.config import settings

logger = logging.getLogger(__name__)

# Initialize Resend with API key
resend.api_key = settings.resend_api_key


class EmailNotConfiguredError(RuntimeError):
    """Raised in production when no Resend API key is configured."""


async def send_email(
    to_email: str,
    subject: str,
    html_content: str,
    reply_to: str | None = None,
) -> bool:
    """
    Send an email using Resend.

    Without an API key the email is logged instead of sent, outside
    production only.

    Args:
        to_email: Recipient email address
        subject: Email subject line
        html_content: HTML content of the email
        reply_to: Optional Reply-To address

    Returns:
        True if email was sent (or logged) successfully

    Raises:
        EmailNotConfiguredError: In production without an API key
    """
    if not resend.api_key:
        if settings.is_production:
            raise EmailNotConfiguredError("Email service not configured.")
        logger.warning("RESEND_API_KEY not set - logging email instead of sending")
        logger.info(f"EMAIL TO: {to_email} | SUBJECT: {subject}")
        return True

    try:
        params: resend.Emails.SendParams = {
            "from": settings.email_from,
            "to": [to_email],
            "subject": subject,
            "html": html_content,
        }
        if reply_to:
            params["reply_to"] = reply_to

        # Run sync Resend call in thread pool to avoid blocking event loop
        email = await asyncio.to_thread(resend.Emails.send, params)
        logger.info(f"Email sent successfully to {to_email}, id: {email['id']}")
        return True
    except Exception as e:
        logger.error(f"Failed to send email to {to_email}: {e}")
        return False


async def send_verification_email(to_email: str, code: str) -> bool:
    """Send the six-digit email verification code."""
    if settings.is_development:
        logger.info(f"Verification code for {to_email}: {code}")

    html_content = f"""
    <div style="font-family:Arial,sans-serif;line-height:1.5;">
      <h2>Verify your email</h2>
      <p>Use this code to verify your account:</p>
      <p style="font-size:20px;font-weight:bold;letter-spacing:2px;">{escape(code)}</p>
      <p>This code expires in {settings.verification_code_ttl_minutes} minutes.</p>
    </div>
    """
    return await send_email(
        to_email=to_email,
        subject="Verify your email",
        html_content=html_content,
    )


async def send_contact_notification(
    to_email: str,
    name: str,
    sender_email: str,
    message: str,
) -> bool:
    """Forward a contact form message to the site administrator."""
    # Escape user inputs to prevent XSS
    safe_name = escape(name)
    safe_email = escape(sender_email)
    safe_message = escape(message).replace("\n", "<br/>")

    html_content = f"""
    <div style="font-family:Arial,sans-serif;line-height:1.5;">
      <h2>New contact message</h2>
      <p><strong>Name:</strong> {safe_name}</p>
      <p><strong>Email:</strong> {safe_email}</p>
      <p><strong>Message:</strong></p>
      <p>{safe_message}</p>
    </div>
    """
    return await send_email(
        to_email=to_email,
        subject=f"New contact message from {safe_name}",
        html_content=html_content,
        reply_to=sender_email,
    )


async def send_contact_auto_reply(to_email: str, name: str | None) -> bool:
    """Acknowledge a contact form submission to its sender."""
    safe_name = escape(name) if name else "there"

    html_content = f"""
    <div style="font-family:Arial,sans-serif;line-height:1.5;">
      <p>Hi {safe_name},</p>
      <p>Thanks for reaching out! We received your message and will get back to you shortly.</p>
      <p>- JobSphere Team</p>
    </div>
    """
    return await send_email(
        to_email=to_email,
        subject="We received your message",
        html_content=html_content,
    )

"""
Core email sending utilities over SMTP.
"""

import asyncio
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional, Sequence

from libs.common.config import get_settings
from libs.common.logging import get_logger

logger = get_logger(__name__)


def _deliver(
    recipients: Sequence[str], sender: str, message: str
) -> None:
    settings = get_settings()
    with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=30) as server:
        server.starttls()
        server.login(settings.SMTP_USERNAME, settings.SMTP_PASSWORD)
        server.sendmail(sender, list(recipients), message)


async def send_email(
    to_emails: Sequence[str],
    subject: str,
    body: str,
    html_body: Optional[str] = None,
    from_email: Optional[str] = None,
    from_name: Optional[str] = None,
) -> bool:
    """
    Send an email over SMTP.

    Args:
        to_emails: Recipient addresses
        subject: Email subject line
        body: Plain text body
        html_body: Optional HTML alternative
        from_email: Sender address (defaults to DEFAULT_FROM_EMAIL)
        from_name: Sender display name (defaults to DEFAULT_FROM_NAME)

    Returns:
        True if the message was handed to the SMTP server, False otherwise
    """
    settings = get_settings()
    recipients = [e for e in to_emails if e]

    if not recipients:
        logger.warning("No recipients for email %r - email not sent", subject)
        return False

    if not settings.SMTP_USERNAME or not settings.SMTP_PASSWORD:
        logger.warning("SMTP credentials not configured - email not sent")
        logger.info("Would have sent email to %s: %s", ", ".join(recipients), subject)
        logger.debug("Email body: %s...", body[:200])
        return False

    sender_email = from_email or settings.DEFAULT_FROM_EMAIL
    sender_name = from_name or settings.DEFAULT_FROM_NAME

    if html_body:
        msg = MIMEMultipart("alternative")
        msg.attach(MIMEText(body, "plain"))
        msg.attach(MIMEText(html_body, "html"))
    else:
        msg = MIMEText(body, "plain")

    msg["Subject"] = subject
    msg["From"] = f"{sender_name} <{sender_email}>"
    msg["To"] = ", ".join(recipients)

    try:
        logger.info("Sending email to %s: %s", ", ".join(recipients), subject)
        # smtplib blocks; keep it off the event loop
        await asyncio.to_thread(_deliver, recipients, sender_email, msg.as_string())
        logger.info("Email sent successfully to %s", ", ".join(recipients))
        return True

    except smtplib.SMTPAuthenticationError as e:
        logger.error("SMTP authentication failed: %s", e)
        return False
    except (smtplib.SMTPException, OSError) as e:
        logger.error("Failed to send email: %s: %s", type(e).__name__, e)
        return False

"""
Mail transport wrapper.

Sends through Django's configured email backend (SMTP in production,
console locally, in-memory under tests).
"""

import smtplib

from django.conf import settings
from django.core.mail import EmailMultiAlternatives

from apps.core.logging import get_logger

logger = get_logger(__name__)


class MailError(Exception):
    """Exception raised when an email could not be handed to the transport."""

    pass


def send_email(recipient: str, subject: str, body_text: str, body_html: str = "") -> None:
    """
    Send one email.

    Args:
        recipient: Destination address
        subject: Subject line
        body_text: Plain-text body
        body_html: Optional HTML alternative

    Raises:
        MailError: If the transport rejects or cannot reach the server
    """
    if not recipient:
        raise MailError("No recipient address")

    message = EmailMultiAlternatives(
        subject=subject,
        body=body_text,
        from_email=settings.DEFAULT_FROM_EMAIL,
        to=[recipient],
    )
    if body_html:
        message.attach_alternative(body_html, "text/html")

    try:
        message.send(fail_silently=False)
    except (smtplib.SMTPException, OSError) as e:
        logger.warning("email_send_failed", recipient=recipient, subject=subject, error=str(e))
        raise MailError(str(e)) from e

    logger.info("email_sent", recipient=recipient, subject=subject)

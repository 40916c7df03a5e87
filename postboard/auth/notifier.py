"""
Postboard - Email Notifier

Sends password reset links over SMTP. With SMTP disabled (the default in
development) only the recipient is logged; the link is dropped.
"""

import logging
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from postboard.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)

PASSWORD_RESET_SUBJECT = "Change password"

RESET_LINK_HTML = '<a href="{frontend_url}/change-password/{token}">reset password</a>'


def build_reset_link(frontend_url: str, token: str) -> str:
    """HTML anchor pointing the user at the change-password page."""
    return RESET_LINK_HTML.format(frontend_url=frontend_url.rstrip("/"), token=token)


class EmailNotifier:
    """SMTP email sender."""

    def __init__(self, settings: Settings = default_settings):
        self._settings = settings

    def _create_message(self, to_email: str, subject: str, html_body: str) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self._settings.SMTP_FROM_EMAIL
        msg["To"] = to_email
        msg.attach(MIMEText(html_body, "html"))
        return msg

    def _send(self, message: MIMEMultipart) -> None:
        with smtplib.SMTP(self._settings.SMTP_HOST, self._settings.SMTP_PORT) as server:
            if self._settings.SMTP_STARTTLS:
                server.starttls(context=ssl.create_default_context())
            if self._settings.SMTP_USER:
                server.login(self._settings.SMTP_USER, self._settings.SMTP_PASSWORD or "")
            server.send_message(message)

    def send_reset_email(self, to_email: str, html_body: str) -> bool:
        """
        Send a password reset message.

        Returns:
            True if the message was handed to the SMTP server (or dropped
            because SMTP is disabled), False if sending failed
        """
        if not self._settings.SMTP_ENABLED:
            logger.warning("SMTP disabled, reset email to %s not sent", to_email)
            return True

        message = self._create_message(to_email, PASSWORD_RESET_SUBJECT, html_body)
        try:
            self._send(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Failed to send reset email to %s: %s", to_email, e)
            return False

        logger.info("Reset email sent to %s", to_email)
        return True

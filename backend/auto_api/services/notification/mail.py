"""
Mail notification for newly created Autos.

Delivery is fire-and-forget: inside a request the mail is sent from FastAPI
BackgroundTasks after the response, elsewhere from a daemon thread. Failures
are logged and never reach the caller.

Usage:
    mail = MailService(background_tasks)
    mail.notify("Neues Auto 42", "Das Auto ... ist angelegt.")
"""

from __future__ import annotations

import smtplib
import threading
from email.message import EmailMessage
from typing import TYPE_CHECKING, Protocol

from shared.config.logging import mail_logger as logger, mask_email
from shared.config.settings import Settings, settings as default_settings

if TYPE_CHECKING:
    from fastapi import BackgroundTasks


class Notifier(Protocol):
    """Anything the write service can hand a post-create notification to."""

    def notify(self, subject: str, body: str) -> None: ...


class MailService:
    """SMTP notifier configured from MAIL_* settings."""

    def __init__(
        self,
        background_tasks: "BackgroundTasks | None" = None,
        settings: Settings | None = None,
    ):
        self._background_tasks = background_tasks
        self._settings = settings or default_settings

    def notify(self, subject: str, body: str) -> None:
        """Schedule delivery of the mail and return immediately."""
        if not self._settings.mail_enabled:
            logger.debug("Mail disabled, notification skipped", subject=subject)
            return

        if self._background_tasks is not None:
            self._background_tasks.add_task(self.send, subject, body)
            return

        thread = threading.Thread(
            target=self.send,
            args=(subject, body),
            name="mail-notify",
            daemon=True,
        )
        thread.start()

    def send(self, subject: str, body: str) -> None:
        """Deliver the mail synchronously. Errors are logged, not raised."""
        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = self._settings.mail_from
        msg["To"] = self._settings.mail_to
        msg.set_content(body, subtype="html")

        try:
            with smtplib.SMTP(
                self._settings.mail_host,
                self._settings.mail_port,
                timeout=self._settings.mail_timeout,
            ) as smtp:
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(
                "Mail delivery failed",
                subject=subject,
                host=self._settings.mail_host,
                error=str(e),
                error_type=type(e).__name__,
            )
            return

        logger.info("Mail sent", subject=subject, to=mask_email(self._settings.mail_to))

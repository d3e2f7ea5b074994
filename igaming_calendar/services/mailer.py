"""
Outbound email over SMTP.

``smtplib`` is blocking, so delivery runs in a worker thread. There are no
retries: a failed send raises ``MailDeliveryError`` and the caller decides.

Usage:
    mailer = SmtpMailer(get_mail_config())
    await mailer.send(
        to="visitor@example.com",
        subject="Calendar Invite: ICE London",
        html_body=html,
        attachments=[MailAttachment("event.ics", ics_bytes, "text/calendar", {"method": "PUBLISH"})],
    )
"""

import asyncio
import smtplib
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from email.message import EmailMessage
from email.utils import formataddr
from typing import Protocol

import structlog

from igaming_calendar.core.exceptions.domain import MailDeliveryError
from igaming_calendar.main_config import MailConfig

__all__ = ["MailAttachment", "Mailer", "SmtpMailer"]

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class MailAttachment:
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"
    params: Mapping[str, str] = field(default_factory=dict)


class Mailer(Protocol):
    @property
    def sender_address(self) -> str: ...

    async def send(
        self, to: str, subject: str, html_body: str, attachments: Sequence[MailAttachment] = ()
    ) -> None: ...


class SmtpMailer:
    """Sends HTML mail through an SMTP relay (STARTTLS + login)."""

    def __init__(self, config: MailConfig) -> None:
        self.config = config

    @property
    def sender_address(self) -> str:
        return self.config.user or ""

    def build_message(
        self, to: str, subject: str, html_body: str, attachments: Sequence[MailAttachment] = ()
    ) -> EmailMessage:
        message = EmailMessage()
        message["From"] = formataddr((self.config.sender_name, self.sender_address))
        message["To"] = to
        message["Subject"] = subject
        message.set_content(html_body, subtype="html")

        for attachment in attachments:
            maintype, _, subtype = attachment.content_type.partition("/")
            message.add_attachment(
                attachment.content,
                maintype=maintype,
                subtype=subtype,
                filename=attachment.filename,
                params=dict(attachment.params),
            )
        return message

    def _deliver(self, message: EmailMessage) -> None:
        password = self.config.password.get_secret_value() if self.config.password else None
        with smtplib.SMTP(self.config.host, self.config.port, timeout=self.config.timeout) as server:
            if self.config.use_tls:
                server.starttls()
            if self.config.user and password:
                server.login(self.config.user, password)
            server.send_message(message)

    async def send(
        self, to: str, subject: str, html_body: str, attachments: Sequence[MailAttachment] = ()
    ) -> None:
        message = self.build_message(to, subject, html_body, attachments)
        try:
            await asyncio.to_thread(self._deliver, message)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("smtp_send_failed", host=self.config.host, error=str(exc))
            raise MailDeliveryError(f"Failed to send email: {exc}") from exc
        logger.info("email_sent", subject=subject, attachments=len(attachments))

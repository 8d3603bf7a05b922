"""SMTP implementation of the customer email channel."""

from __future__ import annotations
from tracking import t

import asyncio
import logging
import smtplib
import ssl
from email.message import EmailMessage
from typing import Optional

from reservations.errors import NotificationSendError


class SmtpEmailSink:
    """Send plain-text mail through an SMTP relay.

    ``smtplib`` blocks, so every send runs in a worker thread.
    """

    def __init__(
        self,
        host: str,
        port: int,
        *,
        sender: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        secure: bool = False,
        timeout: float = 15.0,
        smtp_factory=None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        t('botapp.sinks.email_sink.SmtpEmailSink.__init__')
        self.host = host
        self.port = port
        self.sender = sender
        self.username = username
        self.password = password
        self.secure = secure
        self.timeout = timeout
        self.smtp_factory = smtp_factory or (smtplib.SMTP_SSL if secure else smtplib.SMTP)
        self.logger = logger or logging.getLogger('SmtpEmailSink')

    def build_message(self, to: str, subject: str, body: str) -> EmailMessage:
        t('botapp.sinks.email_sink.SmtpEmailSink.build_message')
        message = EmailMessage()
        message['From'] = self.sender
        message['To'] = to
        message['Subject'] = subject
        message.set_content(body)
        return message

    def _deliver(self, message: EmailMessage) -> None:
        with self.smtp_factory(self.host, self.port, timeout=self.timeout) as client:
            if not self.secure:
                client.ehlo()
                if client.has_extn('starttls'):
                    client.starttls(context=ssl.create_default_context())
                    client.ehlo()
            if self.username:
                client.login(self.username, self.password or "")
            client.send_message(message)

    async def send_email(self, to: str, subject: str, body: str) -> None:
        t('botapp.sinks.email_sink.SmtpEmailSink.send_email')
        if not to:
            raise NotificationSendError('email', 'no recipient address')

        message = self.build_message(to, subject, body)
        try:
            await asyncio.to_thread(self._deliver, message)
        except (smtplib.SMTPException, OSError) as exc:
            self.logger.error("Email to %s failed: %s", to, exc)
            raise NotificationSendError('email', str(exc)) from exc

        self.logger.info("Email sent to %s: %s", to, subject)


__all__ = ["SmtpEmailSink"]

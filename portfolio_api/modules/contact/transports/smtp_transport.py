"""
Direct SMTP transport.
"""
import logging
from email.message import EmailMessage
from email.utils import make_msgid
from typing import Optional

import aiosmtplib

from .base import BaseEmailTransport, EmailDeliveryError, OutgoingEmail

logger = logging.getLogger(__name__)

IMPLICIT_TLS_PORT = 465


class SmtpTransport(BaseEmailTransport):
    """Sends mail through an authenticated SMTP relay using aiosmtplib."""

    name = "smtp"

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        sender: str,
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender
        self.timeout = timeout

    @property
    def use_tls(self) -> bool:
        return self.port == IMPLICIT_TLS_PORT

    def build_message(self, email: OutgoingEmail) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = email.to
        message["Subject"] = email.subject
        message["Message-ID"] = make_msgid()
        if email.reply_to:
            message["Reply-To"] = email.reply_to
        message.set_content(email.text or "")

        # HTML goes in as the preferred alternative to the plain text part.
        message.add_alternative(email.html, subtype="html")
        return message

    async def send(self, email: OutgoingEmail) -> Optional[str]:
        message = self.build_message(email)
        try:
            await aiosmtplib.send(
                message,
                hostname=self.host,
                port=self.port,
                username=self.username,
                password=self.password,
                use_tls=self.use_tls,
                start_tls=not self.use_tls,
                timeout=self.timeout,
            )
        except aiosmtplib.SMTPException as e:
            raise EmailDeliveryError(f"SMTP delivery to {email.to} failed: {e}") from e

        message_id = message["Message-ID"]
        logger.info("SMTP email sent: %s", message_id)
        return message_id

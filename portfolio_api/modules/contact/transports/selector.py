"""
Transport selection for the contact form.

The mode is decided once from configuration at startup; request handling
only ever reads the resolved value.
"""
import enum
from dataclasses import dataclass
from typing import Optional

from portfolio_api.common.config import Settings
from .base import BaseEmailTransport
from .resend_transport import ResendTransport
from .smtp_transport import SmtpTransport


class TransportMode(str, enum.Enum):
    SMTP = "smtp"
    THIRD_PARTY = "third_party"
    NONE = "none"


@dataclass(frozen=True)
class TransportConfig:
    """Email delivery settings, resolved once per process."""
    recipient: str
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    smtp_sender: Optional[str] = None
    resend_api_key: str = ""
    resend_sender: str = "Portfolio Contact <onboarding@resend.dev>"
    send_timeout: float = 10.0

    @property
    def has_smtp_credentials(self) -> bool:
        return bool(self.smtp_host and self.smtp_user and self.smtp_password)

    @property
    def has_third_party_key(self) -> bool:
        return bool(self.resend_api_key)

    @classmethod
    def from_settings(cls, settings: Settings) -> "TransportConfig":
        return cls(
            recipient=settings.contact_recipient,
            smtp_host=settings.EMAIL_HOST,
            smtp_port=settings.EMAIL_PORT,
            smtp_user=settings.EMAIL_USER,
            smtp_password=settings.EMAIL_PASSWORD,
            smtp_sender=settings.smtp_sender,
            resend_api_key=settings.RESEND_API_KEY,
            resend_sender=settings.RESEND_FROM,
            send_timeout=settings.EMAIL_SEND_TIMEOUT,
        )


def select_transport_mode(config: TransportConfig) -> TransportMode:
    """SMTP wins over the third-party API; with neither, nothing is sent."""
    if config.has_smtp_credentials:
        return TransportMode.SMTP
    if config.has_third_party_key:
        return TransportMode.THIRD_PARTY
    return TransportMode.NONE


def build_transport(config: TransportConfig, mode: TransportMode) -> Optional[BaseEmailTransport]:
    """Transport for `mode`, or None when the config lacks its credentials."""
    if mode == TransportMode.SMTP and config.has_smtp_credentials:
        return SmtpTransport(
            host=config.smtp_host,
            port=config.smtp_port,
            username=config.smtp_user,
            password=config.smtp_password,
            sender=config.smtp_sender or config.smtp_user,
            timeout=config.send_timeout,
        )
    if mode == TransportMode.THIRD_PARTY and config.has_third_party_key:
        return ResendTransport(
            api_key=config.resend_api_key,
            sender=config.resend_sender,
            timeout=config.send_timeout,
        )
    return None

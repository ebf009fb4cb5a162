"""
Pytest configuration and shared fixtures for the portfolio API tests.
"""

import os

# Set environment BEFORE importing app modules so the module-level settings
# never pick up real credentials.
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ["EMAIL_HOST"] = ""
os.environ["EMAIL_USER"] = ""
os.environ["EMAIL_PASSWORD"] = ""
os.environ["RESEND_API_KEY"] = ""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from portfolio_api.common.config import Settings
from portfolio_api.common.rate_limit import RateLimiter
from portfolio_api.modules.contact.contact_service import ContactService
from portfolio_api.modules.contact.schemas import ContactSubmission
from portfolio_api.modules.contact.transports.base import BaseEmailTransport
from portfolio_api.modules.contact.transports.selector import TransportConfig, TransportMode

RECIPIENT = "owner@example.com"
RECEIVED_AT = datetime(2026, 10, 18, 15, 25, 7, tzinfo=timezone.utc)


class FakeClock:
    """Monotonic clock the tests can move forward by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_transport(name: str = "smtp") -> AsyncMock:
    transport = AsyncMock(spec=BaseEmailTransport)
    transport.name = name
    transport.send.return_value = "<msg-1@example.com>"
    return transport


@pytest.fixture
def valid_form():
    return {
        "name": "  Ada Lovelace ",
        "email": " Ada@Example.COM ",
        "subject": "Project enquiry",
        "message": "Hello there,\nI'd like to talk about a project.",
    }


@pytest.fixture
def submission():
    return ContactSubmission(
        name="Ada Lovelace",
        email="ada@example.com",
        subject="Project enquiry",
        message="Hello there,\nI'd like to talk about a project.",
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def smtp_config():
    return TransportConfig(
        recipient=RECIPIENT,
        smtp_host="smtp.example.com",
        smtp_user="mailer@example.com",
        smtp_password="app-password",
        send_timeout=0.5,
    )


@pytest.fixture
def resend_config():
    return TransportConfig(recipient=RECIPIENT, resend_api_key="re_test_key", send_timeout=0.5)


@pytest.fixture
def empty_config():
    return TransportConfig(recipient=RECIPIENT)


@pytest.fixture
def make_service(clock):
    """Build a ContactService around a fake transport."""

    def _make(config, transport=None, mode=None, max_requests=5):
        mode = mode if mode is not None else (
            TransportMode.SMTP if config.has_smtp_credentials
            else TransportMode.THIRD_PARTY if config.has_third_party_key
            else TransportMode.NONE
        )
        if transport is None and mode != TransportMode.NONE:
            transport = make_transport("smtp" if mode == TransportMode.SMTP else "resend")
        return ContactService(
            rate_limiter=RateLimiter(max_requests=max_requests, window_seconds=900, clock=clock),
            config=config,
            transport=transport,
            mode=mode,
            clock=lambda: RECEIVED_AT,
        )

    return _make


@pytest.fixture
def test_settings():
    return Settings(
        LOG_LEVEL="WARNING",
        TRUSTED_PROXY_HOPS=1,
        EMAIL_HOST="",
        EMAIL_USER="",
        EMAIL_PASSWORD="",
        RESEND_API_KEY="",
        EMAIL_TO=RECIPIENT,
        ALLOWED_ORIGINS=["https://portfolio.example.com"],
    )

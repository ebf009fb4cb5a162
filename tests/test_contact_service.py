"""
Tests for ContactService: the contact form submission pipeline.

Tests cover:
- Rate limiting before validation
- Validation failures with no outbound sends
- SMTP mode: notification plus acknowledgment
- Third-party mode: notification only
- No transport: accepted without delivery
- Failure containment for both sends
"""

import asyncio
import logging
from unittest.mock import AsyncMock, patch
from zoneinfo import ZoneInfo

import aiosmtplib
import pytest

from portfolio_api.common.utils.global_messages import GlobalMessages
from portfolio_api.modules.contact.contact_service import ContactService
from portfolio_api.modules.contact.transports.base import EmailDeliveryError
from portfolio_api.modules.contact.transports.selector import TransportMode, build_transport

from conftest import RECIPIENT, make_transport


def sent_emails(transport):
    return [call.args[0] for call in transport.send.await_args_list]


class TestRateLimiting:
    @pytest.mark.asyncio
    async def test_sixth_submission_is_rejected_without_sending(self, make_service, smtp_config, valid_form):
        transport = make_transport()
        service = make_service(smtp_config, transport=transport)

        for _ in range(5):
            result = await service.submit(valid_form, "203.0.113.5")
            assert result.success
        transport.send.reset_mock()

        result = await service.submit(valid_form, "203.0.113.5")

        assert result.status_code == 429
        assert result.success is False
        assert result.message == GlobalMessages.CONTACT_RATE_LIMITED
        transport.send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rate_limit_is_checked_before_validation(self, make_service, smtp_config):
        service = make_service(smtp_config, max_requests=1)

        first = await service.submit({}, "198.51.100.7")
        second = await service.submit({}, "198.51.100.7")

        assert first.status_code == 400
        assert second.status_code == 429
        assert second.errors is None

    @pytest.mark.asyncio
    async def test_other_clients_are_unaffected(self, make_service, smtp_config, valid_form):
        service = make_service(smtp_config, max_requests=1)

        await service.submit(valid_form, "a")
        result = await service.submit(valid_form, "b")

        assert result.success


class TestValidation:
    @pytest.mark.asyncio
    async def test_invalid_submission_sends_nothing(self, make_service, smtp_config, valid_form):
        transport = make_transport()
        service = make_service(smtp_config, transport=transport)

        result = await service.submit(dict(valid_form, email="not-an-email", message="hey"), "client")

        assert result.status_code == 400
        assert result.message == GlobalMessages.CONTACT_VALIDATION_FAILED
        assert [(e.field, e.message) for e in result.errors] == [
            ("email", GlobalMessages.EMAIL_INVALID),
            ("message", GlobalMessages.MESSAGE_INVALID),
        ]
        transport.send.assert_not_awaited()


class TestSmtpMode:
    @pytest.mark.asyncio
    async def test_sends_notification_then_acknowledgment(self, make_service, smtp_config, valid_form):
        transport = make_transport()
        service = make_service(smtp_config, transport=transport)

        result = await service.submit(valid_form, "client")

        assert result.status_code == 200
        assert result.success is True
        assert result.message == GlobalMessages.CONTACT_RECEIVED

        notification, acknowledgment = sent_emails(transport)
        assert notification.to == RECIPIENT
        assert notification.reply_to == "ada@example.com"
        assert notification.subject == "Portfolio Contact: Project enquiry"
        assert acknowledgment.to == "ada@example.com"
        assert acknowledgment.reply_to == RECIPIENT
        assert acknowledgment.subject == "Thank you for contacting me - Project enquiry"

    @pytest.mark.asyncio
    async def test_acknowledgment_failure_does_not_change_the_outcome(
        self, make_service, smtp_config, valid_form, caplog
    ):
        transport = make_transport()
        transport.send.side_effect = ["<notification@example.com>", EmailDeliveryError("mailbox full")]
        service = make_service(smtp_config, transport=transport)

        with caplog.at_level(logging.WARNING):
            result = await service.submit(valid_form, "client")

        assert result.success is True
        assert transport.send.await_count == 2
        assert "Auto-reply failed" in caplog.text
        assert "mailbox full" in caplog.text

    @pytest.mark.asyncio
    async def test_notification_failure_skips_acknowledgment(self, make_service, smtp_config, valid_form, caplog):
        transport = make_transport()
        transport.send.side_effect = EmailDeliveryError("535 authentication failed")
        service = make_service(smtp_config, transport=transport)

        with caplog.at_level(logging.ERROR):
            result = await service.submit(valid_form, "client")

        assert result.status_code == 500
        assert result.success is False
        assert result.message == GlobalMessages.CONTACT_SEND_FAILED
        assert "535" not in result.message
        assert transport.send.await_count == 1
        assert "535 authentication failed" in caplog.text

    @pytest.mark.asyncio
    async def test_unexpected_transport_errors_are_contained(self, make_service, smtp_config, valid_form):
        transport = make_transport()
        transport.send.side_effect = ConnectionResetError("peer reset")
        service = make_service(smtp_config, transport=transport)

        result = await service.submit(valid_form, "client")

        assert result.status_code == 500
        assert result.message == GlobalMessages.CONTACT_SEND_FAILED

    @pytest.mark.asyncio
    async def test_slow_notification_times_out(self, make_service, smtp_config, valid_form):
        transport = make_transport()

        async def hang(email):
            await asyncio.sleep(5)

        transport.send.side_effect = hang
        service = make_service(smtp_config, transport=transport)

        result = await service.submit(valid_form, "client")

        assert result.status_code == 500
        assert transport.send.await_count == 1


class TestThirdPartyMode:
    @pytest.mark.asyncio
    async def test_sends_notification_only(self, make_service, resend_config, valid_form):
        transport = make_transport("resend")
        service = make_service(resend_config, transport=transport)

        result = await service.submit(valid_form, "client")

        assert result.success is True
        (notification,) = sent_emails(transport)
        assert notification.to == RECIPIENT
        assert notification.reply_to == "ada@example.com"

    @pytest.mark.asyncio
    async def test_notification_failure_is_reported(self, make_service, resend_config, valid_form):
        transport = make_transport("resend")
        transport.send.side_effect = EmailDeliveryError("Resend rejected the message (422)")
        service = make_service(resend_config, transport=transport)

        result = await service.submit(valid_form, "client")

        assert result.status_code == 500
        assert result.success is False


class TestNoTransport:
    @pytest.mark.asyncio
    async def test_submission_is_accepted_without_delivery(self, make_service, empty_config, valid_form, caplog):
        # Current behaviour: the caller is told the message was received even
        # though nothing was emailed; the submission only reaches the logs.
        service = make_service(empty_config)

        with caplog.at_level(logging.INFO):
            result = await service.submit(valid_form, "client")

        assert service.transport is None
        assert result.status_code == 200
        assert result.success is True
        assert "No email service configured" in caplog.text
        assert "ada@example.com" in caplog.text

    @pytest.mark.asyncio
    async def test_invalid_submission_still_rejected(self, make_service, empty_config):
        service = make_service(empty_config)
        result = await service.submit({"name": "Jo"}, "client")
        assert result.status_code == 400


class TestConstruction:
    def test_resolves_mode_and_transport_from_config(self, smtp_config):
        from portfolio_api.common.rate_limit import RateLimiter

        service = ContactService(rate_limiter=RateLimiter(5, 900), config=smtp_config)

        assert service.mode == TransportMode.SMTP
        assert service.transport.name == "smtp"

    def test_mode_without_transport_is_rejected(self, empty_config):
        from portfolio_api.common.rate_limit import RateLimiter

        with pytest.raises(ValueError):
            ContactService(rate_limiter=RateLimiter(5, 900), config=empty_config, mode=TransportMode.SMTP)


class TestMultiLineSubjectOverSmtp:
    @pytest.mark.asyncio
    async def test_message_is_built_and_sent(self, make_service, smtp_config, valid_form):
        transport = build_transport(smtp_config, TransportMode.SMTP)
        service = make_service(smtp_config, transport=transport)

        with patch.object(aiosmtplib, "send", new=AsyncMock()) as mock_send:
            result = await service.submit(dict(valid_form, subject="Hello\nthere"), "client")

        assert result.status_code == 200
        assert mock_send.await_count == 2
        notification = mock_send.await_args_list[0].args[0]
        assert notification["Subject"] == "Portfolio Contact: Hello there"
        assert notification["To"] == RECIPIENT


class TestDisplayTimezone:
    @pytest.mark.asyncio
    async def test_received_time_is_shown_in_configured_zone(self, clock, smtp_config, valid_form):
        from portfolio_api.common.rate_limit import RateLimiter
        from conftest import RECEIVED_AT

        transport = make_transport()
        service = ContactService(
            rate_limiter=RateLimiter(5, 900, clock=clock),
            config=smtp_config,
            transport=transport,
            mode=TransportMode.SMTP,
            clock=lambda: RECEIVED_AT,
            display_timezone=ZoneInfo("Asia/Kolkata"),
        )

        await service.submit(valid_form, "client")

        notification = sent_emails(transport)[0]
        assert "Sunday, October 18, 2026 at 08:55:07 PM IST" in notification.html

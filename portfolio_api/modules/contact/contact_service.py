# portfolio_api/modules/contact/contact_service.py

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from typing import Any, Callable, List, Optional

from fastapi import status

from portfolio_api.common.rate_limit import RateLimiter
from portfolio_api.common.utils.global_messages import GlobalMessages
from portfolio_api.modules.contact.email_renderer import (
    RenderedEmail,
    SiteOwner,
    render_acknowledgment,
    render_notification,
)
from portfolio_api.modules.contact.schemas import (
    ContactFormResponse,
    ContactSubmission,
    FieldError,
    ValidationFailed,
    validate_submission,
)
from portfolio_api.modules.contact.transports.base import (
    BaseEmailTransport,
    DeliveryResult,
    EmailDeliveryError,
    OutgoingEmail,
)
from portfolio_api.modules.contact.transports.selector import (
    TransportConfig,
    TransportMode,
    build_transport,
    select_transport_mode,
)

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ContactResult:
    """What the caller is told about a submission."""
    status_code: int
    success: bool
    message: str
    errors: Optional[List[FieldError]] = None

    def to_response(self) -> ContactFormResponse:
        return ContactFormResponse(success=self.success, message=self.message, errors=self.errors)


class ContactService:
    """
    Runs a contact form submission through rate limiting, validation,
    rendering and delivery.

    The notification to the site owner must go out for the submission to
    count as a success. The acknowledgment to the sender is only attempted
    over SMTP, after the notification, and its failure is logged and ignored.
    """

    def __init__(
        self,
        rate_limiter: RateLimiter,
        config: TransportConfig,
        transport: Optional[BaseEmailTransport] = None,
        mode: Optional[TransportMode] = None,
        owner: SiteOwner = SiteOwner(),
        clock: Callable[[], datetime] = utc_now,
        display_timezone: tzinfo = timezone.utc,
    ):
        self.rate_limiter = rate_limiter
        self.config = config
        self.mode = mode if mode is not None else select_transport_mode(config)
        self.transport = transport if transport is not None else build_transport(config, self.mode)
        if self.mode != TransportMode.NONE and self.transport is None:
            raise ValueError(f"No transport available for mode {self.mode.value}")
        self.owner = owner
        self._clock = clock
        self.display_timezone = display_timezone

    async def submit(self, raw: Any, client_key: str) -> ContactResult:
        if not self.rate_limiter.check(client_key):
            logger.warning("Contact form rate limit exceeded for %s", client_key)
            return ContactResult(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                success=False,
                message=GlobalMessages.CONTACT_RATE_LIMITED,
            )

        try:
            submission = validate_submission(raw)
        except ValidationFailed as e:
            logger.debug("Contact form rejected, invalid fields: %s", e)
            return ContactResult(
                status_code=status.HTTP_400_BAD_REQUEST,
                success=False,
                message=GlobalMessages.CONTACT_VALIDATION_FAILED,
                errors=e.errors,
            )

        received_at = self._clock().astimezone(self.display_timezone)
        recipient = self.config.recipient
        notification = render_notification(submission, received_at, recipient)
        acknowledgment = render_acknowledgment(submission, received_at, recipient, self.owner)

        if self.mode == TransportMode.NONE:
            logger.warning("No email service configured. Message received but not sent via email.")
            logger.info(
                "Contact submission: name=%s email=%s subject=%s message=%s",
                submission.name,
                submission.email,
                submission.subject,
                submission.message,
            )
            return self._received()

        try:
            await self._send(self._outgoing(notification, to=recipient, reply_to=submission.email))
        except Exception:
            logger.exception("Contact form error: notification to %s failed", recipient)
            return ContactResult(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                success=False,
                message=GlobalMessages.CONTACT_SEND_FAILED,
            )

        if self.mode == TransportMode.SMTP:
            result = await self.send_acknowledgment(submission, acknowledgment)
            if not result.sent:
                logger.warning("Auto-reply failed (%s): %s", self.transport.name, result.error_message)
        else:
            logger.info("Auto-reply not sent to sender (%s is a third-party service)", self.transport.name)

        return self._received()

    async def send_acknowledgment(self, submission: ContactSubmission, rendered: RenderedEmail) -> DeliveryResult:
        email = self._outgoing(rendered, to=submission.email, reply_to=self.config.recipient)
        try:
            message_id = await self._send(email)
        except Exception as e:
            return DeliveryResult.failed(str(e))
        return DeliveryResult.ok(message_id)

    async def _send(self, email: OutgoingEmail) -> Optional[str]:
        try:
            return await asyncio.wait_for(self.transport.send(email), timeout=self.config.send_timeout)
        except asyncio.TimeoutError as e:
            raise EmailDeliveryError(
                f"Sending to {email.to} timed out after {self.config.send_timeout}s"
            ) from e

    @staticmethod
    def _outgoing(rendered: RenderedEmail, to: str, reply_to: str) -> OutgoingEmail:
        return OutgoingEmail(
            to=to,
            subject=rendered.subject,
            html=rendered.html,
            text=rendered.text,
            reply_to=reply_to,
        )

    @staticmethod
    def _received() -> ContactResult:
        return ContactResult(
            status_code=status.HTTP_200_OK,
            success=True,
            message=GlobalMessages.CONTACT_RECEIVED,
        )

"""
Resend transactional email API transport.
"""
import logging
from typing import Any, Dict, Optional

import httpx

from .base import BaseEmailTransport, EmailDeliveryError, OutgoingEmail

logger = logging.getLogger(__name__)

RESEND_API_URL = "https://api.resend.com/emails"


class ResendTransport(BaseEmailTransport):
    """Sends mail through the Resend HTTPS API."""

    name = "resend"

    def __init__(
        self,
        api_key: str,
        sender: str,
        timeout: float = 10.0,
        base_url: str = RESEND_API_URL,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key
        self.sender = sender
        self.timeout = timeout
        self.base_url = base_url
        self._client = client

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def build_payload(self, email: OutgoingEmail) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "from": self.sender,
            "to": [email.to],
            "subject": email.subject,
            "html": email.html,
        }
        if email.text:
            payload["text"] = email.text
        if email.reply_to:
            payload["reply_to"] = email.reply_to
        return payload

    async def _post(self, client: httpx.AsyncClient, payload: Dict[str, Any]) -> httpx.Response:
        return await client.post(
            self.base_url,
            headers=self.headers,
            json=payload,
            timeout=self.timeout,
        )

    async def send(self, email: OutgoingEmail) -> Optional[str]:
        payload = self.build_payload(email)
        try:
            if self._client is not None:
                response = await self._post(self._client, payload)
            else:
                async with httpx.AsyncClient() as client:
                    response = await self._post(client, payload)
        except httpx.HTTPError as e:
            logger.error("Resend email sending failed: %s", e)
            raise EmailDeliveryError(f"Resend request failed: {e}") from e

        if response.status_code >= 400:
            try:
                detail = response.json().get("message", response.text)
            except ValueError:
                detail = response.text
            logger.error("Resend email sending failed: %s %s", response.status_code, detail)
            raise EmailDeliveryError(f"Resend rejected the message ({response.status_code}): {detail}")

        try:
            message_id = response.json().get("id")
        except ValueError:
            message_id = None
        logger.info("Resend email sent successfully: %s", message_id)
        return message_id

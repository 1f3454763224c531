# contact form submission and the store's contact details
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote

import httpx

from db.models import ContactMessage
from utils.config import Settings
from utils.logger import get_logger
from utils.results import Result

_logger = get_logger(__name__)

SEND_ERROR = "Could not send message"
SENT_OK = "Message sent!"
WHATSAPP_GREETING = "Hi! I'd like to know more about your organic products."


class ContactClient:
    """
    Sends contact-form messages to a write-only HTTP endpoint.

    The endpoint answers `{"success": bool, "message": str}`. Failures are
    reported back to the form and never retried. Without an endpoint the
    message is only logged.
    """

    def __init__(
        self,
        endpoint_url: Optional[str],
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ) -> None:
        self.endpoint_url = endpoint_url
        self._client = client
        self._timeout = timeout

    async def _post(self, payload: dict) -> httpx.Response:
        if self._client is not None:
            return await self._client.post(self.endpoint_url, json=payload)
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await client.post(self.endpoint_url, json=payload)

    async def send(self, message: ContactMessage) -> Result[str]:
        if not self.endpoint_url:
            _logger.info(f"Contact message from <{message.email}> (no endpoint set).")
            return Result.success(SENT_OK)

        try:
            response = await self._post(message.to_dict())
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, ValueError):
            _logger.exception("Contact submission failed.")
            return Result.failure(SEND_ERROR)

        if not isinstance(body, dict) or not body.get("success"):
            reason = body.get("message") if isinstance(body, dict) else None
            return Result.failure(reason or SEND_ERROR)
        return Result.success(body.get("message") or SENT_OK)


@dataclass(frozen=True)
class ContactInfo:
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    whatsapp_number: Optional[str] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "ContactInfo":
        return cls(
            phone=settings.phone_number,
            email=settings.email,
            address=settings.address,
            whatsapp_number=settings.whatsapp_number,
        )

    @property
    def tel_link(self) -> Optional[str]:
        return f"tel:{self.phone}" if self.phone else None

    @property
    def mailto_link(self) -> Optional[str]:
        return f"mailto:{self.email}" if self.email else None

    def whatsapp_link(self, text: str = WHATSAPP_GREETING) -> Optional[str]:
        if not self.whatsapp_number:
            return None
        return f"https://wa.me/{self.whatsapp_number}?text={quote(text)}"

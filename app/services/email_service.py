"""Transactional email delivery via SendGrid."""

import logging
from dataclasses import asdict, dataclass
from typing import Any

import httpx

from app.config import Settings
from app.core.exceptions import DependencyError
from app.services.email_templates import render_email
from app.utils.validators import mask_email

logger = logging.getLogger(__name__)

SENDGRID_SEND_URL = "https://api.sendgrid.com/v3/mail/send"


@dataclass(frozen=True)
class BookingEmailData:
    """Structured fields interpolated into booking emails."""

    to: str | None
    access_code: str
    clinic_name: str
    procedure: str
    preferred_date: str
    confirmed_date: str | None = None
    confirmed_time: str | None = None
    confirmed_price: str | None = None
    cancel_reason: str | None = None


class EmailService:
    """Sends booking emails through the SendGrid v3 HTTP API."""

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient | None = None) -> None:
        self.settings = settings
        self._http_client = http_client

    @property
    def is_configured(self) -> bool:
        return bool(self.settings.sendgrid_api_key)

    @property
    def http_client(self) -> httpx.AsyncClient:
        """Lazy-load HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self.settings.email_timeout_seconds)
        return self._http_client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def send_booking_email(
        self,
        email_type: str,
        locale: str | None,
        data: BookingEmailData,
    ) -> bool:
        """Render and send a booking email.

        Args:
            email_type: Template key (booking_confirmed, booking_cancelled)
            locale: Recipient locale
            data: Template fields and recipient

        Returns:
            bool: True if SendGrid accepted the message, False if email is not
            configured or there is no recipient

        Raises:
            DependencyError: SendGrid unreachable or rejected the message
        """
        if not self.is_configured:
            logger.warning(f"SendGrid API key not configured, {email_type} email not sent")
            return False
        if not data.to:
            logger.warning(f"No recipient email address for {email_type} email")
            return False

        rendered = render_email(email_type, locale, asdict(data))
        payload: dict[str, Any] = {
            "personalizations": [{"to": [{"email": data.to}]}],
            "from": {
                "email": self.settings.email_from_address,
                "name": self.settings.email_from_name,
            },
            "subject": rendered.subject,
            "content": [{"type": "text/plain", "value": rendered.body}],
        }
        headers = {
            "Authorization": f"Bearer {self.settings.sendgrid_api_key}",
            "Content-Type": "application/json",
        }

        try:
            response = await self.http_client.post(SENDGRID_SEND_URL, headers=headers, json=payload)
        except httpx.HTTPError as e:
            raise DependencyError("sendgrid", str(e)) from e

        if response.status_code not in (200, 202):
            raise DependencyError("sendgrid", f"HTTP {response.status_code}")

        logger.info(f"Email sent: {email_type} to {mask_email(data.to)}")
        return True

"""
Transactional email dispatch.

Brevo is the production provider; services depend only on EmailDispatcher so
tests can swap in a recording fake.
"""
from abc import ABC, abstractmethod
from typing import Optional

import httpx
import structlog

from app.config import Settings
from app.core.errors import InternalError, PermissionDenied, ResourceExhausted

logger = structlog.get_logger(__name__)


class EmailDispatcher(ABC):
    """Base class for email providers"""

    @abstractmethod
    async def send(self, to_email: str, to_name: str, subject: str, html: str) -> str:
        """
        Send a single-recipient HTML email

        Args:
            to_email: Recipient address
            to_name: Recipient display name
            subject: Subject line
            html: Rendered HTML body

        Returns:
            Provider message id

        Raises:
            ResourceExhausted: provider rate limit hit
            PermissionDenied: provider rejected our credentials
            InternalError: misconfiguration, transport failure or any other provider error
        """
        pass

    @property
    def is_configured(self) -> bool:
        """False when the provider cannot send anything, e.g. no API key."""
        return True


class BrevoEmailDispatcher(EmailDispatcher):
    """Brevo (Sendinblue) SMTP API implementation"""

    def __init__(self, client: httpx.AsyncClient, settings: Settings):
        self.client = client
        self.api_key = settings.BREVO_API_KEY
        self.api_url = settings.BREVO_API_URL
        self.sender_email = settings.SENDER_EMAIL
        self.sender_name = settings.SENDER_NAME

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def build_payload(self, to_email: str, to_name: str, subject: str, html: str) -> dict:
        return {
            "sender": {"name": self.sender_name, "email": self.sender_email},
            "to": [{"email": to_email, "name": to_name or to_email}],
            "subject": subject,
            "htmlContent": html,
        }

    async def send(self, to_email: str, to_name: str, subject: str, html: str) -> str:
        if not self.is_configured:
            logger.error("email_not_configured", reason="BREVO_API_KEY is empty")
            raise InternalError("Email service configuration error")

        try:
            response = await self.client.post(
                self.api_url,
                headers={
                    "accept": "application/json",
                    "api-key": self.api_key,
                    "content-type": "application/json",
                },
                json=self.build_payload(to_email, to_name, subject, html),
            )
        except httpx.TimeoutException as e:
            logger.error("email_timeout", to=to_email, error=str(e))
            raise InternalError("Email service timed out") from e
        except httpx.HTTPError as e:
            logger.error("email_transport_error", to=to_email, error=str(e))
            raise InternalError("Failed to send email") from e

        if response.is_success:
            message_id = self._message_id(response)
            logger.info("email_sent", to=to_email, subject=subject, message_id=message_id)
            return message_id

        body = response.text[:500]
        logger.error("email_rejected", to=to_email, status_code=response.status_code, body=body)

        if response.status_code == 429:
            raise ResourceExhausted("Email rate limit exceeded. Please try again later.")
        if response.status_code in (401, 403):
            raise PermissionDenied("Email service authentication failed")
        raise InternalError(
            f"Failed to send email: {response.status_code}",
            details={"provider_status": response.status_code},
        )

    @staticmethod
    def _message_id(response: httpx.Response) -> str:
        message_id: Optional[str] = None
        try:
            message_id = response.json().get("messageId")
        except ValueError:
            logger.warning("email_response_not_json", status_code=response.status_code)
        return message_id or ""

"""SendGrid v3 mail API client adapter."""

from dataclasses import dataclass

import httpx

from booking_backoffice.domain.notifications import EmailMessage
from booking_backoffice.errors import EmailDeliveryError
from booking_backoffice.services.notifications import EmailSender

SENDGRID_MAIL_SEND_URL = "https://api.sendgrid.com/v3/mail/send"


@dataclass
class HttpxSendGridClient(EmailSender):
    """Email sender implemented with httpx against SendGrid."""

    api_key: str
    http_client: httpx.AsyncClient
    timeout: float = 10

    @classmethod
    def create(cls, api_key: str, timeout: float = 10) -> "HttpxSendGridClient":
        """Create a SendGrid client with a managed httpx session."""
        return cls(api_key=api_key, http_client=httpx.AsyncClient(), timeout=timeout)

    async def send(self, message: EmailMessage) -> None:
        """Send a message using SendGrid's mail/send API."""
        payload: dict[str, object] = {
            "personalizations": [{"to": [{"email": message.to}]}],
            "from": {"email": message.from_email},
            "subject": message.subject,
            "content": [{"type": "text/html", "value": message.html}],
            "tracking_settings": {"click_tracking": {"enable": False}},
        }
        response = await self.http_client.post(
            SENDGRID_MAIL_SEND_URL,
            json=payload,
            headers={"Authorization": f"Bearer {self.api_key}"},
            timeout=self.timeout,
        )
        if response.is_error:
            raise EmailDeliveryError(_error_message(response))

    async def close(self) -> None:
        """Close the underlying HTTP client session."""
        await self.http_client.aclose()


def _error_message(response: httpx.Response) -> str:
    """Extract SendGrid's first error message, if present."""
    try:
        body = response.json()
    except ValueError:
        body = None
    errors = body.get("errors") if isinstance(body, dict) else None
    if errors and isinstance(errors[0], dict) and errors[0].get("message"):
        return str(errors[0]["message"])
    return f"SendGrid returned HTTP {response.status_code}"

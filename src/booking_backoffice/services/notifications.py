"""Owner notification emails."""

import logging
from dataclasses import dataclass
from html import escape
from typing import Protocol

import httpx

from booking_backoffice.domain.notifications import DeliveryResult, EmailMessage
from booking_backoffice.errors import EmailDeliveryError

logger = logging.getLogger(__name__)


class EmailSender(Protocol):
    """Interface for an email delivery provider."""

    async def send(self, message: EmailMessage) -> None:
        """Deliver a message, raising on failure."""


@dataclass
class NotificationService:
    """Builds and sends owner-facing notification emails."""

    sender: EmailSender
    from_email: str

    async def send_booking_link(
        self,
        to: str | None,
        business_name: str,
        booking_link: str,
        owner_name: str | None = None,
    ) -> DeliveryResult:
        """Send the "your booking page is live" email."""
        if not to or not to.strip():
            return DeliveryResult(success=False, error="No recipient email")

        message = build_booking_link_email(
            to=to,
            from_email=self.from_email,
            business_name=business_name,
            booking_link=booking_link,
            owner_name=owner_name,
        )
        try:
            await self.sender.send(message)
        except (EmailDeliveryError, httpx.HTTPError) as exc:
            logger.exception(
                "Failed to send booking-link email", extra={"to": message.to}
            )
            return DeliveryResult(success=False, error=str(exc) or type(exc).__name__)
        logger.info("Booking-link email sent to %s", message.to)
        return DeliveryResult(success=True)


def build_booking_link_email(
    *,
    to: str,
    from_email: str,
    business_name: str,
    booking_link: str,
    owner_name: str | None = None,
) -> EmailMessage:
    """Render the booking-link email for a business owner."""
    greeting = f"Hello {owner_name}" if owner_name else "Hello"
    html = _BOOKING_LINK_HTML.format(
        business_name=escape(business_name),
        greeting=escape(greeting),
        booking_link=escape(booking_link, quote=True),
    )
    return EmailMessage(
        to=to.strip().lower(),
        from_email=from_email,
        subject=f"Your Booking Page is Live - {business_name}",
        html=html,
    )


_BOOKING_LINK_HTML = """<!DOCTYPE html>
<html>
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1.0" />
    <title>Your Booking Page is Live!</title>
  </head>
  <body style="margin:0;padding:0;font-family:Arial,sans-serif;background:#f3f4f6;">
    <div style="max-width:600px;margin:40px auto;background:#ffffff;border-radius:12px;">
      <div style="padding:40px;text-align:center;background:#8b5cf6;color:#ffffff;">
        <h1 style="margin:0;font-size:26px;">Your Booking Page is Live!</h1>
        <p style="margin:15px 0 0;font-size:16px;">{business_name}</p>
      </div>
      <div style="padding:30px 40px;color:#374151;font-size:16px;line-height:1.6;">
        <p>{greeting},</p>
        <p>
          Great news! Your online booking page for <strong>{business_name}</strong>
          is ready. Share the link below with your clients so they can book
          appointments 24/7.
        </p>
        <p style="text-align:center;">
          <a href="{booking_link}"
             style="display:inline-block;padding:14px 32px;background:#ec4899;color:#ffffff;text-decoration:none;border-radius:8px;">
            Open Booking Page
          </a>
        </p>
        <p style="text-align:center;word-break:break-all;">
          <a href="{booking_link}">{booking_link}</a>
        </p>
      </div>
      <div style="padding:25px 40px;background:#f9fafb;text-align:center;color:#6b7280;font-size:12px;">
        This is an automated email. Please do not reply.
      </div>
    </div>
  </body>
</html>
"""

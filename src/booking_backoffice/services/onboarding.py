"""Onboarding of newly created business-owner accounts."""

import asyncio
import logging
from dataclasses import dataclass

from booking_backoffice.domain.accounts import (
    AccountCreatedEvent,
    OnboardingResult,
    account_from_row,
)
from booking_backoffice.errors import AccountDataError
from booking_backoffice.services.accounts import BookingPageAssigner
from booking_backoffice.services.notifications import NotificationService

logger = logging.getLogger(__name__)


@dataclass
class OnboardingService:
    """Assigns a booking page to new owners and emails them the link."""

    booking_pages: BookingPageAssigner
    notifications: NotificationService

    async def handle_account_created(
        self, event: AccountCreatedEvent
    ) -> OnboardingResult:
        """Process one account-created event.

        Store failures propagate to the caller. Email failures are logged and
        reported in the result without undoing the slug assignment.
        """
        if not event.account_id:
            raise AccountDataError("Account-created event has no account id")
        account = account_from_row({**event.record, "id": event.account_id})

        if not account.is_business_owner:
            logger.info(
                "Skipping account %s with role %r", account.id, account.role or None
            )
            return OnboardingResult(account_id=account.id, status="skipped")

        logger.info(
            "New business owner detected: %s (%s)", account.business_name, account.id
        )
        page = await asyncio.to_thread(self.booking_pages.ensure_booking_page, account)

        business_name = account.business_name or account.display_name or page.slug
        try:
            delivery = await self.notifications.send_booking_link(
                to=account.email,
                business_name=business_name,
                booking_link=page.booking_url,
                owner_name=account.display_name or account.business_name,
            )
        except Exception as exc:
            logger.exception(
                "Failed to send booking-link email", extra={"account_id": account.id}
            )
            email_sent, email_error = False, str(exc) or type(exc).__name__
        else:
            email_sent, email_error = delivery.success, delivery.error
            if not delivery.success:
                logger.warning(
                    "Booking-link email not sent to account %s: %s",
                    account.id,
                    delivery.error,
                )

        logger.info(
            "Owner setup complete for %s -> %s", business_name, page.booking_url
        )
        return OnboardingResult(
            account_id=account.id,
            status="completed",
            slug=page.slug,
            booking_url=page.booking_url,
            email_sent=email_sent,
            email_error=email_error,
        )

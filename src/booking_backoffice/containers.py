"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import ClientOptions, create_client

from booking_backoffice.adapters.sendgrid_client import HttpxSendGridClient
from booking_backoffice.adapters.supabase_account_repository import (
    SupabaseAccountRepository,
)
from booking_backoffice.adapters.supabase_hold_repository import SupabaseHoldRepository
from booking_backoffice.config import Settings
from booking_backoffice.services.accounts import BookingPageAssigner
from booking_backoffice.services.backfill import BackfillService
from booking_backoffice.services.holds import HoldExpirySweeper
from booking_backoffice.services.notifications import NotificationService
from booking_backoffice.services.onboarding import OnboardingService
from booking_backoffice.services.slugs import SlugAllocator


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    hold_sweeper: HoldExpirySweeper
    notification_service: NotificationService
    onboarding_service: OnboardingService
    backfill_service: BackfillService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url,
        resolved_settings.supabase_service_key,
        options=ClientOptions(
            postgrest_client_timeout=resolved_settings.store_timeout_seconds
        ),
    )
    account_repository = SupabaseAccountRepository(
        supabase_client, table_name=resolved_settings.accounts_table
    )
    hold_repository = SupabaseHoldRepository(
        supabase_client, table_name=resolved_settings.slot_holds_table
    )
    slug_allocator = SlugAllocator(
        account_repository,
        max_claim_attempts=resolved_settings.slug_claim_max_attempts,
    )
    booking_pages = BookingPageAssigner(
        repository=account_repository,
        slug_allocator=slug_allocator,
        booking_base_url=resolved_settings.booking_base_url,
    )
    hold_sweeper = HoldExpirySweeper(
        hold_repository, batch_size=resolved_settings.hold_sweep_batch_size
    )
    email_client = HttpxSendGridClient.create(
        resolved_settings.sendgrid_api_key,
        timeout=resolved_settings.email_timeout_seconds,
    )
    notification_service = NotificationService(
        sender=email_client, from_email=resolved_settings.email_from
    )
    onboarding_service = OnboardingService(
        booking_pages=booking_pages, notifications=notification_service
    )
    backfill_service = BackfillService(
        repository=account_repository, booking_pages=booking_pages
    )

    async def close_resources() -> None:
        await email_client.close()

    return AppContainer(
        settings=resolved_settings,
        hold_sweeper=hold_sweeper,
        notification_service=notification_service,
        onboarding_service=onboarding_service,
        backfill_service=backfill_service,
        close_resources=close_resources,
    )

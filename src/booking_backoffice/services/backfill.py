"""One-shot slug backfill for existing business owners."""

import logging
from dataclasses import dataclass

from booking_backoffice.domain.accounts import BackfillEntry, BackfillSummary
from booking_backoffice.errors import (
    AccountDataError,
    SlugConflictError,
    StoreUnavailableError,
)
from booking_backoffice.services.accounts import AccountRepository, BookingPageAssigner

logger = logging.getLogger(__name__)


@dataclass
class BackfillService:
    """Assigns slugs and booking urls to owners created before onboarding ran."""

    repository: AccountRepository
    booking_pages: BookingPageAssigner

    def backfill(self) -> BackfillSummary:
        """Migrate every owner missing a slug or booking url.

        A failure on one account is recorded and the run continues. Failing to
        list owners aborts the run.
        """
        logger.info("Starting slug backfill for existing business owners")
        owners = self.repository.list_business_owners()
        summary = BackfillSummary(total_owners=len(owners))

        for account in owners:
            if account.slug and account.booking_url:
                summary.skipped += 1
                continue

            name = account.name_for_slug or "salon"
            try:
                page = self.booking_pages.ensure_booking_page(account)
            except (AccountDataError, SlugConflictError, StoreUnavailableError) as exc:
                logger.exception(
                    "Backfill failed for account", extra={"account_id": account.id}
                )
                summary.failed += 1
                summary.errors.append({"id": account.id, "error": str(exc)})
                continue

            summary.results.append(
                BackfillEntry(id=account.id, name=name, slug=page.slug)
            )
            summary.migrated += 1
            logger.info("Migrated: %s -> %s (%s)", name, page.slug, page.booking_url)

        logger.info(
            "Slug backfill complete: %d owners, %d migrated, %d skipped, %d failed",
            summary.total_owners,
            summary.migrated,
            summary.skipped,
            summary.failed,
        )
        return summary

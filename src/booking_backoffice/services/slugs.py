"""Slug allocation for business-owner booking pages."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from booking_backoffice.domain.holds import now_millis
from booking_backoffice.domain.slugs import (
    fallback_slug,
    generate_slug,
    slug_candidates,
)
from booking_backoffice.errors import AccountDataError, SlugConflictError

logger = logging.getLogger(__name__)


class SlugRepository(Protocol):
    """Persistence interface for slug lookups and claims."""

    def is_slug_taken(self, slug: str, exclude_account_id: str | None = None) -> bool:
        """Return True if another business owner already uses the slug."""

    def claim_slug(self, account_id: str, slug: str) -> bool:
        """Write the slug if the account has none yet.

        Returns False when the account already had a slug. Raises
        SlugConflictError when another account holds the same slug.
        """

    def get_slug(self, account_id: str) -> str | None:
        """Return the slug currently stored for an account."""


@dataclass
class SlugAllocator:
    """Derives unique slugs and claims them for accounts."""

    repository: SlugRepository
    max_claim_attempts: int = 5
    clock: Callable[[], int] = now_millis

    def allocate_slug(
        self, business_name: str | None, exclude_account_id: str | None = None
    ) -> str:
        """Return the first unused slug derived from the business name.

        This only reads the store; the result is not reserved.
        """
        base = generate_slug(business_name)
        if not base:
            return fallback_slug(self.clock())
        candidates = slug_candidates(base)
        candidate = next(candidates)
        while self.repository.is_slug_taken(
            candidate, exclude_account_id=exclude_account_id
        ):
            candidate = next(candidates)
        return candidate

    def claim_slug(self, account_id: str, business_name: str | None) -> str:
        """Allocate a slug and persist it with a conditional write.

        A write rejected because a concurrent caller took the same slug
        restarts the probe. If the account already owns a slug it is kept; if
        the account row is gone, AccountDataError is raised.
        """
        for attempt in range(1, self.max_claim_attempts + 1):
            slug = self.allocate_slug(business_name, exclude_account_id=account_id)
            try:
                written = self.repository.claim_slug(account_id, slug)
            except SlugConflictError:
                logger.warning(
                    "Slug claim lost to a concurrent writer",
                    extra={"account_id": account_id, "slug": slug, "attempt": attempt},
                )
                continue
            if written:
                logger.info("Slug %r assigned to account %s", slug, account_id)
                return slug
            existing = self.repository.get_slug(account_id)
            if not existing:
                raise AccountDataError(f"Account {account_id} not found")
            logger.info("Account %s already has slug %r", account_id, existing)
            return existing
        raise SlugConflictError(slug)

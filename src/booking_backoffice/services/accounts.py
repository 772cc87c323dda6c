"""Account persistence interface and booking page assignment."""

from dataclasses import dataclass
from typing import Protocol

from booking_backoffice.domain.accounts import AccountRecord, build_booking_url
from booking_backoffice.services.slugs import SlugAllocator


class AccountRepository(Protocol):
    """Persistence interface for business-owner accounts."""

    def get_account(self, account_id: str) -> AccountRecord | None:
        """Return an account by id, if present."""

    def list_business_owners(self) -> list[AccountRecord]:
        """Return every business-owner account."""

    def set_booking_url(self, account_id: str, booking_url: str) -> None:
        """Store the public booking url for an account."""


@dataclass(frozen=True)
class BookingPage:
    """Slug and url assigned to an account."""

    slug: str
    booking_url: str
    slug_created: bool


@dataclass
class BookingPageAssigner:
    """Ensures an account has a persisted slug and booking url."""

    repository: AccountRepository
    slug_allocator: SlugAllocator
    booking_base_url: str

    def ensure_booking_page(self, account: AccountRecord) -> BookingPage:
        """Claim a slug if missing and fill in the booking url."""
        slug = account.slug
        slug_created = False
        if not slug:
            slug = self.slug_allocator.claim_slug(account.id, account.name_for_slug)
            slug_created = True
        booking_url = account.booking_url
        if not booking_url or slug_created:
            booking_url = build_booking_url(self.booking_base_url, slug)
            self.repository.set_booking_url(account.id, booking_url)
        return BookingPage(
            slug=slug, booking_url=booking_url, slug_created=slug_created
        )

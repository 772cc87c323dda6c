"""Shared test fixtures."""

import time
from dataclasses import dataclass, field, replace

import pytest

from booking_backoffice.config import Settings
from booking_backoffice.containers import AppContainer
from booking_backoffice.domain.accounts import BUSINESS_OWNER_ROLE, AccountRecord
from booking_backoffice.domain.holds import HOLD_ACTIVE, HOLD_EXPIRED, HoldRecord
from booking_backoffice.domain.notifications import EmailMessage
from booking_backoffice.errors import SlugConflictError, StoreUnavailableError
from booking_backoffice.services.accounts import AccountRepository, BookingPageAssigner
from booking_backoffice.services.backfill import BackfillService
from booking_backoffice.services.holds import HoldExpirySweeper, HoldRepository
from booking_backoffice.services.notifications import EmailSender, NotificationService
from booking_backoffice.services.onboarding import OnboardingService
from booking_backoffice.services.slugs import SlugAllocator, SlugRepository

FIXED_NOW = 1_700_000_000_000
BOOKING_BASE_URL = "https://book.example.com"


def fixed_clock() -> int:
    return FIXED_NOW


def make_owner(
    account_id: str,
    business_name: str | None = "ABC Salon",
    *,
    slug: str | None = None,
    booking_url: str | None = None,
    email: str | None = "owner@example.com",
    display_name: str | None = None,
) -> AccountRecord:
    return AccountRecord(
        id=account_id,
        role=BUSINESS_OWNER_ROLE,
        business_name=business_name,
        display_name=display_name,
        email=email,
        slug=slug,
        booking_url=booking_url,
    )


@dataclass
class InMemoryAccountRepository(AccountRepository, SlugRepository):
    """In-memory account repository for tests."""

    accounts: dict[str, AccountRecord] = field(default_factory=dict)
    probes: list[str] = field(default_factory=list)
    booking_url_writes: list[tuple[str, str]] = field(default_factory=list)
    failing_account_ids: set[str] = field(default_factory=set)
    concurrent_claims: set[str] = field(default_factory=set)
    probe_delay: float = 0.0

    def add(self, account: AccountRecord) -> AccountRecord:
        self.accounts[account.id] = account
        return account

    def get_account(self, account_id: str) -> AccountRecord | None:
        return self.accounts.get(account_id)

    def list_business_owners(self) -> list[AccountRecord]:
        return [
            account for account in self.accounts.values() if account.is_business_owner
        ]

    def set_booking_url(self, account_id: str, booking_url: str) -> None:
        self._check_available(account_id)
        self.booking_url_writes.append((account_id, booking_url))
        self.accounts[account_id] = replace(
            self.accounts[account_id], booking_url=booking_url
        )

    def is_slug_taken(self, slug: str, exclude_account_id: str | None = None) -> bool:
        self.probes.append(slug)
        if self.probe_delay:
            time.sleep(self.probe_delay)
        return any(
            account.slug == slug
            and account.is_business_owner
            and account.id != exclude_account_id
            for account in self.accounts.values()
        )

    def claim_slug(self, account_id: str, slug: str) -> bool:
        self._check_available(account_id)
        account = self.accounts.get(account_id)
        if account is None or account.slug:
            return False
        if slug in self.concurrent_claims:
            # Another writer commits the same slug between probe and claim.
            self.concurrent_claims.discard(slug)
            self.add(make_owner(f"rival-{slug}", slug=slug))
            raise SlugConflictError(slug)
        if self.is_slug_taken(slug, exclude_account_id=account_id):
            raise SlugConflictError(slug)
        self.accounts[account_id] = replace(account, slug=slug)
        return True

    def get_slug(self, account_id: str) -> str | None:
        account = self.accounts.get(account_id)
        return account.slug if account else None

    def _check_available(self, account_id: str) -> None:
        if account_id in self.failing_account_ids:
            raise StoreUnavailableError(f"store unavailable for {account_id}")


@dataclass
class InMemoryHoldRepository(HoldRepository):
    """In-memory slot hold repository for tests."""

    holds: dict[str, HoldRecord] = field(default_factory=dict)
    writes: list[list[str]] = field(default_factory=list)
    fail_writes: bool = False

    def add(self, hold_id: str, expires_at: int, status: str = HOLD_ACTIVE) -> None:
        self.holds[hold_id] = HoldRecord(
            id=hold_id,
            session_id=f"session-{hold_id}",
            status=status,
            expires_at=expires_at,
        )

    def list_overdue_active_holds(self, now: int, limit: int) -> list[HoldRecord]:
        overdue = [
            hold
            for hold in self.holds.values()
            if hold.status == HOLD_ACTIVE and hold.expires_at <= now
        ]
        return sorted(overdue, key=lambda hold: hold.expires_at)[:limit]

    def mark_expired(self, hold_ids: list[str], expired_at: int) -> None:
        if self.fail_writes:
            raise StoreUnavailableError("batch write failed")
        self.writes.append(list(hold_ids))
        for hold_id in hold_ids:
            self.holds[hold_id] = replace(
                self.holds[hold_id], status=HOLD_EXPIRED, expired_at=expired_at
            )


@dataclass
class FakeEmailSender(EmailSender):
    """Fake email sender that records messages or fails on demand."""

    messages: list[EmailMessage] = field(default_factory=list)
    error: Exception | None = None

    async def send(self, message: EmailMessage) -> None:
        if self.error is not None:
            raise self.error
        self.messages.append(message)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        admin_token="admin-token",
        sendgrid_api_key="sendgrid-key",
        booking_base_url=BOOKING_BASE_URL,
        scheduler_enabled=False,
    )


@pytest.fixture
def account_repository() -> InMemoryAccountRepository:
    return InMemoryAccountRepository()


@pytest.fixture
def hold_repository() -> InMemoryHoldRepository:
    return InMemoryHoldRepository()


@pytest.fixture
def email_sender() -> FakeEmailSender:
    return FakeEmailSender()


@pytest.fixture
def slug_allocator(account_repository: InMemoryAccountRepository) -> SlugAllocator:
    return SlugAllocator(account_repository, clock=fixed_clock)


@pytest.fixture
def booking_pages(
    account_repository: InMemoryAccountRepository, slug_allocator: SlugAllocator
) -> BookingPageAssigner:
    return BookingPageAssigner(
        repository=account_repository,
        slug_allocator=slug_allocator,
        booking_base_url=BOOKING_BASE_URL,
    )


@pytest.fixture
def container(
    settings: Settings,
    account_repository: InMemoryAccountRepository,
    hold_repository: InMemoryHoldRepository,
    email_sender: FakeEmailSender,
    booking_pages: BookingPageAssigner,
) -> AppContainer:
    notification_service = NotificationService(
        sender=email_sender, from_email=settings.email_from
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        hold_sweeper=HoldExpirySweeper(hold_repository, clock=fixed_clock),
        notification_service=notification_service,
        onboarding_service=OnboardingService(
            booking_pages=booking_pages, notifications=notification_service
        ),
        backfill_service=BackfillService(
            repository=account_repository, booking_pages=booking_pages
        ),
        close_resources=close_resources,
    )

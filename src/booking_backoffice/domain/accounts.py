"""Domain models for business-owner accounts."""

from dataclasses import dataclass, field

from booking_backoffice.errors import AccountDataError

BUSINESS_OWNER_ROLE = "business_owner"


@dataclass(frozen=True)
class AccountRecord:
    """Represents an account row relevant to slug assignment."""

    id: str
    role: str
    business_name: str | None = None
    display_name: str | None = None
    email: str | None = None
    slug: str | None = None
    booking_url: str | None = None

    @property
    def is_business_owner(self) -> bool:
        return self.role == BUSINESS_OWNER_ROLE

    @property
    def name_for_slug(self) -> str:
        """Return the name the slug is derived from."""
        return self.business_name or self.display_name or ""


@dataclass(frozen=True)
class AccountCreatedEvent:
    """A store notification that a new account row was inserted."""

    account_id: str | None
    record: dict[str, object]


@dataclass(frozen=True)
class OnboardingResult:
    """Outcome of processing one account-created event."""

    account_id: str | None
    status: str
    slug: str | None = None
    booking_url: str | None = None
    email_sent: bool = False
    email_error: str | None = None


@dataclass(frozen=True)
class BackfillEntry:
    """One migrated account in a backfill run."""

    id: str
    name: str
    slug: str


@dataclass
class BackfillSummary:
    """Aggregate result of a slug backfill run."""

    total_owners: int = 0
    migrated: int = 0
    skipped: int = 0
    failed: int = 0
    results: list[BackfillEntry] = field(default_factory=list)
    errors: list[dict[str, str]] = field(default_factory=list)


def build_booking_url(base_url: str, slug: str) -> str:
    """Join the public booking base url and a slug."""
    return f"{base_url.rstrip('/')}/{slug}"


def account_from_row(row: dict[str, object]) -> AccountRecord:
    """Build an account record from a raw store row."""
    account_id = row.get("id")
    if not account_id:
        raise AccountDataError("Account row has no id")
    return AccountRecord(
        id=str(account_id),
        role=str(row.get("role") or ""),
        business_name=_optional_str(row.get("business_name")),
        display_name=_optional_str(row.get("display_name")),
        email=_optional_str(row.get("email")),
        slug=_optional_str(row.get("slug")),
        booking_url=_optional_str(row.get("booking_url")),
    )


def _optional_str(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None

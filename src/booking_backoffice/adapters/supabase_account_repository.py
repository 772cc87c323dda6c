"""Supabase-backed account and slug repository."""

from dataclasses import dataclass

from postgrest.exceptions import APIError
from supabase import Client

from booking_backoffice.adapters.supabase_errors import UNIQUE_VIOLATION, store_errors
from booking_backoffice.domain.accounts import (
    BUSINESS_OWNER_ROLE,
    AccountRecord,
    account_from_row,
)
from booking_backoffice.errors import SlugConflictError
from booking_backoffice.services.accounts import AccountRepository
from booking_backoffice.services.slugs import SlugRepository

_ACCOUNT_COLUMNS = "id, role, business_name, display_name, email, slug, booking_url"
_PAGE_SIZE = 1000


@dataclass
class SupabaseAccountRepository(AccountRepository, SlugRepository):
    """Supabase implementation for account slugs and booking urls."""

    client: Client
    table_name: str = "users"

    def get_account(self, account_id: str) -> AccountRecord | None:
        """Return an account by id, if present."""
        with store_errors("get_account"):
            response = (
                self.client.table(self.table_name)
                .select(_ACCOUNT_COLUMNS)
                .eq("id", account_id)
                .limit(1)
                .execute()
            )
        if not response.data:
            return None
        return account_from_row(response.data[0])

    def list_business_owners(self) -> list[AccountRecord]:
        """Return every business-owner account, paging through the table."""
        accounts: list[AccountRecord] = []
        start = 0
        while True:
            with store_errors("list_business_owners"):
                response = (
                    self.client.table(self.table_name)
                    .select(_ACCOUNT_COLUMNS)
                    .eq("role", BUSINESS_OWNER_ROLE)
                    .order("id")
                    .range(start, start + _PAGE_SIZE - 1)
                    .execute()
                )
            rows = response.data or []
            accounts.extend(account_from_row(row) for row in rows)
            if len(rows) < _PAGE_SIZE:
                return accounts
            start += _PAGE_SIZE

    def set_booking_url(self, account_id: str, booking_url: str) -> None:
        """Store the public booking url for an account."""
        with store_errors("set_booking_url"):
            self.client.table(self.table_name).update(
                {"booking_url": booking_url}
            ).eq("id", account_id).execute()

    def is_slug_taken(self, slug: str, exclude_account_id: str | None = None) -> bool:
        """Return True if another business owner already uses the slug."""
        query = (
            self.client.table(self.table_name)
            .select("id")
            .eq("slug", slug)
            .eq("role", BUSINESS_OWNER_ROLE)
        )
        if exclude_account_id:
            query = query.neq("id", exclude_account_id)
        with store_errors("is_slug_taken"):
            response = query.limit(1).execute()
        return bool(response.data)

    def claim_slug(self, account_id: str, slug: str) -> bool:
        """Write the slug only where the account has none.

        The unique index on ``slug`` rejects a value already owned by
        another account.
        """
        with store_errors("claim_slug"):
            try:
                response = (
                    self.client.table(self.table_name)
                    .update({"slug": slug})
                    .eq("id", account_id)
                    .is_("slug", "null")
                    .execute()
                )
            except APIError as exc:
                if exc.code == UNIQUE_VIOLATION:
                    raise SlugConflictError(slug) from exc
                raise
        return bool(response.data)

    def get_slug(self, account_id: str) -> str | None:
        """Return the slug currently stored for an account."""
        account = self.get_account(account_id)
        return account.slug if account else None

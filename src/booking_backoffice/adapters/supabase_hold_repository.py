"""Supabase-backed slot hold repository."""

from dataclasses import dataclass

from supabase import Client

from booking_backoffice.adapters.supabase_errors import store_errors
from booking_backoffice.domain.holds import (
    HOLD_ACTIVE,
    HOLD_EXPIRED,
    HoldRecord,
    hold_from_row,
)
from booking_backoffice.services.holds import HoldRepository


@dataclass
class SupabaseHoldRepository(HoldRepository):
    """Supabase implementation for slot holds."""

    client: Client
    table_name: str = "slot_holds"

    def list_overdue_active_holds(self, now: int, limit: int) -> list[HoldRecord]:
        """Return up to ``limit`` active holds with ``expires_at <= now``."""
        with store_errors("list_overdue_active_holds"):
            response = (
                self.client.table(self.table_name)
                .select("id, session_id, status, expires_at, expired_at")
                .eq("status", HOLD_ACTIVE)
                .lte("expires_at", now)
                .order("expires_at")
                .limit(limit)
                .execute()
            )
        return [hold_from_row(row) for row in response.data or []]

    def mark_expired(self, hold_ids: list[str], expired_at: int) -> None:
        """Expire the holds with a single UPDATE statement."""
        if not hold_ids:
            return
        with store_errors("mark_expired"):
            self.client.table(self.table_name).update(
                {"status": HOLD_EXPIRED, "expired_at": expired_at}
            ).in_("id", hold_ids).eq("status", HOLD_ACTIVE).lte(
                "expires_at", expired_at
            ).execute()


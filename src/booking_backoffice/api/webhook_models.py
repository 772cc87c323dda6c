"""Pydantic models for Supabase database webhook payloads."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from booking_backoffice.domain.accounts import AccountCreatedEvent

INSERT_EVENT = "INSERT"


class DatabaseWebhookPayload(BaseModel):
    """Row change notification sent by a Supabase database webhook."""

    model_config = ConfigDict(populate_by_name=True)

    type: str
    table: str
    db_schema: str | None = Field(default=None, alias="schema")
    record: dict[str, Any] | None = None
    old_record: dict[str, Any] | None = None

    @property
    def is_insert(self) -> bool:
        return self.type.upper() == INSERT_EVENT and self.record is not None

    def to_account_created_event(self) -> AccountCreatedEvent:
        """Convert the payload into the onboarding event."""
        record = dict(self.record or {})
        account_id = record.get("id")
        return AccountCreatedEvent(
            account_id=str(account_id) if account_id else None,
            record=record,
        )

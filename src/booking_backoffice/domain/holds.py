"""Domain models for temporary slot holds."""

import time
from dataclasses import dataclass, field

HOLD_ACTIVE = "active"
HOLD_EXPIRED = "expired"

MAX_SWEEP_BATCH_SIZE = 500


@dataclass(frozen=True)
class HoldRecord:
    """Represents a persisted slot hold."""

    id: str
    session_id: str | None
    status: str
    expires_at: int
    expired_at: int | None = None


@dataclass(frozen=True)
class SweepResult:
    """Outcome of one expiry sweep."""

    swept_at: int
    hold_ids: list[str] = field(default_factory=list)

    @property
    def expired_count(self) -> int:
        return len(self.hold_ids)


def now_millis() -> int:
    """Return the current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def hold_from_row(row: dict[str, object]) -> HoldRecord:
    """Build a hold record from a raw store row."""
    expired_at = row.get("expired_at")
    return HoldRecord(
        id=str(row["id"]),
        session_id=str(row["session_id"]) if row.get("session_id") else None,
        status=str(row["status"]),
        expires_at=int(row["expires_at"]),
        expired_at=int(expired_at) if expired_at is not None else None,
    )

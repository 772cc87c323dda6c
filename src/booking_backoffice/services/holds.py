"""Reclamation of slot holds that were never confirmed."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol

from booking_backoffice.domain.holds import (
    MAX_SWEEP_BATCH_SIZE,
    HoldRecord,
    SweepResult,
    now_millis,
)

logger = logging.getLogger(__name__)


class HoldRepository(Protocol):
    """Persistence interface for slot holds."""

    def list_overdue_active_holds(self, now: int, limit: int) -> list[HoldRecord]:
        """Return up to ``limit`` active holds whose expiry is at or before now."""

    def mark_expired(self, hold_ids: list[str], expired_at: int) -> None:
        """Expire the given holds in one all-or-nothing write."""


@dataclass
class HoldExpirySweeper:
    """Marks overdue active holds as expired, one capped batch per run."""

    repository: HoldRepository
    batch_size: int = MAX_SWEEP_BATCH_SIZE
    clock: Callable[[], int] = now_millis

    def __post_init__(self) -> None:
        if not 0 < self.batch_size <= MAX_SWEEP_BATCH_SIZE:
            raise ValueError(
                f"batch_size must be between 1 and {MAX_SWEEP_BATCH_SIZE}"
            )

    def sweep(self) -> SweepResult:
        """Run one sweep and return which holds were expired.

        Store failures propagate; nothing is written unless the whole
        batch is.
        """
        now = self.clock()
        overdue = self.repository.list_overdue_active_holds(now, limit=self.batch_size)
        if not overdue:
            logger.info("No expired holds to clean up")
            return SweepResult(swept_at=now)

        hold_ids = [hold.id for hold in overdue]
        self.repository.mark_expired(hold_ids, expired_at=now)
        logger.info("Cleaned up %d expired slot hold(s)", len(hold_ids))
        if len(hold_ids) == self.batch_size:
            logger.info("Sweep hit the batch cap; remaining holds roll to next run")
        return SweepResult(swept_at=now, hold_ids=hold_ids)


def log_hold_created(hold: HoldRecord) -> None:
    """Record a new hold for monitoring."""
    expires = datetime.fromtimestamp(hold.expires_at / 1000, tz=UTC).isoformat()
    logger.info(
        "Slot hold created: %s, session: %s, expires: %s",
        hold.id,
        hold.session_id,
        expires,
    )

"""Tests for the expired hold sweeper."""

import logging
from datetime import UTC, datetime

import pytest

from booking_backoffice.domain.holds import (
    HOLD_ACTIVE,
    HOLD_EXPIRED,
    HoldRecord,
    hold_from_row,
)
from booking_backoffice.errors import StoreUnavailableError
from booking_backoffice.services.holds import HoldExpirySweeper, log_hold_created
from tests.conftest import FIXED_NOW, InMemoryHoldRepository, fixed_clock


def _sweeper(
    repository: InMemoryHoldRepository, batch_size: int = 500
) -> HoldExpirySweeper:
    return HoldExpirySweeper(repository, batch_size=batch_size, clock=fixed_clock)


def test_sweep_expires_only_overdue_holds(
    hold_repository: InMemoryHoldRepository,
) -> None:
    hold_repository.add("h1", expires_at=FIXED_NOW - 10)
    hold_repository.add("h2", expires_at=FIXED_NOW + 10)

    result = _sweeper(hold_repository).sweep()

    assert result.hold_ids == ["h1"]
    assert result.swept_at == FIXED_NOW
    assert hold_repository.holds["h1"].status == HOLD_EXPIRED
    assert hold_repository.holds["h1"].expired_at == FIXED_NOW
    assert hold_repository.holds["h2"].status == HOLD_ACTIVE
    assert hold_repository.holds["h2"].expired_at is None


def test_sweep_expires_hold_due_exactly_now(
    hold_repository: InMemoryHoldRepository,
) -> None:
    hold_repository.add("h1", expires_at=FIXED_NOW)

    result = _sweeper(hold_repository).sweep()

    assert result.expired_count == 1


def test_sweep_is_noop_without_overdue_holds(
    hold_repository: InMemoryHoldRepository,
) -> None:
    hold_repository.add("future", expires_at=FIXED_NOW + 60_000)
    hold_repository.add("done", expires_at=FIXED_NOW - 60_000, status=HOLD_EXPIRED)

    result = _sweeper(hold_repository).sweep()

    assert result.expired_count == 0
    assert result.hold_ids == []
    assert hold_repository.writes == []


def test_sweep_caps_batch_and_rolls_remainder_to_next_run(
    hold_repository: InMemoryHoldRepository,
) -> None:
    for index in range(600):
        hold_repository.add(f"h{index}", expires_at=FIXED_NOW - 1_000 + index)
    sweeper = _sweeper(hold_repository)

    first = sweeper.sweep()
    second = sweeper.sweep()
    third = sweeper.sweep()

    assert first.expired_count == 500
    assert second.expired_count == 100
    assert third.expired_count == 0
    assert [len(batch) for batch in hold_repository.writes] == [500, 100]
    assert all(hold.status == HOLD_EXPIRED for hold in hold_repository.holds.values())


def test_sweep_never_revisits_expired_holds(
    hold_repository: InMemoryHoldRepository,
) -> None:
    hold_repository.add("h1", expires_at=FIXED_NOW - 10)
    sweeper = _sweeper(hold_repository)

    sweeper.sweep()
    sweeper.sweep()

    assert hold_repository.writes == [["h1"]]


def test_expired_at_is_never_before_expires_at(
    hold_repository: InMemoryHoldRepository,
) -> None:
    for index in range(5):
        hold_repository.add(f"h{index}", expires_at=FIXED_NOW - index * 1_000)

    _sweeper(hold_repository).sweep()

    for hold in hold_repository.holds.values():
        assert hold.expired_at is not None
        assert hold.expired_at >= hold.expires_at


def test_failed_write_leaves_holds_active(
    hold_repository: InMemoryHoldRepository,
) -> None:
    hold_repository.add("h1", expires_at=FIXED_NOW - 10)
    hold_repository.fail_writes = True
    sweeper = _sweeper(hold_repository)

    with pytest.raises(StoreUnavailableError):
        sweeper.sweep()

    assert hold_repository.holds["h1"].status == HOLD_ACTIVE

    hold_repository.fail_writes = False
    assert sweeper.sweep().hold_ids == ["h1"]


@pytest.mark.parametrize("batch_size", [0, -1, 501])
def test_batch_size_must_fit_store_limit(
    hold_repository: InMemoryHoldRepository, batch_size: int
) -> None:
    with pytest.raises(ValueError):
        HoldExpirySweeper(hold_repository, batch_size=batch_size)


def test_smaller_batch_size_is_respected(
    hold_repository: InMemoryHoldRepository,
) -> None:
    for index in range(5):
        hold_repository.add(f"h{index}", expires_at=FIXED_NOW - 10)

    result = _sweeper(hold_repository, batch_size=2).sweep()

    assert result.expired_count == 2


def test_hold_from_row_parses_store_values() -> None:
    hold = hold_from_row(
        {
            "id": "hold-1",
            "session_id": "session-1",
            "status": "active",
            "expires_at": str(FIXED_NOW),
            "expired_at": None,
        }
    )

    assert hold == HoldRecord(
        id="hold-1",
        session_id="session-1",
        status="active",
        expires_at=FIXED_NOW,
    )


def test_log_hold_created_reports_id_session_and_expiry(
    caplog: pytest.LogCaptureFixture, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(logging.getLogger("booking_backoffice"), "propagate", True)

    with caplog.at_level(logging.INFO, logger="booking_backoffice.services.holds"):
        log_hold_created(
            HoldRecord(
                id="hold-1",
                session_id="session-1",
                status="active",
                expires_at=FIXED_NOW,
            )
        )

    expires = datetime.fromtimestamp(FIXED_NOW / 1000, tz=UTC).isoformat()
    assert caplog.messages == [
        f"Slot hold created: hold-1, session: session-1, expires: {expires}"
    ]

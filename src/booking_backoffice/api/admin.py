"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from booking_backoffice.errors import StoreUnavailableError

if TYPE_CHECKING:
    from booking_backoffice.containers import AppContainer
    from booking_backoffice.domain.accounts import BackfillSummary

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.post("/backfill-slugs", dependencies=[Depends(require_admin)])
def backfill_slugs(request: Request) -> dict[str, object]:
    """Assign slugs and booking urls to existing owners that lack them."""
    container: AppContainer = request.app.state.container
    try:
        summary = container.backfill_service.backfill()
    except StoreUnavailableError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc
    return _serialize_backfill(summary)


@router.post("/jobs/sweep-holds", dependencies=[Depends(require_admin)])
def sweep_holds(request: Request) -> dict[str, object]:
    """Run one expired-hold sweep, for external cron triggers."""
    container: AppContainer = request.app.state.container
    try:
        result = container.hold_sweeper.sweep()
    except StoreUnavailableError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc
    return {
        "expired": result.expired_count,
        "holdIds": result.hold_ids,
        "sweptAt": result.swept_at,
    }


def _serialize_backfill(summary: BackfillSummary) -> dict[str, object]:
    return {
        "totalOwners": summary.total_owners,
        "migrated": summary.migrated,
        "skipped": summary.skipped,
        "failed": summary.failed,
        "results": [
            {"id": entry.id, "name": entry.name, "slug": entry.slug}
            for entry in summary.results
        ],
        "errors": summary.errors,
    }

"""Store change webhooks."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from booking_backoffice.api.webhook_models import DatabaseWebhookPayload
from booking_backoffice.domain.holds import hold_from_row
from booking_backoffice.errors import (
    AccountDataError,
    SlugConflictError,
    StoreUnavailableError,
)
from booking_backoffice.services.holds import log_hold_created

if TYPE_CHECKING:
    from booking_backoffice.containers import AppContainer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


def _get_webhook_secret(request: Request) -> str | None:
    container: AppContainer = request.app.state.container
    return container.settings.webhook_secret


async def require_webhook_secret(
    x_webhook_secret: str | None = Header(default=None),
    webhook_secret: str | None = Depends(_get_webhook_secret),
) -> None:
    """Reject webhook calls without the shared secret, when one is configured."""
    if webhook_secret and x_webhook_secret != webhook_secret:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.post("/accounts", dependencies=[Depends(require_webhook_secret)])
async def account_created(
    payload: DatabaseWebhookPayload, request: Request
) -> dict[str, object]:
    """Onboard a newly inserted account."""
    container: AppContainer = request.app.state.container
    if not payload.is_insert:
        return {"status": "ignored"}

    event = payload.to_account_created_event()
    try:
        async with asyncio.timeout(container.settings.invocation_timeout_seconds):
            result = await container.onboarding_service.handle_account_created(event)
    except TimeoutError as exc:
        logger.exception("Onboarding timed out", extra={"account_id": event.account_id})
        raise HTTPException(status_code=status.HTTP_504_GATEWAY_TIMEOUT) from exc
    except AccountDataError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except (SlugConflictError, StoreUnavailableError) as exc:
        logger.exception("Onboarding failed", extra={"account_id": event.account_id})
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc

    return {
        "status": result.status,
        "accountId": result.account_id,
        "slug": result.slug,
        "bookingUrl": result.booking_url,
        "emailSent": result.email_sent,
        "emailError": result.email_error,
    }


@router.post("/slot-holds", dependencies=[Depends(require_webhook_secret)])
async def slot_hold_created(payload: DatabaseWebhookPayload) -> dict[str, str]:
    """Log creation of a slot hold."""
    if not payload.is_insert:
        return {"status": "ignored"}
    try:
        hold = hold_from_row(payload.record or {})
    except (KeyError, TypeError, ValueError) as exc:
        raise HTTPException(status_code=422, detail="Invalid slot hold record") from exc
    log_hold_created(hold)
    return {"status": "ok"}

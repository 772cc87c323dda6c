"""Translation of Supabase client failures into store errors."""

from collections.abc import Iterator
from contextlib import contextmanager

import httpx
from postgrest.exceptions import APIError

from booking_backoffice.errors import StoreUnavailableError

UNIQUE_VIOLATION = "23505"


@contextmanager
def store_errors(action: str) -> Iterator[None]:
    """Re-raise PostgREST and transport failures as StoreUnavailableError."""
    try:
        yield
    except APIError as exc:
        raise StoreUnavailableError(f"{action} failed: {exc.message}") from exc
    except httpx.HTTPError as exc:
        raise StoreUnavailableError(f"{action} failed: {exc}") from exc

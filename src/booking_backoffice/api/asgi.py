"""ASGI entrypoint for the booking back-office API."""

from booking_backoffice.api.app import create_app
from booking_backoffice.containers import build_container

app = create_app(build_container())

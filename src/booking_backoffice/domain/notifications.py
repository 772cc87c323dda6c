"""Domain models for outbound email."""

from dataclasses import dataclass


@dataclass(frozen=True)
class EmailMessage:
    """A single HTML email ready for delivery."""

    to: str
    from_email: str
    subject: str
    html: str


@dataclass(frozen=True)
class DeliveryResult:
    """Outcome of a delivery attempt."""

    success: bool
    error: str | None = None

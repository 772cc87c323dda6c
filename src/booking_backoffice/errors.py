"""Error types shared by services, adapters and the API layer."""


class StoreUnavailableError(RuntimeError):
    """Raised when the document store cannot be reached or rejects a request."""


class SlugConflictError(RuntimeError):
    """Raised when a conditional slug write loses to a concurrent claim."""

    def __init__(self, slug: str) -> None:
        super().__init__(f"Slug {slug!r} is already claimed by another account")
        self.slug = slug


class AccountDataError(ValueError):
    """Raised when an account record is missing a required field."""


class EmailDeliveryError(RuntimeError):
    """Raised when the email provider rejects or fails to accept a message."""

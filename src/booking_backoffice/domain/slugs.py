"""Slug normalisation rules for public booking pages."""

import re
from collections.abc import Iterator

_APOSTROPHES = re.compile(r"['‘’]")
_NON_SLUG_RUNS = re.compile(r"[^a-z0-9]+")

FALLBACK_PREFIX = "salon"


def generate_slug(name: str | None) -> str:
    """Convert a business name into a URL-friendly slug.

    Examples:
        "ABC Salon"           -> "abc-salon"
        "Jane's Nails & Spa!" -> "janes-nails-spa"
        "!!!"                 -> ""
    """
    if not name:
        return ""
    lowered = _APOSTROPHES.sub("", name.lower())
    return _NON_SLUG_RUNS.sub("-", lowered).strip("-")


def fallback_slug(epoch_millis: int) -> str:
    """Return the synthetic slug used when a name has no usable characters."""
    return f"{FALLBACK_PREFIX}-{epoch_millis}"


def slug_candidates(base: str) -> Iterator[str]:
    """Yield ``base``, ``base-1``, ``base-2``, ... without end."""
    yield base
    counter = 1
    while True:
        yield f"{base}-{counter}"
        counter += 1

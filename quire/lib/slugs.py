"""Slug normalization and collision resolution."""

import re
from collections.abc import Container

_DISALLOWED = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-{2,}")

FALLBACK_SLUG = "page"

# Matches the pages.slug column
MAX_SLUG_LENGTH = 255

# Room kept for a "-N" counter when narrowing the collision lookup
_COUNTER_RESERVE = 12


def slugify(value: str, max_length: int = MAX_SLUG_LENGTH) -> str:
    """Turn arbitrary text into a lowercase, hyphen-separated URL segment.

    >>> slugify("Hello, World!")
    'hello-world'
    """
    value = _DISALLOWED.sub("", value.lower())
    value = _WHITESPACE.sub("-", value)
    value = _HYPHENS.sub("-", value)
    return value.strip("-")[:max_length].rstrip("-")


def collision_prefix(candidate: str, max_length: int = MAX_SLUG_LENGTH) -> str:
    """Common prefix of ``candidate`` and every suffixed variant ``next_free_slug`` can produce."""
    return candidate[: max_length - _COUNTER_RESERVE].rstrip("-")


def next_free_slug(
    candidate: str,
    taken: Container[str],
    max_length: int = MAX_SLUG_LENGTH,
) -> str:
    """Return ``candidate`` or the first ``candidate-N`` (N >= 1) not in ``taken``.

    The candidate is shortened as needed so the suffixed slug never exceeds
    ``max_length``.
    """
    slug = candidate
    counter = 1
    while slug in taken:
        suffix = f"-{counter}"
        slug = candidate[: max_length - len(suffix)].rstrip("-") + suffix
        counter += 1
    return slug

"""Slug helpers."""

import re
from unicodedata import normalize

SLUG_PATTERN = re.compile(r"[a-z0-9]+(?:-[a-z0-9]+)*")


def slugify(text: str, max_len: int = 60) -> str:
    """Convert text to a safe URL-friendly slug.

    Args:
        text: Input text to slugify
        max_len: Maximum length of output slug (default 60)

    Returns:
        Safe slug string suitable for directory names and URLs

    Examples:
        >>> slugify("Python's Walrus Operator")
        'python-s-walrus-operator'
        >>> slugify("f-strings: Café edition")
        'f-strings-cafe-edition'
        >>> slugify("A" * 100, max_len=20)
        'aaaaaaaaaaaaaaaaaaaa'

    """
    normalized = normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    normalized = normalized.lower()

    slug = re.sub(r"[^a-z0-9]+", "-", normalized).strip("-")

    if not slug:
        return "untitled"

    if len(slug) > max_len:
        slug = slug[:max_len].rstrip("-")

    return slug


def is_valid_slug(slug: str) -> bool:
    """Return True when ``slug`` is lowercase ASCII words joined by single hyphens."""
    return bool(SLUG_PATTERN.fullmatch(slug))

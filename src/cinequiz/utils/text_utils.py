"""Text processing utilities."""

import re
from datetime import date, datetime
from typing import Iterable, Optional, Set

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def normalize_key(value: Optional[str]) -> str:
    """Normalize a title into a comparison key.

    Lowercases the value and strips every character outside ``[a-z0-9]``.
    Accented and non-Latin characters are removed as well, so the key does not
    depend on locale or Unicode case folding.

    Args:
        value: Original title.

    Returns:
        Normalized key (may be empty).

    Examples:
        >>> normalize_key("Spider-Man: No Way Home")
        'spidermannowayhome'
    """
    if not value:
        return ""
    return _NON_ALNUM.sub("", value.lower())


def normalized_names(*values: Optional[str]) -> Set[str]:
    """Build the set of non-empty normalized keys for a group of titles."""
    keys = {normalize_key(value) for value in values}
    keys.discard("")
    return keys


def parse_release_date(value: Optional[str]) -> Optional[date]:
    """Parse a TMDb ``YYYY-MM-DD`` release date.

    Args:
        value: Raw release date string.

    Returns:
        Parsed date or None if missing or malformed.
    """
    if not value:
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        return None


def parse_release_year(value: Optional[str]) -> Optional[int]:
    """Extract the year from a release date string.

    Only the leading ``YYYY`` component is required, so partial dates such as
    ``"1999"`` still yield a year.
    """
    if not value:
        return None
    head = value.split("-", 1)[0].strip()
    if len(head) != 4 or not head.isdigit():
        return None
    return int(head)


def unique_titles(titles: Iterable[Optional[str]], exclude: Iterable[Optional[str]] = ()) -> list:
    """Return distinct non-empty titles, preserving order.

    Titles equal (case-sensitively) to any value in ``exclude`` are skipped.
    """
    seen = {title for title in exclude if title}
    result = []
    for title in titles:
        if title and title not in seen:
            seen.add(title)
            result.append(title)
    return result

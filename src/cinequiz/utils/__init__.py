"""Utility functions and classes."""

from .exceptions import (
    CineQuizError,
    ConfigurationError,
    ContentProviderError,
    SessionError,
    UnqualifiedSubjectError,
)
from .text_utils import (
    normalize_key,
    normalized_names,
    parse_release_date,
    parse_release_year,
    unique_titles,
)

__all__ = [
    "CineQuizError",
    "ConfigurationError",
    "ContentProviderError",
    "SessionError",
    "UnqualifiedSubjectError",
    "normalize_key",
    "normalized_names",
    "parse_release_date",
    "parse_release_year",
    "unique_titles",
]

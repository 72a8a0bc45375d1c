"""Core service implementations."""

from .cast_reveal import CastTransition, qualify_cast, reduce_cast_session
from .cast_reveal_session import CastRevealSession
from .countdown import Countdown
from .filmography import FilmographyTransition, reduce_filmography
from .filmography_builder import build_filmography
from .filmography_session import FilmographySession
from .subject_matcher import find_filmography_entry, is_same_subject, matches_entry
from .tmdb_provider import TMDbContentProvider

__all__ = [
    "TMDbContentProvider",
    "CastRevealSession",
    "CastTransition",
    "FilmographySession",
    "FilmographyTransition",
    "Countdown",
    "build_filmography",
    "qualify_cast",
    "reduce_cast_session",
    "reduce_filmography",
    "find_filmography_entry",
    "is_same_subject",
    "matches_entry",
]

"""Core data models."""

from .filmography import (
    DEFAULT_ROUND_SECONDS,
    MAX_HINT_LEVEL,
    FilmographyPhase,
    FilmographyState,
    GuessResult,
    GuessStatus,
    HintLevel,
)
from .movie import CastMember, GameMovie, MovieSummary
from .person import FilmographyEntry, Person, PersonCredit
from .session import CastOutcome, CastPhase, CastSessionState, RoundResult

__all__ = [
    "MovieSummary",
    "CastMember",
    "GameMovie",
    "Person",
    "PersonCredit",
    "FilmographyEntry",
    "CastPhase",
    "CastOutcome",
    "CastSessionState",
    "RoundResult",
    "FilmographyPhase",
    "FilmographyState",
    "GuessStatus",
    "GuessResult",
    "HintLevel",
    "MAX_HINT_LEVEL",
    "DEFAULT_ROUND_SECONDS",
]

"""Filmography round state models."""

from enum import Enum, IntEnum
from typing import FrozenSet, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .movie import MovieSummary
from .person import FilmographyEntry, Person

DEFAULT_ROUND_SECONDS = 600


class HintLevel(IntEnum):
    """How much of a filmography entry is shown."""

    LOCKED = 0
    YEAR = 1
    GENRE = 2
    CHARACTER = 3
    POSTER = 4


MAX_HINT_LEVEL = int(HintLevel.POSTER)


class FilmographyPhase(str, Enum):
    """Filmography session phase."""

    IDLE = "idle"
    LOADING = "loading"
    RUNNING = "running"
    TIME_UP = "time_up"
    ERROR = "error"


class GuessStatus(str, Enum):
    """Outcome of a filmography guess."""

    CORRECT = "correct"
    WRONG = "wrong"
    ALREADY_GUESSED = "already-guessed"
    OUT_OF_TIME = "out-of-time"
    NO_FILMOGRAPHY = "no-filmography"


class GuessResult(BaseModel):
    """Guess outcome with the matched entry, when there is one."""

    status: GuessStatus
    entry: Optional[FilmographyEntry] = None

    model_config = ConfigDict(frozen=True)


class FilmographyState(BaseModel):
    """Snapshot of a filmography naming round."""

    phase: FilmographyPhase = Field(default=FilmographyPhase.IDLE)
    actor: Optional[Person] = None
    entries: Tuple[FilmographyEntry, ...] = Field(default_factory=tuple)
    solved_ids: FrozenSet[int] = Field(default_factory=frozenset)
    wrong_guesses: Tuple[MovieSummary, ...] = Field(default_factory=tuple)
    hint_levels: Tuple[Tuple[int, int], ...] = Field(default_factory=tuple)

    time_limit: Optional[int] = None
    remaining_seconds: int = Field(default=DEFAULT_ROUND_SECONDS, ge=0)
    is_timer_running: bool = False
    is_time_up: bool = False

    is_loading: bool = False
    error: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @property
    def has_time_limit(self) -> bool:
        return self.time_limit is not None and self.time_limit > 0

    @property
    def correct(self) -> int:
        return len(self.solved_ids)

    @property
    def total(self) -> int:
        return len(self.entries)

    @property
    def remaining(self) -> int:
        return max(self.total - self.correct, 0)

    @property
    def is_complete(self) -> bool:
        """All entries named; the round is over even though the phase stays running."""
        return self.total > 0 and self.correct >= self.total

    def hint_level(self, entry_id: int) -> int:
        return dict(self.hint_levels).get(entry_id, 0)

    def is_solved(self, entry_id: int) -> bool:
        return entry_id in self.solved_ids

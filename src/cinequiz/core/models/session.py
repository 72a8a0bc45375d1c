"""Cast-reveal session state and round result models."""

from datetime import datetime
from enum import Enum
from typing import FrozenSet, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .movie import CastMember, GameMovie, MovieSummary


class CastPhase(str, Enum):
    """Cast-reveal session phase."""

    LOADING = "loading"
    IN_ROUND = "in_round"
    WON = "won"
    LOST = "lost"


class CastOutcome(str, Enum):
    """Typed outcome of a player action in a cast-reveal round."""

    CORRECT = "correct"
    WRONG = "wrong"
    OUT_OF_REVEALS = "out-of-reveals"
    REVEALED = "revealed"
    CAPPED = "capped"
    SKIPPED = "skipped"
    GAVE_UP = "gave-up"
    NO_ROUND = "no-round"
    ROUND_OVER = "round-over"

    @property
    def is_stale(self) -> bool:
        """Whether the action arrived when no round was in flight."""
        return self in (CastOutcome.NO_ROUND, CastOutcome.ROUND_OVER)


class RoundResult(BaseModel):
    """Immutable record of one completed round."""

    id: str = Field(..., description="Unique result ID")
    movie_id: int = Field(..., description="Subject movie ID")
    movie_title: str = Field(..., description="Subject movie title")
    movie_year: Optional[int] = Field(None, description="Subject release year")
    movie_poster_path: Optional[str] = Field(None, description="Subject poster path")
    is_correct: bool = Field(..., description="Whether the player identified the movie")
    guess_count: int = Field(..., ge=0, description="Guesses taken in the round")
    revealed_cast_count: int = Field(..., ge=0, description="Cast members revealed at the end")
    wrong_guesses: Tuple[MovieSummary, ...] = Field(
        default_factory=tuple, description="Wrong guesses in order"
    )
    completed_at: datetime = Field(..., description="Completion time (UTC)")
    mode: str = Field(..., description="Movie mode the subject came from")
    language: str = Field(..., description="Content language")

    model_config = ConfigDict(frozen=True)


class CastSessionState(BaseModel):
    """Snapshot of a cast-reveal session.

    Snapshots are never mutated; every transition produces a new instance.
    """

    phase: CastPhase = Field(default=CastPhase.LOADING)
    mode: str = Field(default="popular")
    language: str = Field(default="en")
    reveal_budget: int = Field(default=6, ge=1)
    history_limit: int = Field(default=50, gt=0)

    pool: Tuple[MovieSummary, ...] = Field(default_factory=tuple)
    used_ids: FrozenSet[int] = Field(default_factory=frozenset)

    current_movie: Optional[GameMovie] = None
    revealed_cast: int = Field(default=0, ge=0)
    guessed_movie: Optional[MovieSummary] = None
    wrong_guesses: Tuple[MovieSummary, ...] = Field(default_factory=tuple)
    current_guess_count: int = Field(default=0, ge=0)

    score: int = Field(default=0, ge=0)
    attempts: int = Field(default=0, ge=0)
    history: Tuple[RoundResult, ...] = Field(default_factory=tuple)

    is_loading: bool = False
    error: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @property
    def is_in_round(self) -> bool:
        return self.phase == CastPhase.IN_ROUND

    @property
    def is_round_over(self) -> bool:
        return self.phase in (CastPhase.WON, CastPhase.LOST)

    @property
    def available_pool(self) -> Tuple[MovieSummary, ...]:
        """Pool members not yet played this session."""
        return tuple(m for m in self.pool if m.id not in self.used_ids)

    @property
    def revealed_members(self) -> Tuple[CastMember, ...]:
        if self.current_movie is None:
            return ()
        return self.current_movie.revealed(self.revealed_cast)

    @property
    def reveals_remaining(self) -> int:
        return max(self.reveal_budget - self.revealed_cast, 0)

    @property
    def rounds_played(self) -> int:
        return len(self.history)

    @property
    def accuracy(self) -> float:
        """Share of recorded rounds that were won."""
        if not self.history:
            return 0.0
        return sum(1 for r in self.history if r.is_correct) / len(self.history)

    @property
    def average_reveals_to_win(self) -> float:
        wins = [r.revealed_cast_count for r in self.history if r.is_correct]
        if not wins:
            return 0.0
        return sum(wins) / len(wins)

"""Cast-reveal round reducer.

``reduce_cast_session(state, action)`` is the single place where a cast-reveal
session changes. It never performs I/O and never mutates its input: every
action yields a new ``CastSessionState`` plus the typed outcome of the action
and, when the action completed a round, the ``RoundResult`` it produced.
"""

from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, Optional, Tuple, Type, Union

from pydantic import BaseModel, ConfigDict, Field

from ...utils import SessionError
from ..models import (
    CastMember,
    CastOutcome,
    CastPhase,
    CastSessionState,
    GameMovie,
    MovieSummary,
    RoundResult,
)
from .subject_matcher import is_same_subject

EMPTY_POOL_MESSAGE = "Could not load movies for the game. Please try again."


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class _Action(BaseModel):
    model_config = ConfigDict(frozen=True)


class _TimedAction(_Action):
    at: datetime = Field(default_factory=utc_now, description="When the player acted")


class LoadStarted(_Action):
    """A pool fetch is in flight."""


class PoolLoaded(_Action):
    movies: Tuple[MovieSummary, ...]


class PoolLoadFailed(_Action):
    message: str


class CandidatesDiscarded(_Action):
    """Candidates without enough clue material leave the working pool."""

    movie_ids: Tuple[int, ...]


class SubjectSelected(_Action):
    movie: GameMovie


class TakeGuess(_TimedAction):
    candidate: MovieSummary


class RevealNextCast(_TimedAction):
    pass


class SkipSubject(_TimedAction):
    pass


class GiveUp(_TimedAction):
    pass


class ResetSession(_Action):
    pass


CastAction = Union[
    LoadStarted,
    PoolLoaded,
    PoolLoadFailed,
    CandidatesDiscarded,
    SubjectSelected,
    TakeGuess,
    RevealNextCast,
    SkipSubject,
    GiveUp,
    ResetSession,
]


class CastTransition(BaseModel):
    """New snapshot produced by one action."""

    state: CastSessionState
    outcome: Optional[CastOutcome] = None
    result: Optional[RoundResult] = None

    model_config = ConfigDict(frozen=True)

    @property
    def completed_round(self) -> bool:
        return self.result is not None


def qualify_cast(
    movie: MovieSummary,
    cast: Iterable[CastMember],
    min_cast_size: int = 6,
    max_cast_order: int = 10,
) -> Optional[GameMovie]:
    """Build a round subject if the movie has enough photo clues.

    Only billed members (``order < max_cast_order``) with a profile photo
    count; the first ``min_cast_size`` of them become the clue cast.

    Returns:
        The subject, or None when the movie does not qualify.
    """
    usable = [m for m in cast if m.has_photo and m.order < max_cast_order]
    usable.sort(key=lambda m: m.order)
    if len(usable) < min_cast_size:
        return None

    return GameMovie(
        id=movie.id,
        title=movie.title,
        original_title=movie.original_title,
        year=movie.year,
        poster_path=movie.poster_path,
        cast=tuple(usable[:min_cast_size]),
    )


def initial_cast_state(
    mode: str = "popular",
    language: str = "en",
    reveal_budget: int = 6,
    history_limit: int = 50,
) -> CastSessionState:
    return CastSessionState(
        mode=mode,
        language=language,
        reveal_budget=reveal_budget,
        history_limit=history_limit,
    )


def reduce_cast_session(state: CastSessionState, action: CastAction) -> CastTransition:
    """Apply one action to a cast-reveal session.

    Raises:
        TypeError: If the action type is unknown.
    """
    handler = _HANDLERS.get(type(action))
    if handler is None:
        raise TypeError(f"Unsupported cast session action: {type(action).__name__}")
    return handler(state, action)


def _stale_outcome(state: CastSessionState) -> Optional[CastOutcome]:
    """Outcome for an action that arrives with no round in play, else None."""
    if state.phase == CastPhase.IN_ROUND and state.current_movie is not None:
        return None
    if state.is_round_over:
        return CastOutcome.ROUND_OVER
    return CastOutcome.NO_ROUND


def _finish_round(
    state: CastSessionState,
    is_correct: bool,
    at: datetime,
    outcome: CastOutcome,
    guess_count: Optional[int] = None,
    **updates,
) -> CastTransition:
    movie = state.current_movie
    if movie is None:
        raise SessionError("Cannot record a result without a current movie")

    result = RoundResult(
        id=f"{int(at.timestamp() * 1000)}-{movie.id}",
        movie_id=movie.id,
        movie_title=movie.title,
        movie_year=movie.year,
        movie_poster_path=movie.poster_path,
        is_correct=is_correct,
        guess_count=state.current_guess_count if guess_count is None else guess_count,
        revealed_cast_count=state.revealed_cast,
        wrong_guesses=state.wrong_guesses,
        completed_at=at,
        mode=state.mode,
        language=state.language,
    )
    history = (result,) + state.history[: state.history_limit - 1]

    new_state = state.model_copy(
        update={
            "phase": CastPhase.WON if is_correct else CastPhase.LOST,
            "history": history,
            "used_ids": state.used_ids | {movie.id},
            **updates,
        }
    )
    return CastTransition(state=new_state, outcome=outcome, result=result)


def _load_started(state: CastSessionState, action: LoadStarted) -> CastTransition:
    """Mark a pool fetch in flight."""
    return CastTransition(state=state.model_copy(update={"is_loading": True, "error": None}))


def _pool_loaded(state: CastSessionState, action: PoolLoaded) -> CastTransition:
    """Store a fetched pool; an empty one is an error and a fully played one starts a new cycle."""
    if not action.movies:
        return CastTransition(
            state=state.model_copy(
                update={
                    "phase": CastPhase.LOADING,
                    "pool": (),
                    "is_loading": False,
                    "error": EMPTY_POOL_MESSAGE,
                }
            )
        )

    used_ids = state.used_ids
    if all(movie.id in used_ids for movie in action.movies):
        # Every candidate was played already, start a new cycle
        used_ids = frozenset()

    return CastTransition(
        state=state.model_copy(
            update={
                "pool": action.movies,
                "used_ids": used_ids,
                "is_loading": False,
                "error": None,
            }
        )
    )


def _pool_load_failed(state: CastSessionState, action: PoolLoadFailed) -> CastTransition:
    """Leave the session loading with the failure message."""
    return CastTransition(
        state=state.model_copy(
            update={"phase": CastPhase.LOADING, "is_loading": False, "error": action.message}
        )
    )


def _candidates_discarded(
    state: CastSessionState, action: CandidatesDiscarded
) -> CastTransition:
    """Drop candidates that could not be played from the pool."""
    dropped = set(action.movie_ids)
    pool = tuple(movie for movie in state.pool if movie.id not in dropped)
    return CastTransition(state=state.model_copy(update={"pool": pool}))


def _subject_selected(state: CastSessionState, action: SubjectSelected) -> CastTransition:
    """Start a round on the subject with its first cast member shown."""
    return CastTransition(
        state=state.model_copy(
            update={
                "phase": CastPhase.IN_ROUND,
                "current_movie": action.movie,
                "revealed_cast": 1,
                "guessed_movie": None,
                "wrong_guesses": (),
                "current_guess_count": 0,
                "is_loading": False,
                "error": None,
            }
        )
    )


def _take_guess(state: CastSessionState, action: TakeGuess) -> CastTransition:
    """Score a guess; a miss reveals one more member or loses at the budget."""
    stale = _stale_outcome(state)
    if stale is not None:
        return CastTransition(state=state, outcome=stale)

    guessed = state.model_copy(
        update={
            "guessed_movie": action.candidate,
            "current_guess_count": state.current_guess_count + 1,
        }
    )

    if is_same_subject(action.candidate, state.current_movie):
        return _finish_round(
            guessed, True, action.at, CastOutcome.CORRECT, score=state.score + 1
        )

    wrong = guessed.model_copy(
        update={
            "wrong_guesses": state.wrong_guesses + (action.candidate,),
            "attempts": state.attempts + 1,
        }
    )
    if wrong.revealed_cast < wrong.reveal_budget:
        return CastTransition(
            state=wrong.model_copy(update={"revealed_cast": wrong.revealed_cast + 1}),
            outcome=CastOutcome.WRONG,
        )
    return _finish_round(wrong, False, action.at, CastOutcome.OUT_OF_REVEALS)


def _reveal_next_cast(state: CastSessionState, action: RevealNextCast) -> CastTransition:
    """Show one more member without guessing, up to the budget."""
    stale = _stale_outcome(state)
    if stale is not None:
        return CastTransition(state=state, outcome=stale)

    if state.revealed_cast >= state.reveal_budget:
        return CastTransition(state=state, outcome=CastOutcome.CAPPED)

    return CastTransition(
        state=state.model_copy(
            update={
                "revealed_cast": state.revealed_cast + 1,
                "current_guess_count": state.current_guess_count + 1,
            }
        ),
        outcome=CastOutcome.REVEALED,
    )


def _skip_subject(state: CastSessionState, action: SkipSubject) -> CastTransition:
    """Lose the round with no guesses recorded."""
    stale = _stale_outcome(state)
    if stale is not None:
        return CastTransition(state=state, outcome=stale)
    # A skipped round never committed to an answer
    return _finish_round(
        state, False, action.at, CastOutcome.SKIPPED, guess_count=0, attempts=state.attempts + 1
    )


def _give_up(state: CastSessionState, action: GiveUp) -> CastTransition:
    """Lose the round keeping the guesses taken."""
    stale = _stale_outcome(state)
    if stale is not None:
        return CastTransition(state=state, outcome=stale)
    return _finish_round(
        state, False, action.at, CastOutcome.GAVE_UP, attempts=state.attempts + 1
    )


def _reset_session(state: CastSessionState, action: ResetSession) -> CastTransition:
    """Clear score, attempts and history but keep the loaded pool."""
    fresh = initial_cast_state(
        mode=state.mode,
        language=state.language,
        reveal_budget=state.reveal_budget,
        history_limit=state.history_limit,
    )
    return CastTransition(state=fresh.model_copy(update={"pool": state.pool}))


_HANDLERS: Dict[Type[BaseModel], Callable[..., CastTransition]] = {
    LoadStarted: _load_started,
    PoolLoaded: _pool_loaded,
    PoolLoadFailed: _pool_load_failed,
    CandidatesDiscarded: _candidates_discarded,
    SubjectSelected: _subject_selected,
    TakeGuess: _take_guess,
    RevealNextCast: _reveal_next_cast,
    SkipSubject: _skip_subject,
    GiveUp: _give_up,
    ResetSession: _reset_session,
}

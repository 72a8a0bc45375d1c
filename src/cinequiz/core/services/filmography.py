"""Filmography naming round reducer."""

from typing import Callable, Dict, Optional, Tuple, Type, Union

from pydantic import BaseModel, ConfigDict

from ..models import (
    DEFAULT_ROUND_SECONDS,
    MAX_HINT_LEVEL,
    FilmographyEntry,
    FilmographyPhase,
    FilmographyState,
    GuessResult,
    GuessStatus,
    MovieSummary,
    Person,
)
from .subject_matcher import find_filmography_entry

NO_ENTRIES_MESSAGE = "No eligible feature films found for this actor."


class _Action(BaseModel):
    model_config = ConfigDict(frozen=True)


class FilmographyLoading(_Action):
    actor: Person


class FilmographyLoaded(_Action):
    actor: Person
    entries: Tuple[FilmographyEntry, ...]
    time_limit: Optional[int] = DEFAULT_ROUND_SECONDS


class FilmographyLoadFailed(_Action):
    message: str


class GuessTitle(_Action):
    candidate: MovieSummary


class RevealHint(_Action):
    entry_id: int


class Tick(_Action):
    pass


class ResetFilmography(_Action):
    time_limit: Optional[int] = DEFAULT_ROUND_SECONDS


FilmographyAction = Union[
    FilmographyLoading,
    FilmographyLoaded,
    FilmographyLoadFailed,
    GuessTitle,
    RevealHint,
    Tick,
    ResetFilmography,
]


class FilmographyTransition(BaseModel):
    """New snapshot plus what the action reported back."""

    state: FilmographyState
    guess: Optional[GuessResult] = None
    hint_level: Optional[int] = None

    model_config = ConfigDict(frozen=True)


def initial_filmography_state(
    time_limit: Optional[int] = DEFAULT_ROUND_SECONDS,
) -> FilmographyState:
    return FilmographyState(time_limit=time_limit, remaining_seconds=_round_seconds(time_limit))


def reduce_filmography(
    state: FilmographyState, action: FilmographyAction
) -> FilmographyTransition:
    """Apply one action to a filmography round.

    Raises:
        TypeError: If the action type is unknown.
    """
    handler = _HANDLERS.get(type(action))
    if handler is None:
        raise TypeError(f"Unsupported filmography action: {type(action).__name__}")
    return handler(state, action)


def _round_seconds(time_limit: Optional[int]) -> int:
    return time_limit if time_limit else DEFAULT_ROUND_SECONDS


def _loading(state: FilmographyState, action: FilmographyLoading) -> FilmographyTransition:
    """Clear the previous round and wait for the actor's credits."""
    return FilmographyTransition(
        state=state.model_copy(
            update={
                "phase": FilmographyPhase.LOADING,
                "actor": action.actor,
                "is_timer_running": False,
                "is_loading": True,
                "error": None,
            }
        )
    )


def _loaded(state: FilmographyState, action: FilmographyLoaded) -> FilmographyTransition:
    """Start the round; an empty filmography is an error."""
    has_entries = bool(action.entries)
    has_limit = bool(action.time_limit and action.time_limit > 0)

    return FilmographyTransition(
        state=FilmographyState(
            phase=FilmographyPhase.RUNNING if has_entries else FilmographyPhase.ERROR,
            actor=action.actor,
            entries=action.entries,
            time_limit=action.time_limit,
            remaining_seconds=_round_seconds(action.time_limit),
            is_timer_running=has_entries and has_limit,
            is_time_up=False,
            is_loading=False,
            error=None if has_entries else NO_ENTRIES_MESSAGE,
        )
    )


def _load_failed(
    state: FilmographyState, action: FilmographyLoadFailed
) -> FilmographyTransition:
    """Enter the error phase with no entries."""
    return FilmographyTransition(
        state=state.model_copy(
            update={
                "phase": FilmographyPhase.ERROR,
                "entries": (),
                "solved_ids": frozenset(),
                "wrong_guesses": (),
                "hint_levels": (),
                "is_timer_running": False,
                "is_loading": False,
                "error": action.message,
            }
        )
    )


def _guess(state: FilmographyState, action: GuessTitle) -> FilmographyTransition:
    """Classify a guess as correct, already named or wrong."""
    if not state.entries:
        return FilmographyTransition(
            state=state, guess=GuessResult(status=GuessStatus.NO_FILMOGRAPHY)
        )
    if state.is_time_up:
        return FilmographyTransition(
            state=state, guess=GuessResult(status=GuessStatus.OUT_OF_TIME)
        )

    entry = find_filmography_entry(action.candidate, state.entries)
    if entry is None:
        return FilmographyTransition(
            state=state.model_copy(
                update={"wrong_guesses": state.wrong_guesses + (action.candidate,)}
            ),
            guess=GuessResult(status=GuessStatus.WRONG),
        )

    if entry.id in state.solved_ids:
        return FilmographyTransition(
            state=state, guess=GuessResult(status=GuessStatus.ALREADY_GUESSED, entry=entry)
        )

    solved = state.solved_ids | {entry.id}
    updates = {"solved_ids": solved}
    if len(solved) >= len(state.entries):
        updates["is_timer_running"] = False

    return FilmographyTransition(
        state=state.model_copy(update=updates),
        guess=GuessResult(status=GuessStatus.CORRECT, entry=entry),
    )


def _reveal_hint(state: FilmographyState, action: RevealHint) -> FilmographyTransition:
    """Raise the hint level of a known entry by one, up to the cap."""
    current = state.hint_level(action.entry_id)
    known = any(entry.id == action.entry_id for entry in state.entries)
    if state.is_time_up or not known or current >= MAX_HINT_LEVEL:
        return FilmographyTransition(state=state, hint_level=current)

    levels = tuple(pair for pair in state.hint_levels if pair[0] != action.entry_id)
    levels += ((action.entry_id, current + 1),)
    return FilmographyTransition(
        state=state.model_copy(update={"hint_levels": levels}), hint_level=current + 1
    )


def _tick(state: FilmographyState, action: Tick) -> FilmographyTransition:
    """Count one second down; reaching zero ends the round."""
    if not state.is_timer_running or state.is_time_up:
        return FilmographyTransition(state=state)

    if state.remaining_seconds <= 1:
        return FilmographyTransition(
            state=state.model_copy(
                update={
                    "phase": FilmographyPhase.TIME_UP,
                    "remaining_seconds": 0,
                    "is_timer_running": False,
                    "is_time_up": True,
                }
            )
        )

    return FilmographyTransition(
        state=state.model_copy(update={"remaining_seconds": state.remaining_seconds - 1})
    )


def _reset(state: FilmographyState, action: ResetFilmography) -> FilmographyTransition:
    """Return to idle with a fresh clock."""
    return FilmographyTransition(state=initial_filmography_state(action.time_limit))


_HANDLERS: Dict[Type[BaseModel], Callable[..., FilmographyTransition]] = {
    FilmographyLoading: _loading,
    FilmographyLoaded: _loaded,
    FilmographyLoadFailed: _load_failed,
    GuessTitle: _guess,
    RevealHint: _reveal_hint,
    Tick: _tick,
    ResetFilmography: _reset,
}

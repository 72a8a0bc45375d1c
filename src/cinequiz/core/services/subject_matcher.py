"""Reconcile player guesses with the subject of a round.

Two independent lookups (search by title, filmography by person) can return
differently shaped records for the same film, so filmography guesses fall
back to a normalized title + year comparison when the IDs disagree. Cast
rounds compare IDs only: guesses and subjects come from the same search index.
"""

from typing import Iterable, Optional

from ...utils.text_utils import normalized_names
from ..models import FilmographyEntry, GameMovie, MovieSummary


def is_same_subject(guess: MovieSummary, movie: Optional[GameMovie]) -> bool:
    """Exact ID match used by cast-reveal rounds."""
    return movie is not None and guess.id == movie.id


def matches_entry(guess: MovieSummary, entry: FilmographyEntry) -> bool:
    """Whether a guess names the same film as a filmography entry.

    Args:
        guess: Movie selected by the player.
        entry: Canonical filmography entry.

    Returns:
        True on ID equality, or on equal release year with at least one
        shared normalized name.
    """
    if guess.id == entry.id:
        return True

    year = guess.year
    if year is None or year != entry.year:
        return False

    guess_names = normalized_names(guess.title, guess.original_title)
    if not guess_names:
        return False
    return not guess_names.isdisjoint(normalized_names(*entry.all_titles))


def find_filmography_entry(
    guess: MovieSummary, entries: Iterable[FilmographyEntry]
) -> Optional[FilmographyEntry]:
    """Resolve a guess against a filmography.

    The exact ID pass runs over every entry before any fallback comparison, so
    an ID hit always wins over a title collision.
    """
    entries = tuple(entries)
    for entry in entries:
        if entry.id == guess.id:
            return entry

    for entry in entries:
        if matches_entry(guess, entry):
            return entry
    return None

"""Build a deduplicated filmography from raw person credits."""

from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

from ...utils.text_utils import normalize_key, unique_titles
from ..models import FilmographyEntry, PersonCredit

# TMDb movie genre table (GET /genre/movie/list)
MOVIE_GENRES: Dict[int, str] = {
    28: "Action",
    12: "Adventure",
    16: "Animation",
    35: "Comedy",
    80: "Crime",
    99: "Documentary",
    18: "Drama",
    10751: "Family",
    14: "Fantasy",
    36: "History",
    27: "Horror",
    10402: "Music",
    9648: "Mystery",
    10749: "Romance",
    878: "Science Fiction",
    10770: "TV Movie",
    53: "Thriller",
    10752: "War",
    37: "Western",
}


def primary_genre(genre_ids: Iterable[int]) -> Optional[str]:
    """Name of the first genre ID, if it is a known movie genre."""
    for genre_id in genre_ids:
        return MOVIE_GENRES.get(genre_id)
    return None


def is_eligible_credit(credit: PersonCredit, today: date) -> bool:
    """Dated, already released, theatrical credits only."""
    released_on = credit.released_on
    if released_on is None or released_on > today:
        return False
    return not credit.video


def dedupe_key(title: Optional[str], year: int) -> Tuple[str, int]:
    return normalize_key(title), year


def build_filmography(
    credits: Iterable[PersonCredit], today: Optional[date] = None
) -> List[FilmographyEntry]:
    """Turn raw credits into the entries a player has to name.

    Credits are visited earliest first, so when two credits share a normalized
    title and year the earliest one becomes the entry. Later duplicates only
    contribute differing titles (as alternates) and a character name if the
    kept credit had none.

    Args:
        credits: Raw movie credits of a person.
        today: Cut-off for future releases; defaults to the current date.

    Returns:
        Entries in chronological order.
    """
    today = today or date.today()
    eligible = [c for c in credits if is_eligible_credit(c, today)]
    eligible.sort(key=lambda c: (c.released_on, c.id))

    kept: Dict[Tuple[str, int], PersonCredit] = {}
    extra_titles: Dict[Tuple[str, int], List[str]] = {}
    characters: Dict[Tuple[str, int], Optional[str]] = {}

    for credit in eligible:
        year = credit.released_on.year
        key = dedupe_key(credit.title, year)
        if not key[0]:
            key = dedupe_key(credit.original_title, year)
        if not key[0]:
            # Titles outside a-z0-9 are only guessable by ID
            key = (f"#{credit.id}", year)

        if key not in kept:
            kept[key] = credit
            extra_titles[key] = []
            characters[key] = credit.character
            continue

        extra_titles[key].extend([credit.title, credit.original_title or ""])
        if not characters[key]:
            characters[key] = credit.character

    entries = []
    for key, credit in kept.items():
        alt_titles = unique_titles(
            extra_titles[key], exclude=(credit.title, credit.original_title)
        )
        entries.append(
            FilmographyEntry(
                id=credit.id,
                title=credit.title,
                original_title=credit.original_title,
                alt_titles=tuple(alt_titles),
                year=key[1],
                genre=primary_genre(credit.genre_ids),
                character=characters[key],
                poster_path=credit.poster_path,
                popularity=credit.popularity,
            )
        )

    entries.sort(key=lambda e: (e.year, normalize_key(e.title)))
    return entries

"""Person and filmography data models."""

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from ...utils.text_utils import parse_release_date, parse_release_year


class Person(BaseModel):
    """Actor that a filmography round is built around."""

    id: int = Field(..., description="TMDb person ID")
    name: str = Field(..., description="Display name")
    popularity: float = Field(default=0.0, description="TMDb popularity score")
    profile_path: Optional[str] = Field(None, description="Profile photo path")
    known_for_department: Optional[str] = Field(None, description="Primary department")

    model_config = ConfigDict(frozen=True)


class PersonCredit(BaseModel):
    """Raw movie credit from a person's filmography."""

    id: int = Field(..., description="TMDb movie ID")
    title: str = Field(..., description="Localized title")
    original_title: Optional[str] = Field(None, description="Original title")
    release_date: Optional[str] = Field(None, description="Release date (YYYY-MM-DD)")
    genre_ids: Tuple[int, ...] = Field(default_factory=tuple, description="TMDb genre IDs")
    character: Optional[str] = Field(None, description="Character played")
    poster_path: Optional[str] = Field(None, description="Poster image path")
    popularity: float = Field(default=0.0, description="TMDb popularity score")
    video: bool = Field(default=False, description="Direct-to-video flag")

    model_config = ConfigDict(frozen=True)

    @property
    def year(self) -> Optional[int]:
        """Release year, if known."""
        return parse_release_year(self.release_date)

    @property
    def released_on(self):
        """Parsed release date or None."""
        return parse_release_date(self.release_date)


class FilmographyEntry(BaseModel):
    """One film the player has to name in a filmography round."""

    id: int = Field(..., description="TMDb movie ID")
    title: str = Field(..., description="Localized title")
    original_title: Optional[str] = Field(None, description="Original title")
    alt_titles: Tuple[str, ...] = Field(default_factory=tuple, description="Alternate titles")
    year: int = Field(..., description="Release year")
    genre: Optional[str] = Field(None, description="Primary genre name")
    character: Optional[str] = Field(None, description="Character played")
    poster_path: Optional[str] = Field(None, description="Poster image path")
    popularity: float = Field(default=0.0, description="TMDb popularity score")

    model_config = ConfigDict(frozen=True)

    @property
    def all_titles(self) -> Tuple[str, ...]:
        """Title, original title and alternates, without blanks."""
        titles = [self.title, self.original_title, *self.alt_titles]
        return tuple(t for t in titles if t)

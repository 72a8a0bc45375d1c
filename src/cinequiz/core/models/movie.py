"""Movie-related data models."""

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from ...utils.text_utils import parse_release_year


class MovieSummary(BaseModel):
    """Movie record as returned by search and listing endpoints.

    This is also the shape of a player's guess: the front end resolves free
    text into one of these before handing it to an engine.
    """

    id: int = Field(..., description="TMDb movie ID")
    title: str = Field(..., description="Localized title")
    original_title: Optional[str] = Field(None, description="Original title")
    release_date: Optional[str] = Field(None, description="Release date (YYYY-MM-DD)")
    poster_path: Optional[str] = Field(None, description="Poster image path")
    popularity: float = Field(default=0.0, description="TMDb popularity score")
    vote_count: int = Field(default=0, description="Number of votes")
    vote_average: float = Field(default=0.0, description="Average rating")
    genre_ids: Tuple[int, ...] = Field(default_factory=tuple, description="TMDb genre IDs")
    adult: bool = Field(default=False, description="Adult content flag")
    video: bool = Field(default=False, description="Direct-to-video flag")

    model_config = ConfigDict(frozen=True)

    @property
    def year(self) -> Optional[int]:
        """Release year, if the release date is known."""
        return parse_release_year(self.release_date)

    @property
    def display_title(self) -> str:
        """Title with year for listings."""
        return f"{self.title} ({self.year})" if self.year else self.title


class CastMember(BaseModel):
    """Credited cast member of a movie."""

    id: int = Field(..., description="TMDb person ID")
    name: str = Field(..., description="Actor name")
    character: Optional[str] = Field(None, description="Character played")
    profile_path: Optional[str] = Field(None, description="Profile photo path")
    order: int = Field(default=0, description="Billing order")

    model_config = ConfigDict(frozen=True)

    @property
    def has_photo(self) -> bool:
        """Whether the member can be shown as a photo clue."""
        return bool(self.profile_path)


class GameMovie(BaseModel):
    """Subject of a cast-reveal round."""

    id: int = Field(..., description="TMDb movie ID")
    title: str = Field(..., description="Localized title")
    original_title: Optional[str] = Field(None, description="Original title")
    year: Optional[int] = Field(None, description="Release year")
    poster_path: Optional[str] = Field(None, description="Poster image path")
    cast: Tuple[CastMember, ...] = Field(..., description="Clue cast in billing order")

    model_config = ConfigDict(frozen=True)

    def revealed(self, count: int) -> Tuple[CastMember, ...]:
        """Cast members visible after ``count`` reveals."""
        return self.cast[: max(count, 0)]

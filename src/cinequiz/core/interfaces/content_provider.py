"""Content provider interface."""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models import CastMember, MovieSummary, Person, PersonCredit


class IContentProvider(ABC):
    """Interface for movie/person content sources.

    Every call is a fallible network operation; implementations raise
    ``ContentProviderError`` on failure.
    """

    @abstractmethod
    async def search_subjects(self, query: str, language: str = "en") -> List[MovieSummary]:
        """Search movies by title.

        Args:
            query: Free-text title query.
            language: Content language code.

        Returns:
            Ranked movie candidates.

        Raises:
            ContentProviderError: If the search fails.
        """
        pass

    @abstractmethod
    async def search_people(self, query: str, language: str = "en") -> List[Person]:
        """Search people by name.

        Args:
            query: Free-text name query.
            language: Content language code.

        Returns:
            Ranked people.

        Raises:
            ContentProviderError: If the search fails.
        """
        pass

    @abstractmethod
    async def get_pool_for_mode(self, mode: str, language: str = "en") -> List[MovieSummary]:
        """Get the candidate pool for a movie mode.

        Args:
            mode: One of ``popular``, ``top_rated``, ``now_playing``, ``upcoming``.
            language: Content language code.

        Returns:
            Candidate movies, deduplicated by ID.

        Raises:
            ContentProviderError: If the listing fails.
        """
        pass

    @abstractmethod
    async def get_credits(self, movie_id: int, language: str = "en") -> List[CastMember]:
        """Get the credited cast of a movie in billing order.

        Raises:
            ContentProviderError: If the request fails.
        """
        pass

    @abstractmethod
    async def get_person_filmography(
        self, person_id: int, language: str = "en"
    ) -> List[PersonCredit]:
        """Get a person's raw movie acting credits.

        Raises:
            ContentProviderError: If the request fails.
        """
        pass

    def image_url(self, path: Optional[str], size: str = "w185") -> Optional[str]:
        """Build an image URL for a poster or profile path."""
        return None

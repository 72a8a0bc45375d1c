"""TMDb content provider implementation."""

import asyncio
from typing import Any, Callable, Dict, List, Optional, TypeVar

import aiohttp

from ...config.models import MOVIE_MODES, Config
from ...infrastructure.logging import LoggerMixin
from ...utils import ConfigurationError, ContentProviderError
from ..interfaces import IContentProvider
from ..models import CastMember, MovieSummary, Person, PersonCredit

TMDB_LANGUAGES = {"en": "en-US", "es": "es-ES"}

# Listings where a vote threshold keeps obscure titles out of the pool
VOTE_FILTERED_MODES = {"popular", "top_rated"}

T = TypeVar("T")


class TMDbContentProvider(IContentProvider, LoggerMixin):
    """Content provider backed by the TMDb v3 REST API."""

    def __init__(self, config: Config) -> None:
        """Initialize TMDb provider.

        Args:
            config: Application configuration.

        Raises:
            ConfigurationError: If the API key is missing or was never expanded.
        """
        api_key = config.tmdb.api_key
        if not api_key or api_key.startswith("${"):
            raise ConfigurationError(
                "TMDb API key is not set. Export TMDB_API_KEY or edit the config file."
            )

        self._config = config
        self._tmdb_config = config.tmdb
        self._session: Optional[aiohttp.ClientSession] = None

    async def search_subjects(self, query: str, language: str = "en") -> List[MovieSummary]:
        """Search movies by title.

        Args:
            query: Free-text title query.
            language: Content language code.

        Returns:
            Movies in TMDb relevance order; empty for a blank query.

        Raises:
            ContentProviderError: If the request fails or the payload is malformed.
        """
        query = query.strip()
        if not query:
            return []

        endpoint = "/search/movie"
        data = await self._get_json(
            endpoint,
            {"query": query, "language": self._tmdb_language(language), "include_adult": "false"},
        )
        results = self._parse_items(endpoint, _results(data), self.parse_movie_summary)
        self.logger.debug(f"Search '{query}' returned {len(results)} movies")
        return results

    async def search_people(self, query: str, language: str = "en") -> List[Person]:
        """Search people by name.

        Raises:
            ContentProviderError: If the request fails or the payload is malformed.
        """
        query = query.strip()
        if not query:
            return []

        endpoint = "/search/person"
        data = await self._get_json(
            endpoint,
            {"query": query, "language": self._tmdb_language(language), "include_adult": "false"},
        )
        return self._parse_items(endpoint, _results(data), self.parse_person)

    async def get_pool_for_mode(self, mode: str, language: str = "en") -> List[MovieSummary]:
        """Fetch and filter the candidate pool for a mode.

        Pages ``1..pool_pages`` of the mode's listing are merged, deduplicated
        by movie ID and stripped of adult and undated titles. Popular and top
        rated listings also enforce ``min_vote_count``.

        Args:
            mode: Movie mode.
            language: Content language code.

        Returns:
            Candidate pool.

        Raises:
            ContentProviderError: If the mode is unknown or a request fails.
        """
        if mode not in MOVIE_MODES:
            raise ContentProviderError(f"Unknown movie mode: {mode}")

        endpoint = f"/movie/{mode}"
        seen = set()
        pool: List[MovieSummary] = []
        for page in range(1, self._tmdb_config.pool_pages + 1):
            data = await self._get_json(
                endpoint,
                {"language": self._tmdb_language(language), "page": str(page)},
            )
            for movie in self._parse_items(endpoint, _results(data), self.parse_movie_summary):
                if movie.id in seen or not self._is_pool_eligible(movie, mode):
                    continue
                seen.add(movie.id)
                pool.append(movie)

            if page >= _total_pages(data):
                break

        self.logger.info(f"Loaded {len(pool)} candidate movies for mode '{mode}'")
        return pool

    async def get_credits(self, movie_id: int, language: str = "en") -> List[CastMember]:
        """Get the credited cast of a movie.

        Args:
            movie_id: TMDb movie ID.
            language: Content language code.

        Returns:
            Cast members sorted by billing order.

        Raises:
            ContentProviderError: If the request fails or the payload is malformed.
        """
        endpoint = f"/movie/{movie_id}/credits"
        data = await self._get_json(endpoint, {"language": self._tmdb_language(language)})
        cast = self._parse_items(endpoint, _results(data, "cast"), self.parse_cast_member)
        cast.sort(key=lambda member: member.order)
        return cast

    async def get_person_filmography(
        self, person_id: int, language: str = "en"
    ) -> List[PersonCredit]:
        """Get a person's raw movie acting credits.

        Args:
            person_id: TMDb person ID.
            language: Content language code.

        Returns:
            Unfiltered credits from ``movie_credits``; undated and unreleased
            films are left for the filmography builder to drop.

        Raises:
            ContentProviderError: If the request fails or the payload is malformed.
        """
        endpoint = f"/person/{person_id}/movie_credits"
        data = await self._get_json(endpoint, {"language": self._tmdb_language(language)})
        return self._parse_items(endpoint, _results(data, "cast"), self.parse_person_credit)

    def image_url(self, path: Optional[str], size: str = "w185") -> Optional[str]:
        """Build a full image URL from a TMDb path, or None when there is no image."""
        if not path:
            return None
        return f"{self._tmdb_config.image_base_url}/{size}{path}"

    def _is_pool_eligible(self, movie: MovieSummary, mode: str) -> bool:
        if movie.adult or not movie.release_date:
            return False
        if mode in VOTE_FILTERED_MODES:
            return movie.vote_count >= self._tmdb_config.min_vote_count
        return True

    @staticmethod
    def parse_movie_summary(data: Dict[str, Any]) -> MovieSummary:
        """Parse a TMDb movie list item."""
        return MovieSummary(
            id=data["id"],
            title=data.get("title") or data.get("original_title") or "",
            original_title=data.get("original_title"),
            release_date=data.get("release_date") or None,
            poster_path=data.get("poster_path"),
            popularity=data.get("popularity") or 0.0,
            vote_count=data.get("vote_count") or 0,
            vote_average=data.get("vote_average") or 0.0,
            genre_ids=tuple(data.get("genre_ids") or ()),
            adult=bool(data.get("adult", False)),
            video=bool(data.get("video", False)),
        )

    @staticmethod
    def parse_cast_member(data: Dict[str, Any]) -> CastMember:
        """Parse a TMDb credits cast item."""
        return CastMember(
            id=data["id"],
            name=data.get("name") or "",
            character=data.get("character") or None,
            profile_path=data.get("profile_path"),
            order=data.get("order") or 0,
        )

    @staticmethod
    def parse_person(data: Dict[str, Any]) -> Person:
        """Parse a TMDb person search item."""
        return Person(
            id=data["id"],
            name=data.get("name") or "",
            popularity=data.get("popularity") or 0.0,
            profile_path=data.get("profile_path"),
            known_for_department=data.get("known_for_department"),
        )

    @staticmethod
    def parse_person_credit(data: Dict[str, Any]) -> PersonCredit:
        """Parse a TMDb ``movie_credits`` cast item."""
        return PersonCredit(
            id=data["id"],
            title=data.get("title") or data.get("original_title") or "",
            original_title=data.get("original_title"),
            release_date=data.get("release_date") or None,
            genre_ids=tuple(data.get("genre_ids") or ()),
            character=data.get("character") or None,
            poster_path=data.get("poster_path"),
            popularity=data.get("popularity") or 0.0,
            video=bool(data.get("video", False)),
        )

    async def _get_json(self, endpoint: str, params: Dict[str, str]) -> Dict[str, Any]:
        """Perform a GET request against the API.

        Args:
            endpoint: Path below the base URL.
            params: Query parameters (the API key is added here).

        Returns:
            Decoded JSON object.

        Raises:
            ContentProviderError: On transport errors, non-2xx responses or
                bodies that are not a JSON object.
        """
        url = f"{self._tmdb_config.base_url}{endpoint}"
        query = {"api_key": self._tmdb_config.api_key, **params}

        try:
            async with self._get_session().get(url, params=query) as response:
                if response.status >= 400:
                    message = await self._error_message(response)
                    raise ContentProviderError(
                        f"TMDb request {endpoint} failed ({response.status}): {message}"
                    )
                data = await response.json()
        except ContentProviderError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            error_msg = f"TMDb request {endpoint} failed: {e}"
            self.logger.error(error_msg)
            raise ContentProviderError(error_msg) from e

        if not isinstance(data, dict):
            raise ContentProviderError(f"Unexpected TMDb payload for {endpoint}")
        return data

    @staticmethod
    async def _error_message(response: aiohttp.ClientResponse) -> str:
        try:
            payload = await response.json()
        except (aiohttp.ContentTypeError, ValueError):
            return response.reason or "request failed"
        if not isinstance(payload, dict):
            return response.reason or "request failed"
        return payload.get("status_message") or response.reason or "request failed"

    def _parse_items(
        self, endpoint: str, items: List[Dict[str, Any]], parser: Callable[[Dict[str, Any]], T]
    ) -> List[T]:
        try:
            return [parser(item) for item in items]
        except (KeyError, TypeError, ValueError) as e:
            error_msg = f"Malformed TMDb payload for {endpoint}: {e}"
            self.logger.error(error_msg)
            raise ContentProviderError(error_msg) from e

    def _tmdb_language(self, language: str) -> str:
        return TMDB_LANGUAGES.get(language, language)

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self._tmdb_config.timeout)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    async def close(self) -> None:
        """Close HTTP session."""
        if self._session:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> "TMDbContentProvider":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()


def _results(data: Dict[str, Any], key: str = "results") -> List[Dict[str, Any]]:
    results = data.get(key) or []
    if not isinstance(results, list):
        return []
    return [item for item in results if isinstance(item, dict) and "id" in item]


def _total_pages(data: Dict[str, Any]) -> int:
    try:
        return int(data.get("total_pages") or 1)
    except (TypeError, ValueError):
        return 1

"""Pytest configuration and fixtures."""

from typing import Dict, List, Optional, Set

import pytest

from cinequiz.config import ConfigManager
from cinequiz.core.interfaces import IContentProvider
from cinequiz.core.models import CastMember, MovieSummary, Person, PersonCredit
from cinequiz.infrastructure import Container
from cinequiz.utils import ContentProviderError


def make_movie(movie_id: int, title: Optional[str] = None, year: Optional[int] = 2000, **kwargs):
    """Build a movie record the way a search or listing returns it."""
    release_date = f"{year}-06-15" if year else None
    return MovieSummary(
        id=movie_id,
        title=title or f"Movie {movie_id}",
        release_date=kwargs.pop("release_date", release_date),
        vote_count=kwargs.pop("vote_count", 5000),
        **kwargs,
    )


def make_cast(count: int, with_photos: bool = True, start_order: int = 0) -> List[CastMember]:
    """Build a billed cast list."""
    return [
        CastMember(
            id=1000 + i,
            name=f"Actor {i}",
            character=f"Role {i}",
            profile_path=f"/actor{i}.jpg" if with_photos else None,
            order=start_order + i,
        )
        for i in range(count)
    ]


def make_credit(movie_id: int, title: str, release_date: Optional[str], **kwargs):
    """Build a raw filmography credit."""
    return PersonCredit(id=movie_id, title=title, release_date=release_date, **kwargs)


class FakeContentProvider(IContentProvider):
    """In-memory content provider."""

    def __init__(self) -> None:
        self.pools: Dict[str, List[MovieSummary]] = {}
        self.credits: Dict[int, List[CastMember]] = {}
        self.filmographies: Dict[int, List[PersonCredit]] = {}
        self.people: List[Person] = []
        self.search_results: Dict[str, List[MovieSummary]] = {}
        self.failing_credits: Set[int] = set()
        self.fail_pool = False
        self.fail_filmography = False
        self.pool_calls = 0
        self.credit_calls: List[int] = []
        self.closed = False

    async def search_subjects(self, query: str, language: str = "en") -> List[MovieSummary]:
        return list(self.search_results.get(query.lower(), []))

    async def search_people(self, query: str, language: str = "en") -> List[Person]:
        return [p for p in self.people if query.lower() in p.name.lower()]

    async def get_pool_for_mode(self, mode: str, language: str = "en") -> List[MovieSummary]:
        self.pool_calls += 1
        if self.fail_pool:
            raise ContentProviderError("pool unavailable")
        return list(self.pools.get(mode, []))

    async def get_credits(self, movie_id: int, language: str = "en") -> List[CastMember]:
        self.credit_calls.append(movie_id)
        if movie_id in self.failing_credits:
            raise ContentProviderError(f"credits unavailable for {movie_id}")
        return list(self.credits.get(movie_id, []))

    async def get_person_filmography(
        self, person_id: int, language: str = "en"
    ) -> List[PersonCredit]:
        if self.fail_filmography:
            raise ContentProviderError("filmography unavailable")
        return list(self.filmographies.get(person_id, []))

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def temp_config_file(tmp_path):
    """Create a temporary configuration file."""
    config_content = """
tmdb:
  api_key: "test-tmdb-key"
  pool_pages: 2

game:
  cast:
    reveal_budget: 6
    min_cast_size: 6
    max_selection_attempts: 10
    history_limit: 50
  filmography:
    time_limit_seconds: 600
    tick_interval_seconds: 0.01

app:
  language: "en"
  mode: "popular"
"""
    config_file = tmp_path / "config.yaml"
    config_file.write_text(config_content)
    return config_file


@pytest.fixture
def config_manager(temp_config_file, tmp_path):
    """Create a configuration manager with test config."""
    return ConfigManager(temp_config_file, env_file=tmp_path / "missing.env")


@pytest.fixture
def config(config_manager):
    """Load test configuration."""
    return config_manager.load_config()


@pytest.fixture
def container(config_manager):
    """Create a test container."""
    container = Container(config_manager)
    return container


@pytest.fixture
def fake_provider():
    """In-memory content provider."""
    return FakeContentProvider()


@pytest.fixture
def game_container(container, fake_provider):
    """Container wired with the fake provider and both game sessions."""
    container.register_instance(IContentProvider, fake_provider)
    container.configure_default_services()
    return container


@pytest.fixture
def stocked_provider(fake_provider):
    """Provider with a popular pool of five qualifying movies."""
    movies = [make_movie(i) for i in range(1, 6)]
    fake_provider.pools["popular"] = movies
    for movie in movies:
        fake_provider.credits[movie.id] = make_cast(8)
    return fake_provider


@pytest.fixture
def movie_factory():
    return make_movie


@pytest.fixture
def cast_factory():
    return make_cast


@pytest.fixture
def credit_factory():
    return make_credit

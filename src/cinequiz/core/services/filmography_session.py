"""Filmography session host."""

from datetime import date
from typing import Callable, List, Optional

from ...config.models import Config
from ...infrastructure.logging import LoggerMixin
from ...utils import ContentProviderError
from ..interfaces import IContentProvider
from ..models import FilmographyState, GuessResult, MovieSummary, Person
from .countdown import Countdown
from .filmography import (
    FilmographyAction,
    FilmographyLoaded,
    FilmographyLoadFailed,
    FilmographyLoading,
    FilmographyTransition,
    GuessTitle,
    ResetFilmography,
    RevealHint,
    Tick,
    initial_filmography_state,
    reduce_filmography,
)
from .filmography_builder import build_filmography

StateListener = Callable[[FilmographyState], None]

LOAD_FAILED_MESSAGE = "Could not load filmography. Please try again."


class FilmographySession(LoggerMixin):
    """Runs one timed "name every film of this actor" round at a time.

    The countdown is the only background work. It is armed when a round with
    a time limit starts and released on reset, reselection, completion,
    time-up and ``close()``.
    """

    def __init__(
        self,
        config: Config,
        content_provider: IContentProvider,
        today: Optional[Callable[[], date]] = None,
    ) -> None:
        """Initialize filmography session.

        Args:
            config: Application configuration.
            content_provider: Source of person filmographies.
            today: Clock used to exclude unreleased films.
        """
        settings = config.game.filmography
        self._provider = content_provider
        self._language = config.app.language
        self._time_limit = settings.time_limit_seconds or None
        self._today = today or date.today
        self._state = initial_filmography_state(self._time_limit)
        self._listeners: List[StateListener] = []
        self._countdown = Countdown(self._on_tick, interval=settings.tick_interval_seconds)

    @property
    def state(self) -> FilmographyState:
        return self._state

    @property
    def countdown(self) -> Countdown:
        return self._countdown

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a snapshot listener.

        Returns:
            Function that removes the listener.
        """
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def dispatch(self, action: FilmographyAction) -> FilmographyTransition:
        """Apply an action, publish the snapshot and sync the countdown."""
        transition = reduce_filmography(self._state, action)
        if transition.state is not self._state:
            self._state = transition.state
            if not self._state.is_timer_running:
                self._countdown.cancel()
            for listener in list(self._listeners):
                listener(self._state)
        return transition

    async def select_subject(
        self,
        actor: Person,
        time_limit: Optional[int] = None,
        language: Optional[str] = None,
    ) -> FilmographyState:
        """Load an actor's filmography and start the round.

        Args:
            actor: Actor to play.
            time_limit: Seconds for this round; overrides the configured limit.
                ``0`` means no limit.
            language: Content language; defaults to the configured one.

        Returns:
            The resulting snapshot. Fetch failures and empty filmographies
            are reported through ``state.error``.
        """
        self._countdown.cancel()
        limit = self._time_limit if time_limit is None else time_limit or None
        self.dispatch(FilmographyLoading(actor=actor))

        try:
            credits = await self._provider.get_person_filmography(
                actor.id, language or self._language
            )
        except ContentProviderError as e:
            self.logger.error(f"Failed to load filmography for {actor.name}: {e}")
            self.dispatch(FilmographyLoadFailed(message=LOAD_FAILED_MESSAGE))
            return self._state

        entries = build_filmography(credits, today=self._today())
        self.logger.info(
            f"Loaded {len(entries)} films for {actor.name} from {len(credits)} credits"
        )
        self.dispatch(
            FilmographyLoaded(actor=actor, entries=tuple(entries), time_limit=limit)
        )

        if self._state.is_timer_running:
            self._countdown.start()
        return self._state

    def guess(self, candidate: MovieSummary) -> GuessResult:
        """Name a film from the actor's filmography."""
        transition = self.dispatch(GuessTitle(candidate=candidate))
        result = transition.guess
        self.logger.debug(f"Guess '{candidate.title}': {result.status.value}")
        if self._state.is_complete:
            self.logger.info(f"All {self._state.total} films named")
        return result

    def reveal_hint(self, entry_id: int) -> int:
        """Advance the hint level of one entry.

        Returns:
            The entry's hint level after the call.
        """
        return self.dispatch(RevealHint(entry_id=entry_id)).hint_level

    def reset(self) -> FilmographyState:
        """Return to idle, releasing the countdown."""
        self._countdown.cancel()
        self.dispatch(ResetFilmography(time_limit=self._time_limit))
        return self._state

    def close(self) -> None:
        """Tear the session down."""
        self._countdown.cancel()

    def _on_tick(self) -> bool:
        self.dispatch(Tick())
        if self._state.is_time_up:
            self.logger.info(
                f"Time up: {self._state.correct}/{self._state.total} films named"
            )
        return self._state.is_timer_running

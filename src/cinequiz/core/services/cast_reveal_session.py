"""Cast-reveal session host.

Owns the current snapshot, talks to the content provider, feeds actions
through ``reduce_cast_session`` and pushes every new snapshot to listeners.
"""

import random
from typing import Callable, List, Optional

from ...config.models import Config
from ...infrastructure.logging import LoggerMixin
from ...utils import ContentProviderError, SessionError, UnqualifiedSubjectError
from ..interfaces import IContentProvider
from ..models import CastSessionState, GameMovie, MovieSummary, RoundResult
from .cast_reveal import (
    CandidatesDiscarded,
    CastAction,
    CastTransition,
    GiveUp,
    LoadStarted,
    PoolLoaded,
    PoolLoadFailed,
    ResetSession,
    RevealNextCast,
    SkipSubject,
    SubjectSelected,
    TakeGuess,
    initial_cast_state,
    qualify_cast,
    reduce_cast_session,
)

StateListener = Callable[[CastSessionState], None]
RoundListener = Callable[[RoundResult], None]

FETCH_FAILED_MESSAGE = "Failed to load movies. Please check your connection and try again."
NO_QUALIFIED_MESSAGE = "Could not find a movie with enough cast members. Please try again."


class CastRevealSession(LoggerMixin):
    """Runs consecutive "guess the movie from its cast" rounds.

    Callers are expected to await each operation before issuing the next one;
    there is no internal queueing of overlapping calls.
    """

    def __init__(
        self,
        config: Config,
        content_provider: IContentProvider,
        rng: Optional[random.Random] = None,
    ) -> None:
        """Initialize cast-reveal session.

        Args:
            config: Application configuration.
            content_provider: Source of candidate pools and credits.
            rng: Random source for subject draws.
        """
        self._settings = config.game.cast
        self._provider = content_provider
        self._rng = rng or random.Random()
        self._state = initial_cast_state(
            mode=config.app.mode,
            language=config.app.language,
            reveal_budget=self._settings.reveal_budget,
            history_limit=self._settings.history_limit,
        )
        self._listeners: List[StateListener] = []
        self._round_listeners: List[RoundListener] = []

    @property
    def state(self) -> CastSessionState:
        return self._state

    @property
    def clue_cast_size(self) -> int:
        """Photographed cast members a subject needs: one per possible reveal."""
        return max(self._settings.min_cast_size, self._state.reveal_budget)

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a snapshot listener.

        Returns:
            Function that removes the listener.
        """
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def on_round_complete(self, listener: RoundListener) -> Callable[[], None]:
        """Register a listener for completed rounds.

        Returns:
            Function that removes the listener.
        """
        self._round_listeners.append(listener)
        return lambda: self._round_listeners.remove(listener)

    def dispatch(self, action: CastAction) -> CastTransition:
        """Apply an action and publish the resulting snapshot."""
        transition = reduce_cast_session(self._state, action)
        if transition.state is not self._state:
            self._state = transition.state
            for listener in list(self._listeners):
                listener(self._state)

        if transition.result is not None:
            result = transition.result
            self.logger.info(
                f"Round complete: '{result.movie_title}' correct={result.is_correct} "
                f"guesses={result.guess_count} revealed={result.revealed_cast_count}"
            )
            for round_listener in list(self._round_listeners):
                round_listener(result)

        return transition

    async def initialize(
        self, mode: Optional[str] = None, language: Optional[str] = None
    ) -> CastSessionState:
        """Load a candidate pool and start the first round.

        Passing a mode or language starts a fresh session for them. Failures
        are reported through ``state.error``; the session then stays loading.

        Returns:
            The resulting snapshot.

        Raises:
            SessionError: If a round is in flight and no override was given.
        """
        if mode is not None or language is not None:
            self._state = initial_cast_state(
                mode=mode or self._state.mode,
                language=language or self._state.language,
                reveal_budget=self._settings.reveal_budget,
                history_limit=self._settings.history_limit,
            )
        elif self._state.is_in_round:
            raise SessionError("Finish or skip the current round first")

        if await self._load_pool():
            await self.select_subject()
        return self._state

    async def select_subject(self) -> Optional[GameMovie]:
        """Start a round with a random, qualifying, not yet played movie.

        Up to ``max_selection_attempts`` candidates are drawn; if none
        qualifies (or the pool is used up) the pool is refilled once from the
        provider before giving up with an error.

        Returns:
            The selected subject, or None if no round could be started.

        Raises:
            SessionError: If a round is already in flight.
        """
        if self._state.is_in_round:
            raise SessionError("Finish or skip the current round first")

        for refill in (False, True):
            if refill:
                self.logger.info("Refilling candidate pool")
                if not await self._load_pool():
                    return None

            movie = await self._draw_subject()
            if movie is not None:
                self.dispatch(SubjectSelected(movie=movie))
                self.logger.debug(f"Selected subject: {movie.title} ({movie.id})")
                return movie

        self.logger.warning("No qualifying subject found after refilling the pool")
        self.dispatch(PoolLoadFailed(message=NO_QUALIFIED_MESSAGE))
        return None

    def take_guess(self, candidate: MovieSummary) -> CastTransition:
        """Guess the current movie."""
        return self.dispatch(TakeGuess(candidate=candidate))

    def reveal_next_cast(self) -> CastTransition:
        """Reveal one more cast member without guessing."""
        return self.dispatch(RevealNextCast())

    def give_up(self) -> CastTransition:
        """End the round as a loss and wait for the next round."""
        return self.dispatch(GiveUp())

    async def skip_subject(self) -> CastTransition:
        """End the round as a loss and move straight to a new subject."""
        transition = self.dispatch(SkipSubject())
        if transition.completed_round:
            await self.select_subject()
        return transition

    async def next_round(self) -> Optional[GameMovie]:
        """Start the next round after a win or loss."""
        if self._state.is_in_round:
            self.logger.debug("next_round ignored, a round is already in flight")
            return self._state.current_movie
        if not self._state.pool:
            await self.initialize()
            return self._state.current_movie
        return await self.select_subject()

    async def reset(self) -> CastSessionState:
        """Clear score, attempts and history, then start a new round."""
        self.dispatch(ResetSession())
        if self._state.pool:
            await self.select_subject()
        else:
            await self.initialize()
        return self._state

    async def play_subject(self, movie: MovieSummary) -> GameMovie:
        """Start a round for one specific movie (shared or custom games).

        Raises:
            SessionError: If a round is still in flight.
            ContentProviderError: If the credits cannot be fetched.
            UnqualifiedSubjectError: If the movie lacks enough cast photos.
        """
        if self._state.is_in_round:
            raise SessionError("Finish or skip the current round first")

        cast = await self._provider.get_credits(movie.id, self._state.language)
        subject = qualify_cast(movie, cast, self.clue_cast_size, self._settings.max_cast_order)
        if subject is None:
            raise UnqualifiedSubjectError(
                f"'{movie.title}' does not have {self.clue_cast_size} cast photos"
            )

        self.dispatch(SubjectSelected(movie=subject))
        return subject

    async def _load_pool(self) -> bool:
        self.dispatch(LoadStarted())
        try:
            movies = await self._provider.get_pool_for_mode(self._state.mode, self._state.language)
        except ContentProviderError as e:
            self.logger.error(f"Failed to load movies: {e}")
            self.dispatch(PoolLoadFailed(message=FETCH_FAILED_MESSAGE))
            return False

        self.dispatch(PoolLoaded(movies=tuple(movies)))
        if not movies:
            self.logger.warning(f"Empty candidate pool for mode '{self._state.mode}'")
            return False
        return True

    async def _draw_subject(self) -> Optional[GameMovie]:
        available = list(self._state.available_pool)
        attempts = min(self._settings.max_selection_attempts, len(available))
        discarded: List[int] = []

        try:
            for _ in range(attempts):
                candidate = self._rng.choice(available)
                self.logger.debug(f"Trying movie: {candidate.title}")

                subject = await self._qualify(candidate)
                if subject is not None:
                    return subject

                available.remove(candidate)
                discarded.append(candidate.id)
            return None
        finally:
            if discarded:
                self.dispatch(CandidatesDiscarded(movie_ids=tuple(discarded)))

    async def _qualify(self, candidate: MovieSummary) -> Optional[GameMovie]:
        try:
            cast = await self._provider.get_credits(candidate.id, self._state.language)
        except ContentProviderError as e:
            self.logger.warning(f"Failed to get cast for movie {candidate.title}: {e}")
            return None

        subject = qualify_cast(
            candidate, cast, self.clue_cast_size, self._settings.max_cast_order
        )
        if subject is None:
            self.logger.debug(f"Movie {candidate.title} doesn't have enough valid cast members")
        return subject

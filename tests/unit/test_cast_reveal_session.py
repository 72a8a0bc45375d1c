"""Test the cast-reveal session host."""

import random

import pytest

from cinequiz.core.models import CastOutcome, CastPhase
from cinequiz.core.services import CastRevealSession
from cinequiz.core.services.cast_reveal import EMPTY_POOL_MESSAGE
from cinequiz.core.services.cast_reveal_session import (
    FETCH_FAILED_MESSAGE,
    NO_QUALIFIED_MESSAGE,
)
from cinequiz.utils import ContentProviderError, SessionError, UnqualifiedSubjectError


@pytest.fixture
def session(config, stocked_provider):
    return CastRevealSession(config, stocked_provider, rng=random.Random(7))


class TestInitialize:
    """Test session start-up."""

    @pytest.mark.asyncio
    async def test_initialize_starts_round(self, session, stocked_provider):
        """Test initialization loads a pool and selects a subject."""
        state = await session.initialize()

        assert state.phase == CastPhase.IN_ROUND
        assert state.current_movie is not None
        assert len(state.current_movie.cast) == 6
        assert state.revealed_cast == 1
        assert len(state.pool) == 5
        assert stocked_provider.pool_calls == 1

    @pytest.mark.asyncio
    async def test_initialize_with_mode_override(self, session, stocked_provider, movie_factory,
                                                 cast_factory):
        """Test a mode override loads that listing."""
        stocked_provider.pools["top_rated"] = [movie_factory(77)]
        stocked_provider.credits[77] = cast_factory(6)

        state = await session.initialize(mode="top_rated", language="es")

        assert state.mode == "top_rated"
        assert state.language == "es"
        assert state.current_movie.id == 77

    @pytest.mark.asyncio
    async def test_fetch_failure_surfaces_error(self, session, stocked_provider):
        """Test a failing provider leaves the session loading with an error."""
        stocked_provider.fail_pool = True

        state = await session.initialize()

        assert state.phase == CastPhase.LOADING
        assert state.error == FETCH_FAILED_MESSAGE
        assert state.current_movie is None
        assert not state.is_loading

    @pytest.mark.asyncio
    async def test_empty_pool_surfaces_error(self, config, fake_provider):
        """Test an empty listing is an error, not an endless retry."""
        session = CastRevealSession(config, fake_provider)

        state = await session.initialize()

        assert state.error == EMPTY_POOL_MESSAGE
        assert state.phase == CastPhase.LOADING
        assert fake_provider.pool_calls == 1
        assert fake_provider.credit_calls == []


class TestSelection:
    """Test subject selection."""

    @pytest.mark.asyncio
    async def test_unqualified_candidates_are_discarded(self, session, stocked_provider,
                                                        cast_factory):
        """Test candidates without enough cast photos leave the pool."""
        for movie_id in (1, 2, 3, 4):
            stocked_provider.credits[movie_id] = cast_factory(3)

        state = await session.initialize()

        assert state.current_movie.id == 5
        tried = set(stocked_provider.credit_calls) - {5}
        assert tried.isdisjoint(m.id for m in state.pool)
        assert 5 in {m.id for m in state.pool}

    @pytest.mark.asyncio
    async def test_credit_failures_are_discarded(self, session, stocked_provider):
        """Test a failing credits fetch only discards that candidate."""
        stocked_provider.failing_credits.update({1, 2, 3, 4})

        state = await session.initialize()

        assert state.current_movie.id == 5
        assert state.error is None

    @pytest.mark.asyncio
    async def test_no_qualified_subject_after_refill(self, session, stocked_provider,
                                                     cast_factory):
        """Test the pool is refilled once before giving up."""
        for movie_id in range(1, 6):
            stocked_provider.credits[movie_id] = cast_factory(2)

        state = await session.initialize()

        assert stocked_provider.pool_calls == 2
        assert state.error == NO_QUALIFIED_MESSAGE
        assert state.phase == CastPhase.LOADING
        assert state.current_movie is None

    @pytest.mark.asyncio
    async def test_played_subjects_are_not_repeated(self, session):
        """Test every subject is played once before any repeats."""
        await session.initialize()
        seen = []
        for _ in range(5):
            seen.append(session.state.current_movie.id)
            session.give_up()
            await session.next_round()

        assert sorted(seen) == [1, 2, 3, 4, 5]

    @pytest.mark.asyncio
    async def test_used_up_pool_starts_new_cycle(self, config, fake_provider, movie_factory,
                                                 cast_factory):
        """Test a fully played pool is refilled and reused."""
        fake_provider.pools["popular"] = [movie_factory(1)]
        fake_provider.credits[1] = cast_factory(6)
        session = CastRevealSession(config, fake_provider)
        await session.initialize()
        session.take_guess(movie_factory(1))

        movie = await session.next_round()

        assert movie.id == 1
        assert session.state.phase == CastPhase.IN_ROUND
        assert fake_provider.pool_calls == 2

    @pytest.mark.asyncio
    async def test_large_budget_keeps_a_clue_per_reveal(self, config, fake_provider,
                                                        movie_factory, cast_factory):
        """Test a budget above the minimum cast size shows a new member per reveal."""
        config.game.cast.reveal_budget = 8
        fake_provider.pools["popular"] = [movie_factory(1), movie_factory(2)]
        fake_provider.credits[1] = cast_factory(6)
        fake_provider.credits[2] = cast_factory(10)
        session = CastRevealSession(config, fake_provider, rng=random.Random(7))

        await session.initialize()
        for _ in range(7):
            session.take_guess(movie_factory(999))

        state = session.state
        assert state.current_movie.id == 2
        assert len(state.current_movie.cast) == 8
        assert state.revealed_cast == 8
        assert len({m.id for m in state.revealed_members}) == 8
        assert state.phase == CastPhase.IN_ROUND

    @pytest.mark.asyncio
    async def test_select_subject_refused_mid_round(self, session, stocked_provider):
        """Test a running round is not replaced by a new draw."""
        await session.initialize()
        current = session.state.current_movie

        with pytest.raises(SessionError):
            await session.select_subject()
        with pytest.raises(SessionError):
            await session.initialize()

        assert session.state.current_movie == current
        assert stocked_provider.pool_calls == 1


class TestRounds:
    """Test round play through the host."""

    @pytest.mark.asyncio
    async def test_correct_guess_notifies_listeners(self, session, movie_factory):
        """Test completed rounds reach round listeners and snapshots reach subscribers."""
        results = []
        snapshots = []
        session.on_round_complete(results.append)
        session.subscribe(snapshots.append)
        await session.initialize()

        subject_id = session.state.current_movie.id
        transition = session.take_guess(movie_factory(subject_id))

        assert transition.outcome == CastOutcome.CORRECT
        assert session.state.score == 1
        assert results == [transition.result]
        assert snapshots[-1] is session.state

    @pytest.mark.asyncio
    async def test_unsubscribe(self, session):
        """Test unsubscribed listeners stop receiving snapshots."""
        snapshots = []
        unsubscribe = session.subscribe(snapshots.append)
        unsubscribe()

        await session.initialize()

        assert snapshots == []

    @pytest.mark.asyncio
    async def test_stale_actions_do_not_notify(self, session, movie_factory):
        """Test ignored actions publish nothing."""
        await session.initialize()
        session.give_up()
        snapshots = []
        session.subscribe(snapshots.append)

        transition = session.take_guess(movie_factory(1))

        assert transition.outcome == CastOutcome.ROUND_OVER
        assert snapshots == []

    @pytest.mark.asyncio
    async def test_skip_moves_to_next_subject(self, session):
        """Test skipping records a loss and starts the next round."""
        await session.initialize()
        first = session.state.current_movie.id

        transition = await session.skip_subject()

        assert transition.outcome == CastOutcome.SKIPPED
        assert transition.result.guess_count == 0
        assert session.state.phase == CastPhase.IN_ROUND
        assert session.state.current_movie.id != first
        assert session.state.attempts == 1

    @pytest.mark.asyncio
    async def test_next_round_ignored_mid_round(self, session, stocked_provider):
        """Test next_round keeps an unfinished round."""
        await session.initialize()
        current = session.state.current_movie

        assert await session.next_round() == current
        assert stocked_provider.pool_calls == 1

    @pytest.mark.asyncio
    async def test_reset_clears_progress(self, session, movie_factory):
        """Test reset clears score and history and starts a new round."""
        await session.initialize()
        session.take_guess(movie_factory(session.state.current_movie.id))

        state = await session.reset()

        assert state.score == 0
        assert state.history == ()
        assert state.phase == CastPhase.IN_ROUND


class TestPlaySubject:
    """Test starting a round for a chosen movie."""

    @pytest.mark.asyncio
    async def test_play_subject(self, session, movie_factory, cast_factory, stocked_provider):
        """Test a specific movie becomes the subject."""
        stocked_provider.credits[99] = cast_factory(7)

        subject = await session.play_subject(movie_factory(99, "Heat", 1995))

        assert subject.id == 99
        assert session.state.current_movie == subject
        assert session.state.phase == CastPhase.IN_ROUND

    @pytest.mark.asyncio
    async def test_play_subject_refused_mid_round(self, session, movie_factory):
        """Test a running round is not replaced."""
        await session.initialize()

        with pytest.raises(SessionError):
            await session.play_subject(movie_factory(1))

    @pytest.mark.asyncio
    async def test_play_subject_unqualified(self, session, movie_factory, cast_factory,
                                            stocked_provider):
        """Test a movie without enough cast photos is rejected."""
        stocked_provider.credits[99] = cast_factory(3)

        with pytest.raises(UnqualifiedSubjectError):
            await session.play_subject(movie_factory(99))

    @pytest.mark.asyncio
    async def test_play_subject_provider_error(self, session, movie_factory, stocked_provider):
        """Test credit fetch failures propagate."""
        stocked_provider.failing_credits.add(99)

        with pytest.raises(ContentProviderError):
            await session.play_subject(movie_factory(99))


    @pytest.mark.asyncio
    async def test_play_subject_needs_cast_for_budget(self, config, stocked_provider,
                                                      movie_factory, cast_factory):
        """Test a budget above six raises the cast photos a movie needs."""
        config.game.cast.reveal_budget = 8
        session = CastRevealSession(config, stocked_provider)
        stocked_provider.credits[99] = cast_factory(7)

        with pytest.raises(UnqualifiedSubjectError, match="8 cast photos"):
            await session.play_subject(movie_factory(99))

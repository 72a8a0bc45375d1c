"""Test filmography building."""

from datetime import date

from cinequiz.core.services import build_filmography
from cinequiz.core.services.filmography_builder import is_eligible_credit, primary_genre

TODAY = date(2024, 6, 1)


class TestEligibility:
    """Test which credits make it into a filmography."""

    def test_released_feature_is_eligible(self, credit_factory):
        """Test a dated, released, theatrical credit is kept."""
        assert is_eligible_credit(credit_factory(1, "Heat", "1995-12-15"), TODAY)

    def test_released_today_is_eligible(self, credit_factory):
        """Test a release on the cut-off date is kept."""
        assert is_eligible_credit(credit_factory(1, "Heat", "2024-06-01"), TODAY)

    def test_undated_future_and_video_are_excluded(self, credit_factory):
        """Test undated, unreleased and direct-to-video credits are dropped."""
        assert not is_eligible_credit(credit_factory(1, "Untitled", None), TODAY)
        assert not is_eligible_credit(credit_factory(2, "Sequel", "2025-01-01"), TODAY)
        assert not is_eligible_credit(credit_factory(3, "Extras", "2001-01-01", video=True), TODAY)


def test_primary_genre():
    """Test the first genre ID names the genre."""
    assert primary_genre((80, 18)) == "Crime"
    assert primary_genre(()) is None
    assert primary_genre((99999,)) is None


class TestBuildFilmography:
    """Test build_filmography function."""

    def test_duplicate_title_and_year_collapse(self, credit_factory):
        """Test the same film reported twice yields one entry."""
        credits = [
            credit_factory(1, "Movie A", "2001-05-04", character="Hero"),
            credit_factory(2, "Movie A", "2001-05-04"),
        ]

        entries = build_filmography(credits, today=TODAY)

        assert len(entries) == 1
        assert entries[0].id == 1
        assert entries[0].year == 2001

    def test_earliest_release_wins(self, credit_factory):
        """Test the earliest credit becomes the entry and later ones add alternates."""
        credits = [
            credit_factory(7, "Movie A", "2001-11-20", original_title="Película A"),
            credit_factory(3, "Movie A", "2001-02-01"),
        ]

        entries = build_filmography(credits, today=TODAY)

        assert len(entries) == 1
        assert entries[0].id == 3
        assert entries[0].alt_titles == ("Película A",)

    def test_missing_character_filled_from_duplicate(self, credit_factory):
        """Test a later duplicate supplies the character name."""
        credits = [
            credit_factory(1, "Movie A", "2001-05-04"),
            credit_factory(2, "Movie A!", "2001-08-01", character="Sidekick"),
        ]

        entries = build_filmography(credits, today=TODAY)

        assert len(entries) == 1
        assert entries[0].character == "Sidekick"
        assert entries[0].alt_titles == ("Movie A!",)

    def test_same_title_different_years_are_separate(self, credit_factory):
        """Test remakes are kept apart by year."""
        credits = [
            credit_factory(1, "Dune", "1984-12-14"),
            credit_factory(2, "Dune", "2021-10-22"),
        ]

        entries = build_filmography(credits, today=TODAY)

        assert [e.id for e in entries] == [1, 2]

    def test_future_and_undated_excluded(self, credit_factory):
        """Test only released, dated credits become entries."""
        credits = [
            credit_factory(1, "Released", "2010-01-01"),
            credit_factory(2, "Announced", None),
            credit_factory(3, "Upcoming", "2030-01-01"),
        ]

        entries = build_filmography(credits, today=TODAY)

        assert [e.title for e in entries] == ["Released"]

    def test_chronological_order(self, credit_factory):
        """Test entries are ordered by year, then title."""
        credits = [
            credit_factory(1, "Zodiac", "2007-03-02"),
            credit_factory(2, "Alien", "1979-05-25"),
            credit_factory(3, "Avatar", "2007-01-01"),
        ]

        entries = build_filmography(credits, today=TODAY)

        assert [e.title for e in entries] == ["Alien", "Avatar", "Zodiac"]

    def test_genre_and_metadata_copied(self, credit_factory):
        """Test entry metadata comes from the kept credit."""
        credits = [
            credit_factory(
                1,
                "Heat",
                "1995-12-15",
                genre_ids=(80, 18),
                character="Neil McCauley",
                poster_path="/heat.jpg",
                popularity=42.0,
            )
        ]

        entry = build_filmography(credits, today=TODAY)[0]

        assert entry.genre == "Crime"
        assert entry.character == "Neil McCauley"
        assert entry.poster_path == "/heat.jpg"
        assert entry.popularity == 42.0

    def test_non_latin_titles_are_kept(self, credit_factory):
        """Test titles that normalize to nothing still become entries."""
        credits = [
            credit_factory(10, "기생충", "2019-05-30", original_title="기생충"),
            credit_factory(12, "千と千尋の神隠し", "2001-07-20"),
            credit_factory(11, "Heat", "1995-12-15"),
        ]

        entries = build_filmography(credits, today=TODAY)

        assert {e.id for e in entries} == {10, 11, 12}
        assert [e.year for e in entries] == [1995, 2001, 2019]

    def test_non_latin_titles_dedupe_by_id(self, credit_factory):
        """Test repeated credits of one non-Latin film collapse, distinct films do not."""
        credits = [
            credit_factory(10, "기생충", "2019-05-30"),
            credit_factory(10, "기생충", "2019-05-30", character="Ki-taek"),
            credit_factory(13, "살인의 추억", "2019-05-30"),
        ]

        entries = build_filmography(credits, today=TODAY)

        assert sorted(e.id for e in entries) == [10, 13]
        assert next(e for e in entries if e.id == 10).character == "Ki-taek"

    def test_empty_credits(self):
        """Test no credits give no entries."""
        assert build_filmography([], today=TODAY) == []

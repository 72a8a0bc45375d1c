"""Test text utility functions."""

from datetime import date

from cinequiz.utils.text_utils import (
    normalize_key,
    normalized_names,
    parse_release_date,
    parse_release_year,
    unique_titles,
)


class TestNormalizeKey:
    """Test normalize_key function."""

    def test_strips_punctuation_and_spaces(self):
        """Test punctuation and whitespace are removed."""
        assert normalize_key("Spider-Man: No Way Home") == "spidermannowayhome"

    def test_lowercases(self):
        """Test case is folded."""
        assert normalize_key("THE Matrix") == normalize_key("the matrix")

    def test_keeps_digits(self):
        """Test digits survive normalization."""
        assert normalize_key("Se7en") == "se7en"
        assert normalize_key("2001: A Space Odyssey") == "2001aspaceodyssey"

    def test_drops_accented_characters(self):
        """Test characters outside a-z0-9 are dropped, accented ones included."""
        assert normalize_key("Amélie") == "amlie"

    def test_empty_values(self):
        """Test empty and missing values give an empty key."""
        assert normalize_key("") == ""
        assert normalize_key(None) == ""
        assert normalize_key("!!! ...") == ""


def test_normalized_names_skips_blank_keys():
    """Test blank titles do not contribute keys."""
    assert normalized_names("Heat", None, "", "?!") == {"heat"}
    assert normalized_names("Heat", "HEAT") == {"heat"}


class TestReleaseDates:
    """Test release date parsing."""

    def test_parse_full_date(self):
        """Test a full TMDb release date."""
        assert parse_release_date("1999-03-31") == date(1999, 3, 31)

    def test_parse_missing_or_malformed_date(self):
        """Test missing or malformed dates give None."""
        assert parse_release_date(None) is None
        assert parse_release_date("") is None
        assert parse_release_date("1999") is None
        assert parse_release_date("1999-13-01") is None

    def test_parse_year(self):
        """Test the year only needs the leading component."""
        assert parse_release_year("1999-03-31") == 1999
        assert parse_release_year("1999") == 1999
        assert parse_release_year("99-03-31") is None
        assert parse_release_year(None) is None


def test_unique_titles_preserves_order_and_excludes():
    """Test duplicates, blanks and excluded titles are dropped."""
    titles = ["Le Samouraï", "", None, "The Samurai", "Le Samouraï", "Godson"]
    assert unique_titles(titles, exclude=("Godson", None)) == ["Le Samouraï", "The Samurai"]

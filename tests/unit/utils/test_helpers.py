"""
Tests pour les fonctions utilitaires et les liens externes.
"""

import pytest

from src.utils.helpers import (
    clean_title,
    format_runtime,
    format_year,
    parse_int,
    parse_leading_int,
)
from src.utils.links import (
    imdb_url,
    metacritic_url,
    rotten_tomatoes_url,
    trailer_url,
    wikipedia_url,
)


class TestParseInt:
    """Tests pour parse_int."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("2010", 2010), (" 42 ", 42), ("2010a", None), ("", None), (None, None), ("1.5", None)],
    )
    def test_parse(self, raw, expected) -> None:
        assert parse_int(raw) == expected


class TestParseLeadingInt:
    """Tests pour parse_leading_int."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("2010", 2010),
            ("2010abc", 2010),
            ("2010-", 2010),
            (" 42 min", 42),
            ("-12", -12),
            ("abc", None),
            ("-", None),
            ("", None),
            (None, None),
        ],
    )
    def test_parse(self, raw, expected) -> None:
        assert parse_leading_int(raw) == expected


class TestFormatting:
    """Tests pour format_runtime, format_year et clean_title."""

    def test_runtime(self) -> None:
        assert format_runtime("148 min") == "2h 28m"
        assert format_runtime(45) == "45m"
        assert format_runtime("N/A") == ""
        assert format_runtime(None) == ""

    def test_year(self) -> None:
        assert format_year("2010") == "2010"
        assert format_year(None) == ""

    def test_clean_title_removes_invisible_chars(self) -> None:
        assert clean_title("\u200eInception ") == "Inception"


class TestLinks:
    """Tests pour les liens vers les pages de metadonnees."""

    def test_imdb(self) -> None:
        assert imdb_url("tt1375666") == "https://www.imdb.com/title/tt1375666/"

    def test_search_links_are_encoded(self) -> None:
        assert rotten_tomatoes_url("The Matrix") == (
            "https://www.rottentomatoes.com/search?search=The+Matrix"
        )
        assert metacritic_url("The Matrix") == "https://www.metacritic.com/search/The%20Matrix/"

    def test_wikipedia_includes_year(self) -> None:
        assert wikipedia_url("Heat", "1995") == (
            "https://en.wikipedia.org/w/index.php?search=Heat+%281995%29"
        )
        assert wikipedia_url("Heat").endswith("search=Heat")

    def test_trailer(self) -> None:
        assert trailer_url("Heat", "1995") == (
            "https://www.youtube.com/results?search_query=Heat+1995+official+trailer"
        )

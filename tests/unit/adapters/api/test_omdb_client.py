"""
Tests for OMDbClient - OMDb API client implementation.

Uses respx to mock httpx calls and verifies:
- Detail mapping (N/A normalization, votes, Rotten Tomatoes / Metacritic)
- OMDb "Response: False" errors become failed ProviderResults
- Search is cache-first and treats "Movie not found!" as an empty result
- Key validation
"""

from unittest.mock import AsyncMock

import httpx
import pytest
import respx

from src.adapters.api.cache import APICache
from src.adapters.api.omdb_client import (
    OMDbClient,
    map_omdb_type,
    normalize_omdb_value,
    parse_omdb_votes,
)
from src.core.entities.title import DataSource, TitleType
from src.core.ports.api_clients import IRatingsProvider
from src.utils.constants import OMDB_BASE_URL
from tests.fixtures.omdb_responses import (
    OMDB_DETAIL_RESPONSE,
    OMDB_DETAIL_SPARSE_RESPONSE,
    OMDB_INVALID_KEY_RESPONSE,
    OMDB_NOT_FOUND_RESPONSE,
    OMDB_SEARCH_RESPONSE,
)
from tests.fixtures.titles import make_record

OMDB_URL = f"{OMDB_BASE_URL}/"


@pytest.fixture
def mock_cache() -> AsyncMock:
    """Mock APICache for testing."""
    cache = AsyncMock(spec=APICache)
    cache.get.return_value = None  # Cache miss by default
    return cache


@pytest.fixture
def omdb_client(mock_cache: AsyncMock) -> OMDbClient:
    """OMDbClient instance with mocked cache."""
    return OMDbClient(api_key="test_api_key", cache=mock_cache)


class TestHelpers:
    """Tests for OMDb value helpers."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("movie", TitleType.MOVIE), ("series", TitleType.SERIES), ("episode", TitleType.OTHER),
         (None, TitleType.OTHER)],
    )
    def test_map_type(self, raw, expected) -> None:
        assert map_omdb_type(raw) == expected

    def test_normalize_na(self) -> None:
        assert normalize_omdb_value("N/A") is None
        assert normalize_omdb_value("  ") is None
        assert normalize_omdb_value("148 min") == "148 min"

    def test_parse_votes(self) -> None:
        assert parse_omdb_votes("2,512,345") == 2512345
        assert parse_omdb_votes("N/A") is None
        assert parse_omdb_votes("lots") is None


class TestOMDbClientInterface:
    """Test OMDbClient implements IRatingsProvider correctly."""

    def test_implements_interface(self, omdb_client: OMDbClient) -> None:
        assert isinstance(omdb_client, IRatingsProvider)

    def test_source_property_returns_omdb(self, omdb_client: OMDbClient) -> None:
        assert omdb_client.source == "omdb"


class TestOMDbDetails:
    """Tests for OMDbClient.get_details()."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_get_details_maps_response(self, omdb_client: OMDbClient) -> None:
        """get_details() maps all OMDb fields."""
        route = respx.get(OMDB_URL).mock(
            return_value=httpx.Response(200, json=OMDB_DETAIL_RESPONSE)
        )

        result = await omdb_client.get_details("tt1375666")

        assert result.ok
        detail = result.value
        assert detail.imdb_id == "tt1375666"
        assert detail.title == "Inception"
        assert detail.type == TitleType.MOVIE
        assert detail.rating == "8.8"
        assert detail.votes == 2512345
        assert detail.genres == ["Action", "Adventure", "Sci-Fi"]
        assert detail.rotten_tomatoes_score == "87%"
        assert detail.metacritic_score == "74/100"
        assert detail.cast.startswith("Leonardo DiCaprio")
        assert len(detail.omdb_ratings) == 3

        params = route.calls.last.request.url.params
        assert params["i"] == "tt1375666"
        assert params["apikey"] == "test_api_key"
        assert params["plot"] == "full"

    @pytest.mark.asyncio
    @respx.mock
    async def test_na_fields_become_none(self, omdb_client: OMDbClient) -> None:
        """N/A values are normalized to None."""
        respx.get(OMDB_URL).mock(
            return_value=httpx.Response(200, json=OMDB_DETAIL_SPARSE_RESPONSE)
        )

        detail = (await omdb_client.get_details("tt9999999")).value

        assert detail.runtime is None
        assert detail.genres is None
        assert detail.rating is None
        assert detail.votes is None
        assert detail.poster_url is None
        assert detail.omdb_ratings is None

    @pytest.mark.asyncio
    @respx.mock
    async def test_error_response_is_failure(self, omdb_client: OMDbClient) -> None:
        """Response: False becomes a failed result carrying OMDb's message."""
        respx.get(OMDB_URL).mock(
            return_value=httpx.Response(200, json={"Response": "False", "Error": "Incorrect IMDb ID."})
        )

        result = await omdb_client.get_details("tt0")

        assert not result.ok
        assert result.error == "Incorrect IMDb ID."

    @pytest.mark.asyncio
    @respx.mock
    async def test_invalid_schema_is_failure(self, omdb_client: OMDbClient) -> None:
        """A response missing Title fails schema validation."""
        respx.get(OMDB_URL).mock(return_value=httpx.Response(200, json={"Year": "2010"}))

        result = await omdb_client.get_details("tt1375666")

        assert not result.ok

    @pytest.mark.asyncio
    @respx.mock
    async def test_network_error_is_failure(self, omdb_client: OMDbClient) -> None:
        """A network error never raises."""
        respx.get(OMDB_URL).mock(side_effect=httpx.ConnectError("boom"))

        result = await omdb_client.get_details("tt1375666")

        assert not result.ok

    @pytest.mark.asyncio
    async def test_no_key_is_failure(self) -> None:
        """Without a key, no request is made."""
        client = OMDbClient(api_key=None)

        result = await client.get_details("tt1375666")

        assert not result.ok

    @pytest.mark.asyncio
    @respx.mock
    async def test_details_by_title_sends_year_and_type(self, omdb_client: OMDbClient) -> None:
        """get_details_by_title() sends t=, y= and type=."""
        route = respx.get(OMDB_URL).mock(
            return_value=httpx.Response(200, json=OMDB_DETAIL_RESPONSE)
        )

        result = await omdb_client.get_details_by_title("Inception", "2010", TitleType.MOVIE)

        assert result.ok
        params = route.calls.last.request.url.params
        assert params["t"] == "Inception"
        assert params["y"] == "2010"
        assert params["type"] == "movie"


class TestOMDbSearch:
    """Tests for OMDbClient.search()."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_search_returns_records(
        self, omdb_client: OMDbClient, mock_cache: AsyncMock
    ) -> None:
        """search() returns lightweight records keyed by IMDb id and caches them."""
        respx.get(OMDB_URL).mock(return_value=httpx.Response(200, json=OMDB_SEARCH_RESPONSE))

        result = await omdb_client.search("Inception")

        assert result.ok
        assert [r.id for r in result.value] == ["tt1375666", "tt5295894"]
        assert result.value[0].source == DataSource.OMDB
        assert result.value[1].poster_url is None
        mock_cache.set_search.assert_awaited_once()
        assert mock_cache.set_search.call_args[0][0] == "omdb:search:inception"

    @pytest.mark.asyncio
    @respx.mock
    async def test_search_uses_cache_first(
        self, omdb_client: OMDbClient, mock_cache: AsyncMock
    ) -> None:
        """A cache hit avoids any HTTP call."""
        cached = [make_record("tt1375666", "Inception", imdb_id="tt1375666")]
        mock_cache.get.return_value = cached
        route = respx.get(OMDB_URL)

        result = await omdb_client.search("Inception")

        assert result.value == cached
        assert not route.called

    @pytest.mark.asyncio
    @respx.mock
    async def test_not_found_is_empty_success(self, omdb_client: OMDbClient) -> None:
        """"Movie not found!" is a valid empty answer."""
        respx.get(OMDB_URL).mock(return_value=httpx.Response(200, json=OMDB_NOT_FOUND_RESPONSE))

        result = await omdb_client.search("zzzz")

        assert result.ok
        assert result.value == []

    @pytest.mark.asyncio
    @respx.mock
    async def test_invalid_key_is_failure(self, omdb_client: OMDbClient) -> None:
        respx.get(OMDB_URL).mock(
            return_value=httpx.Response(200, json=OMDB_INVALID_KEY_RESPONSE)
        )

        result = await omdb_client.search("Inception")

        assert result.error == "Invalid API key!"


class TestOMDbValidateKey:
    """Tests for OMDbClient.validate_key()."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_valid_key(self, omdb_client: OMDbClient) -> None:
        route = respx.get(OMDB_URL).mock(
            return_value=httpx.Response(200, json=OMDB_DETAIL_RESPONSE)
        )

        result = await omdb_client.validate_key("candidate")

        assert result.ok
        assert route.calls.last.request.url.params["apikey"] == "candidate"

    @pytest.mark.asyncio
    @respx.mock
    async def test_rejected_key(self, omdb_client: OMDbClient) -> None:
        """A 401 carrying OMDb's JSON error reports its message."""
        respx.get(OMDB_URL).mock(
            return_value=httpx.Response(401, json=OMDB_INVALID_KEY_RESPONSE)
        )

        result = await omdb_client.validate_key("bad")

        assert not result.ok
        assert result.error == "Invalid API key!"

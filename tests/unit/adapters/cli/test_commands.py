"""
Tests unitaires pour les commandes CLI du launcher.

Tests couvrant:
- search: suggestions locales, recherche distante conditionnee aux cles
- show: detail depuis le cache sans cles, erreur de reconciliation
- link: cible invalide, lien introuvable
- region: lecture et changement du pays des offres
- detail_panel: offres de streaming
- keys set / keys reset
- version via l'application Typer
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import typer
from typer.testing import CliRunner

from src.adapters.cli.commands import (
    _keys_reset_async,
    _keys_set_async,
    _link_async,
    _region_async,
    _search_async,
    _show_async,
)
from src.adapters.cli.helpers import detail_panel
from src.core.entities.title import (
    ApiKeys,
    KeyValidationResult,
    Suggestion,
    TitleType,
    WatchProviders,
)
from src.main import app
from tests.fixtures.titles import make_record

runner = CliRunner()


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def session() -> MagicMock:
    """Session simulee : cles valides, aucune suggestion."""
    mock = MagicMock()
    mock.init = AsyncMock()
    mock.fetch_remote_suggestions = AsyncMock()
    mock.select_suggestion = AsyncMock()
    mock.save_keys = AsyncMock(return_value=True)
    mock.set_watch_region = AsyncMock()
    mock.keys_valid = True
    mock.keys = ApiKeys(omdb_key="omdb", tmdb_key="tmdb")
    mock.keys_error = None
    mock.suggestions = []
    mock.error_message = None
    return mock


@pytest.fixture
def mock_container(session: MagicMock):
    """Mock le Container pour les tests.

    Patche Container dans helpers.py car c'est la que le decorateur
    @with_container() l'importe et l'instancie.
    """
    with patch("src.adapters.cli.helpers.Container") as mock_cls:
        container_instance = MagicMock()
        mock_cls.return_value = container_instance
        container_instance.database.init = MagicMock()
        container_instance.launcher_session.return_value = session
        container_instance.omdb_client.return_value.close = AsyncMock()
        container_instance.tmdb_client.return_value.close = AsyncMock()
        yield container_instance


# ============================================================================
# Tests search
# ============================================================================


class TestSearch:
    """Tests pour la commande search."""

    @pytest.mark.asyncio
    async def test_local_search(self, mock_container, session) -> None:
        """Sans --remote, aucune recherche distante."""
        session.suggestions = [Suggestion(id="tt1375666", title="Inception", type=TitleType.MOVIE)]

        await _search_async("inception", 5, False)

        session.init.assert_awaited_once()
        session.set_query.assert_called_once_with("inception")
        session.fetch_remote_suggestions.assert_not_awaited()
        mock_container.launcher_session.assert_called_once_with(suggestion_limit=5)

    @pytest.mark.asyncio
    async def test_remote_search(self, mock_container, session) -> None:
        await _search_async("inception", 5, True)

        session.fetch_remote_suggestions.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_remote_search_requires_valid_keys(self, mock_container, session) -> None:
        session.keys_valid = False

        await _search_async("inception", 5, True)

        session.fetch_remote_suggestions.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_clients_are_closed(self, mock_container, session) -> None:
        """Le decorateur ferme les clients HTTP en sortie."""
        await _search_async("inception", 5, False)

        mock_container.database.init.assert_called_once()
        mock_container.omdb_client.return_value.close.assert_awaited_once()
        mock_container.tmdb_client.return_value.close.assert_awaited_once()


# ============================================================================
# Tests show
# ============================================================================


class TestShow:
    """Tests pour la commande show."""

    @pytest.mark.asyncio
    async def test_without_keys_uses_cache(self, mock_container, session) -> None:
        session.keys = ApiKeys()
        mock_container.reconciler_service.return_value.load_cached.return_value = make_record(
            "tt1", "Heat"
        )

        await _show_async("tt1")

        session.select_suggestion.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_without_keys_and_cache_exits(self, mock_container, session) -> None:
        session.keys = ApiKeys()
        mock_container.reconciler_service.return_value.load_cached.return_value = None

        with pytest.raises(typer.Exit):
            await _show_async("tt1")

    @pytest.mark.asyncio
    async def test_detail_is_reconciled(self, mock_container, session) -> None:
        session.detail = make_record("tt1375666", "Inception", year="2010")

        await _show_async("tmdb:27205")

        session.select_suggestion.assert_awaited_once_with("tmdb:27205")

    @pytest.mark.asyncio
    async def test_unavailable_detail_exits(self, mock_container, session) -> None:
        session.detail = None
        session.error_message = "Details unavailable."

        with pytest.raises(typer.Exit):
            await _show_async("tt0000001")


# ============================================================================
# Tests link
# ============================================================================


class TestLink:
    """Tests pour la commande link."""

    def test_unknown_target_is_rejected(self) -> None:
        result = runner.invoke(app, ["link", "tt1375666", "--target", "letterboxd"])

        assert result.exit_code == 1
        assert "letterboxd" in result.output

    @pytest.mark.asyncio
    async def test_target_is_saved(self, mock_container, session) -> None:
        session.metadata_link_for.return_value = "https://www.metacritic.com/search/Inception/"

        await _link_async("tt1375666", "metacritic")

        session.set_metadata_link_target.assert_called_once_with("metacritic")

    @pytest.mark.asyncio
    async def test_missing_link_exits(self, mock_container, session) -> None:
        session.metadata_link_for.return_value = None

        with pytest.raises(typer.Exit):
            await _link_async("tt0000000", None)


class TestRegion:
    """Tests pour la commande region."""

    @pytest.mark.asyncio
    async def test_show_current_region(self, mock_container, session) -> None:
        session.watch_region = "GB"

        await _region_async(None)

        session.set_watch_region.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_change_region(self, mock_container, session) -> None:
        await _region_async("fr")

        session.set_watch_region.assert_awaited_once_with("fr")


class TestDetailPanel:
    """Tests pour le rendu du detail."""

    def test_watch_providers_are_listed(self) -> None:
        record = make_record(
            "tt1375666",
            "Inception",
            watch_providers=WatchProviders(region="GB", flatrate=["Netflix"], rent=["Apple TV"]),
        )

        body = detail_panel(record).renderable

        assert "Abonnement (GB) : Netflix" in body
        assert "Location (GB) : Apple TV" in body
        assert "Achat" not in body

    def test_region_without_offers(self) -> None:
        record = make_record("tt1", "Heat", watch_providers=WatchProviders(region="US"))

        assert "Aucune offre de streaming (US)" in detail_panel(record).renderable


# ============================================================================
# Tests keys
# ============================================================================


class TestKeys:
    """Tests pour les commandes keys."""

    @pytest.mark.asyncio
    async def test_set_valid_keys(self, mock_container, session) -> None:
        await _keys_set_async("omdb", "tmdb")

        session.save_keys.assert_awaited_once_with(ApiKeys(omdb_key="omdb", tmdb_key="tmdb"))

    @pytest.mark.asyncio
    async def test_set_invalid_keys_exits(self, mock_container, session) -> None:
        session.save_keys.return_value = False
        session.keys_error = KeyValidationResult(omdb_error="Invalid API key!")

        with pytest.raises(typer.Exit):
            await _keys_set_async("bad", "tmdb")

    @pytest.mark.asyncio
    async def test_reset(self, mock_container, session) -> None:
        await _keys_reset_async()

        session.reset_keys.assert_called_once()


class TestApp:
    """Tests pour l'application Typer."""

    def test_version(self) -> None:
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert "Mediapedia" in result.output

"""
Tests unitaires pour ProviderReconcilerService.

Les fournisseurs sont des AsyncMock ; le cache est un vrai repository
SQLModel sur une base SQLite en memoire.

Ces tests verifient:
- La resolution d'un ID synthetique en ID natif via TMDB
- Les libelles de provenance (TMDB seul, cache perime)
- L'absence de resultat quand rien n'est disponible
- La recherche par titre en dernier recours
- La reprise d'une ligne native existante apres resolution de l'ID
- Les offres de streaming du pays configure
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.core.entities.title import (
    FALLBACK_STALE,
    FALLBACK_TMDB,
    DataSource,
    TitleRecord,
    TitleType,
    WatchProviders,
)
from src.core.ports.api_clients import (
    CatalogDetail,
    ICatalogProvider,
    IRatingsProvider,
    ProviderResult,
    RatingsDetail,
)
from src.infrastructure.persistence.repositories import SQLModelTitleRepository
from src.services.reconciler import ProviderReconcilerService, synthetic_tmdb_id
from tests.fixtures.titles import make_record

INCEPTION_OMDB = RatingsDetail(
    title="Inception",
    imdb_id="tt1375666",
    year="2010",
    type=TitleType.MOVIE,
    runtime="148 min",
    rating="8.8",
    votes=2512345,
    plot="A thief who steals corporate secrets...",
    poster_url="http://omdb/poster.jpg",
)

INCEPTION_TMDB = CatalogDetail(
    tmdb_id=27205,
    title="Inception",
    year="2010",
    runtime="148 min",
    genres=["Action", "Science Fiction"],
    plot="Cobb, a skilled thief...",
    poster_url="http://tmdb/poster.jpg",
    backdrop_url="http://tmdb/backdrop.jpg",
    popularity=85.2,
)


@pytest.fixture
def ratings() -> AsyncMock:
    """Fournisseur de notes en echec par defaut."""
    mock = AsyncMock(spec=IRatingsProvider)
    mock.get_details.return_value = ProviderResult.failure("Incorrect IMDb ID.")
    mock.get_details_by_title.return_value = ProviderResult.failure("Movie not found!")
    return mock


@pytest.fixture
def catalog() -> AsyncMock:
    """Fournisseur de catalogue en echec par defaut."""
    mock = AsyncMock(spec=ICatalogProvider)
    mock.get_details.return_value = ProviderResult.failure("TMDB error: 404")
    mock.get_imdb_id.return_value = ProviderResult.failure("No IMDb id for this title.")
    mock.get_watch_providers.return_value = ProviderResult.failure("TMDB error: 404")
    return mock


@pytest.fixture
def reconciler(
    title_repo: SQLModelTitleRepository, ratings: AsyncMock, catalog: AsyncMock
) -> ProviderReconcilerService:
    return ProviderReconcilerService(
        title_repo=title_repo,
        ratings_provider=ratings,
        catalog_provider=catalog,
        cache_expiry_seconds=3600,
    )


class TestSyntheticId:
    """Tests pour synthetic_tmdb_id()."""

    def test_extracts_numeric_id(self) -> None:
        assert synthetic_tmdb_id("tmdb:27205") == 27205

    def test_native_id_returns_none(self) -> None:
        assert synthetic_tmdb_id("tt1375666") is None

    def test_malformed_returns_none(self) -> None:
        assert synthetic_tmdb_id("tmdb:abc") is None


class TestReconcile:
    """Tests pour ProviderReconcilerService.reconcile()."""

    @pytest.mark.asyncio
    async def test_synthetic_id_resolved_to_native(
        self,
        reconciler: ProviderReconcilerService,
        title_repo: SQLModelTitleRepository,
        ratings: AsyncMock,
        catalog: AsyncMock,
    ) -> None:
        """tmdb:27205 -> detail TMDB -> tt1375666 -> detail OMDb : ID natif, sans libelle."""
        catalog.get_details.return_value = ProviderResult.success(INCEPTION_TMDB)
        catalog.get_imdb_id.return_value = ProviderResult.success("tt1375666")
        ratings.get_details.return_value = ProviderResult.success(INCEPTION_OMDB)

        result = await reconciler.reconcile("tmdb:27205")

        assert result is not None
        assert result.record.id == "tt1375666"
        assert result.record.fallback_label is None
        assert result.record.source == DataSource.MIXED
        assert result.omdb_success and result.tmdb_success
        assert not result.had_cache

        catalog.get_details.assert_awaited_once_with(27205, "movie")
        catalog.get_imdb_id.assert_awaited_once_with(27205, "movie")
        ratings.get_details.assert_awaited_once_with("tt1375666")

        persisted = title_repo.get("tt1375666")
        assert persisted is not None
        assert persisted.fallback_label is None
        assert persisted.tmdb_id == 27205
        assert persisted.rating == "8.8"
        assert persisted.poster_url == "http://tmdb/poster.jpg"

    @pytest.mark.asyncio
    async def test_synthetic_row_is_replaced(
        self,
        reconciler: ProviderReconcilerService,
        title_repo: SQLModelTitleRepository,
        ratings: AsyncMock,
        catalog: AsyncMock,
    ) -> None:
        """La ligne synthetique en cache est supprimee une fois l'ID natif resolu."""
        title_repo.upsert(make_record("tmdb:27205", "Inception", tmdb_id=27205))
        catalog.get_details.return_value = ProviderResult.success(INCEPTION_TMDB)
        catalog.get_imdb_id.return_value = ProviderResult.success("tt1375666")
        ratings.get_details.return_value = ProviderResult.success(INCEPTION_OMDB)

        result = await reconciler.reconcile("tmdb:27205")

        assert result.record.id == "tt1375666"
        assert title_repo.get("tmdb:27205") is None
        assert [r.id for r in title_repo.list_all()] == ["tt1375666"]

    @pytest.mark.asyncio
    async def test_native_and_numeric_fetched_together(
        self,
        reconciler: ProviderReconcilerService,
        title_repo: SQLModelTitleRepository,
        ratings: AsyncMock,
        catalog: AsyncMock,
    ) -> None:
        """Avec les deux IDs connus, aucune reference croisee n'est necessaire."""
        title_repo.upsert(make_record("tt1375666", "Inception", imdb_id="tt1375666", tmdb_id=27205))
        catalog.get_details.return_value = ProviderResult.success(INCEPTION_TMDB)
        ratings.get_details.return_value = ProviderResult.success(INCEPTION_OMDB)

        result = await reconciler.reconcile("tt1375666")

        assert result.record.fallback_label is None
        assert result.had_cache
        catalog.get_imdb_id.assert_not_awaited()
        ratings.get_details.assert_awaited_once_with("tt1375666")

    @pytest.mark.asyncio
    async def test_tmdb_fallback_label(
        self,
        reconciler: ProviderReconcilerService,
        title_repo: SQLModelTitleRepository,
        catalog: AsyncMock,
    ) -> None:
        """OMDb en echec, TMDB reussi avec un cache : "Fallback data (TMDB)"."""
        title_repo.upsert(make_record("tt1375666", "Inception", imdb_id="tt1375666", tmdb_id=27205))
        catalog.get_details.return_value = ProviderResult.success(INCEPTION_TMDB)

        result = await reconciler.reconcile("tt1375666")

        assert result.record.fallback_label == FALLBACK_TMDB
        assert result.record.source == DataSource.TMDB
        assert title_repo.get("tt1375666").fallback_label == FALLBACK_TMDB

    @pytest.mark.asyncio
    async def test_stale_cache_label(
        self,
        reconciler: ProviderReconcilerService,
        title_repo: SQLModelTitleRepository,
    ) -> None:
        """Les deux fournisseurs en echec avec un cache : "Stale cache"."""
        title_repo.upsert(
            make_record("tt1375666", "Inception", imdb_id="tt1375666", tmdb_id=27205, rating="8.8")
        )

        result = await reconciler.reconcile("tt1375666")

        assert result.record.fallback_label == FALLBACK_STALE
        assert result.record.source == DataSource.CACHE
        assert result.record.rating == "8.8"

    @pytest.mark.asyncio
    async def test_nothing_available_returns_none(
        self,
        reconciler: ProviderReconcilerService,
        title_repo: SQLModelTitleRepository,
    ) -> None:
        """Sans cache et sans fournisseur : None, rien n'est persiste."""
        result = await reconciler.reconcile("tt0000001")

        assert result is None
        assert title_repo.list_all() == []

    @pytest.mark.asyncio
    async def test_title_lookup_as_last_resort(
        self,
        reconciler: ProviderReconcilerService,
        title_repo: SQLModelTitleRepository,
        ratings: AsyncMock,
        catalog: AsyncMock,
    ) -> None:
        """Sans ID IMDb resolu, OMDb est interroge par titre + annee + type."""
        catalog.get_details.return_value = ProviderResult.success(
            CatalogDetail(tmdb_id=1396, title="Breaking Bad", year="2008")
        )
        title_repo.upsert(
            make_record("tmdb:1396", "Breaking Bad", tmdb_id=1396, type=TitleType.SERIES)
        )
        ratings.get_details_by_title.return_value = ProviderResult.success(
            RatingsDetail(title="Breaking Bad", imdb_id="tt0903747", year="2008-2013", rating="9.5")
        )

        result = await reconciler.reconcile("tmdb:1396")

        ratings.get_details_by_title.assert_awaited_once_with(
            "Breaking Bad", "2008", TitleType.SERIES
        )
        catalog.get_details.assert_awaited_once_with(1396, "tv")
        assert result.record.id == "tt0903747"
        assert result.record.type == TitleType.SERIES
        assert result.record.rating == "9.5"
        assert result.record.fallback_label is None

    @pytest.mark.asyncio
    async def test_resolved_native_row_keeps_its_ratings(
        self,
        reconciler: ProviderReconcilerService,
        title_repo: SQLModelTitleRepository,
        catalog: AsyncMock,
    ) -> None:
        """Une ligne native sans ID TMDB n'est pas ecrasee quand OMDb echoue."""
        title_repo.upsert(
            make_record(
                "tt1375666",
                "Inception",
                imdb_id="tt1375666",
                rating="8.8",
                votes=2400000,
                cast="Leonardo DiCaprio, Joseph Gordon-Levitt",
            )
        )
        title_repo.upsert(make_record("tmdb:27205", "Inception", tmdb_id=27205))
        catalog.get_details.return_value = ProviderResult.success(INCEPTION_TMDB)
        catalog.get_imdb_id.return_value = ProviderResult.success("tt1375666")

        result = await reconciler.reconcile("tmdb:27205")

        assert result.record.id == "tt1375666"
        assert result.record.fallback_label == FALLBACK_TMDB
        native = title_repo.get("tt1375666")
        assert native.rating == "8.8"
        assert native.votes == 2400000
        assert native.cast == "Leonardo DiCaprio, Joseph Gordon-Levitt"
        assert native.tmdb_id == 27205
        assert native.backdrop_url == "http://tmdb/backdrop.jpg"
        assert title_repo.get("tmdb:27205") is None

    @pytest.mark.asyncio
    async def test_watch_providers_fetched_for_region(
        self,
        reconciler: ProviderReconcilerService,
        title_repo: SQLModelTitleRepository,
        catalog: AsyncMock,
    ) -> None:
        """Les offres du pays demande sont recuperees avec le detail TMDB."""
        title_repo.upsert(make_record("tt1375666", "Inception", imdb_id="tt1375666", tmdb_id=27205))
        providers = WatchProviders(region="FR", flatrate=["Netflix"])
        catalog.get_details.return_value = ProviderResult.success(INCEPTION_TMDB)
        catalog.get_watch_providers.return_value = ProviderResult.success(providers)

        result = await reconciler.reconcile("tt1375666", watch_region="FR")

        catalog.get_watch_providers.assert_awaited_once_with(27205, "movie", "FR")
        assert result.record.watch_providers == providers
        assert title_repo.get("tt1375666").watch_providers == providers

    @pytest.mark.asyncio
    async def test_watch_providers_failure_keeps_cached_offers(
        self,
        reconciler: ProviderReconcilerService,
        title_repo: SQLModelTitleRepository,
        catalog: AsyncMock,
    ) -> None:
        """Un echec des offres conserve celles deja en cache."""
        cached_offers = WatchProviders(region="GB", rent=["Apple TV"])
        title_repo.upsert(
            make_record(
                "tt1375666",
                "Inception",
                imdb_id="tt1375666",
                tmdb_id=27205,
                watch_providers=cached_offers,
            )
        )
        catalog.get_details.return_value = ProviderResult.success(INCEPTION_TMDB)

        result = await reconciler.reconcile("tt1375666")

        catalog.get_watch_providers.assert_awaited_once_with(27205, "movie", "GB")
        assert result.record.watch_providers == cached_offers

    @pytest.mark.asyncio
    async def test_no_tmdb_id_skips_watch_providers(
        self,
        reconciler: ProviderReconcilerService,
        ratings: AsyncMock,
        catalog: AsyncMock,
    ) -> None:
        ratings.get_details.return_value = ProviderResult.success(INCEPTION_OMDB)

        result = await reconciler.reconcile("tt1375666")

        assert result.record.watch_providers is None
        catalog.get_watch_providers.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_cached_record_surfaced_before_network(
        self,
        reconciler: ProviderReconcilerService,
        title_repo: SQLModelTitleRepository,
    ) -> None:
        """on_cached recoit l'enregistrement en cache."""
        title_repo.upsert(make_record("tt1375666", "Inception", imdb_id="tt1375666"))
        on_cached = MagicMock()

        await reconciler.reconcile("tt1375666", on_cached=on_cached)

        on_cached.assert_called_once()
        surfaced: TitleRecord = on_cached.call_args[0][0]
        assert surfaced.id == "tt1375666"

    @pytest.mark.asyncio
    async def test_synthetic_id_finds_native_row_by_tmdb_id(
        self,
        reconciler: ProviderReconcilerService,
        title_repo: SQLModelTitleRepository,
    ) -> None:
        """Un ID synthetique retrouve la ligne native par son ID TMDB."""
        title_repo.upsert(make_record("tt1375666", "Inception", imdb_id="tt1375666", tmdb_id=27205))

        assert reconciler.load_cached("tmdb:27205").id == "tt1375666"

"""
Container d'injection de dependances via dependency-injector.

Fournit une gestion centralisee des dependances pour la CLI et pour toute
autre interface tenant une LauncherSession.
"""

from dependency_injector import containers, providers

from .adapters.api.cache import APICache
from .adapters.api.omdb_client import OMDbClient
from .adapters.api.tmdb_client import TMDBClient
from .config import Settings
from .infrastructure.persistence.database import get_session, init_db
from .infrastructure.persistence.key_store import SettingsKeyStore
from .infrastructure.persistence.repositories import (
    SQLModelRecentSearchRepository,
    SQLModelSettingsRepository,
    SQLModelTitleRepository,
    SQLModelTrendingRepository,
)
from .services.debounce import SearchDebouncer
from .services.key_validation import KeyValidationService
from .services.reconciler import ProviderReconcilerService
from .services.remote_suggestions import RemoteSuggestionService
from .services.session import LauncherSession
from .services.trending import TrendingRefresherService


class Container(containers.DeclarativeContainer):
    """Container DI de l'application.

    Utilisation :
        container = Container()
        container.database.init()  # Initialise la DB une fois
        session = container.launcher_session()
        await session.init()
    """

    # Configuration - singleton charge une seule fois
    config = providers.Singleton(Settings)

    # Database - Resource pour initialisation unique
    database = providers.Resource(init_db)

    # Session SQLModel unique, partagee par tous les repositories
    session = providers.Singleton(lambda: next(get_session()))

    # Repositories
    title_repository = providers.Factory(SQLModelTitleRepository, session=session)
    trending_repository = providers.Factory(SQLModelTrendingRepository, session=session)
    settings_repository = providers.Factory(SQLModelSettingsRepository, session=session)
    recent_search_repository = providers.Factory(
        SQLModelRecentSearchRepository,
        session=session,
    )

    # Stockage des cles : table settings puis variables d'environnement
    key_store = providers.Factory(
        SettingsKeyStore,
        settings_repo=settings_repository,
        settings=config,
    )

    # Cache API - Singleton pour partage entre clients
    api_cache = providers.Singleton(
        APICache,
        cache_dir=config.provided.api_cache_dir,
    )

    # Clients API - Singleton ; la cle effective est appliquee par la session
    # (stockage des cles) via set_api_key
    omdb_client = providers.Singleton(
        OMDbClient,
        api_key=config.provided.omdb_api_key,
        cache=api_cache,
        timeout=config.provided.http_timeout,
    )
    tmdb_client = providers.Singleton(
        TMDBClient,
        api_key=config.provided.tmdb_api_key,
        cache=api_cache,
        timeout=config.provided.http_timeout,
    )

    # Services
    reconciler_service = providers.Factory(
        ProviderReconcilerService,
        title_repo=title_repository,
        ratings_provider=omdb_client,
        catalog_provider=tmdb_client,
        cache_expiry_seconds=config.provided.cache_expiry_seconds,
    )
    trending_service = providers.Factory(
        TrendingRefresherService,
        catalog_provider=tmdb_client,
        title_repo=title_repository,
        trending_repo=trending_repository,
        settings_repo=settings_repository,
        key_store=key_store,
        refresh_seconds=config.provided.trending_refresh_seconds,
        cache_expiry_seconds=config.provided.cache_expiry_seconds,
    )
    remote_suggestion_service = providers.Factory(
        RemoteSuggestionService,
        ratings_provider=omdb_client,
        catalog_provider=tmdb_client,
        title_repo=title_repository,
        recent_repo=recent_search_repository,
        cache_expiry_seconds=config.provided.cache_expiry_seconds,
    )
    key_validation_service = providers.Factory(
        KeyValidationService,
        ratings_provider=omdb_client,
        catalog_provider=tmdb_client,
    )
    debouncer = providers.Factory(
        SearchDebouncer,
        delay=config.provided.search_debounce_seconds,
    )

    # Session du launcher - Factory : une session par interface
    launcher_session = providers.Factory(
        LauncherSession,
        title_repo=title_repository,
        trending_repo=trending_repository,
        settings_repo=settings_repository,
        recent_repo=recent_search_repository,
        key_store=key_store,
        ratings_provider=omdb_client,
        catalog_provider=tmdb_client,
        reconciler=reconciler_service,
        trending_service=trending_service,
        remote_service=remote_suggestion_service,
        key_validator=key_validation_service,
        debouncer=debouncer,
        suggestion_limit=config.provided.suggestion_limit,
        fuzzy_threshold=config.provided.fuzzy_threshold,
    )

"""
Session du launcher : etat applicatif et actions.

LauncherSession est l'objet de contexte explicite tenu par la couche
d'interface (CLI ou autre). Tout changement d'etat passe par ses methodes
d'action ; l'etat est expose en lecture seule.

Cycle de vie:
    session = container.launcher_session()
    await session.init()
    session.set_query("inception year:2010")
    await session.select_suggestion(session.selected_suggestion.id)
"""

import asyncio
from typing import Optional

from loguru import logger

from src.core.entities.title import (
    DEFAULT_WATCH_REGION,
    ApiKeys,
    KeyValidationResult,
    Suggestion,
    TitleRecord,
    TrendingSeed,
)
from src.core.ports.api_clients import ICatalogProvider, IRatingsProvider
from src.core.ports.key_store import IKeyStore
from src.core.ports.repositories import (
    IRecentSearchRepository,
    ISettingsRepository,
    ITitleRepository,
    ITrendingRepository,
)
from src.services.debounce import SearchDebouncer
from src.services.key_validation import KeyValidationService
from src.services.query_parser import parse_query
from src.services.ranking import DEFAULT_LIMIT, search_titles
from src.services.reconciler import ProviderReconcilerService
from src.services.remote_suggestions import RemoteSuggestionService
from src.services.search_index import DEFAULT_THRESHOLD, SearchIndex, build_index
from src.services.trending import TrendingRefresherService
from src.utils.constants import (
    ERROR_DETAILS_UNAVAILABLE,
    LINK_TARGETS,
    SETTING_METADATA_LINK_TARGET,
    SETTING_SHOW_TRENDING,
    SETTING_WATCH_REGION,
)
from src.utils.links import imdb_url, metacritic_url, rotten_tomatoes_url

VIEW_LIST = "list"
VIEW_DETAIL = "detail"


def normalize_region(value: Optional[str]) -> str:
    """Code pays sur deux lettres majuscules (GB par defaut)."""
    return (value or "").strip().upper()[:2] or DEFAULT_WATCH_REGION


class LauncherSession:
    """
    Etat du launcher et actions associees.

    Suggestions locales recalculees a chaque saisie ; recherche distante
    anti-rebond ; reconciliation des details a la selection.
    """

    def __init__(
        self,
        title_repo: ITitleRepository,
        trending_repo: ITrendingRepository,
        settings_repo: ISettingsRepository,
        recent_repo: IRecentSearchRepository,
        key_store: IKeyStore,
        ratings_provider: IRatingsProvider,
        catalog_provider: ICatalogProvider,
        reconciler: ProviderReconcilerService,
        trending_service: TrendingRefresherService,
        remote_service: RemoteSuggestionService,
        key_validator: KeyValidationService,
        debouncer: Optional[SearchDebouncer] = None,
        suggestion_limit: int = DEFAULT_LIMIT,
        fuzzy_threshold: float = DEFAULT_THRESHOLD,
    ) -> None:
        self._title_repo = title_repo
        self._trending_repo = trending_repo
        self._settings_repo = settings_repo
        self._recent_repo = recent_repo
        self._key_store = key_store
        self._ratings = ratings_provider
        self._catalog = catalog_provider
        self._reconciler = reconciler
        self._trending_service = trending_service
        self._remote_service = remote_service
        self._key_validator = key_validator
        self._debouncer = debouncer or SearchDebouncer()
        self._suggestion_limit = suggestion_limit
        self._fuzzy_threshold = fuzzy_threshold

        self._keys = ApiKeys()
        self._keys_valid = False
        self._keys_error: Optional[KeyValidationResult] = None
        self._query = ""
        self._suggestions: list[Suggestion] = []
        self._selection_index = 0
        self._selected_id: Optional[str] = None
        self._detail: Optional[TitleRecord] = None
        self._detail_loading = False
        self._view = VIEW_LIST
        self._show_trending = True
        self._metadata_link_target = "imdb"
        self._watch_region = DEFAULT_WATCH_REGION
        self._trending: list[TrendingSeed] = []
        self._local_titles: list[TitleRecord] = []
        self._index: Optional[SearchIndex] = None
        self._recent_searches: list[str] = []
        self._error_message: Optional[str] = None

    # Etat en lecture seule

    @property
    def keys(self) -> ApiKeys:
        return self._keys

    @property
    def keys_valid(self) -> bool:
        return self._keys_valid

    @property
    def keys_error(self) -> Optional[KeyValidationResult]:
        return self._keys_error

    @property
    def query(self) -> str:
        return self._query

    @property
    def suggestions(self) -> list[Suggestion]:
        return list(self._suggestions)

    @property
    def trending_suggestions(self) -> list[Suggestion]:
        """Tendances a afficher (vide si le panneau est masque)."""
        if not self._show_trending:
            return []
        return [Suggestion.from_seed(seed) for seed in self._trending]

    @property
    def selection_index(self) -> int:
        return self._selection_index

    @property
    def selected_id(self) -> Optional[str]:
        return self._selected_id

    @property
    def selected_suggestion(self) -> Optional[Suggestion]:
        if 0 <= self._selection_index < len(self._suggestions):
            return self._suggestions[self._selection_index]
        return None

    @property
    def detail(self) -> Optional[TitleRecord]:
        return self._detail

    @property
    def detail_loading(self) -> bool:
        return self._detail_loading

    @property
    def view(self) -> str:
        return self._view

    @property
    def show_trending(self) -> bool:
        return self._show_trending

    @property
    def metadata_link_target(self) -> str:
        return self._metadata_link_target

    @property
    def watch_region(self) -> str:
        return self._watch_region

    @property
    def local_titles(self) -> list[TitleRecord]:
        return list(self._local_titles)

    @property
    def recent_searches(self) -> list[str]:
        return list(self._recent_searches)

    @property
    def error_message(self) -> Optional[str]:
        return self._error_message

    # Cycle de vie

    async def init(self) -> None:
        """
        Charge l'etat persiste, rafraichit les tendances si necessaire et
        valide les cles connues.
        """
        self._apply_keys(self._key_store.get_keys())
        self._trending = self._trending_repo.list_all()
        self._show_trending = self._settings_repo.get(SETTING_SHOW_TRENDING) != "false"
        target = self._settings_repo.get(SETTING_METADATA_LINK_TARGET)
        self._metadata_link_target = target if target in LINK_TARGETS else "imdb"
        self._watch_region = normalize_region(self._settings_repo.get(SETTING_WATCH_REGION))
        self._recent_searches = self._recent_repo.list_recent()
        self.rebuild_index()

        seeds = await self._trending_service.refresh_if_due()
        if seeds is not None:
            self._trending = seeds
            self.rebuild_index()

        if self._keys.complete:
            self._keys_valid = await self.test_keys(self._keys)
            if self._keys_valid and self._view == VIEW_DETAIL:
                await self.refresh_details()
        else:
            self._keys_valid = False
        logger.debug("Session initialisee", titles=len(self._local_titles), keys_valid=self._keys_valid)

    def _apply_keys(self, keys: ApiKeys) -> None:
        self._keys = keys
        self._ratings.set_api_key(keys.omdb_key)
        self._catalog.set_api_key(keys.tmdb_key)

    # Recherche locale

    def set_query(self, text: str) -> None:
        self._query = text
        self._update_local_suggestions()

    def _update_local_suggestions(self) -> None:
        parsed = parse_query(self._query.strip())
        self._suggestions = search_titles(
            parsed, self._local_titles, self._index, self._suggestion_limit
        )
        self._selection_index = min(self._selection_index, max(len(self._suggestions) - 1, 0))

    def rebuild_index(self) -> None:
        """Reconstruit l'index flou depuis la totalite du cache local."""
        self._local_titles = self._title_repo.list_all()
        self._index = build_index(self._local_titles, threshold=self._fuzzy_threshold)
        self._update_local_suggestions()

    def set_selection_index(self, value: int) -> None:
        upper = max(len(self._suggestions) - 1, 0)
        self._selection_index = min(max(value, 0), upper)

    def move_selection(self, delta: int) -> None:
        self.set_selection_index(self._selection_index + delta)

    # Detail

    async def select_suggestion(self, title_id: str) -> None:
        """Passe en vue detail et reconcilie le titre (idempotent)."""
        self._selected_id = title_id
        self._view = VIEW_DETAIL
        self._detail = self._reconciler.load_cached(title_id)
        self._detail_loading = True
        await self.refresh_details(title_id)

    def back_to_list(self) -> None:
        self._view = VIEW_LIST
        self._detail_loading = False

    def _show_cached(self, record: TitleRecord) -> None:
        self._detail = record

    async def refresh_details(self, title_id: Optional[str] = None) -> None:
        """Relance la reconciliation du titre selectionne (ou de title_id)."""
        target_id = title_id or self._selected_id
        if not target_id:
            return
        if not self._keys.complete:
            self._detail_loading = False
            return

        self._error_message = None
        result = await self._reconciler.reconcile(
            target_id, on_cached=self._show_cached, watch_region=self._watch_region
        )
        if result is None:
            self._detail_loading = False
            self._error_message = ERROR_DETAILS_UNAVAILABLE
            return

        self._detail = result.record
        self._detail_loading = False
        self._selected_id = result.record.id
        self.rebuild_index()

    # Tendances et recherche distante

    async def refresh_trending(self) -> None:
        seeds = await self._trending_service.refresh()
        if seeds is None:
            return
        self._trending = seeds
        self.rebuild_index()

    async def fetch_remote_suggestions(self, query: Optional[str] = None) -> None:
        """Recherche distante pour la saisie courante (ou query)."""
        text = (query if query is not None else self._query).strip()
        if not text or not self._keys.complete or not self._keys_valid:
            return
        await self._remote_service.fetch(text)
        self._recent_searches = self._recent_repo.list_recent()
        self.rebuild_index()

    def schedule_remote_fetch(self) -> asyncio.Task:
        """Planifie une recherche distante anti-rebond pour la saisie courante."""
        return self._debouncer.schedule(self._query, self.fetch_remote_suggestions)

    # Cles

    async def test_keys(self, keys: ApiKeys) -> bool:
        self._keys_error = None
        result = await self._key_validator.test_keys(keys)
        self._keys_error = None if result.ok else result
        return result.ok

    async def save_keys(self, keys: ApiKeys) -> bool:
        """Valide puis enregistre les cles. Retourne False si la validation echoue."""
        if not await self.test_keys(keys):
            return False
        self._key_store.set_keys(keys.omdb_key, keys.tmdb_key)
        self._apply_keys(keys)
        self._keys_valid = True
        if self._view == VIEW_DETAIL:
            await self.refresh_details()
        return True

    def reset_keys(self) -> None:
        self._key_store.reset_keys()
        self._apply_keys(ApiKeys())
        self._keys_valid = False
        self._keys_error = None

    # Reglages

    def set_show_trending(self, value: bool) -> None:
        self._settings_repo.set(SETTING_SHOW_TRENDING, "true" if value else "false")
        self._show_trending = value

    def set_metadata_link_target(self, value: str) -> None:
        if value not in LINK_TARGETS:
            raise ValueError(f"Cible de lien inconnue: {value}")
        self._settings_repo.set(SETTING_METADATA_LINK_TARGET, value)
        self._metadata_link_target = value

    async def set_watch_region(self, value: str) -> None:
        """Change le pays des offres de streaming et recharge le detail affiche."""
        region = normalize_region(value)
        self._settings_repo.set(SETTING_WATCH_REGION, region)
        self._watch_region = region
        if self._view == VIEW_DETAIL:
            await self.refresh_details()

    def metadata_link(self) -> Optional[str]:
        """URL de la page de metadonnees (IMDb, Rotten Tomatoes ou Metacritic) du titre courant."""
        selected = self.selected_suggestion
        target_id = self._selected_id or (selected.id if selected else None)
        if not target_id:
            return None
        return self.metadata_link_for(target_id)

    def metadata_link_for(self, target_id: str) -> Optional[str]:
        """URL de la page de metadonnees d'un titre, selon la cible configuree."""
        selected = self.selected_suggestion
        detail = self._detail if self._detail and self._detail.id == target_id else None
        cached = self._title_repo.get(target_id)
        title = (
            (detail.title if detail else None)
            or (cached.title if cached else None)
            or (selected.title if selected and selected.id == target_id else None)
        )
        if self._metadata_link_target == "rotten":
            return rotten_tomatoes_url(title) if title else None
        if self._metadata_link_target == "metacritic":
            return metacritic_url(title) if title else None
        imdb_id = (
            (detail.imdb_id if detail else None)
            or (cached.imdb_id if cached else None)
            or (target_id if target_id.startswith("tt") else None)
        )
        return imdb_url(imdb_id) if imdb_id else None

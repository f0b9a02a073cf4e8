"""
Service de suggestions distantes.

Interroge OMDb et TMDB en parallele pour une saisie, fusionne les
resultats, les enregistre dans le cache local et memorise la recherche.
"""

import asyncio
from dataclasses import replace

from loguru import logger

from src.core.entities.title import TitleRecord
from src.core.ports.api_clients import ICatalogProvider, IRatingsProvider
from src.core.ports.repositories import IRecentSearchRepository, ITitleRepository
from src.services.merge import merge_into_existing, merge_search_results
from src.utils.helpers import now_unix

DEFAULT_CACHE_EXPIRY_SECONDS = 40 * 24 * 60 * 60


class RemoteSuggestionService:
    """Recherche distante OMDb + TMDB et alimentation du cache local."""

    def __init__(
        self,
        ratings_provider: IRatingsProvider,
        catalog_provider: ICatalogProvider,
        title_repo: ITitleRepository,
        recent_repo: IRecentSearchRepository,
        cache_expiry_seconds: int = DEFAULT_CACHE_EXPIRY_SECONDS,
    ) -> None:
        self._ratings = ratings_provider
        self._catalog = catalog_provider
        self._title_repo = title_repo
        self._recent_repo = recent_repo
        self._cache_expiry_seconds = cache_expiry_seconds

    def _existing_for(self, record: TitleRecord) -> TitleRecord | None:
        """Enregistrement deja en cache pour un resultat (par ID puis par ID TMDB)."""
        existing = self._title_repo.get(record.id)
        if existing is None and record.tmdb_id is not None:
            existing = self._title_repo.get_by_tmdb_id(record.tmdb_id)
        return existing

    async def fetch(self, query: str) -> list[TitleRecord]:
        """
        Recherche distante pour une saisie.

        Un fournisseur en echec contribue une liste vide. Les resultats sont
        fusionnes dans le cache sans jamais effacer un champ deja rempli.

        Returns:
            Les enregistrements tels que persistes
        """
        query = query.strip()
        if not query:
            return []

        omdb_result, tmdb_result = await asyncio.gather(
            self._ratings.search(query),
            self._catalog.search(query),
        )
        omdb_items = omdb_result.value if omdb_result.ok else []
        tmdb_items = tmdb_result.value if tmdb_result.ok else []

        expires_at = now_unix() + self._cache_expiry_seconds
        saved: list[TitleRecord] = []
        for item in merge_search_results(omdb_items, tmdb_items):
            record = replace(item, id=item.imdb_id or item.id, expires_at=expires_at)
            merged = merge_into_existing(record, self._existing_for(record))
            saved.append(self._title_repo.upsert(merged))

        self._recent_repo.add(query)
        logger.debug(
            "Suggestions distantes",
            query=query,
            omdb=len(omdb_items),
            tmdb=len(tmdb_items),
            saved=len(saved),
        )
        return saved

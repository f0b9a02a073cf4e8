"""
Service de rafraichissement des tendances.

Recupere la liste des tendances du jour depuis TMDB, remplace entierement
la table des tendances (pas de fusion incrementale) et enregistre chaque
titre dans le cache local avec une expiration et un horodatage tendance.
"""

import asyncio
from dataclasses import replace
from typing import Optional

from loguru import logger

from src.core.entities.title import TrendingSeed
from src.core.ports.api_clients import ICatalogProvider
from src.core.ports.key_store import IKeyStore
from src.core.ports.repositories import (
    ISettingsRepository,
    ITitleRepository,
    ITrendingRepository,
)
from src.services.merge import merge_into_existing
from src.utils.constants import SETTING_LAST_TRENDING_REFRESH
from src.utils.helpers import now_unix, parse_int

DEFAULT_REFRESH_SECONDS = 24 * 60 * 60
DEFAULT_CACHE_EXPIRY_SECONDS = 40 * 24 * 60 * 60


class TrendingRefresherService:
    """
    Rafraichissement des tendances TMDB.

    Sans cle TMDB, toutes les operations sont des no-op silencieux.
    """

    def __init__(
        self,
        catalog_provider: ICatalogProvider,
        title_repo: ITitleRepository,
        trending_repo: ITrendingRepository,
        settings_repo: ISettingsRepository,
        key_store: IKeyStore,
        refresh_seconds: int = DEFAULT_REFRESH_SECONDS,
        cache_expiry_seconds: int = DEFAULT_CACHE_EXPIRY_SECONDS,
    ) -> None:
        self._catalog = catalog_provider
        self._title_repo = title_repo
        self._trending_repo = trending_repo
        self._settings_repo = settings_repo
        self._key_store = key_store
        self._refresh_seconds = refresh_seconds
        self._cache_expiry_seconds = cache_expiry_seconds

    def last_refresh(self) -> Optional[int]:
        return parse_int(self._settings_repo.get(SETTING_LAST_TRENDING_REFRESH))

    def is_due(self, now: Optional[int] = None) -> bool:
        """True si aucun rafraichissement n'a eu lieu ou si le dernier est trop ancien."""
        last = self.last_refresh()
        now = now if now is not None else now_unix()
        return last is None or now - last > self._refresh_seconds

    async def refresh(self) -> Optional[list[TrendingSeed]]:
        """
        Rafraichit les tendances.

        Returns:
            Les nouvelles tendances, ou None si rien n'a ete fait (cle
            absente ou fournisseur en echec)
        """
        if not self._key_store.get_keys().tmdb_key:
            return None

        result = await self._catalog.get_trending()
        if not result.ok:
            logger.warning("Tendances indisponibles", error=result.error)
            return None

        now = now_unix()
        seeds: list[TrendingSeed] = []
        for rank, item in enumerate(result.value, start=1):
            record = replace(
                item,
                tmdb_rank=rank,
                tmdb_trending_at=now,
                expires_at=now + self._cache_expiry_seconds,
            )
            existing = self._title_repo.get(record.id)
            if existing is None and record.tmdb_id is not None:
                existing = self._title_repo.get_by_tmdb_id(record.tmdb_id)
            saved = self._title_repo.upsert(merge_into_existing(record, existing))
            seeds.append(replace(TrendingSeed.from_record(saved), tmdb_rank=rank))

        self._trending_repo.replace_all(seeds)
        self._settings_repo.set(SETTING_LAST_TRENDING_REFRESH, str(now))
        logger.info("Tendances rafraichies", count=len(seeds))
        return seeds

    async def refresh_if_due(self) -> Optional[list[TrendingSeed]]:
        if not self.is_due():
            return None
        return await self.refresh()

    async def run_periodic(self, stop_event: asyncio.Event, interval: Optional[float] = None) -> None:
        """
        Boucle de rafraichissement periodique jusqu'a stop_event.

        Args:
            stop_event: Evenement d'arret de la boucle
            interval: Delai entre deux verifications (defaut: intervalle de rafraichissement)
        """
        delay = interval if interval is not None else float(self._refresh_seconds)
        while not stop_event.is_set():
            await self.refresh_if_due()
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=delay)
            except asyncio.TimeoutError:
                continue

"""
Service de reconciliation des details d'un titre.

ProviderReconcilerService fusionne le cache local et les details des deux
fournisseurs (OMDb pour les notes, TMDB pour le catalogue) en un seul
enregistrement canonique, puis le persiste.

Deroulement:
1. Chargement du cache (par ID, puis par ID TMDB pour un ID synthetique)
2. Detail OMDb (ID natif), detail TMDB et offres de streaming (ID numerique)
   en parallele
3. Resolution de l'ID IMDb via TMDB si aucun ID natif n'est connu
4. Nouvelle tentative OMDb avec l'ID resolu, puis recherche par titre
5. Reprise de la ligne native existante quand l'ID natif vient d'etre resolu
6. Libelle de provenance, persistance, suppression de la ligne synthetique

Aucune exception fournisseur ne sort de reconcile() : un echec laisse
simplement le fournisseur concerne en "non reussi".
"""

import asyncio
from dataclasses import dataclass, replace
from typing import Awaitable, Callable, Optional

from loguru import logger

from src.core.entities.title import (
    DEFAULT_WATCH_REGION,
    TMDB_ID_PREFIX,
    TitleRecord,
    TitleType,
    media_type_for,
)
from src.core.ports.api_clients import ICatalogProvider, IRatingsProvider, ProviderResult
from src.core.ports.repositories import ITitleRepository
from src.services.merge import (
    MergeContext,
    apply_omdb_detail,
    apply_tmdb_detail,
    compute_fallback_label,
    compute_source,
    merge_into_existing,
)
from src.utils.helpers import now_unix, parse_int

DEFAULT_CACHE_EXPIRY_SECONDS = 40 * 24 * 60 * 60


@dataclass
class ReconcileResult:
    """
    Resultat d'une reconciliation.

    Attributs:
        record: Enregistrement canonique persiste
        omdb_success: True si un detail OMDb a ete fusionne
        tmdb_success: True si un detail TMDB a ete fusionne
        had_cache: True si un enregistrement existait deja
    """

    record: TitleRecord
    omdb_success: bool = False
    tmdb_success: bool = False
    had_cache: bool = False


def synthetic_tmdb_id(title_id: str) -> Optional[int]:
    """Extrait l'ID numerique d'un ID synthetique "tmdb:<n>" (None sinon)."""
    if not title_id.startswith(TMDB_ID_PREFIX):
        return None
    return parse_int(title_id[len(TMDB_ID_PREFIX):])


async def _skipped() -> None:
    return None


class ProviderReconcilerService:
    """
    Reconciliation cache + OMDb + TMDB d'un titre.

    Le service ne reconstruit pas l'index local : l'appelant le fait apres
    une reconciliation reussie.
    """

    def __init__(
        self,
        title_repo: ITitleRepository,
        ratings_provider: IRatingsProvider,
        catalog_provider: ICatalogProvider,
        cache_expiry_seconds: int = DEFAULT_CACHE_EXPIRY_SECONDS,
    ) -> None:
        self._title_repo = title_repo
        self._ratings = ratings_provider
        self._catalog = catalog_provider
        self._cache_expiry_seconds = cache_expiry_seconds

    def load_cached(self, target_id: str) -> Optional[TitleRecord]:
        """Enregistrement en cache pour un ID (ou pour l'ID TMDB d'un ID synthetique)."""
        cached = self._title_repo.get(target_id)
        if cached is None:
            tmdb_id = synthetic_tmdb_id(target_id)
            if tmdb_id is not None:
                cached = self._title_repo.get_by_tmdb_id(tmdb_id)
        return cached

    async def reconcile(
        self,
        target_id: str,
        on_cached: Optional[Callable[[TitleRecord], None]] = None,
        watch_region: str = DEFAULT_WATCH_REGION,
    ) -> Optional[ReconcileResult]:
        """
        Reconcilie et persiste le detail d'un titre.

        Args:
            target_id: ID natif (ttXXXXXXX) ou synthetique (tmdb:<n>)
            on_cached: Appele avec l'enregistrement en cache, avant tout appel reseau
            watch_region: Pays des offres de streaming (code ISO a deux lettres)

        Returns:
            ReconcileResult, ou None si ni le cache ni aucun fournisseur
            n'a produit de donnees
        """
        cached = self.load_cached(target_id)
        if cached is not None and on_cached is not None:
            on_cached(cached)

        is_synthetic = target_id.startswith(TMDB_ID_PREFIX)
        tmdb_id = (cached.tmdb_id if cached else None) or synthetic_tmdb_id(target_id)
        imdb_id = (cached.imdb_id if cached else None) or (None if is_synthetic else target_id)
        media_type = media_type_for(cached.type) if cached else "movie"

        context = MergeContext(
            target_id=target_id,
            tmdb_id=tmdb_id,
            known_imdb_id=imdb_id,
            resolved_imdb_id=imdb_id,
            expires_at=now_unix() + self._cache_expiry_seconds,
        )
        merged = cached
        omdb_success = False
        tmdb_success = False

        omdb_call: Awaitable = self._ratings.get_details(imdb_id) if imdb_id else _skipped()
        tmdb_call: Awaitable = (
            self._catalog.get_details(tmdb_id, media_type) if tmdb_id else _skipped()
        )
        watch_call: Awaitable = (
            self._catalog.get_watch_providers(tmdb_id, media_type, watch_region)
            if tmdb_id
            else _skipped()
        )
        omdb_result, tmdb_result, watch_result = await asyncio.gather(
            omdb_call, tmdb_call, watch_call
        )

        if omdb_result is not None and omdb_result.ok:
            omdb_success = True
            merged = apply_omdb_detail(omdb_result.value, merged, context)

        if tmdb_result is not None and tmdb_result.ok:
            tmdb_success = True
            if context.resolved_imdb_id is None:
                xref: ProviderResult[str] = await self._catalog.get_imdb_id(tmdb_id, media_type)
                if xref.ok:
                    logger.debug("ID IMDb resolu via TMDB", tmdb_id=tmdb_id, imdb_id=xref.value)
                    context = replace(context, resolved_imdb_id=xref.value)
            merged = apply_tmdb_detail(tmdb_result.value, merged, context, media_type)
            if watch_result is not None and watch_result.ok:
                merged = replace(merged, watch_providers=watch_result.value)

        resolved = context.resolved_imdb_id
        if not omdb_success and resolved and resolved != imdb_id:
            retry = await self._ratings.get_details(resolved)
            if retry.ok:
                omdb_success = True
                merged = apply_omdb_detail(retry.value, merged, context)

        if not omdb_success and merged is not None and merged.title:
            lookup_type = merged.type if merged.type in (TitleType.MOVIE, TitleType.SERIES) else None
            by_title = await self._ratings.get_details_by_title(merged.title, merged.year, lookup_type)
            if by_title.ok:
                omdb_success = True
                merged = apply_omdb_detail(by_title.value, merged, context)

        if merged is None:
            logger.warning("Aucune donnee pour le titre", target_id=target_id)
            return None

        if merged.id != (cached.id if cached else target_id):
            native = self._title_repo.get(merged.id)
            if native is not None:
                logger.debug("Ligne native reprise", target_id=target_id, id=native.id)
                merged = merge_into_existing(merged, native)

        merged = replace(
            merged,
            fallback_label=compute_fallback_label(omdb_success, tmdb_success, cached is not None),
            source=compute_source(omdb_success, tmdb_success),
        )
        saved = self._title_repo.upsert(merged)
        self._drop_superseded(saved.id, target_id, cached)

        logger.info(
            "Titre reconcilie",
            target_id=target_id,
            id=saved.id,
            omdb=omdb_success,
            tmdb=tmdb_success,
            fallback=saved.fallback_label,
        )
        return ReconcileResult(
            record=saved,
            omdb_success=omdb_success,
            tmdb_success=tmdb_success,
            had_cache=cached is not None,
        )

    def _drop_superseded(
        self, canonical_id: str, target_id: str, cached: Optional[TitleRecord]
    ) -> None:
        """Supprime la ligne synthetique remplacee par un ID natif."""
        stale_ids = {target_id}
        if cached is not None:
            stale_ids.add(cached.id)
        for stale_id in stale_ids:
            if stale_id != canonical_id and stale_id.startswith(TMDB_ID_PREFIX):
                if self._title_repo.delete(stale_id):
                    logger.debug("Ligne synthetique remplacee", old_id=stale_id, new_id=canonical_id)

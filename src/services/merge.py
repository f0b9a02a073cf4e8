"""
Fusion champ par champ des donnees fournisseurs dans un TitleRecord.

Fonctions pures, sans I/O : toutes les entrees (detail fournisseur,
enregistrement de base, identifiants connus, date d'expiration) sont
passees explicitement.

Regle de preference (prefer_value): la valeur entrante l'emporte sauf si
elle est None, une chaine vide (apres strip) ou une liste vide ; dans ce
cas la valeur precedente est conservee. Un champ rempli n'est donc jamais
ecrase par une valeur vide.
"""

from dataclasses import dataclass, fields, replace
from typing import Any, Optional, TypeVar

from src.core.entities.title import (
    FALLBACK_CACHED,
    FALLBACK_STALE,
    FALLBACK_TMDB,
    DataSource,
    TitleRecord,
    TitleType,
)
from src.core.ports.api_clients import CatalogDetail, RatingsDetail

T = TypeVar("T")


def is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return False


def prefer_value(next_value: Optional[T], prev_value: Optional[T]) -> Optional[T]:
    """Retourne next_value sauf s'il est vide, sinon prev_value."""
    if is_empty(next_value):
        return prev_value
    return next_value


@dataclass(frozen=True)
class MergeContext:
    """
    Identifiants et horodatage d'une reconciliation en cours.

    Attributs:
        target_id: ID demande (natif ou synthetique "tmdb:<n>")
        tmdb_id: ID numerique TMDB connu
        known_imdb_id: ID IMDb connu au depart (cache ou ID natif demande)
        resolved_imdb_id: ID IMDb resolu (connu ou obtenu par reference croisee)
        expires_at: Expiration a ecrire sur l'enregistrement fusionne
    """

    target_id: str
    tmdb_id: Optional[int] = None
    known_imdb_id: Optional[str] = None
    resolved_imdb_id: Optional[str] = None
    expires_at: Optional[int] = None


def _get(base: Optional[TitleRecord], name: str) -> Any:
    return getattr(base, name) if base is not None else None


def _has_native_id(base: Optional[TitleRecord]) -> bool:
    return base is not None and not base.is_synthetic


def apply_omdb_detail(
    detail: RatingsDetail, base: Optional[TitleRecord], context: MergeContext
) -> TitleRecord:
    """
    Fusionne un detail OMDb dans l'enregistrement de travail.

    OMDb l'emporte sur les champs qu'il fournit, sauf le poster (celui
    deja en cache, souvent TMDB, est conserve) et les champs propres a
    TMDB (backdrop, popularite) repris de la base. Un ID natif deja
    attribue n'est jamais remplace.
    """
    if _has_native_id(base):
        record_id = base.id
    else:
        record_id = (
            detail.imdb_id
            or context.resolved_imdb_id
            or context.known_imdb_id
            or _get(base, "id")
            or context.target_id
        )

    detail_type = detail.type if detail.type != TitleType.OTHER else None
    merged = base if base is not None else TitleRecord(id=record_id)
    return replace(
        merged,
        id=record_id,
        imdb_id=prefer_value(_get(base, "imdb_id"), detail.imdb_id)
        or context.resolved_imdb_id
        or context.known_imdb_id,
        tmdb_id=prefer_value(context.tmdb_id, _get(base, "tmdb_id")),
        title=prefer_value(detail.title, _get(base, "title")) or "",
        year=prefer_value(detail.year, _get(base, "year")),
        type=prefer_value(detail_type, _get(base, "type")) or TitleType.MOVIE,
        runtime=prefer_value(detail.runtime, _get(base, "runtime")),
        rating=prefer_value(detail.rating, _get(base, "rating")),
        votes=prefer_value(detail.votes, _get(base, "votes")),
        poster_url=prefer_value(_get(base, "poster_url"), detail.poster_url),
        genres=prefer_value(detail.genres, _get(base, "genres")),
        plot=prefer_value(detail.plot, _get(base, "plot")),
        cast=prefer_value(detail.cast, _get(base, "cast")),
        director=prefer_value(detail.director, _get(base, "director")),
        country=prefer_value(detail.country, _get(base, "country")),
        language=prefer_value(detail.language, _get(base, "language")),
        rotten_tomatoes_score=prefer_value(
            detail.rotten_tomatoes_score, _get(base, "rotten_tomatoes_score")
        ),
        metacritic_score=prefer_value(detail.metacritic_score, _get(base, "metacritic_score")),
        omdb_ratings=prefer_value(detail.omdb_ratings, _get(base, "omdb_ratings")),
        expires_at=context.expires_at,
    )


def apply_tmdb_detail(
    detail: CatalogDetail,
    base: Optional[TitleRecord],
    context: MergeContext,
    media_type: str = "movie",
) -> TitleRecord:
    """
    Fusionne un detail TMDB dans l'enregistrement de travail.

    TMDB fait autorite pour poster, backdrop, intrigue, genres et popularite
    quand il les fournit ; les autres champs gardent la valeur de travail et
    ne prennent la valeur TMDB qu'a defaut.
    """
    if _has_native_id(base):
        record_id = base.id
    else:
        record_id = context.resolved_imdb_id or _get(base, "id") or context.target_id

    base_type = _get(base, "type")
    if base_type is None or base_type == TitleType.OTHER:
        base_type = TitleType.SERIES if media_type == "tv" else TitleType.MOVIE

    merged = base if base is not None else TitleRecord(id=record_id)
    return replace(
        merged,
        id=record_id,
        imdb_id=prefer_value(_get(base, "imdb_id"), context.resolved_imdb_id),
        tmdb_id=prefer_value(context.tmdb_id, _get(base, "tmdb_id")) or detail.tmdb_id,
        title=prefer_value(_get(base, "title"), detail.title) or "",
        year=prefer_value(_get(base, "year"), detail.year),
        type=base_type,
        runtime=prefer_value(_get(base, "runtime"), detail.runtime),
        country=prefer_value(_get(base, "country"), detail.country),
        language=prefer_value(_get(base, "language"), detail.language),
        poster_url=prefer_value(detail.poster_url, _get(base, "poster_url")),
        backdrop_url=prefer_value(detail.backdrop_url, _get(base, "backdrop_url")),
        plot=prefer_value(detail.plot, _get(base, "plot")),
        genres=prefer_value(detail.genres, _get(base, "genres")),
        popularity=prefer_value(detail.popularity, _get(base, "popularity")),
        expires_at=context.expires_at,
    )


def compute_fallback_label(
    omdb_success: bool, tmdb_success: bool, had_cache: bool
) -> Optional[str]:
    """
    Libelle de provenance d'une reconciliation.

    L'ordre des tests compte : "Fallback data (TMDB)" est evalue avant les
    libelles de cache.
    """
    if not omdb_success and tmdb_success:
        return FALLBACK_TMDB
    if not omdb_success and not tmdb_success and had_cache:
        return FALLBACK_STALE
    if not omdb_success and had_cache:
        return FALLBACK_CACHED
    return None


def compute_source(omdb_success: bool, tmdb_success: bool) -> DataSource:
    if omdb_success and tmdb_success:
        return DataSource.MIXED
    if omdb_success:
        return DataSource.OMDB
    if tmdb_success:
        return DataSource.TMDB
    return DataSource.CACHE


# Champs de tenue qui ne viennent jamais d'un resultat de recherche
_BOOKKEEPING = {"id", "source", "fallback_label", "last_updated_at"}


def merge_into_existing(incoming: TitleRecord, existing: Optional[TitleRecord]) -> TitleRecord:
    """
    Fusionne un enregistrement leger (resultat de recherche, ou detail dont
    l'ID natif vient d'etre resolu) dans la ligne existante.

    Chaque champ rempli de l'entrant l'emporte, les champs vides gardent la
    valeur existante : une recherche n'efface jamais un detail deja en cache.
    """
    if existing is None:
        return incoming
    values = {
        f.name: prefer_value(getattr(incoming, f.name), getattr(existing, f.name))
        for f in fields(TitleRecord)
        if f.name not in _BOOKKEEPING
    }
    if existing.type != TitleType.OTHER and incoming.type == TitleType.OTHER:
        values["type"] = existing.type
    # Poster deja en cache conserve, comme pour le detail OMDb
    values["poster_url"] = prefer_value(existing.poster_url, incoming.poster_url)
    return replace(existing, **values)


def merge_search_results(*result_sets: list[TitleRecord]) -> list[TitleRecord]:
    """
    Fusionne les resultats de recherche des deux fournisseurs.

    Les resultats sont indexes par ID IMDb (a defaut par ID). La premiere
    occurrence l'emporte ; la suivante ne complete que le poster, la
    popularite et les identifiants manquants. L'ordre d'apparition est conserve.
    """
    merged: dict[str, TitleRecord] = {}
    for results in result_sets:
        for item in results:
            key = item.imdb_id or item.id
            current = merged.get(key)
            if current is None:
                merged[key] = item
                continue
            merged[key] = replace(
                current,
                poster_url=current.poster_url or item.poster_url,
                popularity=current.popularity if current.popularity is not None else item.popularity,
                tmdb_id=current.tmdb_id if current.tmdb_id is not None else item.tmdb_id,
                imdb_id=current.imdb_id or item.imdb_id,
            )
    return list(merged.values())

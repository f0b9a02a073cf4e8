"""
Client TMDB pour le catalogue, les tendances et les images.

Implemente l'interface ICatalogProvider pour TMDB (The Movie Database).
Utilise le cache persistant pour les recherches et le mecanisme de retry
pour gerer le rate limiting.

Usage:
    cache = APICache()
    client = TMDBClient(api_key="your_key", cache=cache)
    result = await client.get_trending()
    details = await client.get_details(27205, "movie")
    await client.close()
"""

from typing import Any, Optional

import httpx
from loguru import logger
from pydantic import BaseModel, ValidationError

from src.adapters.api.cache import APICache
from src.adapters.api.retry import RateLimitError, request_with_retry
from src.adapters.api.schemas import (
    TmdbDetailResponse,
    TmdbExternalIdsResponse,
    TmdbSearchItem,
    TmdbSearchResponse,
    TmdbWatchProvider,
    TmdbWatchProvidersResponse,
)
from src.core.entities.title import (
    DEFAULT_WATCH_REGION,
    TMDB_ID_PREFIX,
    DataSource,
    TitleRecord,
    TitleType,
    WatchProviders,
)
from src.core.ports.api_clients import CatalogDetail, ICatalogProvider, ProviderResult
from src.utils.constants import TMDB_BASE_URL, TMDB_IMAGE_BASE_URL
from src.utils.helpers import clean_title

_NO_KEY = "TMDB key is not configured."

_FETCH_ERRORS = (httpx.HTTPError, RateLimitError, ValueError, ValidationError)


def image_url(path: Optional[str]) -> Optional[str]:
    """Construit l'URL complete d'une image TMDB (None si pas de chemin)."""
    return f"{TMDB_IMAGE_BASE_URL}{path}" if path else None


def _year_of(date: Optional[str]) -> Optional[str]:
    return date[:4] if date and len(date) >= 4 else None


def map_search_item(item: TmdbSearchItem, default_type: str = "movie") -> TitleRecord:
    """
    Transforme un resultat de recherche/tendance TMDB en enregistrement leger.

    L'ID canonique est synthetique ("tmdb:<n>") tant que l'ID IMDb
    n'est pas resolu.
    """
    media_type = item.media_type or default_type
    return TitleRecord(
        id=f"{TMDB_ID_PREFIX}{item.id}",
        tmdb_id=item.id,
        title=clean_title(item.title or item.name or ""),
        year=_year_of(item.release_date or item.first_air_date),
        type=TitleType.SERIES if media_type == "tv" else TitleType.MOVIE,
        poster_url=image_url(item.poster_path),
        popularity=item.popularity,
        source=DataSource.TMDB,
    )


def map_detail(data: TmdbDetailResponse) -> CatalogDetail:
    """Transforme une reponse de detail TMDB validee en CatalogDetail."""
    countries = [c.name for c in data.production_countries or [] if c.name]
    languages = [lang.name for lang in data.spoken_languages or [] if lang.name]
    genres = [g.name for g in data.genres or [] if g.name]
    return CatalogDetail(
        tmdb_id=data.id,
        title=clean_title(data.title or data.name or ""),
        year=_year_of(data.release_date or data.first_air_date),
        runtime=f"{data.runtime} min" if data.runtime else None,
        genres=genres or None,
        plot=data.overview or None,
        poster_url=image_url(data.poster_path),
        backdrop_url=image_url(data.backdrop_path),
        country=", ".join(countries) or None,
        language=", ".join(languages) or None,
        popularity=data.popularity,
    )


def _provider_names(providers: Optional[list[TmdbWatchProvider]]) -> list[str]:
    ordered = sorted(providers or [], key=lambda p: (p.display_priority is None, p.display_priority))
    return [p.provider_name for p in ordered]


def map_watch_providers(data: TmdbWatchProvidersResponse, region: str) -> WatchProviders:
    """Extrait les offres d'un pays (vide si le titre n'y est pas disponible)."""
    offers = data.results.get(region)
    if offers is None:
        return WatchProviders(region=region)
    return WatchProviders(
        region=region,
        link=offers.link,
        flatrate=_provider_names(offers.flatrate),
        rent=_provider_names(offers.rent),
        buy=_provider_names(offers.buy),
    )


class TMDBClient(ICatalogProvider):
    """
    Client API TMDB pour le catalogue de films et series.

    Implemente ICatalogProvider avec:
    - Validation de cle (endpoint /configuration)
    - Recherche multi films + series (cache 24h, personnes exclues)
    - Details film ou serie, IDs externes (resolution IMDb)
    - Offres de streaming par pays
    - Tendances du jour
    - Retry automatique sur rate limiting (429)

    Supporte les deux modes d'authentification TMDB:
    - API Key v3 (32 caracteres hex) : passe en parametre api_key
    - Read Access Token v4 (long JWT) : passe en header Bearer
    """

    def __init__(
        self,
        api_key: Optional[str],
        cache: Optional[APICache] = None,
        timeout: float = 15.0,
    ) -> None:
        """
        Initialise le client TMDB.

        Args:
            api_key: Cle API TMDB (v3 ou v4), None si non configuree
            cache: Cache disque des recherches (optionnel)
            timeout: Timeout HTTP en secondes
        """
        self._api_key = api_key
        self._cache = cache
        self._timeout = timeout
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        """Retourne le client HTTP, le cree si necessaire (lazy init)."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=TMDB_BASE_URL,
                headers={"Accept": "application/json"},
                timeout=self._timeout,
            )
        return self._client

    @property
    def source(self) -> str:
        return "tmdb"

    def set_api_key(self, api_key: Optional[str]) -> None:
        self._api_key = api_key

    @staticmethod
    def _auth(api_key: str) -> tuple[dict[str, str], dict[str, str]]:
        """Retourne (headers, params) d'authentification pour une cle."""
        if len(api_key) > 40:
            return {"Authorization": f"Bearer {api_key}"}, {}
        return {}, {"api_key": api_key}

    async def _get_json(
        self,
        path: str,
        params: Optional[dict[str, str]] = None,
        api_key: Optional[str] = None,
    ) -> Any:
        """
        Execute une requete TMDB et retourne le JSON brut.

        Raises:
            httpx.HTTPError, RateLimitError, ValueError (JSON illisible)
        """
        headers, auth_params = self._auth(api_key or self._api_key or "")
        response = await request_with_retry(
            self._get_client(),
            "GET",
            path,
            params={**auth_params, **(params or {})},
            headers=headers,
        )
        return response.json()

    async def _fetch(
        self, path: str, schema: type[BaseModel], params: Optional[dict[str, str]] = None
    ) -> ProviderResult[Any]:
        """Requete + validation de schema, toute erreur devient un echec."""
        if not self._api_key:
            return ProviderResult.failure(_NO_KEY)
        try:
            data = schema.model_validate(await self._get_json(path, params))
        except _FETCH_ERRORS as exc:
            message = self._error_message(exc)
            logger.warning("Requete TMDB en echec", path=path, error=message)
            return ProviderResult.failure(message)
        return ProviderResult.success(data)

    @staticmethod
    def _error_message(exc: Exception) -> str:
        if isinstance(exc, httpx.HTTPStatusError):
            try:
                body = exc.response.json()
                if isinstance(body, dict) and body.get("status_message"):
                    return str(body["status_message"])
            except ValueError:
                pass
            return f"TMDB error: {exc.response.status_code}"
        return str(exc) or exc.__class__.__name__

    async def validate_key(self, api_key: str) -> ProviderResult[bool]:
        """Valide une cle via l'endpoint /configuration."""
        try:
            data = await self._get_json("/configuration", api_key=api_key)
        except (httpx.HTTPError, RateLimitError, ValueError) as exc:
            return ProviderResult.failure(self._error_message(exc))
        if not isinstance(data, dict) or "images" not in data:
            return ProviderResult.failure("Unexpected TMDB response.")
        return ProviderResult.success(True)

    async def search(self, query: str) -> ProviderResult[list[TitleRecord]]:
        """
        Recherche multi (films et series).

        Utilise le pattern cache-first : les resultats sont caches 24 heures.
        Les personnes sont exclues des resultats.
        """
        if not self._api_key:
            return ProviderResult.failure(_NO_KEY)

        cache_key = APICache.search_key(self.source, query)
        if self._cache is not None:
            cached = await self._cache.get(cache_key)
            if cached is not None:
                return ProviderResult.success(cached)

        result = await self._fetch(
            "/search/multi",
            TmdbSearchResponse,
            params={"query": query, "include_adult": "false"},
        )
        if not result.ok:
            return ProviderResult.failure(result.error or "TMDB search failed.")

        records = [
            map_search_item(item)
            for item in result.value.results
            if item.media_type in ("movie", "tv")
        ]
        if self._cache is not None:
            await self._cache.set_search(cache_key, records)
        return ProviderResult.success(records)

    async def get_details(
        self, tmdb_id: int, media_type: str = "movie"
    ) -> ProviderResult[CatalogDetail]:
        """Details d'un film (/movie/{id}) ou d'une serie (/tv/{id})."""
        result = await self._fetch(f"/{media_type}/{tmdb_id}", TmdbDetailResponse)
        if not result.ok:
            return ProviderResult.failure(result.error or "TMDB details failed.")
        return ProviderResult.success(map_detail(result.value))

    async def get_imdb_id(
        self, tmdb_id: int, media_type: str = "movie"
    ) -> ProviderResult[str]:
        """Resout l'ID IMDb d'un titre via /{media_type}/{id}/external_ids."""
        result = await self._fetch(
            f"/{media_type}/{tmdb_id}/external_ids", TmdbExternalIdsResponse
        )
        if not result.ok:
            return ProviderResult.failure(result.error or "TMDB external ids failed.")
        imdb_id = result.value.imdb_id
        if not imdb_id:
            return ProviderResult.failure("No IMDb id for this title.")
        return ProviderResult.success(imdb_id)

    async def get_watch_providers(
        self, tmdb_id: int, media_type: str = "movie", region: str = DEFAULT_WATCH_REGION
    ) -> ProviderResult[WatchProviders]:
        """Offres de streaming d'un titre pour un pays (/{media_type}/{id}/watch/providers)."""
        result = await self._fetch(
            f"/{media_type}/{tmdb_id}/watch/providers", TmdbWatchProvidersResponse
        )
        if not result.ok:
            return ProviderResult.failure(result.error or "TMDB watch providers failed.")
        return ProviderResult.success(map_watch_providers(result.value, region))

    async def get_trending(self) -> ProviderResult[list[TitleRecord]]:
        """Tendances du jour (/trending/all/day), personnes exclues, ordre conserve."""
        result = await self._fetch("/trending/all/day", TmdbSearchResponse)
        if not result.ok:
            return ProviderResult.failure(result.error or "TMDB trending failed.")
        return ProviderResult.success(
            [
                map_search_item(item)
                for item in result.value.results
                if item.media_type != "person"
            ]
        )

    async def close(self) -> None:
        """Ferme le client HTTP."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

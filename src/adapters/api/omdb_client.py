"""
Client OMDb pour les notes, l'intrigue et le casting des titres.

Implemente l'interface IRatingsProvider pour OMDb (indexation par ID IMDb).
Chaque reponse est validee par un schema pydantic ; toute erreur (statut
HTTP, reseau, schema, champ Error d'OMDb) devient un ProviderResult en echec.

Usage:
    client = OMDbClient(api_key="your_key", cache=APICache())
    result = await client.get_details("tt1375666")
    if result.ok:
        print(result.value.rating)
    await client.close()
"""

from typing import Any, Optional

import httpx
from loguru import logger
from pydantic import ValidationError

from src.adapters.api.cache import APICache
from src.adapters.api.retry import RateLimitError, request_with_retry
from src.adapters.api.schemas import (
    OmdbDetailResponse,
    OmdbErrorResponse,
    OmdbSearchResponse,
)
from src.core.entities.title import DataSource, OmdbRating, TitleRecord, TitleType
from src.core.ports.api_clients import IRatingsProvider, ProviderResult, RatingsDetail
from src.utils.constants import OMDB_BASE_URL, OMDB_NOT_AVAILABLE
from src.utils.helpers import clean_title

_NO_KEY = "OMDb key is not configured."


def map_omdb_type(value: Optional[str]) -> TitleType:
    """Convertit le champ Type d'OMDb/TMDB en TitleType."""
    if not value:
        return TitleType.OTHER
    lowered = value.lower()
    if "movie" in lowered:
        return TitleType.MOVIE
    if "tv" in lowered or "series" in lowered:
        return TitleType.SERIES
    return TitleType.OTHER


def normalize_omdb_value(value: Optional[str]) -> Optional[str]:
    """Normalise "N/A" et les chaines vides en None."""
    if value is None:
        return None
    if not value.strip() or value.strip().lower() == OMDB_NOT_AVAILABLE:
        return None
    return value


def parse_omdb_votes(value: Optional[str]) -> Optional[int]:
    """Convertit "2,345,678" en 2345678 (None si illisible)."""
    cleaned = normalize_omdb_value(value)
    if cleaned is None:
        return None
    try:
        return int(cleaned.replace(",", ""))
    except ValueError:
        return None


def map_omdb_detail(
    data: OmdbDetailResponse, fallback_imdb_id: Optional[str] = None
) -> RatingsDetail:
    """Transforme une reponse de detail OMDb validee en RatingsDetail."""
    genre = normalize_omdb_value(data.genre)
    genres = [g.strip() for g in genre.split(",") if g.strip()] if genre else None
    ratings = data.ratings or []

    def _rating_for(source: str) -> Optional[str]:
        for rating in ratings:
            if rating.source == source:
                return normalize_omdb_value(rating.value)
        return None

    return RatingsDetail(
        imdb_id=normalize_omdb_value(data.imdb_id) or fallback_imdb_id,
        title=clean_title(data.title),
        year=normalize_omdb_value(data.year),
        type=map_omdb_type(data.type),
        runtime=normalize_omdb_value(data.runtime),
        rating=normalize_omdb_value(data.imdb_rating),
        votes=parse_omdb_votes(data.imdb_votes),
        genres=genres or None,
        plot=normalize_omdb_value(data.plot),
        cast=normalize_omdb_value(data.actors),
        director=normalize_omdb_value(data.director),
        country=normalize_omdb_value(data.country),
        language=normalize_omdb_value(data.language),
        rotten_tomatoes_score=_rating_for("Rotten Tomatoes"),
        metacritic_score=_rating_for("Metacritic"),
        omdb_ratings=[OmdbRating(source=r.source, value=r.value) for r in ratings] or None,
        poster_url=normalize_omdb_value(data.poster),
    )


class OMDbClient(IRatingsProvider):
    """
    Client API OMDb.

    Implemente IRatingsProvider avec:
    - Validation de cle (recherche par titre "Inception")
    - Recherche plein texte (cache disque 24h)
    - Detail par ID IMDb et par titre (+ annee, + type)
    - Retry automatique sur rate limiting (429)

    La cle API peut changer en cours d'execution (set_api_key) : elle est
    passee a chaque requete plutot qu'a la creation du client HTTP.
    """

    def __init__(
        self,
        api_key: Optional[str],
        cache: Optional[APICache] = None,
        timeout: float = 15.0,
    ) -> None:
        """
        Initialise le client OMDb.

        Args:
            api_key: Cle API OMDb (None si non configuree)
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
                base_url=OMDB_BASE_URL,
                headers={"Accept": "application/json"},
                timeout=self._timeout,
            )
        return self._client

    @property
    def source(self) -> str:
        return "omdb"

    def set_api_key(self, api_key: Optional[str]) -> None:
        self._api_key = api_key

    async def _get_json(self, params: dict[str, str], api_key: Optional[str] = None) -> Any:
        """
        Execute une requete OMDb et retourne le JSON brut.

        Raises:
            httpx.HTTPError, RateLimitError, ValueError (JSON illisible)
        """
        query = {"apikey": api_key or self._api_key or "", **params}
        response = await request_with_retry(self._get_client(), "GET", "/", params=query)
        return response.json()

    @staticmethod
    def _error_message(exc: Exception) -> str:
        """Extrait le champ Error d'une reponse OMDb en erreur, sinon le message brut."""
        if isinstance(exc, httpx.HTTPStatusError):
            try:
                body = OmdbErrorResponse.model_validate(exc.response.json())
                if body.error:
                    return body.error
            except (ValueError, ValidationError):
                pass
            return f"OMDb error: {exc.response.status_code}"
        return str(exc) or exc.__class__.__name__

    async def validate_key(self, api_key: str) -> ProviderResult[bool]:
        """Valide une cle par une recherche de titre connue."""
        try:
            data = await self._get_json({"t": "Inception"}, api_key=api_key)
        except (httpx.HTTPError, RateLimitError, ValueError) as exc:
            return ProviderResult.failure(self._error_message(exc))

        try:
            error = OmdbErrorResponse.model_validate(data).error
            if error:
                return ProviderResult.failure(error)
            OmdbDetailResponse.model_validate(data)
        except ValidationError:
            return ProviderResult.failure("Unexpected OMDb response.")
        return ProviderResult.success(True)

    async def search(self, query: str) -> ProviderResult[list[TitleRecord]]:
        """
        Recherche plein texte (parametre s=).

        Utilise le pattern cache-first sur le cache disque.
        """
        if not self._api_key:
            return ProviderResult.failure(_NO_KEY)

        cache_key = APICache.search_key(self.source, query)
        if self._cache is not None:
            cached = await self._cache.get(cache_key)
            if cached is not None:
                return ProviderResult.success(cached)

        try:
            data = OmdbSearchResponse.model_validate(await self._get_json({"s": query}))
            if data.response == "False" and data.error and "not found" not in data.error.lower():
                logger.warning("Recherche OMDb refusee", query=query, error=data.error)
                return ProviderResult.failure(data.error)
        except (httpx.HTTPError, RateLimitError, ValueError, ValidationError) as exc:
            logger.warning("Recherche OMDb en echec", query=query, error=self._error_message(exc))
            return ProviderResult.failure(self._error_message(exc))

        if not data.search:
            # "Movie not found!" est une reponse valide sans resultat
            return ProviderResult.success([])

        results = [
            TitleRecord(
                id=item.imdb_id,
                imdb_id=item.imdb_id,
                title=clean_title(item.title),
                year=normalize_omdb_value(item.year),
                type=map_omdb_type(item.type),
                poster_url=normalize_omdb_value(item.poster),
                source=DataSource.OMDB,
            )
            for item in data.search
        ]
        if self._cache is not None:
            await self._cache.set_search(cache_key, results)
        return ProviderResult.success(results)

    async def _fetch_detail(
        self, params: dict[str, str], fallback_imdb_id: Optional[str] = None
    ) -> ProviderResult[RatingsDetail]:
        if not self._api_key:
            return ProviderResult.failure(_NO_KEY)
        try:
            payload = await self._get_json({**params, "plot": "full"})
            error = OmdbErrorResponse.model_validate(payload).error
            if error:
                logger.debug("Detail OMDb introuvable", params=params, error=error)
                return ProviderResult.failure(error)
            data = OmdbDetailResponse.model_validate(payload)
        except (httpx.HTTPError, RateLimitError, ValueError, ValidationError) as exc:
            logger.warning("Detail OMDb en echec", params=params, error=self._error_message(exc))
            return ProviderResult.failure(self._error_message(exc))

        return ProviderResult.success(map_omdb_detail(data, fallback_imdb_id))

    async def get_details(self, imdb_id: str) -> ProviderResult[RatingsDetail]:
        """Detail par ID IMDb (parametre i=)."""
        return await self._fetch_detail({"i": imdb_id}, fallback_imdb_id=imdb_id)

    async def get_details_by_title(
        self,
        title: str,
        year: Optional[str] = None,
        title_type: Optional[TitleType] = None,
    ) -> ProviderResult[RatingsDetail]:
        """Detail par titre (t=), avec annee (y=) et type (type=) si connus."""
        params = {"t": title}
        if year:
            params["y"] = str(year)
        if title_type in (TitleType.MOVIE, TitleType.SERIES):
            params["type"] = title_type.value
        return await self._fetch_detail(params)

    async def close(self) -> None:
        """Ferme le client HTTP."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

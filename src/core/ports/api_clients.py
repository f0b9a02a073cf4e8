"""
Interfaces ports pour les clients API.

Interfaces abstraites (ports) définissant les contrats pour les deux
fournisseurs de métadonnées externes :
- fournisseur de notes (OMDb, identifiants IMDb natifs)
- fournisseur de catalogue (TMDB, identifiants numériques, tendances)

Chaque appel retourne un ProviderResult : succès avec une valeur, ou échec
avec un message. Un client ne lève jamais d'exception pour un fournisseur
indisponible, une réponse non valide ou une erreur réseau.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from src.core.entities.title import (
    DEFAULT_WATCH_REGION,
    OmdbRating,
    TitleRecord,
    TitleType,
    WatchProviders,
)

T = TypeVar("T")


@dataclass(frozen=True)
class ProviderResult(Generic[T]):
    """
    Résultat étiqueté d'un appel fournisseur.

    Attributs :
        value : Valeur validée (None en cas d'échec)
        error : Message d'échec (None en cas de succès)
    """

    value: Optional[T] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.value is not None

    @classmethod
    def success(cls, value: T) -> "ProviderResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: str) -> "ProviderResult[T]":
        return cls(error=error)


@dataclass
class RatingsDetail:
    """
    Détail d'un titre depuis le fournisseur de notes (OMDb).

    Les valeurs "N/A" de l'API sont normalisées en None.

    Attributs :
        imdb_id : ID IMDb du titre
        title : Titre
        year : Année (texte, peut être un intervalle pour les séries)
        type : Type de titre
        runtime : Durée en texte ("148 min")
        rating : Note IMDb (texte, 0-10)
        votes : Nombre de votes IMDb
        genres : Genres dans l'ordre de l'API
        rotten_tomatoes_score : Score Rotten Tomatoes ("87%")
        metacritic_score : Score Metacritic ("74/100")
        omdb_ratings : Tableau brut des notes
    """

    title: str
    imdb_id: Optional[str] = None
    year: Optional[str] = None
    type: TitleType = TitleType.OTHER
    runtime: Optional[str] = None
    rating: Optional[str] = None
    votes: Optional[int] = None
    genres: Optional[list[str]] = None
    plot: Optional[str] = None
    cast: Optional[str] = None
    director: Optional[str] = None
    country: Optional[str] = None
    language: Optional[str] = None
    rotten_tomatoes_score: Optional[str] = None
    metacritic_score: Optional[str] = None
    omdb_ratings: Optional[list[OmdbRating]] = None
    poster_url: Optional[str] = None


@dataclass
class CatalogDetail:
    """
    Détail d'un titre depuis le fournisseur de catalogue (TMDB).

    Attributs :
        tmdb_id : ID numérique TMDB
        title : Titre (title pour un film, name pour une série)
        year : Année extraite de release_date / first_air_date
        runtime : Durée en texte ("148 min")
        genres : Noms des genres
        plot : Résumé (overview)
        poster_url : URL complète du poster
        backdrop_url : URL complète de l'image de fond
        country : Pays de production, joints par ", "
        language : Langues parlées, jointes par ", "
        popularity : Indice de popularité TMDB
    """

    tmdb_id: int
    title: str = ""
    year: Optional[str] = None
    runtime: Optional[str] = None
    genres: Optional[list[str]] = None
    plot: Optional[str] = None
    poster_url: Optional[str] = None
    backdrop_url: Optional[str] = None
    country: Optional[str] = None
    language: Optional[str] = None
    popularity: Optional[float] = None


class IRatingsProvider(ABC):
    """
    Interface du fournisseur de notes (OMDb).

    Fournit les notes, l'intrigue et le casting, indexés par ID IMDb.
    """

    @abstractmethod
    def set_api_key(self, api_key: Optional[str]) -> None:
        """Remplace la clé utilisée pour les appels suivants."""
        ...

    @abstractmethod
    async def validate_key(self, api_key: str) -> ProviderResult[bool]:
        """Vérifie qu'une clé API est acceptée par le fournisseur."""
        ...

    @abstractmethod
    async def search(self, query: str) -> ProviderResult[list[TitleRecord]]:
        """Recherche plein texte, retourne des enregistrements légers."""
        ...

    @abstractmethod
    async def get_details(self, imdb_id: str) -> ProviderResult[RatingsDetail]:
        """Récupère le détail d'un titre par son ID IMDb."""
        ...

    @abstractmethod
    async def get_details_by_title(
        self,
        title: str,
        year: Optional[str] = None,
        title_type: Optional[TitleType] = None,
    ) -> ProviderResult[RatingsDetail]:
        """Récupère le détail d'un titre par titre (+ année, + type)."""
        ...


class ICatalogProvider(ABC):
    """
    Interface du fournisseur de catalogue (TMDB).

    Fournit la recherche, les tendances, les images, la résolution
    d'ID IMDb à partir d'un ID numérique et les offres de streaming.
    """

    @abstractmethod
    def set_api_key(self, api_key: Optional[str]) -> None:
        """Remplace la clé utilisée pour les appels suivants."""
        ...

    @abstractmethod
    async def validate_key(self, api_key: str) -> ProviderResult[bool]:
        """Vérifie qu'une clé API est acceptée par le fournisseur."""
        ...

    @abstractmethod
    async def search(self, query: str) -> ProviderResult[list[TitleRecord]]:
        """Recherche multi (films et séries), enregistrements légers."""
        ...

    @abstractmethod
    async def get_details(
        self, tmdb_id: int, media_type: str = "movie"
    ) -> ProviderResult[CatalogDetail]:
        """Récupère le détail d'un titre (media_type: "movie" ou "tv")."""
        ...

    @abstractmethod
    async def get_imdb_id(
        self, tmdb_id: int, media_type: str = "movie"
    ) -> ProviderResult[str]:
        """Résout l'ID IMDb d'un titre via ses IDs externes."""
        ...

    @abstractmethod
    async def get_watch_providers(
        self, tmdb_id: int, media_type: str = "movie", region: str = DEFAULT_WATCH_REGION
    ) -> ProviderResult[WatchProviders]:
        """Récupère les offres de streaming d'un titre pour un pays."""
        ...

    @abstractmethod
    async def get_trending(self) -> ProviderResult[list[TitleRecord]]:
        """Liste des tendances du jour, dans l'ordre du fournisseur."""
        ...

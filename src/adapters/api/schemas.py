"""
Schemas pydantic des reponses OMDb et TMDB.

Chaque reponse est validee avant d'etre transformee : une reponse qui ne
respecte pas le schema est traitee exactement comme une erreur reseau
(le fournisseur n'a pas repondu avec succes).

Les champs inconnus sont ignores ; seuls les champs utilises sont declares.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class _OmdbModel(BaseModel):
    """Base des schemas OMDb (champs en PascalCase cote API)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class OmdbSearchItem(_OmdbModel):
    title: str = Field(alias="Title")
    year: str = Field(alias="Year")
    imdb_id: str = Field(alias="imdbID")
    type: str = Field(alias="Type")
    poster: Optional[str] = Field(default=None, alias="Poster")


class OmdbSearchResponse(_OmdbModel):
    search: Optional[list[OmdbSearchItem]] = Field(default=None, alias="Search")
    response: str = Field(alias="Response")
    error: Optional[str] = Field(default=None, alias="Error")


class OmdbRatingItem(_OmdbModel):
    source: str = Field(alias="Source")
    value: str = Field(alias="Value")


class OmdbDetailResponse(_OmdbModel):
    title: str = Field(alias="Title")
    year: Optional[str] = Field(default=None, alias="Year")
    imdb_id: Optional[str] = Field(default=None, alias="imdbID")
    type: Optional[str] = Field(default=None, alias="Type")
    runtime: Optional[str] = Field(default=None, alias="Runtime")
    imdb_rating: Optional[str] = Field(default=None, alias="imdbRating")
    imdb_votes: Optional[str] = Field(default=None, alias="imdbVotes")
    genre: Optional[str] = Field(default=None, alias="Genre")
    plot: Optional[str] = Field(default=None, alias="Plot")
    actors: Optional[str] = Field(default=None, alias="Actors")
    director: Optional[str] = Field(default=None, alias="Director")
    country: Optional[str] = Field(default=None, alias="Country")
    language: Optional[str] = Field(default=None, alias="Language")
    poster: Optional[str] = Field(default=None, alias="Poster")
    ratings: Optional[list[OmdbRatingItem]] = Field(default=None, alias="Ratings")
    response: Optional[str] = Field(default=None, alias="Response")
    error: Optional[str] = Field(default=None, alias="Error")


class OmdbErrorResponse(_OmdbModel):
    """Reponse d'erreur OMDb ({"Response": "False", "Error": "..."})."""

    response: Optional[str] = Field(default=None, alias="Response")
    error: Optional[str] = Field(default=None, alias="Error")


class TmdbSearchItem(BaseModel):
    id: int
    title: Optional[str] = None
    name: Optional[str] = None
    media_type: Optional[str] = None
    release_date: Optional[str] = None
    first_air_date: Optional[str] = None
    poster_path: Optional[str] = None
    popularity: Optional[float] = None


class TmdbSearchResponse(BaseModel):
    results: list[TmdbSearchItem]


class TmdbGenre(BaseModel):
    name: str


class TmdbCountry(BaseModel):
    iso_3166_1: str
    name: str


class TmdbSpokenLanguage(BaseModel):
    iso_639_1: str
    name: str


class TmdbDetailResponse(BaseModel):
    id: int
    title: Optional[str] = None
    name: Optional[str] = None
    overview: Optional[str] = None
    runtime: Optional[int] = None
    genres: Optional[list[TmdbGenre]] = None
    poster_path: Optional[str] = None
    backdrop_path: Optional[str] = None
    production_countries: Optional[list[TmdbCountry]] = None
    spoken_languages: Optional[list[TmdbSpokenLanguage]] = None
    popularity: Optional[float] = None
    release_date: Optional[str] = None
    first_air_date: Optional[str] = None


class TmdbExternalIdsResponse(BaseModel):
    imdb_id: Optional[str] = None


class TmdbWatchProvider(BaseModel):
    provider_id: int
    provider_name: str
    logo_path: Optional[str] = None
    display_priority: Optional[int] = None


class TmdbRegionWatchProviders(BaseModel):
    link: Optional[str] = None
    flatrate: Optional[list[TmdbWatchProvider]] = None
    rent: Optional[list[TmdbWatchProvider]] = None
    buy: Optional[list[TmdbWatchProvider]] = None


class TmdbWatchProvidersResponse(BaseModel):
    """Offres par pays ({"results": {"GB": {...}, "FR": {...}}})."""

    id: int
    results: dict[str, TmdbRegionWatchProviders] = {}

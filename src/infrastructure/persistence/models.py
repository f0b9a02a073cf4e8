"""
Modeles SQLModel pour la base de donnees du cache local.

Ces modeles representent les tables de la base de donnees SQLite.
Ils sont distincts des entites de domaine (dataclass dans core/entities/)
selon l'architecture hexagonale.

Tables:
- titles: Enregistrements canoniques des titres
- trending_seed: Tendances du jour (remplacees en bloc)
- settings: Reglages cle/valeur
- recent_searches: Dernieres recherches (10 max)

Les champs JSON (*_json) permettent de stocker des listes (genres, notes OMDb,
offres de streaming)
de maniere serialisee dans SQLite. Les horodatages sont en secondes epoch.
"""

from __future__ import annotations

import json
from typing import Optional

from sqlmodel import Field, SQLModel


class TitleModel(SQLModel, table=True):
    """
    Modele representant un titre dans le cache.

    La cle primaire est l'ID canonique (ID IMDb ou "tmdb:<n>").
    """

    __tablename__ = "titles"

    id: str = Field(primary_key=True)
    imdb_id: str | None = Field(default=None, index=True)
    tmdb_id: int | None = Field(default=None, index=True)
    title: str = Field(default="", index=True)
    year: str | None = None
    type: str = Field(default="other")
    runtime: str | None = None
    rating: str | None = None  # Note IMDb (0-10)
    votes: int | None = None  # Nombre de votes IMDb
    poster_url: str | None = None
    backdrop_url: str | None = None
    genres_json: str | None = None  # JSON: ["Action", "Sci-Fi"]
    plot: str | None = None
    cast: str | None = None  # Noms joints par des virgules
    director: str | None = None
    country: str | None = None
    language: str | None = None
    rotten_tomatoes_score: str | None = None
    metacritic_score: str | None = None
    omdb_ratings_json: str | None = None  # JSON: [{"source": ..., "value": ...}]
    watch_providers_json: str | None = None  # JSON: {"region": "GB", "flatrate": [...], ...}
    popularity: float | None = None
    source: str | None = None
    tmdb_rank: int | None = None
    tmdb_trending_at: int | None = None
    fallback_label: str | None = None
    created_at: int | None = None
    updated_at: int | None = None
    expires_at: int | None = None

    @property
    def genres(self) -> list[str]:
        """Retourne les genres deserialises."""
        if self.genres_json:
            return json.loads(self.genres_json)
        return []


class TrendingSeedModel(SQLModel, table=True):
    """Modele d'une tendance (projection legere d'un titre)."""

    __tablename__ = "trending_seed"

    id: str = Field(primary_key=True)
    title: str
    year: str | None = None
    type: str = Field(default="movie")
    poster_url: str | None = None
    tmdb_rank: int | None = Field(default=None, index=True)
    popularity: float | None = None
    created_at: int | None = None
    updated_at: int | None = None


class SettingModel(SQLModel, table=True):
    """Reglage cle/valeur (texte)."""

    __tablename__ = "settings"

    key: str = Field(primary_key=True)
    value: str
    created_at: int | None = None
    updated_at: int | None = None


class RecentSearchModel(SQLModel, table=True):
    """Recherche recente."""

    __tablename__ = "recent_searches"

    id: Optional[int] = Field(default=None, primary_key=True)
    query: str = Field(index=True)
    created_at: int = Field(default=0, index=True)
    updated_at: int | None = None

"""
Title metadata entities.

Entities representing the canonical cached record of a film/series and the
lightweight projections derived from it (trending seeds, suggestions).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class TitleType(str, Enum):
    """Type of a title as shown in the launcher."""

    MOVIE = "movie"
    SERIES = "series"
    DOCUMENTARY = "documentary"
    OTHER = "other"


class DataSource(str, Enum):
    """Provenance of the last successful write of a record."""

    OMDB = "omdb"
    TMDB = "tmdb"
    CACHE = "cache"
    MIXED = "mixed"


FALLBACK_CACHED = "Cached data"
FALLBACK_STALE = "Stale cache"
FALLBACK_TMDB = "Fallback data (TMDB)"

TMDB_ID_PREFIX = "tmdb:"
DEFAULT_WATCH_REGION = "GB"


@dataclass(frozen=True)
class OmdbRating:
    """One entry of the raw OMDb ratings array (e.g. Rotten Tomatoes / 85%)."""

    source: str
    value: str


@dataclass
class WatchProviders:
    """
    Streaming availability of a title in one region (TMDB / JustWatch).

    Attributes:
        region: ISO 3166-1 country code the offers apply to
        link: TMDB page listing the offers
        flatrate: Subscription services, in display order
        rent: Rental services
        buy: Purchase services
    """

    region: str
    link: Optional[str] = None
    flatrate: list[str] = field(default_factory=list)
    rent: list[str] = field(default_factory=list)
    buy: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.flatrate or self.rent or self.buy)


@dataclass
class TitleRecord:
    """
    Canonical cached record for one film, series or documentary.

    The id prefers an IMDb id (ttXXXXXXX) and falls back to a synthetic
    "tmdb:<n>" id while the title is only known through TMDB.

    Attributes:
        id: Canonical key
        imdb_id: IMDb id, when resolved
        tmdb_id: TMDB numeric id, when known
        title: Display title
        year: Release year as free text (may be a range like "2008-2013")
        type: Title type
        runtime: Free-text duration ("148 min")
        rating: IMDb rating on a 0-10 scale, as text
        votes: IMDb vote count
        omdb_ratings: Raw OMDb ratings array, kept for re-derivation
        watch_providers: Streaming offers for the configured region
        popularity: TMDB popularity signal
        source: Provenance of the last successful write
        tmdb_rank: 1-based position in the last trending list
        tmdb_trending_at: Epoch seconds of the last trending refresh
        last_updated_at: Epoch seconds of the last write
        expires_at: Epoch seconds after which the record is stale
        fallback_label: Provenance hint for the UI
    """

    id: str
    title: str = ""
    imdb_id: Optional[str] = None
    tmdb_id: Optional[int] = None
    year: Optional[str] = None
    type: TitleType = TitleType.OTHER
    runtime: Optional[str] = None
    genres: Optional[list[str]] = None
    plot: Optional[str] = None
    cast: Optional[str] = None
    director: Optional[str] = None
    country: Optional[str] = None
    language: Optional[str] = None
    rating: Optional[str] = None
    votes: Optional[int] = None
    rotten_tomatoes_score: Optional[str] = None
    metacritic_score: Optional[str] = None
    omdb_ratings: Optional[list[OmdbRating]] = None
    watch_providers: Optional[WatchProviders] = None
    poster_url: Optional[str] = None
    backdrop_url: Optional[str] = None
    popularity: Optional[float] = None
    source: Optional[DataSource] = None
    tmdb_rank: Optional[int] = None
    tmdb_trending_at: Optional[int] = None
    last_updated_at: Optional[int] = None
    expires_at: Optional[int] = None
    fallback_label: Optional[str] = None

    @property
    def is_synthetic(self) -> bool:
        """True while the record is keyed by a synthetic TMDB id."""
        return self.id.startswith(TMDB_ID_PREFIX)

    def is_expired(self, now: int) -> bool:
        """True when the TTL has passed. Expired records stay usable."""
        return self.expires_at is not None and self.expires_at < now


@dataclass
class TrendingSeed:
    """
    Lightweight projection used by the trending panel.

    Always derived from records fetched from the TMDB trending endpoint and
    replaced wholesale on each refresh.
    """

    id: str
    title: str
    type: TitleType = TitleType.MOVIE
    year: Optional[str] = None
    poster_url: Optional[str] = None
    tmdb_rank: Optional[int] = None
    popularity: Optional[float] = None

    @classmethod
    def from_record(cls, record: TitleRecord) -> "TrendingSeed":
        return cls(
            id=record.id,
            title=record.title,
            type=record.type,
            year=record.year,
            poster_url=record.poster_url,
            tmdb_rank=record.tmdb_rank,
            popularity=record.popularity,
        )


@dataclass(frozen=True)
class Suggestion:
    """Read-only projection of a title for list rendering."""

    id: str
    title: str
    type: TitleType
    year: Optional[str] = None
    runtime: Optional[str] = None
    rating: Optional[str] = None
    poster_url: Optional[str] = None
    popularity: Optional[float] = None
    votes: Optional[int] = None
    tmdb_rank: Optional[int] = None

    @classmethod
    def from_record(cls, record: TitleRecord) -> "Suggestion":
        return cls(
            id=record.id,
            title=record.title,
            type=record.type,
            year=record.year,
            runtime=record.runtime,
            rating=record.rating,
            poster_url=record.poster_url,
            popularity=record.popularity,
            votes=record.votes,
            tmdb_rank=record.tmdb_rank,
        )

    @classmethod
    def from_seed(cls, seed: TrendingSeed) -> "Suggestion":
        return cls(
            id=seed.id,
            title=seed.title,
            type=seed.type,
            year=seed.year,
            poster_url=seed.poster_url,
            popularity=seed.popularity,
            tmdb_rank=seed.tmdb_rank,
        )


@dataclass
class ApiKeys:
    """API keys of both providers (None when not configured)."""

    omdb_key: Optional[str] = None
    tmdb_key: Optional[str] = None

    @property
    def complete(self) -> bool:
        return bool(self.omdb_key) and bool(self.tmdb_key)


@dataclass
class KeyValidationResult:
    """Per-provider key validation messages (None = valid)."""

    omdb_error: Optional[str] = None
    tmdb_error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.omdb_error is None and self.tmdb_error is None


def media_type_for(title_type: TitleType) -> str:
    """TMDB media type ("movie" or "tv") of a title type."""
    return "tv" if title_type == TitleType.SERIES else "movie"

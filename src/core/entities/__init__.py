"""
Business entities representing core domain concepts.

Entities are mutable objects with identity that persist over time.

Exports:
- TitleRecord: Canonical cached record of a title
- TrendingSeed: Lightweight trending projection
- Suggestion: Read-only list projection
- TitleType / DataSource: Enumerations of type and provenance
- OmdbRating: Raw OMDb rating entry
- ApiKeys / KeyValidationResult: Provider keys and their validation status
"""

from src.core.entities.title import (
    FALLBACK_CACHED,
    FALLBACK_STALE,
    FALLBACK_TMDB,
    TMDB_ID_PREFIX,
    ApiKeys,
    DataSource,
    KeyValidationResult,
    OmdbRating,
    Suggestion,
    TitleRecord,
    TitleType,
    TrendingSeed,
)

__all__ = [
    "FALLBACK_CACHED",
    "FALLBACK_STALE",
    "FALLBACK_TMDB",
    "TMDB_ID_PREFIX",
    "ApiKeys",
    "DataSource",
    "KeyValidationResult",
    "OmdbRating",
    "Suggestion",
    "TitleRecord",
    "TitleType",
    "TrendingSeed",
]

"""
Clients API externes pour l'enrichissement des metadonnees.

Ce module fournit les adaptateurs pour communiquer avec les API externes:
- OMDb: notes, intrigue et casting (indexation par ID IMDb)
- TMDB: catalogue, tendances, images et resolution d'ID IMDb

Infrastructure partagee:
- APICache: Cache persistant des recherches (24h)
- RateLimitError: Exception pour les erreurs 429
- with_retry: Decorateur avec backoff exponentiel pour gerer le rate limiting

Les clients implementent IRatingsProvider et ICatalogProvider definis
dans core/ports/api_clients.py.
"""

from src.adapters.api.cache import APICache
from src.adapters.api.omdb_client import OMDbClient
from src.adapters.api.retry import RateLimitError, request_with_retry, with_retry
from src.adapters.api.tmdb_client import TMDBClient

__all__ = [
    "APICache",
    "OMDbClient",
    "TMDBClient",
    "RateLimitError",
    "with_retry",
    "request_with_retry",
]

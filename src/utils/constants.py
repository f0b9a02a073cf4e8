"""
Constantes globales pour Mediapedia.

Ce module contient les constantes utilisees dans l'application:
- URLs de base des fournisseurs
- Cles des reglages persistes
- Messages d'erreur presentes a l'utilisateur
"""

# URLs des fournisseurs
OMDB_BASE_URL = "https://www.omdbapi.com"
TMDB_BASE_URL = "https://api.themoviedb.org/3"
TMDB_IMAGE_BASE_URL = "https://image.tmdb.org/t/p/w500"

# Valeur "absente" renvoyee par OMDb
OMDB_NOT_AVAILABLE = "n/a"

# Cles des reglages (table settings)
SETTING_LAST_TRENDING_REFRESH = "last_trending_refresh"
SETTING_SHOW_TRENDING = "show_trending"
SETTING_METADATA_LINK_TARGET = "metadata_link_target"
SETTING_OMDB_KEY = "omdb_key"
SETTING_TMDB_KEY = "tmdb_key"
SETTING_WATCH_REGION = "watch_region"

# Cibles des liens de metadonnees
LINK_TARGETS = ("imdb", "rotten", "metacritic")

# Recherches recentes conservees
RECENT_SEARCHES_LIMIT = 10

# Messages utilisateur
ERROR_DETAILS_UNAVAILABLE = "Unable to load details."
ERROR_OMDB_KEY_REQUIRED = "OMDb key is required."
ERROR_TMDB_KEY_REQUIRED = "TMDB key is required."
ERROR_OMDB_KEY_INVALID = "OMDb key validation failed."
ERROR_TMDB_KEY_INVALID = "TMDB key validation failed."

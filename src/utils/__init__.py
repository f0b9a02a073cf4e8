"""
Utilitaires et constantes pour Mediapedia.

Ce module contient les constantes et fonctions utilitaires partagees.
"""

from src.utils.constants import (
    OMDB_BASE_URL,
    TMDB_BASE_URL,
    TMDB_IMAGE_BASE_URL,
)

__all__ = [
    "OMDB_BASE_URL",
    "TMDB_BASE_URL",
    "TMDB_IMAGE_BASE_URL",
]

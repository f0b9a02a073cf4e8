"""
Interface port pour le stockage des clés API.

Le stockage sécurisé (trousseau du système) est un collaborateur externe ;
ce port décrit uniquement le contrat attendu par le coeur.
"""

from abc import ABC, abstractmethod
from typing import Optional

from src.core.entities.title import ApiKeys


class IKeyStore(ABC):
    """Stockage des clés API des deux fournisseurs."""

    @abstractmethod
    def get_keys(self) -> ApiKeys:
        """Retourne les clés connues (None si absentes)."""
        ...

    @abstractmethod
    def set_keys(self, omdb_key: Optional[str], tmdb_key: Optional[str]) -> None:
        """Enregistre les clés des deux fournisseurs."""
        ...

    @abstractmethod
    def reset_keys(self) -> None:
        """Efface les clés enregistrées."""
        ...

"""
Interfaces ports pour les repositories.

Interfaces abstraites (ports) définissant les contrats du cache local :
enregistrements de titres, tendances, réglages et recherches récentes.
Les implémentations (adaptateurs) fournissent le stockage concret
(SQLite via SQLModel).
"""

from abc import ABC, abstractmethod
from typing import Optional

from src.core.entities.title import TitleRecord, TrendingSeed


class ITitleRepository(ABC):
    """
    Interface de stockage des enregistrements de titres.

    Le cache est l'unique propriétaire des TitleRecord persistés.
    """

    @abstractmethod
    def get(self, title_id: str) -> Optional[TitleRecord]:
        """Récupère un titre par son ID canonique."""
        ...

    @abstractmethod
    def get_by_tmdb_id(self, tmdb_id: int) -> Optional[TitleRecord]:
        """Récupère un titre par son ID TMDB."""
        ...

    @abstractmethod
    def list_all(self) -> list[TitleRecord]:
        """Liste tous les titres du cache."""
        ...

    @abstractmethod
    def upsert(self, record: TitleRecord) -> TitleRecord:
        """Insère ou remplace un titre (clé : ID canonique)."""
        ...

    @abstractmethod
    def delete(self, title_id: str) -> bool:
        """Supprime un titre. Retourne True si supprimé."""
        ...


class ITrendingRepository(ABC):
    """Interface de stockage des tendances (remplacement complet)."""

    @abstractmethod
    def replace_all(self, seeds: list[TrendingSeed]) -> None:
        """Remplace toute la table des tendances."""
        ...

    @abstractmethod
    def list_all(self) -> list[TrendingSeed]:
        """Liste les tendances triées par rang croissant."""
        ...


class ISettingsRepository(ABC):
    """Interface de stockage des réglages (clé/valeur texte)."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Retourne la valeur d'un réglage, ou None."""
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Enregistre la valeur d'un réglage."""
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        """Supprime un réglage s'il existe."""
        ...


class IRecentSearchRepository(ABC):
    """Interface de stockage des recherches récentes (10 max, plus récente en tête)."""

    @abstractmethod
    def add(self, query: str) -> None:
        """Ajoute une recherche, dédupliquée par chaîne exacte."""
        ...

    @abstractmethod
    def list_recent(self, limit: int = 10) -> list[str]:
        """Liste les recherches, la plus récente en tête."""
        ...

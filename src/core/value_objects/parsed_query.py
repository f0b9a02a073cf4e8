"""
Objets valeur pour la requete de recherche parsee.

Objets valeur immutables representant le resultat du parsing d'une saisie
utilisateur : texte libre et filtres extraits des operateurs (type:, year:,
country:, lang:). Recalcules a chaque frappe, jamais persistes.
"""

from dataclasses import dataclass, field
from typing import Optional

from src.core.entities.title import TitleType


@dataclass(frozen=True)
class YearRange:
    """Intervalle d'annees inclusif (year:2010-2020)."""

    start: int
    end: int

    def contains(self, year: int) -> bool:
        return self.start <= year <= self.end


@dataclass(frozen=True)
class SearchFilters:
    """
    Filtres extraits des operateurs de la requete.

    Seules les cles reconnues sont renseignees, les autres restent a None.

    Attributs:
        type: Type de titre (movie, series, documentary)
        year_exact: Annee exacte (year:2010)
        year_range: Intervalle d'annees (year:2010-2020)
        country: Pays, en minuscules (country:uk)
        lang: Langue, en minuscules (lang:fr)
    """

    type: Optional[TitleType] = None
    year_exact: Optional[int] = None
    year_range: Optional[YearRange] = None
    country: Optional[str] = None
    lang: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return (
            self.type is None
            and self.year_exact is None
            and self.year_range is None
            and self.country is None
            and self.lang is None
        )


@dataclass(frozen=True)
class ParsedQuery:
    """
    Requete de recherche parsee.

    Attributs:
        free_text: Tokens non reconnus comme operateurs, joints par des espaces
        filters: Filtres reconnus
    """

    free_text: str = ""
    filters: SearchFilters = field(default_factory=SearchFilters)

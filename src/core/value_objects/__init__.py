"""
Objets valeur immutables representant des concepts du domaine sans identite.

Les objets valeur sont definis par leurs attributs plutot que par une identite.
Ils sont immutables et peuvent etre librement partages et compares par valeur.

Exports :
- YearRange : Intervalle d'annees inclusif
- SearchFilters : Filtres extraits des operateurs de recherche
- ParsedQuery : Texte libre et filtres d'une saisie utilisateur
"""

from src.core.value_objects.parsed_query import (
    ParsedQuery,
    SearchFilters,
    YearRange,
)

__all__ = [
    "ParsedQuery",
    "SearchFilters",
    "YearRange",
]

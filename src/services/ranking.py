"""
Filtrage et classement des suggestions locales.

Score composite d'un candidat:
- correspondance textuelle: 3 (debut du titre), 2 (contenu), 1 (sinon ou requete vide)
- popularite / 100
- votes / 100000
- (50 - rang tendance) / 50 si le titre a un rang tendance

Le tri est stable : a score egal, l'ordre d'entree est conserve.
"""

from typing import Optional

from src.core.entities.title import Suggestion, TitleRecord, TitleType
from src.core.value_objects.parsed_query import ParsedQuery, SearchFilters
from src.services.search_index import SearchIndex
from src.utils.helpers import parse_int

DEFAULT_LIMIT = 5


def _matches_type(record: TitleRecord, wanted: TitleType) -> bool:
    if wanted != TitleType.DOCUMENTARY:
        return record.type == wanted
    # Un titre sans genre beneficie du doute
    if record.type == TitleType.DOCUMENTARY:
        return True
    genres = " ".join(record.genres or []).lower()
    return not genres or "documentary" in genres


def _contains(stored: Optional[str], wanted: str) -> bool:
    """Containment insensible a la casse ; un champ vide passe toujours."""
    if not stored:
        return True
    return wanted.lower() in stored.lower()


def matches_filters(record: TitleRecord, filters: SearchFilters) -> bool:
    """True si le titre satisfait tous les filtres fournis."""
    if filters.type is not None and not _matches_type(record, filters.type):
        return False
    if filters.year_exact is not None or filters.year_range is not None:
        year = parse_int(record.year)
        if filters.year_exact is not None and year != filters.year_exact:
            return False
        if filters.year_range is not None and (year is None or not filters.year_range.contains(year)):
            return False
    if filters.country is not None and not _contains(record.country, filters.country):
        return False
    if filters.lang is not None and not _contains(record.language, filters.lang):
        return False
    return True


def apply_filters(titles: list[TitleRecord], filters: SearchFilters) -> list[TitleRecord]:
    return [record for record in titles if matches_filters(record, filters)]


def match_score(title: str, query: str) -> int:
    lowered_query = query.lower()
    if not lowered_query:
        return 1
    lowered_title = (title or "").lower()
    if lowered_title.startswith(lowered_query):
        return 3
    if lowered_query in lowered_title:
        return 2
    return 1


def composite_score(record: TitleRecord, query: str) -> float:
    """Score composite d'un candidat (voir l'en-tete du module)."""
    score = match_score(record.title, query)
    score += (record.popularity or 0) / 100
    score += (record.votes or 0) / 100000
    if record.tmdb_rank:
        score += (50 - record.tmdb_rank) / 50
    return score


def rank(query: str, candidates: list[TitleRecord], limit: int = DEFAULT_LIMIT) -> list[Suggestion]:
    """Classe les candidats par score decroissant et tronque a limit."""
    ordered = sorted(candidates, key=lambda record: composite_score(record, query), reverse=True)
    return [Suggestion.from_record(record) for record in ordered[:limit]]


def search_titles(
    parsed: ParsedQuery,
    titles: list[TitleRecord],
    index: Optional[SearchIndex],
    limit: int = DEFAULT_LIMIT,
) -> list[Suggestion]:
    """
    Suggestions locales pour une requete parsee.

    Le texte libre restreint d'abord les candidats via l'index flou (etape
    ignoree si le texte est vide ou si l'index n'existe pas encore), puis
    les filtres s'appliquent, puis le classement.
    """
    candidates = titles
    if parsed.free_text and index is not None:
        candidates = index.search(parsed.free_text)
    filtered = apply_filters(candidates, parsed.filters)
    return rank(parsed.free_text, filtered, limit)

"""
Parsing de la saisie utilisateur en texte libre + filtres.

Operateurs reconnus (cle et valeur insensibles a la casse):
- type:movie | type:series | type:documentary
- year:2010 (annee exacte) | year:2010-2020 (intervalle inclusif), chaque
  nombre lu en tete de sa partie ("year:2010-" donne 2010)
- country:<valeur> | lang:<valeur>

Les guillemets regroupent plusieurs mots en un seul token (les guillemets
sont retires). Tout token non reconnu retourne dans le texte libre, dans
l'ordre d'origine. Le parsing ne leve jamais d'exception.
"""

from typing import Optional

from src.core.entities.title import TitleType
from src.core.value_objects.parsed_query import ParsedQuery, SearchFilters, YearRange
from src.utils.helpers import parse_leading_int

_TYPE_VALUES = {
    "movie": TitleType.MOVIE,
    "series": TitleType.SERIES,
    "documentary": TitleType.DOCUMENTARY,
}


def tokenize(raw: str) -> list[str]:
    """
    Decoupe une saisie sur les espaces en respectant les guillemets.

    Un guillemet ouvre ou ferme une zone dans laquelle les espaces ne
    separent plus les tokens. Un guillemet non ferme court jusqu'a la fin.
    """
    tokens: list[str] = []
    current: list[str] = []
    in_quotes = False
    for char in raw:
        if char == '"':
            in_quotes = not in_quotes
            continue
        if char.isspace() and not in_quotes:
            if current:
                tokens.append("".join(current))
                current = []
            continue
        current.append(char)
    if current:
        tokens.append("".join(current))
    return tokens


def _parse_year(value: str) -> tuple[Optional[int], Optional[YearRange]]:
    """
    Retourne (annee exacte, intervalle), les deux a None si illisible.

    Chaque nombre est lu en tete de sa partie, la suite est ignoree :
    "2010-" et "2010abc" donnent l'annee 2010, "2000-2005x" l'intervalle
    2000-2005. Un intervalle incomplet retombe sur l'annee exacte.
    """
    if "-" in value:
        start, _, end = value.partition("-")
        start_year, end_year = parse_leading_int(start), parse_leading_int(end)
        if start_year is not None and end_year is not None:
            return None, YearRange(start=start_year, end=end_year)
    return parse_leading_int(value), None


def parse_query(raw: str) -> ParsedQuery:
    """
    Parse une saisie brute en ParsedQuery.

    Une occurrence ulterieure d'une meme cle remplace la precedente.

    Example:
        >>> parse_query('type:movie year:2010-2020 "the matrix"').free_text
        'the matrix'
    """
    free_tokens: list[str] = []
    filters: dict = {}

    for token in tokenize(raw or ""):
        if token.count(":") != 1:
            free_tokens.append(token)
            continue

        key, value = (part.lower() for part in token.split(":"))
        if not value:
            free_tokens.append(token)
            continue

        if key == "type" and value in _TYPE_VALUES:
            filters["type"] = _TYPE_VALUES[value]
        elif key == "year":
            year_exact, year_range = _parse_year(value)
            if year_range is not None:
                filters["year_range"] = year_range
                filters.pop("year_exact", None)
            elif year_exact is not None:
                filters["year_exact"] = year_exact
                filters.pop("year_range", None)
            else:
                free_tokens.append(token)
        elif key == "country":
            filters["country"] = value
        elif key == "lang":
            filters["lang"] = value
        else:
            free_tokens.append(token)

    return ParsedQuery(
        free_text=" ".join(free_tokens).strip(),
        filters=SearchFilters(**filters),
    )

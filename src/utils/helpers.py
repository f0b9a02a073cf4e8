"""
Fonctions utilitaires partagees dans le projet Mediapedia.

Ce module centralise les fonctions reutilisees a travers le codebase :
- clean_title : nettoyage des titres renvoyes par les API
- now_unix : horodatage courant en secondes epoch
- parse_int : conversion tolerante texte -> entier
- parse_leading_int : entier en tete d'un texte ("2010abc" -> 2010)
- format_runtime / format_year : affichage
"""

import re
import time
import unicodedata
from typing import Optional


def strip_invisible_chars(text: str) -> str:
    """
    Retire les caractères Unicode invisibles d'une chaîne.

    Supprime les caractères de contrôle et les marques directionnelles
    qui peuvent provenir des APIs (LRM, RLM, BOM, etc.).
    """
    result = []
    for char in text:
        category = unicodedata.category(char)
        if category in ("Cf", "Cc"):
            continue
        result.append(char)
    return "".join(result)


def clean_title(title: str) -> str:
    """Nettoie un titre : retire les caractères invisibles et les espaces superflus."""
    if not title:
        return title
    return strip_invisible_chars(title).strip()


def now_unix() -> int:
    """Horodatage courant en secondes epoch."""
    return int(time.time())


def parse_int(value: Optional[str]) -> Optional[int]:
    """
    Convertit un texte en entier, None si impossible.

    Les espaces en bordure sont ignores. Aucune exception n'est levee.
    """
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")


def parse_leading_int(value: Optional[str]) -> Optional[int]:
    """
    Lit l'entier en tete d'un texte et ignore la suite.

    "2010" -> 2010, "2010abc" -> 2010, " 42 min" -> 42, "abc" -> None.
    """
    if value is None:
        return None
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else None


def format_runtime(runtime: Optional[str | int]) -> str:
    """
    Formate une duree en minutes ("148 min" ou 148) en "2h 28m".

    Retourne une chaine vide si la duree est absente ou illisible.
    """
    if not runtime:
        return ""
    if isinstance(runtime, int):
        minutes = runtime
    else:
        digits = runtime.strip().split(" ")[0]
        minutes = parse_int(digits) or 0
    if minutes <= 0:
        return ""
    hours, mins = divmod(minutes, 60)
    return f"{hours}h {mins}m" if hours > 0 else f"{mins}m"


def format_year(value: Optional[str | int]) -> str:
    """Formate une annee pour l'affichage (chaine vide si absente)."""
    if not value:
        return ""
    return str(value)

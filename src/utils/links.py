"""
Liens externes vers les pages de metadonnees d'un titre.
"""

from typing import Optional
from urllib.parse import quote, quote_plus


def imdb_url(imdb_id: str) -> str:
    return f"https://www.imdb.com/title/{quote(imdb_id, safe='')}/"


def wikipedia_url(title: str, year: Optional[str] = None) -> str:
    query = f"{title} ({year})" if year else title
    return f"https://en.wikipedia.org/w/index.php?search={quote_plus(query)}"


def rotten_tomatoes_url(title: str) -> str:
    return f"https://www.rottentomatoes.com/search?search={quote_plus(title)}"


def metacritic_url(title: str) -> str:
    return f"https://www.metacritic.com/search/{quote(title, safe='')}/"


def trailer_url(title: str, year: Optional[str] = None) -> str:
    query = f"{title} {year} official trailer" if year else f"{title} official trailer"
    return f"https://www.youtube.com/results?search_query={quote_plus(query)}"

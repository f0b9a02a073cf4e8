"""
Index flou des titres du cache local.

L'index est une projection en lecture seule de la liste complete des
titres : il est reconstruit a chaque ecriture du cache, jamais modifie.

Le seuil de flou suit l'echelle 0-1 (0 = exact uniquement, 1 = tout
accepte). Il est converti en score minimal rapidfuzz (0-100).
"""

from dataclasses import dataclass

from rapidfuzz import fuzz, process, utils

from src.core.entities.title import TitleRecord

DEFAULT_THRESHOLD = 0.35


@dataclass(frozen=True)
class IndexHit:
    """Resultat de recherche floue : le titre et sa similarite (0-100)."""

    record: TitleRecord
    score: float


class SearchIndex:
    """
    Index flou sur le champ title uniquement.

    Utilise fuzz.WRatio (tolerant aux correspondances partielles et a
    l'ordre des mots) avec normalisation default_process.
    """

    def __init__(self, titles: list[TitleRecord], threshold: float = DEFAULT_THRESHOLD) -> None:
        self._records = list(titles)
        self._choices = [record.title or "" for record in self._records]
        self._threshold = threshold

    def __len__(self) -> int:
        return len(self._records)

    @property
    def score_cutoff(self) -> float:
        return (1.0 - self._threshold) * 100

    def search_hits(self, text: str) -> list[IndexHit]:
        """Recherche floue, resultats tries par similarite decroissante."""
        if not text.strip() or not self._records:
            return []
        matches = process.extract(
            text,
            self._choices,
            scorer=fuzz.WRatio,
            processor=utils.default_process,
            score_cutoff=self.score_cutoff,
            limit=None,
        )
        # extract trie deja par score ; l'index d'origine departage les egalites
        ordered = sorted(matches, key=lambda match: (-match[1], match[2]))
        return [IndexHit(record=self._records[index], score=score) for _, score, index in ordered]

    def search(self, text: str) -> list[TitleRecord]:
        return [hit.record for hit in self.search_hits(text)]


def build_index(titles: list[TitleRecord], threshold: float = DEFAULT_THRESHOLD) -> SearchIndex:
    """Construit un index flou sur l'ensemble des titres fournis."""
    return SearchIndex(titles, threshold=threshold)

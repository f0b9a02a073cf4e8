"""
Fabriques d'enregistrements de titres pour les tests.
"""

from src.core.entities.title import TitleRecord, TitleType


def make_record(title_id: str, title: str, **kwargs) -> TitleRecord:
    """Construit un TitleRecord de test (type film par defaut)."""
    kwargs.setdefault("type", TitleType.MOVIE)
    return TitleRecord(id=title_id, title=title, **kwargs)

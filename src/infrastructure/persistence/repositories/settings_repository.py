"""
Implementation SQLModel des repositories de reglages et de recherches recentes.
"""

from typing import Optional

from sqlmodel import Session, col, select

from src.core.ports.repositories import IRecentSearchRepository, ISettingsRepository
from src.infrastructure.persistence.models import RecentSearchModel, SettingModel
from src.utils.constants import RECENT_SEARCHES_LIMIT
from src.utils.helpers import now_unix


class SQLModelSettingsRepository(ISettingsRepository):
    """Repository SQLModel pour les reglages cle/valeur."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, key: str) -> Optional[str]:
        """Retourne la valeur d'un reglage (None si absent ou vide)."""
        model = self._session.get(SettingModel, key)
        if model is None or not model.value:
            return None
        return model.value

    def set(self, key: str, value: str) -> None:
        """Insere ou met a jour un reglage."""
        now = now_unix()
        model = self._session.get(SettingModel, key)
        if model is None:
            model = SettingModel(key=key, value=value, created_at=now, updated_at=now)
        else:
            model.value = value
            model.updated_at = now
        self._session.add(model)
        self._session.commit()

    def delete(self, key: str) -> None:
        model = self._session.get(SettingModel, key)
        if model is not None:
            self._session.delete(model)
            self._session.commit()


class SQLModelRecentSearchRepository(IRecentSearchRepository):
    """
    Repository SQLModel pour les recherches recentes.

    Conserve au plus RECENT_SEARCHES_LIMIT recherches, dedupliquees par
    chaine exacte, la plus recente en tete.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def add(self, query: str) -> None:
        """Ajoute une recherche en tete et tronque l'historique."""
        now = now_unix()
        duplicates = select(RecentSearchModel).where(RecentSearchModel.query == query)
        for model in self._session.exec(duplicates).all():
            self._session.delete(model)
        self._session.add(RecentSearchModel(query=query, created_at=now, updated_at=now))
        self._session.commit()

        overflow = (
            select(RecentSearchModel)
            .order_by(col(RecentSearchModel.created_at).desc(), col(RecentSearchModel.id).desc())
            .offset(RECENT_SEARCHES_LIMIT)
        )
        for model in self._session.exec(overflow).all():
            self._session.delete(model)
        self._session.commit()

    def list_recent(self, limit: int = RECENT_SEARCHES_LIMIT) -> list[str]:
        """Liste les recherches, la plus recente en tete."""
        statement = (
            select(RecentSearchModel)
            .order_by(col(RecentSearchModel.created_at).desc(), col(RecentSearchModel.id).desc())
            .limit(limit)
        )
        return [model.query for model in self._session.exec(statement).all()]

"""
Implementation SQLModel du repository des tendances.

Les tendances sont remplacees en bloc a chaque rafraichissement
(suppression puis insertion), jamais fusionnees.
"""

from sqlmodel import Session, select

from src.core.entities.title import TitleType, TrendingSeed
from src.core.ports.repositories import ITrendingRepository
from src.infrastructure.persistence.models import TrendingSeedModel
from src.utils.helpers import now_unix


class SQLModelTrendingRepository(ITrendingRepository):
    """Repository SQLModel pour les tendances."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def _to_entity(self, model: TrendingSeedModel) -> TrendingSeed:
        try:
            title_type = TitleType(model.type)
        except ValueError:
            title_type = TitleType.MOVIE
        return TrendingSeed(
            id=model.id,
            title=model.title,
            type=title_type,
            year=model.year,
            poster_url=model.poster_url,
            tmdb_rank=model.tmdb_rank,
            popularity=model.popularity,
        )

    def replace_all(self, seeds: list[TrendingSeed]) -> None:
        """Remplace toute la table des tendances."""
        now = now_unix()
        for existing in self._session.exec(select(TrendingSeedModel)).all():
            self._session.delete(existing)
        self._session.flush()
        seen: set[str] = set()
        for seed in seeds:
            if seed.id in seen:
                continue
            seen.add(seed.id)
            self._session.add(
                TrendingSeedModel(
                    id=seed.id,
                    title=seed.title,
                    year=seed.year,
                    type=seed.type.value,
                    poster_url=seed.poster_url,
                    tmdb_rank=seed.tmdb_rank,
                    popularity=seed.popularity,
                    created_at=now,
                    updated_at=now,
                )
            )
        self._session.commit()

    def list_all(self) -> list[TrendingSeed]:
        """Liste les tendances triees par rang croissant."""
        statement = select(TrendingSeedModel).order_by(TrendingSeedModel.tmdb_rank)
        models = self._session.exec(statement).all()
        return [self._to_entity(model) for model in models]

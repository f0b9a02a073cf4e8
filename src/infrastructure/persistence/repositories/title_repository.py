"""
Implementation SQLModel du repository des titres.

Implemente l'interface ITitleRepository pour la persistance des
enregistrements canoniques dans la base de donnees SQLite via SQLModel.
"""

import json
from dataclasses import asdict
from typing import Optional

from sqlmodel import Session, col, select

from src.core.entities.title import (
    DataSource,
    OmdbRating,
    TitleRecord,
    TitleType,
    WatchProviders,
)
from src.core.ports.repositories import ITitleRepository
from src.infrastructure.persistence.models import TitleModel
from src.utils.helpers import now_unix


def _parse_type(value: Optional[str]) -> TitleType:
    try:
        return TitleType(value) if value else TitleType.OTHER
    except ValueError:
        return TitleType.OTHER


def _parse_source(value: Optional[str]) -> Optional[DataSource]:
    try:
        return DataSource(value) if value else None
    except ValueError:
        return None


class SQLModelTitleRepository(ITitleRepository):
    """
    Repository SQLModel pour les titres.

    Implemente ITitleRepository avec conversion bidirectionnelle
    entre l'entite TitleRecord (domaine) et TitleModel (persistance).
    """

    def __init__(self, session: Session) -> None:
        """
        Initialise le repository avec une session SQLModel.

        Args :
            session : Session SQLModel active pour les operations DB
        """
        self._session = session

    def _to_entity(self, model: TitleModel) -> TitleRecord:
        """
        Convertit un modele DB en entite domaine.

        Args :
            model : Le modele TitleModel depuis la DB

        Retourne :
            L'entite TitleRecord correspondante
        """
        ratings = None
        if model.omdb_ratings_json:
            ratings = [
                OmdbRating(source=item["source"], value=item["value"])
                for item in json.loads(model.omdb_ratings_json)
            ]
        watch_providers = None
        if model.watch_providers_json:
            watch_providers = WatchProviders(**json.loads(model.watch_providers_json))
        return TitleRecord(
            id=model.id,
            imdb_id=model.imdb_id,
            tmdb_id=model.tmdb_id,
            title=model.title,
            year=model.year,
            type=_parse_type(model.type),
            runtime=model.runtime,
            rating=model.rating,
            votes=model.votes,
            poster_url=model.poster_url,
            backdrop_url=model.backdrop_url,
            genres=model.genres if model.genres_json else None,
            plot=model.plot,
            cast=model.cast,
            director=model.director,
            country=model.country,
            language=model.language,
            rotten_tomatoes_score=model.rotten_tomatoes_score,
            metacritic_score=model.metacritic_score,
            omdb_ratings=ratings,
            watch_providers=watch_providers,
            popularity=model.popularity,
            source=_parse_source(model.source),
            tmdb_rank=model.tmdb_rank,
            tmdb_trending_at=model.tmdb_trending_at,
            fallback_label=model.fallback_label,
            last_updated_at=model.updated_at,
            expires_at=model.expires_at,
        )

    def _to_model(self, entity: TitleRecord, created_at: int, now: int) -> TitleModel:
        """
        Convertit une entite domaine en modele DB.

        Args :
            entity : L'entite TitleRecord du domaine
            created_at : Date de premiere insertion a conserver
            now : Horodatage de l'ecriture

        Retourne :
            Le modele TitleModel pour la persistance
        """
        ratings_json = None
        if entity.omdb_ratings:
            ratings_json = json.dumps(
                [{"source": r.source, "value": r.value} for r in entity.omdb_ratings]
            )
        return TitleModel(
            id=entity.id,
            imdb_id=entity.imdb_id,
            tmdb_id=entity.tmdb_id,
            title=entity.title,
            year=entity.year,
            type=entity.type.value,
            runtime=entity.runtime,
            rating=entity.rating,
            votes=entity.votes,
            poster_url=entity.poster_url,
            backdrop_url=entity.backdrop_url,
            genres_json=json.dumps(entity.genres) if entity.genres is not None else None,
            plot=entity.plot,
            cast=entity.cast,
            director=entity.director,
            country=entity.country,
            language=entity.language,
            rotten_tomatoes_score=entity.rotten_tomatoes_score,
            metacritic_score=entity.metacritic_score,
            omdb_ratings_json=ratings_json,
            watch_providers_json=(
                json.dumps(asdict(entity.watch_providers))
                if entity.watch_providers is not None
                else None
            ),
            popularity=entity.popularity,
            source=entity.source.value if entity.source else None,
            tmdb_rank=entity.tmdb_rank,
            tmdb_trending_at=entity.tmdb_trending_at,
            fallback_label=entity.fallback_label,
            created_at=created_at,
            updated_at=now,
            expires_at=entity.expires_at,
        )

    def get(self, title_id: str) -> Optional[TitleRecord]:
        """Recupere un titre par son ID canonique."""
        model = self._session.get(TitleModel, title_id)
        if model:
            return self._to_entity(model)
        return None

    def get_by_tmdb_id(self, tmdb_id: int) -> Optional[TitleRecord]:
        """Recupere un titre par son ID TMDB (l'ID natif est prefere)."""
        statement = (
            select(TitleModel)
            .where(TitleModel.tmdb_id == tmdb_id)
            .order_by(col(TitleModel.imdb_id).is_(None))
        )
        model = self._session.exec(statement).first()
        if model:
            return self._to_entity(model)
        return None

    def list_all(self) -> list[TitleRecord]:
        """Liste tous les titres dans l'ordre d'insertion."""
        statement = select(TitleModel).order_by(TitleModel.created_at, TitleModel.id)
        models = self._session.exec(statement).all()
        return [self._to_entity(model) for model in models]

    def upsert(self, record: TitleRecord) -> TitleRecord:
        """Insere ou remplace un titre (la date de creation est conservee)."""
        now = now_unix()
        existing = self._session.get(TitleModel, record.id)
        created_at = existing.created_at if existing and existing.created_at else now

        model = self._to_model(record, created_at=created_at, now=now)
        self._session.merge(model)
        self._session.commit()
        return self._to_entity(model)

    def delete(self, title_id: str) -> bool:
        """Supprime un titre par ID."""
        model = self._session.get(TitleModel, title_id)
        if model is None:
            return False
        self._session.delete(model)
        self._session.commit()
        return True

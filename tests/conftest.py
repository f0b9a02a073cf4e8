"""
Fixtures pytest partagees pour les tests Mediapedia.

Ce module contient les fixtures communes utilisees dans les tests:
- Session SQLModel sur une base SQLite en memoire
- Repositories SQLModel branches sur cette session
- Settings de test avec chemins temporaires
- Enregistrement type (Inception)
"""

from pathlib import Path
from typing import Iterator

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from src.config import Settings
from src.core.entities.title import TitleRecord
from src.infrastructure.persistence.database import init_db
from src.infrastructure.persistence.repositories import (
    SQLModelRecentSearchRepository,
    SQLModelSettingsRepository,
    SQLModelTitleRepository,
    SQLModelTrendingRepository,
)
from tests.fixtures.titles import make_record


@pytest.fixture
def db_session() -> Iterator[Session]:
    """
    Session SQLModel sur une base SQLite en memoire.

    StaticPool garantit que toutes les connexions partagent la meme base.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    with Session(engine) as session:
        yield session


@pytest.fixture
def title_repo(db_session: Session) -> SQLModelTitleRepository:
    return SQLModelTitleRepository(db_session)


@pytest.fixture
def trending_repo(db_session: Session) -> SQLModelTrendingRepository:
    return SQLModelTrendingRepository(db_session)


@pytest.fixture
def settings_repo(db_session: Session) -> SQLModelSettingsRepository:
    return SQLModelSettingsRepository(db_session)


@pytest.fixture
def recent_repo(db_session: Session) -> SQLModelRecentSearchRepository:
    return SQLModelRecentSearchRepository(db_session)


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """
    Settings de test avec chemins temporaires.

    Aucune cle API : les tests qui en ont besoin la fournissent explicitement.
    """
    return Settings(
        database_url=f"sqlite:///{tmp_path}/test.db",
        api_cache_dir=tmp_path / "cache",
        log_file=tmp_path / "test.log",
        omdb_api_key=None,
        tmdb_api_key=None,
    )


@pytest.fixture
def inception() -> TitleRecord:
    """Enregistrement complet pour Inception."""
    return make_record(
        "tt1375666",
        "Inception",
        imdb_id="tt1375666",
        tmdb_id=27205,
        year="2010",
        runtime="148 min",
        rating="8.8",
        votes=2400000,
        genres=["Action", "Adventure", "Sci-Fi"],
        country="United States, United Kingdom",
        language="English, Japanese, French",
        popularity=85.0,
    )

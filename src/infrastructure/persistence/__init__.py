"""
Module de persistance SQLite du cache local.

Ce module fournit l'infrastructure de stockage utilisant SQLModel (SQLAlchemy).
Il contient :

- database.py : Configuration de l'engine SQLite, session factory, initialisation
- models.py : Modeles SQLModel representant les tables de la base de donnees
- repositories/ : Implementations des ports du cache
- key_store.py : Stockage des cles API dans la table des reglages

Usage:
    from src.infrastructure.persistence import init_db, get_session

    init_db()  # Cree les tables si necessaire
    session = next(get_session())
"""

from src.infrastructure.persistence.database import (
    get_engine,
    get_session,
    init_db,
)
from src.infrastructure.persistence.key_store import SettingsKeyStore
from src.infrastructure.persistence.models import (
    RecentSearchModel,
    SettingModel,
    TitleModel,
    TrendingSeedModel,
)

__all__ = [
    "get_engine",
    "get_session",
    "init_db",
    "TitleModel",
    "TrendingSeedModel",
    "SettingModel",
    "RecentSearchModel",
    "SettingsKeyStore",
]

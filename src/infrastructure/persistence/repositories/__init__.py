"""
Implementations SQLModel des repositories.

Ce module contient les implementations concretes des interfaces repository
definies dans src/core/ports/repositories.py, utilisant SQLModel pour
la persistance SQLite.

Chaque repository :
- Herite de l'interface ABC correspondante du domaine
- Recoit une session SQLModel via injection de dependances
- Convertit entre entites de domaine (dataclass) et modeles DB (SQLModel)
"""

from src.infrastructure.persistence.repositories.settings_repository import (
    SQLModelRecentSearchRepository,
    SQLModelSettingsRepository,
)
from src.infrastructure.persistence.repositories.title_repository import (
    SQLModelTitleRepository,
)
from src.infrastructure.persistence.repositories.trending_repository import (
    SQLModelTrendingRepository,
)

__all__ = [
    "SQLModelTitleRepository",
    "SQLModelTrendingRepository",
    "SQLModelSettingsRepository",
    "SQLModelRecentSearchRepository",
]

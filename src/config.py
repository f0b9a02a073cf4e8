"""
Configuration de l'application via pydantic-settings.

La configuration est chargée depuis les variables d'environnement avec le préfixe MEDIAPEDIA_,
et peut optionnellement être fournie via un fichier .env.

Les clés API (OMDb, TMDB) sont optionnelles ici : elles peuvent aussi être
enregistrées plus tard via le stockage des clés. La recherche distante exige les deux.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Trouver le fichier .env à la racine du projet (parent de src/)
_PROJECT_ROOT = Path(__file__).parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Paramètres de l'application avec support des variables d'environnement.

    Tous les paramètres peuvent être surchargés via des variables d'environnement
    avec le préfixe MEDIAPEDIA_.
    Exemple : MEDIAPEDIA_LOG_LEVEL=DEBUG

    Les chemins sont automatiquement étendus (~ -> répertoire home).
    """

    model_config = SettingsConfigDict(
        env_prefix="MEDIAPEDIA_",
        env_file=_ENV_FILE if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Base de données (cache local)
    database_url: str = Field(default="sqlite:///mediapedia.db")

    # Cache disque des recherches distantes
    api_cache_dir: Path = Field(default=Path(".cache/api"))

    # Clés API (OPTIONNELLES - peuvent venir du stockage des clés)
    omdb_api_key: Optional[str] = Field(default=None)
    tmdb_api_key: Optional[str] = Field(default=None)

    # Réseau
    http_timeout: float = Field(default=15.0, gt=0)

    # Cache et tendances
    cache_expiry_days: int = Field(default=40, ge=1)
    trending_refresh_hours: int = Field(default=24, ge=1)

    # Recherche
    search_debounce_ms: int = Field(default=250, ge=0)
    suggestion_limit: int = Field(default=5, ge=1)
    fuzzy_threshold: float = Field(default=0.35, ge=0.0, le=1.0)

    # Logging (fichier + stderr, rotation 10MB, 5 fichiers de rétention)
    log_level: str = Field(default="INFO")
    log_file: Path = Field(default=Path("logs/mediapedia.log"))
    log_rotation_size: str = Field(default="10 MB")
    log_retention_count: int = Field(default=5)

    @field_validator("api_cache_dir", "log_file", mode="before")
    @classmethod
    def expand_path(cls, v: str | Path) -> Path:
        """Étend ~ vers le répertoire home dans les chemins."""
        return Path(v).expanduser()

    @property
    def omdb_enabled(self) -> bool:
        """Vérifie si l'API OMDb est configurée."""
        return self.omdb_api_key is not None

    @property
    def tmdb_enabled(self) -> bool:
        """Vérifie si l'API TMDB est configurée."""
        return self.tmdb_api_key is not None

    @property
    def cache_expiry_seconds(self) -> int:
        return self.cache_expiry_days * 24 * 60 * 60

    @property
    def trending_refresh_seconds(self) -> int:
        return self.trending_refresh_hours * 60 * 60

    @property
    def search_debounce_seconds(self) -> float:
        return self.search_debounce_ms / 1000

"""
Stockage des cles API dans la table des reglages.

Les cles saisies par l'utilisateur sont enregistrees dans la table settings ;
a defaut, les variables d'environnement (MEDIAPEDIA_OMDB_API_KEY,
MEDIAPEDIA_TMDB_API_KEY) servent de repli.
"""

from typing import Optional

from src.config import Settings
from src.core.entities.title import ApiKeys
from src.core.ports.key_store import IKeyStore
from src.core.ports.repositories import ISettingsRepository
from src.utils.constants import SETTING_OMDB_KEY, SETTING_TMDB_KEY


class SettingsKeyStore(IKeyStore):
    """Stockage des cles : table settings d'abord, environnement ensuite."""

    def __init__(self, settings_repo: ISettingsRepository, settings: Settings) -> None:
        self._settings_repo = settings_repo
        self._settings = settings

    def get_keys(self) -> ApiKeys:
        return ApiKeys(
            omdb_key=self._settings_repo.get(SETTING_OMDB_KEY) or self._settings.omdb_api_key,
            tmdb_key=self._settings_repo.get(SETTING_TMDB_KEY) or self._settings.tmdb_api_key,
        )

    def set_keys(self, omdb_key: Optional[str], tmdb_key: Optional[str]) -> None:
        for name, value in ((SETTING_OMDB_KEY, omdb_key), (SETTING_TMDB_KEY, tmdb_key)):
            if value and value.strip():
                self._settings_repo.set(name, value.strip())
            else:
                self._settings_repo.delete(name)

    def reset_keys(self) -> None:
        self._settings_repo.delete(SETTING_OMDB_KEY)
        self._settings_repo.delete(SETTING_TMDB_KEY)

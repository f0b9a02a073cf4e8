"""
Tests pour SettingsKeyStore (table settings + repli environnement).
"""

from src.config import Settings
from src.infrastructure.persistence import SettingsKeyStore
from src.utils.constants import SETTING_OMDB_KEY


class TestSettingsKeyStore:
    """Tests pour SettingsKeyStore."""

    def test_empty_store(self, settings_repo, test_settings: Settings) -> None:
        keys = SettingsKeyStore(settings_repo, test_settings).get_keys()

        assert keys.omdb_key is None
        assert keys.tmdb_key is None
        assert not keys.complete

    def test_set_keys_are_stripped(self, settings_repo, test_settings: Settings) -> None:
        store = SettingsKeyStore(settings_repo, test_settings)

        store.set_keys("  abc ", "def")

        keys = store.get_keys()
        assert keys.omdb_key == "abc"
        assert keys.tmdb_key == "def"
        assert keys.complete

    def test_blank_key_is_removed(self, settings_repo, test_settings: Settings) -> None:
        store = SettingsKeyStore(settings_repo, test_settings)
        store.set_keys("abc", "def")

        store.set_keys("   ", "def")

        assert settings_repo.get(SETTING_OMDB_KEY) is None
        assert store.get_keys().omdb_key is None

    def test_environment_fallback(self, settings_repo, tmp_path) -> None:
        """Sans cle enregistree, la configuration sert de repli."""
        settings = Settings(
            database_url=f"sqlite:///{tmp_path}/t.db",
            log_file=tmp_path / "t.log",
            omdb_api_key="env-omdb",
            tmdb_api_key="env-tmdb",
        )
        store = SettingsKeyStore(settings_repo, settings)

        assert store.get_keys().omdb_key == "env-omdb"

        store.set_keys("stored-omdb", "stored-tmdb")
        assert store.get_keys().omdb_key == "stored-omdb"

    def test_reset_keys(self, settings_repo, test_settings: Settings) -> None:
        store = SettingsKeyStore(settings_repo, test_settings)
        store.set_keys("abc", "def")

        store.reset_keys()

        assert not store.get_keys().complete

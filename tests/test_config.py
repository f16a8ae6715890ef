from pathlib import Path

from wp_sites import SiteStore
from wp_sites.config import DEFAULT_ENCRYPTION_KEY, Settings
from wp_sites.storage import EncryptedFileStore, JsonFileStore


def test_settings_defaults():
    settings = Settings.from_env({})
    assert settings.encryption_key == DEFAULT_ENCRYPTION_KEY
    assert settings.request_timeout == 10.0
    assert settings.log_level == "INFO"


def test_settings_from_env(tmp_path):
    settings = Settings.from_env({
        "WP_SITES_DIR": str(tmp_path),
        "WP_SITES_ENCRYPTION_KEY": "secret",
        "WP_SITES_TIMEOUT": "0",
        "WP_SITES_LOG_LEVEL": "debug",
    })
    assert settings.storage_dir == Path(tmp_path)
    assert settings.metadata_path == tmp_path / "sites.json"
    assert settings.encryption_key == "secret"
    assert settings.request_timeout is None
    assert settings.log_level == "DEBUG"


def test_store_from_settings(tmp_path):
    store = SiteStore.from_settings(Settings(storage_dir=tmp_path, request_timeout=5.0))
    assert isinstance(store.metadata_store, JsonFileStore)
    assert isinstance(store.secret_store, EncryptedFileStore)
    assert store.secret_store.path == tmp_path / "secrets.json"
    assert store.timeout == 5.0
    assert store.list_sites() == []

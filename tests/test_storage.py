import json

from cryptography.fernet import Fernet

from wp_sites.storage import EncryptedFileStore, JsonFileStore, MemoryStore, derive_fernet_key


def test_memory_store():
    store = MemoryStore()
    store.set_item("a", "1")
    assert store.get_item("a") == "1"
    store.remove_item("a")
    store.remove_item("a")
    assert store.get_item("a") is None


def test_json_file_store_persists(tmp_path):
    path = tmp_path / "nested" / "kv.json"
    JsonFileStore(path).set_item("site-index", "[]")
    assert path.exists()

    # Reload from disk
    assert JsonFileStore(path).get_item("site-index") == "[]"
    assert json.loads(path.read_text()) == {"site-index": "[]"}


def test_json_file_store_corrupt_file_reads_as_empty(tmp_path):
    path = tmp_path / "kv.json"
    path.write_text("{not json")
    store = JsonFileStore(path)
    assert store.get_item("site-index") is None
    store.set_item("k", "v")
    assert store.get_item("k") == "v"


def test_encrypted_store_does_not_write_plaintext(tmp_path):
    path = tmp_path / "secrets.json"
    store = EncryptedFileStore(path, derive_fernet_key("passphrase"))
    store.set_item("site-secret-1", '{"applicationPassword": "abcd efgh"}')
    assert "abcd efgh" not in path.read_text()
    assert store.get_item("site-secret-1") == '{"applicationPassword": "abcd efgh"}'


def test_encrypted_store_wrong_key_reads_as_absent(tmp_path):
    path = tmp_path / "secrets.json"
    EncryptedFileStore(path, Fernet.generate_key()).set_item("k", "v")
    assert EncryptedFileStore(path, Fernet.generate_key()).get_item("k") is None


def test_derive_fernet_key_is_valid_for_short_and_long_seeds():
    for seed in ("short", "x" * 100):
        Fernet(derive_fernet_key(seed))

import json

from kuda.database.session_cache import SessionCache
from kuda.database.token_store import FileTokenStore, TokenStore


def test_token_store_set_and_clear():
    store = TokenStore()
    assert not store.is_authenticated

    store.set_token("abc")
    assert store.get_token() == "abc"
    assert store.is_authenticated

    store.clear_token()
    assert store.get_token() is None


def test_file_token_store_persists_between_instances(tmp_path):
    path = tmp_path / "session" / "token.json"
    FileTokenStore(path).set_token("persisted")

    assert json.loads(path.read_text(encoding="utf-8")) == {"authToken": "persisted"}
    assert FileTokenStore(path).get_token() == "persisted"

    FileTokenStore(path).clear_token()
    assert FileTokenStore(path).get_token() is None


def test_file_token_store_ignores_unreadable_file(tmp_path):
    path = tmp_path / "token.json"
    path.write_text("{not json", encoding="utf-8")

    store = FileTokenStore(path)
    assert store.get_token() is None

    store.set_token("fresh")
    assert store.get_token() == "fresh"


def test_session_cache_is_keyed_per_session():
    cache = SessionCache()
    cache.set("token-a", "transfer", 1)
    cache.set("token-b", "transfer", 2)

    assert cache.get("token-a", "transfer") == 1
    assert cache.get("token-b", "transfer") == 2
    assert cache.get("token-a", "bills") is None

    cache.delete_session("token-a")
    assert "token-a" not in cache
    assert "token-b" in cache
    assert cache.ping() is True

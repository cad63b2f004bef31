from datetime import timedelta
from uuid import uuid4

import pytest
import yaml

from chirp.errors import HandleTaken, NotFound
from chirp.infra import store as store_module
from chirp.infra.store import MemoryStore, YamlStore, store_from_env


def test_memory_store_users(store):
    user_id = store.create_user("hash", "alice")
    user = store.find_user("alice")
    assert user.id == user_id
    assert store.get_user(user_id) == user
    assert store.get_password_hash("alice") == "hash"
    with pytest.raises(HandleTaken):
        store.create_user("other", "alice")


def test_handles_are_case_sensitive(store):
    store.create_user("hash", "alice")
    store.create_user("hash", "Alice")


def test_missing_lookups_raise_not_found(store):
    with pytest.raises(NotFound):
        store.find_user("nobody")
    with pytest.raises(NotFound):
        store.get_password_hash("nobody")
    with pytest.raises(NotFound):
        store.get_session(uuid4())
    with pytest.raises(NotFound):
        store.get_user(uuid4())


def test_yaml_store_persists(tmp_path):
    path = tmp_path / "store.yml"
    store = YamlStore(path)
    user_id = store.create_user("$argon2id$fake", "alice")
    session = store.create_session(user_id, timedelta(weeks=3), {})

    reopened = YamlStore(path)
    assert reopened.find_user("alice").id == user_id
    assert reopened.get_session(session.id) == session
    assert yaml.safe_load(path.read_text(encoding="utf-8"))["version"] == 1


def test_yaml_store_sees_external_writes(tmp_path):
    path = tmp_path / "store.yml"
    reader = YamlStore(path)
    with pytest.raises(NotFound):
        reader.find_user("alice")
    YamlStore(path).create_user("hash", "alice")
    reader._mtime = 0.0
    assert reader.find_user("alice").handle.value == "alice"


def test_yaml_store_drops_invalid_display_name(tmp_path):
    path = tmp_path / "store.yml"
    YamlStore(path).create_user("hash", "alice")
    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    raw["users"]["alice"]["display_name"] = "n" * 31
    path.write_text(yaml.safe_dump(raw), encoding="utf-8")
    assert YamlStore(path).find_user("alice").display_name is None


def test_store_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("CHIRP_STORE", "memory")
    assert isinstance(store_from_env(), MemoryStore)
    monkeypatch.setenv("CHIRP_STORE", "yaml")
    monkeypatch.setenv("CHIRP_STORE_PATH", str(tmp_path / "s.yml"))
    assert isinstance(store_from_env(), YamlStore)
    monkeypatch.setenv("CHIRP_STORE", "postgres")
    with pytest.raises(ValueError):
        store_from_env()


def _failing_replace(src, dst):
    raise OSError("disk full")


def test_failed_write_does_not_keep_user(tmp_path, monkeypatch):
    store = YamlStore(tmp_path / "store.yml")
    monkeypatch.setattr(store_module.os, "replace", _failing_replace)
    with pytest.raises(OSError):
        store.create_user("hash", "alice")
    with pytest.raises(NotFound):
        store.find_user("alice")

    monkeypatch.undo()
    user_id = store.create_user("hash", "alice")
    assert YamlStore(tmp_path / "store.yml").find_user("alice").id == user_id


def test_failed_write_does_not_keep_session(tmp_path, monkeypatch):
    store = YamlStore(tmp_path / "store.yml")
    user_id = store.create_user("hash", "alice")
    before = dict(store._sessions)
    monkeypatch.setattr(store_module.os, "replace", _failing_replace)
    with pytest.raises(OSError):
        store.create_session(user_id, timedelta(weeks=3), {})
    assert store._sessions == before


def test_expired_sessions_dropped_on_write(tmp_path):
    path = tmp_path / "store.yml"
    store = YamlStore(path)
    user_id = store.create_user("hash", "alice")
    old = store.create_session(user_id, timedelta(seconds=-1), {})
    fresh = store.create_session(user_id, timedelta(weeks=3), {})

    with pytest.raises(NotFound):
        store.get_session(old.id)
    assert store.get_session(fresh.id) == fresh
    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    assert list(raw["sessions"]) == [str(fresh.id)]

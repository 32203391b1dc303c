# tests/test_backends.py
import pytest

from decorquote.config import AppConfig
from decorquote.db import SqlBackend
from decorquote.kv import JsonDirBackend, MemoryBackend
from decorquote.records import CLIENTS
from decorquote.store import DocumentStore, open_store


@pytest.fixture(params=["memory", "json", "sql"])
def backend(request, tmp_path):
    if request.param == "memory":
        return MemoryBackend()
    if request.param == "json":
        return JsonDirBackend(tmp_path / "store")
    return SqlBackend(f"sqlite:///{(tmp_path / 'kv.db').as_posix()}")


def test_backend_roundtrip(backend):
    assert backend.get("clients") is None
    backend.set("clients", "[]")
    backend.set("clients", '[{"id": 1}]')
    backend.set("seeded", "true")
    assert backend.get("clients") == '[{"id": 1}]'
    assert sorted(backend.keys()) == ["clients", "seeded"]
    backend.delete("seeded")
    backend.delete("seeded")
    assert backend.get("seeded") is None


def test_store_crud_on_every_backend(backend):
    store = DocumentStore(backend)
    a = store.create(CLIENTS, {"name": "Anna"})
    store.create(CLIENTS, {"name": "Luca"})
    store.update(CLIENTS, a["id"], {"status": "confirmed"})
    assert store.delete(CLIENTS, 2) is True
    assert [(c["id"], c["status"]) for c in store.list(CLIENTS)] == [(1, "confirmed")]


def test_json_dir_survives_reopen(tmp_path):
    DocumentStore(JsonDirBackend(tmp_path)).create(CLIENTS, {"name": "Anna"})
    again = DocumentStore(JsonDirBackend(tmp_path))
    assert again.list(CLIENTS)[0]["name"] == "Anna"
    assert (tmp_path / "clients.json").exists()
    assert not list(tmp_path.glob("*.tmp"))


def test_json_dir_rejects_path_like_keys(tmp_path):
    backend = JsonDirBackend(tmp_path)
    with pytest.raises(ValueError):
        backend.set("../escape", "1")


def test_json_dir_corrupted_file_reads_as_absent(tmp_path):
    (tmp_path / "clients.json").write_text("[{broken", encoding="utf-8")
    assert DocumentStore(JsonDirBackend(tmp_path)).list(CLIENTS) == []


def test_open_store_picks_configured_backend(tmp_path):
    store = open_store(AppConfig(backend="json", store_dir=str(tmp_path / "data")))
    assert isinstance(store.backend, JsonDirBackend)
    assert isinstance(open_store(AppConfig(backend="memory")).backend, MemoryBackend)
    sql = open_store(AppConfig(backend="sqlite", store_dir=str(tmp_path / "db")))
    assert isinstance(sql.backend, SqlBackend)
    assert (tmp_path / "db" / "decorquote.db").exists()

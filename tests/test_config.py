# tests/test_config.py
import logging

import pytest

from decorquote.config import AppConfig, get_config
from decorquote.logging_config import setup_logging


@pytest.fixture(autouse=True)
def fresh_config():
    get_config.cache_clear()
    yield
    get_config.cache_clear()


def test_defaults(monkeypatch):
    for name in ("DECORQUOTE_BACKEND", "DECORQUOTE_STORE", "DECORQUOTE_DB_URL", "DECORQUOTE_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    cfg = get_config()
    assert cfg.backend == "json"
    assert cfg.log_level == "INFO"
    assert cfg.sqlite_url == "sqlite:///.decorquote_store/decorquote.db"


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("DECORQUOTE_BACKEND", "SQLite")
    monkeypatch.setenv("DECORQUOTE_DB_URL", "sqlite:///elsewhere.db")
    monkeypatch.setenv("DECORQUOTE_LOG_LEVEL", "debug")
    cfg = get_config()
    assert cfg.backend == "sqlite"
    assert cfg.sqlite_url == "sqlite:///elsewhere.db"
    assert cfg.log_level == "DEBUG"


def test_unknown_backend(monkeypatch):
    monkeypatch.setenv("DECORQUOTE_BACKEND", "redis")
    with pytest.raises(ValueError):
        get_config()


def test_setup_logging_writes_file(tmp_path):
    root = logging.getLogger()
    saved = root.handlers[:]
    for h in saved:  # keep pytest's own handlers open
        root.removeHandler(h)
    try:
        setup_logging(AppConfig(log_dir=str(tmp_path / "logs"), log_level="DEBUG"))
        logging.getLogger("decorquote.test").info("hello")
        for h in root.handlers:
            h.flush()
        assert "hello" in (tmp_path / "logs" / "decorquote.log").read_text(encoding="utf-8")
    finally:
        for h in root.handlers[:]:
            root.removeHandler(h)
            h.close()
        for h in saved:
            root.addHandler(h)

from __future__ import annotations

from pathlib import Path

import pytest

from json_schema_relations.config import AppConfig, build_store
from json_schema_relations.record_sources import DEFAULT_TIMEOUT
from json_schema_relations.storage import JsonFileStore, MemoryStore


def test_defaults():
    config = AppConfig()
    assert config.data_dir == Path(".schema-dashboard")
    assert config.persist is True
    assert config.record_source_timeout == DEFAULT_TIMEOUT
    assert config.server_name is None and config.server_port is None


def test_timeout_must_be_positive():
    with pytest.raises(ValueError):
        AppConfig(record_source_timeout=0)


def test_build_store_picks_backend(tmp_path):
    assert isinstance(build_store(AppConfig(data_dir=tmp_path)).backend, JsonFileStore)
    assert isinstance(build_store(AppConfig(persist=False)).backend, MemoryStore)


def test_main_launches_with_default_config(monkeypatch, tmp_path):
    import app

    launched = {}

    class FakeDemo:
        def launch(self, **kwargs):
            launched.update(kwargs)

    def fake_build_app(context, registry, config):
        launched["config"] = config
        return FakeDemo()

    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(app, "configure_logging", lambda level: None)
    monkeypatch.setattr(app, "build_app", fake_build_app)

    app.main()

    assert launched["config"] == AppConfig()
    assert launched["server_name"] is None and launched["server_port"] is None

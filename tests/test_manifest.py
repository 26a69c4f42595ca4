"""Tests for wren.assets.manifest: loading a production build from disk."""

import json

import pytest

from wren.assets.manifest import load_asset_cache
from wren.errors import ConfigurationError
from wren.templating.templates import Templates


def _write_build(dest, *, client=None, server=None, service_worker=None) -> None:
    (dest / "client").mkdir(parents=True)
    (dest / "client" / "main.1a2b.js").write_bytes(b"main()")
    (dest / "client" / "_about.9f8e.js").write_bytes(b"about()")
    (dest / "client" / "main.1a2b.js.map").write_bytes(b"{}")
    client = client or {
        "publicPath": "/client/",
        "assetsByChunkName": {
            "main": ["main.1a2b.js", "main.1a2b.js.map"],
            "_about": "_about.9f8e.js",
        },
        "assets": [{"name": "main.1a2b.js"}, {"name": "_about.9f8e.js"}, {"name": "main.1a2b.js.map"}],
    }
    (dest / "stats.client.json").write_text(json.dumps(client))
    (dest / "stats.server.json").write_text(json.dumps(server or {"entry": "myapp.build.server"}))
    if service_worker is not None:
        (dest / "service-worker.js").write_text(service_worker)


class TestLoadAssetCache:
    def test_client_assets(self, tmp_path) -> None:
        _write_build(tmp_path)
        cache = load_asset_cache(tmp_path, Templates())

        assert cache.client.main_file == "/client/main.1a2b.js"
        assert cache.client.routes == {"_about": "/client/_about.9f8e.js"}
        assert cache.client.chunks["/client/main.1a2b.js"] == b"main()"
        assert cache.client.chunks["/client/_about.9f8e.js"] == b"about()"
        assert cache.server.entry == "myapp.build.server"

    def test_index_is_empty_page_shell(self, tmp_path) -> None:
        _write_build(tmp_path)
        cache = load_asset_cache(tmp_path, Templates())

        assert "<div id='wren'></div>" in cache.client.index
        assert "<script src='/client/main.1a2b.js'></script>" in cache.client.index
        assert "wren-head-start" in cache.client.index

    def test_service_worker_placeholders(self, tmp_path) -> None:
        _write_build(tmp_path, service_worker="const t = __timestamp__; const shell = __shell__;")
        cache = load_asset_cache(tmp_path, Templates())

        assert "__timestamp__" not in cache.client.service_worker
        assert '"/client/_about.9f8e.js"' in cache.client.service_worker

    def test_no_service_worker(self, tmp_path) -> None:
        _write_build(tmp_path)
        assert load_asset_cache(tmp_path, Templates()).client.service_worker == ""

    def test_missing_manifest(self, tmp_path) -> None:
        with pytest.raises(ConfigurationError, match="stats.client.json"):
            load_asset_cache(tmp_path, Templates())

    def test_invalid_json(self, tmp_path) -> None:
        _write_build(tmp_path)
        (tmp_path / "stats.server.json").write_text("{not json")
        with pytest.raises(ConfigurationError, match="not valid JSON"):
            load_asset_cache(tmp_path, Templates())

    def test_missing_main_chunk(self, tmp_path) -> None:
        _write_build(tmp_path, client={"publicPath": "/client/", "assetsByChunkName": {}, "assets": []})
        with pytest.raises(ConfigurationError, match="main"):
            load_asset_cache(tmp_path, Templates())

    def test_missing_entry(self, tmp_path) -> None:
        _write_build(tmp_path, server={"entry": ""})
        with pytest.raises(ConfigurationError, match="entry"):
            load_asset_cache(tmp_path, Templates())

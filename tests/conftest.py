"""Shared fixtures: a small build snapshot and an app factory around it."""

from collections.abc import Callable, Iterable
from typing import Any

import pytest

from wren.app import App
from wren.assets.cache import AssetCache, ClientAssets, ServerAssets
from wren.config import AppConfig
from wren.routing.route import Route
from wren.templating.templates import Templates

MAIN_FILE = "/client/main.abc123.js"
CHUNK_PATH = "/client/app.abcd1234.js"
CHUNK_BYTES = b"console.log('app');"


def build_cache(bundle: Any, **client: Any) -> AssetCache:
    """An AssetCache around *bundle* with small, recognizable client files."""
    fields: dict[str, Any] = {
        "index": "<!doctype html><title>index</title>",
        "service_worker": "self.addEventListener('fetch', () => {});",
        "main_file": MAIN_FILE,
        "chunks": {CHUNK_PATH: CHUNK_BYTES},
        "routes": {},
    }
    fields.update(client)
    return AssetCache(client=ClientAssets(**fields), server=ServerAssets(entry=bundle))


@pytest.fixture
def cache_for() -> Callable[..., AssetCache]:
    return build_cache


@pytest.fixture
def make_app(tmp_path) -> Callable[..., App]:
    """Build a production-mode App serving *bundle* under *routes*."""

    def factory(
        routes: Iterable[Route],
        bundle: Any,
        *,
        templates: Templates | None = None,
        **client: Any,
    ) -> App:
        config = AppConfig(template_dir=tmp_path / "no-templates")
        return App(
            config,
            routes=routes,
            assets=build_cache(bundle, **client),
            templates=templates,
        )

    return factory

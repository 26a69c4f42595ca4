"""Tests for wren.middleware.assets: serving cached build output."""

from types import SimpleNamespace

from wren.config import AppConfig
from wren.http.query import QueryParams
from wren.http.request import Request
from wren.http.response import Response
from wren.middleware.assets import exact, make_asset_handler, prefix, standard_asset_handlers
from wren.middleware.chain import compose, set_pathname
from wren.testing import TestClient

from conftest import CHUNK_BYTES, CHUNK_PATH, build_cache


async def _terminal(request: Request) -> Response:
    return Response("fallback", status=404)


class TestAssetHandler:
    async def test_non_matching_path_falls_through(self) -> None:
        calls: list[str] = []

        def resolver(pathname: str) -> str:
            calls.append(pathname)
            return "never"

        handler = make_asset_handler(exact("/index.html"), "text/html", "max-age=600", resolver)
        response = await handler(Request(method="GET", path="/other", pathname="/other"), _terminal)

        assert response.status == 404
        assert calls == []

    async def test_missing_entry_falls_through(self) -> None:
        handler = make_asset_handler(prefix("/client/"), "application/javascript", "max-age=1", lambda p: None)
        response = await handler(Request(method="GET", path="/client/x.js"), _terminal)
        assert response.status == 404

    async def test_resolver_runs_per_request(self) -> None:
        version = {"n": 1}
        handler = make_asset_handler(
            exact("/index.html"),
            "text/html",
            "max-age=600",
            lambda _: f"v{version['n']}",
        )
        request = Request(method="GET", path="/index.html")

        first = await handler(request, _terminal)
        version["n"] = 2
        second = await handler(request, _terminal)

        assert first.text == "v1"
        assert second.text == "v2"

    async def test_uses_pathname_over_path(self) -> None:
        handler = make_asset_handler(exact("/index.html"), "text/html", "max-age=600", lambda _: "doc")
        request = Request(method="GET", path="/index.html?x=1", pathname="/index.html")
        response = await handler(request, _terminal)
        assert response.text == "doc"


class TestStandardHandlers:
    def _chain(self, **client):
        cache = build_cache(SimpleNamespace(), **client)
        return compose([set_pathname, *standard_asset_handlers(AppConfig(), lambda: cache)])

    async def test_chunk_served_with_long_cache(self) -> None:
        chain = self._chain()
        response = await chain(Request(method="GET", path=CHUNK_PATH), _terminal)

        assert response.status == 200
        assert response.content_type == "application/javascript"
        assert response.header("Cache-Control") == "max-age=31536000"
        assert response.body_bytes == CHUNK_BYTES

    async def test_unknown_chunk_falls_through(self) -> None:
        chain = self._chain()
        response = await chain(Request(method="GET", path="/client/missing.js"), _terminal)
        assert response.text == "fallback"

    async def test_index(self) -> None:
        chain = self._chain(index="<!doctype html><p>shell</p>")
        response = await chain(Request(method="GET", path="/index.html"), _terminal)

        assert response.content_type == "text/html"
        assert response.header("cache-control") == "max-age=600"
        assert response.text == "<!doctype html><p>shell</p>"

    async def test_service_worker(self) -> None:
        chain = self._chain(service_worker="self.skipWaiting();")
        response = await chain(Request(method="GET", path="/service-worker.js"), _terminal)

        assert response.content_type == "application/javascript"
        assert response.header("cache-control") == "max-age=600"
        assert response.text == "self.skipWaiting();"

    async def test_query_string_ignored_for_matching(self) -> None:
        chain = self._chain()
        request = Request(method="GET", path=CHUNK_PATH, query=QueryParams(b"v=1"))
        response = await chain(request, _terminal)
        assert response.status == 200


class TestAssetsThroughApp:
    async def test_chunk_request(self, make_app) -> None:
        app = make_app([], SimpleNamespace())

        async with TestClient(app) as client:
            response = await client.get(f"{CHUNK_PATH}?v=1")

        assert response.status == 200
        assert response.content_type == "application/javascript"
        assert response.header("cache-control") == "max-age=31536000"
        assert response.body_bytes == CHUNK_BYTES

    async def test_newly_published_build_served(self, make_app, cache_for) -> None:
        app = make_app([], SimpleNamespace())

        async with TestClient(app) as client:
            app.publish(cache_for(SimpleNamespace(), chunks={"/client/new.js": b"new()"}))
            fresh = await client.get("/client/new.js")
            stale = await client.get(CHUNK_PATH)

        assert fresh.body_bytes == b"new()"
        assert stale.status == 404

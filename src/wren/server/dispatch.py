"""Route dispatch: the last stage of the chain.

For a request pathname the dispatcher picks the first matching route,
resolves the route's module from the current server bundle, and either
renders a page or hands the request to an endpoint method handler:

    page      preload? --> render --> document (streamed when preloaded)
    endpoint  method --> export name (DELETE -> "del") --> handler

Any failure while matching or handling is caught here, once, and turned
into the 500 page. Unmatched routes and unimplemented methods fall
through to the next continuation (the not-found page).
"""

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import replace
from typing import Any

import anyio.lowlevel

from wren._internal.invoke import invoke
from wren.assets.cache import AssetCache, ServerAssets
from wren.errors import ConfigurationError
from wren.http.request import Request
from wren.http.response import Response, StreamingResponse
from wren.middleware.protocol import AnyResponse, Next
from wren.routing.route import Route
from wren.routing.table import RouteTable
from wren.server.bundle import get_export, load_bundle, method_export
from wren.server.errors import render_error
from wren.templating.slots import (
    field_of,
    head_block,
    preload_link_header,
    scripts_block,
    serialize_preloaded,
    style_block,
)
from wren.templating.streaming import render_document, render_stream
from wren.templating.templates import Templates

logger = logging.getLogger("wren.server")

type Rendered = tuple[Any, str | None]


def page_slots(main_file: str, rendered: Any, serialized: str | None = None) -> dict[str, str]:
    """Slot values for a page document from a ``render()`` result."""
    return {
        "scripts": scripts_block(main_file, serialized),
        "html": field_of(rendered, "html") or "",
        "head": head_block(field_of(rendered, "head")),
        "styles": style_block(field_of(rendered, "css")),
    }


async def _project(upstream: Awaitable[Rendered], fn: Callable[[Any, str | None], str]) -> str:
    rendered, serialized = await upstream
    return fn(rendered, serialized)


def _as_response(result: Any, route: Route) -> AnyResponse:
    """Accept what an endpoint handler returned as a response."""
    match result:
        case Response() | StreamingResponse():
            return result
        case str() | bytes():
            return Response(body=result)
        case dict() | list():
            return Response(body=json.dumps(result), content_type="application/json")
        case _:
            msg = f"Endpoint {route.id!r} returned {type(result).__name__}, not a response."
            raise TypeError(msg)


class RouteHandler:
    """Chain stage that dispatches to page and endpoint routes.

    ``assets`` is called once per request; the snapshot it returns is
    used for the whole request even if a rebuild is published meanwhile.
    """

    __slots__ = ("_bundle", "assets", "routes", "templates")

    def __init__(
        self,
        routes: RouteTable,
        assets: Callable[[], AssetCache],
        templates: Templates,
    ) -> None:
        self.routes = routes
        self.assets = assets
        self.templates = templates
        self._bundle: tuple[ServerAssets, Any] | None = None

    async def __call__(self, request: Request, next: Next) -> AnyResponse:
        url = request.pathname if request.pathname is not None else request.path
        try:
            # Dispatch is never synchronous with respect to the caller
            await anyio.lowlevel.checkpoint()
            route = self.routes.find(url)
            response = None
            if route is not None:
                response = await self._handle(route, request, next, self.assets())
        except Exception as exc:
            logger.exception("500 %s %s", request.method, url)
            return render_error(exc, url, self.templates)

        if response is None:
            return await next(request)
        return response

    def bundle(self, server: ServerAssets) -> Any:
        """The server bundle for *server*, resolved once per snapshot."""
        cached = self._bundle
        if cached is not None and cached[0] is server:
            return cached[1]
        bundle = load_bundle(server.entry)
        self._bundle = (server, bundle)
        return bundle

    async def _handle(
        self,
        route: Route,
        request: Request,
        next: Next,
        cache: AssetCache,
    ) -> AnyResponse | None:
        request = replace(request, params=route.exec(request.pathname or request.path))
        module = get_export(self.bundle(cache.server), route.id)
        if module is None:
            msg = f"Server bundle has no export for route {route.id!r}."
            raise ConfigurationError(msg)

        if route.is_page:
            return await self._page(route, module, request, cache)

        handler = get_export(module, method_export(request.method))
        if handler is None:
            # No handler for this method: 404, not 405
            return None
        return _as_response(await invoke(handler, request, next), route)

    async def _page(
        self,
        route: Route,
        page: Any,
        request: Request,
        cache: AssetCache,
    ) -> AnyResponse:
        client = cache.client
        link = preload_link_header(client.main_file, client.routes.get(route.id))

        render = get_export(page, "render")
        if render is None:
            msg = f"Page {route.id!r} has no render()."
            raise ConfigurationError(msg)

        data: dict[str, Any] = {"params": dict(request.params), "query": request.query.to_dict()}
        preload = get_export(page, "preload")

        if preload is None:
            rendered = await invoke(render, data)
            body = render_document(self.templates, 200, page_slots(client.main_file, rendered))
            return Response(body=body).with_header("Link", link)

        upstream = asyncio.ensure_future(self._preload_and_render(preload, render, request, data))
        # Failures must surface here, before any bytes are committed
        await upstream

        main_file = client.main_file
        projections: dict[str, Callable[[Any, str | None], str]] = {
            "scripts": lambda _, serialized: scripts_block(main_file, serialized),
            "html": lambda rendered, _: field_of(rendered, "html") or "",
            "head": lambda rendered, _: head_block(field_of(rendered, "head")),
            "styles": lambda rendered, _: style_block(field_of(rendered, "css")),
        }
        slots = {name: asyncio.ensure_future(_project(upstream, fn)) for name, fn in projections.items()}
        chunks = render_stream(self.templates, 200, slots)
        return StreamingResponse(chunks=chunks).with_header("Link", link)

    async def _preload_and_render(
        self,
        preload: Callable[..., Any],
        render: Callable[..., Any],
        request: Request,
        data: dict[str, Any],
    ) -> Rendered:
        preloaded = await invoke(preload, request)
        serialized = serialize_preloaded(preloaded)
        if preloaded is not None:
            if not isinstance(preloaded, Mapping):
                msg = f"preload() must return a mapping, not {type(preloaded).__name__}."
                raise TypeError(msg)
            data.update(preloaded)
        rendered = await invoke(render, data)
        return rendered, serialized


def make_route_handler(
    routes: RouteTable,
    assets: Callable[[], AssetCache],
    templates: Templates,
) -> RouteHandler:
    """Build the dispatch stage for *routes*."""
    return RouteHandler(routes, assets, templates)

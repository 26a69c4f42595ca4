"""Cached asset serving.

An asset handler answers one class of pathname (the root document, the
service worker, hashed client chunks) straight from the asset cache. The
body is resolved at request time, so it always reflects the snapshot
that is current when the request arrives.

Falls through to the next stage for non-matching paths, and for
matching paths that have no entry in the cache.
"""

from collections.abc import Callable

from wren.assets.cache import AssetCache
from wren.config import AppConfig
from wren.http.request import Request
from wren.http.response import HTML, JAVASCRIPT, Response
from wren.middleware.protocol import AnyResponse, Next

type Predicate = Callable[[str], bool]
type Resolver = Callable[[str], str | bytes | None]


class AssetHandler:
    """Serve one class of cached asset.

    Usage::

        AssetHandler(
            predicate=lambda p: p.startswith("/client/"),
            content_type="application/javascript",
            cache_control="max-age=31536000",
            resolver=lambda p: store().client.chunks.get(p),
        )
    """

    __slots__ = ("cache_control", "content_type", "predicate", "resolver")

    def __init__(
        self,
        predicate: Predicate,
        content_type: str,
        cache_control: str,
        resolver: Resolver,
    ) -> None:
        self.predicate = predicate
        self.content_type = content_type
        self.cache_control = cache_control
        self.resolver = resolver

    async def __call__(self, request: Request, next: Next) -> AnyResponse:
        pathname = request.pathname if request.pathname is not None else request.path
        if not self.predicate(pathname):
            return await next(request)

        body = self.resolver(pathname)
        if body is None:
            return await next(request)

        return Response(body=body, content_type=self.content_type).with_header(
            "Cache-Control", self.cache_control
        )


def make_asset_handler(
    predicate: Predicate,
    content_type: str,
    cache_policy: str,
    resolver: Resolver,
) -> AssetHandler:
    """Build a handler serving *resolver(pathname)* wherever *predicate* holds."""
    return AssetHandler(predicate, content_type, cache_policy, resolver)


def exact(path: str) -> Predicate:
    """Predicate matching exactly *path*."""
    return lambda pathname: pathname == path


def prefix(namespace: str) -> Predicate:
    """Predicate matching every pathname under *namespace*."""
    return lambda pathname: pathname.startswith(namespace)


def standard_asset_handlers(
    config: AppConfig,
    assets: Callable[[], AssetCache],
) -> tuple[AssetHandler, ...]:
    """The root document, service worker and client chunk handlers, in order."""
    return (
        make_asset_handler(
            exact(config.index_path),
            HTML,
            config.asset_cache_control,
            lambda _: assets().client.index,
        ),
        make_asset_handler(
            exact(config.service_worker_path),
            JAVASCRIPT,
            config.asset_cache_control,
            lambda _: assets().client.service_worker,
        ),
        make_asset_handler(
            prefix(config.client_prefix),
            JAVASCRIPT,
            config.chunk_cache_control,
            lambda pathname: assets().client.chunks.get(pathname),
        ),
    )

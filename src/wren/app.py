"""Wren application class.

Mutable during setup (routes, extra middleware). Frozen when the first
ASGI scope arrives: the route table is compiled, the asset source is
wired up and the handler chain is composed.

Chain order::

    [extra middleware] -> [wait for first build (dev)] -> set_pathname
      -> index.html -> service-worker.js -> /client/* -> route dispatch
      -> (fallback) not-found page
"""

import logging
import threading
from collections.abc import Iterable

from wren._internal.asgi import Receive, Scope, Send
from wren.assets.cache import AssetCache
from wren.assets.manifest import load_asset_cache
from wren.assets.store import AssetStore, WaitForAssets, Watcher
from wren.config import AppConfig
from wren.middleware.assets import standard_asset_handlers
from wren.middleware.chain import Chain, set_pathname
from wren.middleware.protocol import Middleware
from wren.routing.route import Route, RouteKind
from wren.routing.table import RouteTable
from wren.server.dispatch import make_route_handler
from wren.server.errors import NotFoundHandler
from wren.server.handler import handle_request
from wren.templating.templates import Templates

logger = logging.getLogger("wren.server")


class App:
    """The wren application: an ASGI callable.

    Production (``config.dev`` false) loads the build manifests from
    ``config.dest`` at startup unless an AssetCache is passed in.
    Development waits on *watcher* (by default the app's own store, fed
    through :meth:`publish`) before serving anything::

        app = App(AppConfig(dev=True), routes=[Route.from_pattern("_index", "/")])
        compiler.on_build(app.publish)

    Thread safety:
        Setup is single-threaded. The freeze transition uses a Lock +
        double-check so exactly one thread composes the chain.
    """

    __slots__ = (
        "_chain",
        "_freeze_lock",
        "_frozen",
        "_middleware_list",
        "_not_found",
        "_routes",
        "_templates",
        "_watcher",
        "config",
        "store",
    )

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        routes: RouteTable | Iterable[Route] = (),
        assets: AssetCache | None = None,
        watcher: Watcher | None = None,
        templates: Templates | None = None,
    ) -> None:
        self.config: AppConfig = config or AppConfig()
        self._routes = routes if isinstance(routes, RouteTable) else RouteTable(routes)
        self._templates = templates or Templates(self.config.template_dir, auto_reload=self.config.dev)
        self.store = AssetStore(assets)
        self._watcher = watcher
        self._middleware_list: list[Middleware] = []
        self._frozen = False
        self._freeze_lock = threading.Lock()
        self._chain: Chain | None = None
        self._not_found: NotFoundHandler | None = None

    # -- Setup --

    def route(self, id: str, pattern: str, kind: RouteKind | str = RouteKind.PAGE) -> Route:
        """Register a route. Registration order is match priority."""
        self._check_not_frozen()
        route = Route.from_pattern(id, pattern, kind)
        self._routes.add(route)
        return route

    def add_middleware(self, middleware: Middleware) -> None:
        """Add a stage that runs before asset and route handling."""
        self._check_not_frozen()
        self._middleware_list.append(middleware)

    def publish(self, cache: AssetCache) -> int:
        """Make *cache* the current build (development compilers call this)."""
        return self.store.publish(cache)

    @property
    def routes(self) -> RouteTable:
        return self._routes

    @property
    def templates(self) -> Templates:
        return self._templates

    def close(self) -> None:
        """Release the development watcher, if any."""
        if self._watcher is not None:
            self._watcher.close()

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        self._ensure_frozen()
        assert self._chain is not None
        assert self._not_found is not None

        await handle_request(
            scope,
            receive,
            send,
            chain=self._chain,
            fallback=self._not_found,
            templates=self._templates,
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol.

        Freezing at startup means a missing or broken production build is
        reported before the first request rather than on it.
        """
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    self._ensure_frozen()
                except Exception as exc:
                    logger.exception("startup failed")
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                self.close()
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Internal --

    def _ensure_frozen(self) -> None:
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile the app into its runtime state.

        MUST only be called while holding _freeze_lock.
        """
        config = self.config
        self._routes.compile()

        stages: list[Middleware] = list(self._middleware_list)
        if config.dev:
            stages.append(WaitForAssets(self._watcher or self.store, self.store))
        elif not self.store.is_ready:
            self.store.publish(load_asset_cache(config.dest, self._templates))

        stages.append(set_pathname)
        stages.extend(standard_asset_handlers(config, self.store))
        stages.append(make_route_handler(self._routes, self.store, self._templates))

        self._chain = Chain(stages)
        self._not_found = NotFoundHandler(self.store, self._templates)
        self._frozen = True
        logger.debug(
            "app frozen: %d routes, %d stages, mode=%s",
            len(self._routes),
            len(self._chain),
            "dev" if config.dev else "production",
        )

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register routes and middleware before the first request."
            )
            raise RuntimeError(msg)

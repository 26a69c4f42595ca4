"""The current asset snapshot and the stage that waits for it.

Exactly one AssetCache is current at any instant. ``publish`` swaps the
reference in one assignment, so a reader sees either the old snapshot
or the new one, never a mix. Requests pin whichever snapshot they read
when dispatch starts; a rebuild that lands mid-request does not affect
them.
"""

import asyncio
import logging
from typing import Protocol

from wren.assets.cache import AssetCache
from wren.errors import AssetsNotReady
from wren.http.request import Request
from wren.middleware.protocol import AnyResponse, Next

logger = logging.getLogger("wren.assets")


class Watcher(Protocol):
    """A development build watcher.

    ``ready()`` resolves to the most recent completed build, waiting for
    the first one if nothing has been built yet.
    """

    async def ready(self) -> AssetCache: ...

    def close(self) -> None: ...


class AssetStore:
    """Holder of the current AssetCache snapshot.

    Doubles as the provider handed to stages (``store()`` returns the
    current snapshot) and as a minimal :class:`Watcher` for builds that
    happen in-process::

        store = AssetStore()
        store.publish(build())        # from the compiler callback
        cache = await store.ready()   # from a request
    """

    __slots__ = ("_cache", "_ready", "_version")

    def __init__(self, cache: AssetCache | None = None) -> None:
        self._cache: AssetCache | None = None
        self._version = 0
        self._ready = asyncio.Event()
        if cache is not None:
            self.publish(cache)

    def __call__(self) -> AssetCache:
        return self.current

    @property
    def current(self) -> AssetCache:
        """The current snapshot.

        Raises ``AssetsNotReady`` before the first ``publish``.
        """
        if self._cache is None:
            msg = "No build has been published yet."
            raise AssetsNotReady(msg)
        return self._cache

    @property
    def version(self) -> int:
        """Number of snapshots published so far."""
        return self._version

    @property
    def is_ready(self) -> bool:
        return self._cache is not None

    def publish(self, cache: AssetCache) -> int:
        """Make *cache* the current snapshot and return its version."""
        self._cache = cache
        self._version += 1
        self._ready.set()
        logger.debug("published asset snapshot v%d (main=%s)", self._version, cache.client.main_file)
        return self._version

    async def ready(self) -> AssetCache:
        """Wait until a snapshot exists, then return the current one."""
        await self._ready.wait()
        return self.current

    def close(self) -> None:
        """Nothing to release; present for :class:`Watcher` compatibility."""


class WaitForAssets:
    """Chain stage that holds requests until the watcher has a build.

    Every build the watcher reports is published into the store, so later
    stages read it through the store's provider.
    """

    __slots__ = ("store", "watcher")

    def __init__(self, watcher: Watcher, store: AssetStore) -> None:
        self.watcher = watcher
        self.store = store

    async def __call__(self, request: Request, next: Next) -> AnyResponse:
        cache = await self.watcher.ready()
        if not self.store.is_ready or cache is not self.store.current:
            self.store.publish(cache)
        return await next(request)

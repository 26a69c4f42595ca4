"""Invoke helpers: call sync or async callables uniformly.

Page modules, endpoint handlers and chain stages can be ``def`` or
``async def``. Anything that calls user-provided code goes through
:func:`invoke` so the sync/async check lives in exactly one place.

Usage::

    from wren._internal.invoke import invoke

    preloaded = await invoke(page.preload, request)
"""

import inspect
from typing import Any


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *handler* and await the result if it is awaitable.

    Works with both sync and async callables::

        # sync: value returned as-is
        def preload(request):
            return {"user": "ada"}

        # async: coroutine awaited automatically
        async def preload(request):
            return {"user": await fetch_user(request.params["id"])}
    """
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result

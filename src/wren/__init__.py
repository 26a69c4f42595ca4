"""Wren: server-side rendering middleware for compiled page bundles.

Serves the compiled client build, renders page routes to full HTML
documents (streamed when a page preloads data), and hands endpoint
routes to their method handlers.

Basic usage::

    from wren import App, AppConfig, Route

    app = App(
        AppConfig(dest="build"),
        routes=[
            Route.from_pattern("_index", "/"),
            Route.from_pattern("_api_items", "/api/items", "endpoint"),
            Route.from_pattern("_blog_post", "/blog/{slug}"),
        ],
    )
"""

__version__ = "0.1.0"
__all__ = [
    "AnyResponse",
    "App",
    "AppConfig",
    "AssetCache",
    "AssetStore",
    "AssetsNotReady",
    "ClientAssets",
    "ConfigurationError",
    "Middleware",
    "Next",
    "Request",
    "Response",
    "Route",
    "RouteKind",
    "RouteTable",
    "ServerAssets",
    "StreamingResponse",
    "Templates",
    "WrenError",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import wren`` fast while providing a clean top-level API.
    """
    if name == "App":
        from wren.app import App

        return App

    if name == "AppConfig":
        from wren.config import AppConfig

        return AppConfig

    if name == "Request":
        from wren.http.request import Request

        return Request

    if name in ("Response", "StreamingResponse"):
        from wren.http import response as _resp

        return getattr(_resp, name)

    if name in ("AnyResponse", "Middleware", "Next"):
        from wren.middleware import protocol as _mw

        return getattr(_mw, name)

    if name in ("AssetCache", "AssetStore", "ClientAssets", "ServerAssets"):
        import wren.assets as _assets

        return getattr(_assets, name)

    if name in ("Route", "RouteKind", "RouteTable"):
        import wren.routing as _routing

        return getattr(_routing, name)

    if name == "Templates":
        from wren.templating.templates import Templates

        return Templates

    if name in ("AssetsNotReady", "ConfigurationError", "WrenError"):
        from wren import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)

"""Chain stages: Protocol-based, no inheritance required.

A stage is any callable matching:
    async def stage(request: Request, next: Next) -> AnyResponse

Built-in stages:
    AssetHandler -- Serve one class of cached build asset
    Chain -- Run stages in sequence as a single stage
    set_pathname -- Normalize the request pathname once, up front
"""

from wren.middleware.assets import AssetHandler, make_asset_handler, standard_asset_handlers
from wren.middleware.chain import Chain, compose, set_pathname
from wren.middleware.protocol import AnyResponse, Middleware, Next

__all__ = [
    "AnyResponse",
    "AssetHandler",
    "Chain",
    "Middleware",
    "Next",
    "compose",
    "make_asset_handler",
    "set_pathname",
    "standard_asset_handlers",
]

"""Compiled build artifacts: the asset cache and where it comes from.

    AssetCache -- Immutable snapshot of client and server build output
    AssetStore -- Holds the current snapshot; swaps it on each rebuild
    load_asset_cache -- Production loader reading build manifests from disk
"""

from wren.assets.cache import AssetCache, ClientAssets, ServerAssets
from wren.assets.manifest import load_asset_cache
from wren.assets.store import AssetStore, Watcher

__all__ = [
    "AssetCache",
    "AssetStore",
    "ClientAssets",
    "ServerAssets",
    "Watcher",
    "load_asset_cache",
]

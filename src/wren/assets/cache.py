"""AssetCache frozen dataclasses.

One snapshot describes a complete build: the client files served
verbatim and the identifier of the compiled server bundle. Snapshots
are never modified; a rebuild produces a new one.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any


@dataclass(frozen=True, slots=True)
class ClientAssets:
    """Client-side build output.

    ``chunks`` maps request pathname (``/client/main.1a2b.js``) to script
    bytes; ``routes`` maps route id to the pathname of that route's bundle.
    """

    index: str | bytes
    service_worker: str | bytes
    main_file: str
    chunks: Mapping[str, str | bytes] = field(default_factory=dict)
    routes: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "chunks", MappingProxyType(dict(self.chunks)))
        object.__setattr__(self, "routes", MappingProxyType(dict(self.routes)))


@dataclass(frozen=True, slots=True)
class ServerAssets:
    """Server-side build output.

    ``entry`` is a dotted import path for the compiled bundle, or the
    bundle object itself when it was built in-process.
    """

    entry: Any


@dataclass(frozen=True, slots=True)
class AssetCache:
    """A complete build snapshot."""

    client: ClientAssets
    server: ServerAssets

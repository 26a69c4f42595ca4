"""Production asset loading from build manifests.

The build writes two JSON manifests into the output directory::

    stats.client.json
        {
          "publicPath": "/client/",
          "assetsByChunkName": {"main": "main.1a2b.js", "_about": "_about.9f8e.js"},
          "assets": [{"name": "main.1a2b.js"}, {"name": "_about.9f8e.js"}]
        }

    stats.server.json
        {"entry": "myapp.build.server"}

Client files live under ``<dest>/client/``. An optional
``<dest>/service-worker.js`` template has ``__timestamp__`` and
``__shell__`` filled in. The result is synthesized once, synchronously,
at startup.
"""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import TYPE_CHECKING, Any

from wren.assets.cache import AssetCache, ClientAssets, ServerAssets
from wren.errors import ConfigurationError
from wren.templating.slots import head_block, script_tag

if TYPE_CHECKING:
    from wren.templating.templates import Templates

logger = logging.getLogger("wren.assets")

CLIENT_MANIFEST = "stats.client.json"
SERVER_MANIFEST = "stats.server.json"


def read_json(path: Path) -> Any:
    """Read and parse a JSON manifest, reporting problems as configuration errors."""
    try:
        return json.loads(path.read_text("utf-8"))
    except FileNotFoundError:
        msg = f"Build manifest not found: {path}. Run the build before starting in production mode."
        raise ConfigurationError(msg) from None
    except json.JSONDecodeError as exc:
        msg = f"Build manifest {path} is not valid JSON: {exc}"
        raise ConfigurationError(msg) from exc


def _script_file(files: str | list[str] | None) -> str | None:
    """The first ``.js`` file of a chunk (chunks may list source maps too)."""
    if isinstance(files, str):
        files = [files]
    for name in files or ():
        if name.endswith(".js"):
            return name
    return None


def load_asset_cache(dest: str | Path, templates: Templates) -> AssetCache:
    """Synthesize an AssetCache from the manifests in *dest*."""
    dest = Path(dest)
    client_stats = read_json(dest / CLIENT_MANIFEST)
    server_stats = read_json(dest / SERVER_MANIFEST)

    public_path: str = client_stats.get("publicPath", "/client/")
    by_chunk: dict[str, Any] = client_stats.get("assetsByChunkName", {})

    main = _script_file(by_chunk.get("main"))
    if main is None:
        msg = f"{CLIENT_MANIFEST} has no 'main' chunk."
        raise ConfigurationError(msg)
    main_file = public_path + main

    routes: dict[str, str] = {}
    for name, files in by_chunk.items():
        script = _script_file(files)
        if name != "main" and script is not None:
            routes[name] = public_path + script

    chunks: dict[str, bytes] = {}
    for asset in client_stats.get("assets", ()):
        name = asset["name"] if isinstance(asset, dict) else asset
        chunks[public_path + name] = (dest / "client" / name).read_bytes()

    entry = server_stats.get("entry")
    if not entry:
        msg = f"{SERVER_MANIFEST} has no 'entry'."
        raise ConfigurationError(msg)

    index = templates.render(
        200,
        scripts=script_tag(main_file),
        html="",
        head=head_block(""),
        styles="",
    )

    logger.info("loaded %d client chunks from %s (entry=%s)", len(chunks), dest, entry)
    return AssetCache(
        client=ClientAssets(
            index=index,
            service_worker=_service_worker(dest, chunks),
            main_file=main_file,
            chunks=chunks,
            routes=routes,
        ),
        server=ServerAssets(entry=entry),
    )


def _service_worker(dest: Path, chunks: dict[str, bytes]) -> str:
    path = dest / "service-worker.js"
    if not path.is_file():
        return ""
    source = path.read_text("utf-8")
    return source.replace("__timestamp__", str(int(time.time() * 1000))).replace(
        "__shell__", json.dumps(sorted(chunks))
    )

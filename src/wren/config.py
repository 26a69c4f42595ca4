"""Application configuration.

Everything is read from one frozen dataclass; there are no string-key
settings lookups.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

_DEV_ENVIRONMENTS = frozenset({"dev", "development", "local"})


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(dev=True, template_dir="templates")
    """

    # Mode: development waits on a watcher, production reads manifests from dest
    dev: bool = False
    dest: str | Path = ".wren"

    # Templates (2xx.html / 4xx.html / 5xx.html override the built-ins)
    template_dir: str | Path | None = "templates"

    # Asset paths
    index_path: str = "/index.html"
    service_worker_path: str = "/service-worker.js"
    client_prefix: str = "/client/"

    # Cache policies
    asset_cache_control: str = "max-age=600"
    chunk_cache_control: str = "max-age=31536000"

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> AppConfig:
        """Build a config from ``WREN_*`` environment variables.

        ``WREN_ENV`` selects the mode (production unless it names a
        development environment), ``WREN_DEST`` the build output directory
        and ``WREN_TEMPLATES`` the template directory.
        """
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            dev=env.get("WREN_ENV", "production").lower() in _DEV_ENVIRONMENTS,
            dest=env.get("WREN_DEST", defaults.dest),
            template_dir=env.get("WREN_TEMPLATES", defaults.template_dir),
        )

"""Server bundle resolution and export lookup.

A compiled server bundle maps route ids to route modules. Bundles and
modules are looked up the same way: a ``Mapping`` by key, anything else
(a module, class or namespace) by attribute.
"""

import importlib
from collections.abc import Mapping
from typing import Any

from wren.errors import ConfigurationError


def load_bundle(entry: Any) -> Any:
    """Resolve a ``ServerAssets.entry`` to the bundle object.

    Strings are imported as dotted module paths; anything else is taken
    to be the bundle itself.
    """
    if not isinstance(entry, str):
        return entry
    try:
        return importlib.import_module(entry)
    except ImportError as exc:
        msg = f"Cannot import server bundle {entry!r}: {exc}"
        raise ConfigurationError(msg) from exc


def get_export(module: Any, name: str) -> Any:
    """The export *name* of *module*, or ``None``."""
    if isinstance(module, Mapping):
        return module.get(name)
    return getattr(module, name, None)


def method_export(method: str) -> str:
    """Export name for an HTTP method.

    DELETE looks up ``del``, the name existing endpoint modules export
    it under.
    """
    name = method.lower()
    return "del" if name == "delete" else name

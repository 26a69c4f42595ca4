"""Wren exception hierarchy.

Shared across the asset store, route table, dispatcher and App so every
module raises and catches the same types.
"""


class WrenError(Exception):
    """Base for all wren-specific errors."""


class ConfigurationError(WrenError):
    """Raised when configuration or build output is unusable.

    Missing manifest files, malformed manifests and server bundles that
    cannot be imported all surface as this at startup.
    """


class AssetsNotReady(WrenError):  # noqa: N818
    """The asset cache was read before the first build was published."""

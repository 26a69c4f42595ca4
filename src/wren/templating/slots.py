"""HTML fragments that fill the page document's slots.

The page template has four slots: ``scripts``, ``html``, ``head`` and
``styles``. The helpers here build the markup for each from a page's
render result and its preloaded data.
"""

import json
import logging
from collections.abc import Mapping
from typing import Any

logger = logging.getLogger("wren.templating")

# The client runtime locates the server-rendered head between these
HEAD_START = "<noscript id='wren-head-start'></noscript>"
HEAD_END = "<noscript id='wren-head-end'></noscript>"

# Characters that would let JSON break out of an inline <script>
_UNSAFE_CHARS = str.maketrans(
    {
        "<": "\\u003C",
        ">": "\\u003E",
        "/": "\\u002F",
        "\u2028": "\\u2028",
        "\u2029": "\\u2029",
    }
)


def field_of(value: Any, name: str, default: Any = None) -> Any:
    """Read *name* from a mapping key or an attribute."""
    if isinstance(value, Mapping):
        return value.get(name, default)
    return getattr(value, name, default)


def script_tag(src: str) -> str:
    return f"<script src='{src}'></script>"


def head_block(head: str | None) -> str:
    """Wrap page head markup between the hydration sentinels."""
    return f"{HEAD_START}{head or ''}{HEAD_END}"


def style_block(css: Any) -> str:
    """Inline critical CSS, or ``""`` when the page has none.

    *css* is whatever the page's ``render`` returned under ``css``: a
    mapping or object with a ``code`` string, or ``None``.
    """
    if css is None:
        return ""
    code = field_of(css, "code")
    if not code:
        return ""
    return f"<style>{code}</style>"


def serialize_preloaded(data: Any) -> str | None:
    """Serialize preloaded data for embedding in an inline script.

    Returns ``None`` when *data* cannot be serialized (cycles, values
    JSON has no encoding for). Callers treat that as "no inline data".
    """
    try:
        payload = json.dumps(data, separators=(",", ":"))
    except (TypeError, ValueError, RecursionError) as exc:
        logger.debug("preloaded data not serializable, omitting inline data: %s", exc)
        return None
    return payload.translate(_UNSAFE_CHARS)


def scripts_block(main_file: str, serialized: str | None) -> str:
    """Entry script tag, preceded by the inline data script when there is data."""
    main = script_tag(main_file)
    if serialized:
        return f"<script>__WREN__ = {{ preloaded: {serialized} }};</script>{main}"
    return main


def preload_link_header(*scripts: str | None) -> str:
    """``Link`` header value advertising *scripts* as preloadable."""
    return ", ".join(f'<{src}>;rel="preload";as="script"' for src in scripts if src)

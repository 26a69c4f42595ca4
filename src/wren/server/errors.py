"""Fallback documents: not-found and internal error pages.

Both are rendered through the same templates as ordinary pages so the
layout stays consistent.
"""

import html
import logging
import traceback
from collections.abc import Callable

from kida.template import Markup

from wren.assets.cache import AssetCache
from wren.http.request import Request
from wren.http.response import Response
from wren.templating.slots import field_of, script_tag
from wren.templating.templates import Templates

logger = logging.getLogger("wren.server")


def format_stack(exc: BaseException) -> str:
    """The traceback frames of *exc*, without the line repeating its message."""
    if exc.__traceback__ is None:
        return ""
    return "".join(traceback.format_tb(exc.__traceback__)).rstrip("\n")


def error_detail(exc: BaseException) -> str:
    """Human-readable detail for *exc*: ``detail`` if present, else its message."""
    return field_of(exc, "detail") or str(exc) or "Unknown error"


def render_error(exc: BaseException, url: str, templates: Templates) -> Response:
    """Render *exc* as a 500 page.

    The detail is HTML-escaped: error text can carry user input.
    """
    title = type(exc).__name__ or "Internal server error"
    escaped = html.escape(error_detail(exc))
    stack = format_stack(exc)
    try:
        body = templates.render(500, title=title, url=url, error=Markup(escaped), stack=stack)
    except Exception:
        logger.exception("error template failed while rendering 500 for %s", url)
        body = f"<h1>{html.escape(title)}</h1><pre>{escaped}</pre>"
    return Response(body=body, status=500)


class NotFoundHandler:
    """Terminal continuation: renders the 404 page.

    Reads the entry script from the live asset cache on every call.
    """

    __slots__ = ("assets", "templates")

    def __init__(self, assets: Callable[[], AssetCache], templates: Templates) -> None:
        self.assets = assets
        self.templates = templates

    async def __call__(self, request: Request) -> Response:
        logger.debug("404 %s %s", request.method, request.url)
        body = self.templates.render(
            404,
            title="Not found",
            status=404,
            method=request.method,
            url=request.url,
            scripts=script_tag(self.assets().client.main_file),
        )
        return Response(body=body, status=404)

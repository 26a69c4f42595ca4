"""ASGI handler: translates ASGI scope/messages to wren types.

The only component that touches raw ASGI directly. Converts the scope
to a Request, runs it through the chain, and sends the resulting
response back through ASGI ``send()``.
"""

import logging

from wren._internal.asgi import Receive, Scope, Send
from wren.http.request import Request
from wren.http.response import StreamingResponse
from wren.middleware.protocol import AnyResponse, Middleware, Next
from wren.server.errors import render_error
from wren.server.sender import send_response, send_streaming_response
from wren.templating.templates import Templates

logger = logging.getLogger("wren.server")


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    chain: Middleware,
    fallback: Next,
    templates: Templates,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)

    response: AnyResponse
    try:
        response = await chain(request, fallback)
    except Exception as exc:
        # Route dispatch converts its own failures; this covers the stages before it
        logger.exception("500 %s %s", request.method, request.path)
        response = render_error(exc, request.path, templates)

    if isinstance(response, StreamingResponse):
        await send_streaming_response(response, send)
    else:
        await send_response(response, send)

"""ASGI response sending: translates wren responses to ASGI messages.

Handles both single-body responses and chunked streaming responses.
"""

import logging
from collections.abc import AsyncIterator

from wren._internal.asgi import Send
from wren.http.response import Response, StreamingResponse

logger = logging.getLogger("wren.server")

# Written in place of the rest of a document whose stream failed mid-way
STREAM_ERROR_CHUNK = b"<!-- wren: render error -->"


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


def _raw_headers(response: Response | StreamingResponse) -> list[tuple[bytes, bytes]]:
    raw = [(b"content-type", response.content_type.encode("latin-1"))]
    raw.extend(
        (name.lower().encode("latin-1"), value.encode("latin-1")) for name, value in response.headers
    )
    return raw


async def send_response(response: Response, send: Send) -> None:
    """Translate a Response into ASGI send() calls."""
    raw_headers = _raw_headers(response)
    body = response.body_bytes if _body_allowed(response.status) else b""
    raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))

    await send({"type": "http.response.start", "status": response.status, "headers": raw_headers})
    await send({"type": "http.response.body", "body": body})


async def send_streaming_response(response: StreamingResponse, send: Send) -> None:
    """Send a streaming response via chunked transfer encoding.

    Sends headers immediately, then each chunk as an ASGI body message
    with ``more_body=True``, and closes with an empty body. Headers are
    already out when a chunk fails, so a failure is logged and the
    document ends with an HTML comment.
    """
    raw_headers = _raw_headers(response)
    raw_headers.append((b"transfer-encoding", b"chunked"))
    await send({"type": "http.response.start", "status": response.status, "headers": raw_headers})

    try:
        if isinstance(response.chunks, AsyncIterator):
            async for chunk in response.chunks:
                await _send_chunk(send, chunk)
        else:
            for chunk in response.chunks:
                await _send_chunk(send, chunk)
    except Exception:
        logger.exception("stream failed after headers were sent")
        await send({"type": "http.response.body", "body": STREAM_ERROR_CHUNK, "more_body": True})

    await send({"type": "http.response.body", "body": b"", "more_body": False})


async def _send_chunk(send: Send, chunk: str | bytes) -> None:
    if not chunk:
        return
    body = chunk.encode("utf-8") if isinstance(chunk, str) else chunk
    await send({"type": "http.response.body", "body": body, "more_body": True})

"""Handler protocol and Next type alias.

A chain stage is any callable matching::

    async def stage(request: Request, next: Next) -> AnyResponse: ...

No base class required. A stage terminates the chain by returning a
response, or delegates with ``return await next(request)``. Plain
``def`` stages are accepted too; the chain awaits whatever they return.
"""

from collections.abc import Awaitable, Callable
from typing import Protocol

from wren.http.request import Request
from wren.http.response import Response, StreamingResponse

# Any response type the pipeline can produce
type AnyResponse = Response | StreamingResponse

# The next stage in the chain
type Next = Callable[[Request], Awaitable[AnyResponse]]


class Middleware(Protocol):
    """Protocol for chain stages.

    Accepts both functions and callable objects::

        # Function stage
        async def timing(request: Request, next: Next) -> AnyResponse:
            start = time.monotonic()
            response = await next(request)
            return response.with_header("X-Time", f"{time.monotonic() - start:.3f}")

        # Class stage
        class Gate:
            async def __call__(self, request: Request, next: Next) -> AnyResponse:
                ...
    """

    async def __call__(self, request: Request, next: Next) -> AnyResponse: ...

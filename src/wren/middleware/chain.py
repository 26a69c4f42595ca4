"""Sequential composition of chain stages.

``compose`` turns an ordered list of stages into one stage. Stages run
strictly one after another: stage *N+1* starts only when stage *N*
awaits ``next``. When the list is exhausted, control passes to the
``next`` the composed stage was called with.
"""

from collections.abc import Iterable
from dataclasses import replace

from wren._internal.invoke import invoke
from wren.http.request import Request
from wren.middleware.protocol import AnyResponse, Middleware, Next


class Chain:
    """An ordered, immutable sequence of stages usable as a single stage.

    Usage::

        chain = Chain([set_pathname, index_handler, route_handler])
        response = await chain(request, not_found)
    """

    __slots__ = ("stages",)

    def __init__(self, stages: Iterable[Middleware]) -> None:
        self.stages: tuple[Middleware, ...] = tuple(stages)

    def __len__(self) -> int:
        return len(self.stages)

    async def __call__(self, request: Request, next: Next) -> AnyResponse:
        handler = next
        for stage in reversed(self.stages):
            handler = _link(stage, handler)
        return await handler(request)


def _link(stage: Middleware, downstream: Next) -> Next:
    async def proceed(request: Request) -> AnyResponse:
        return await invoke(stage, request, downstream)

    return proceed


def compose(stages: Iterable[Middleware]) -> Chain:
    """Compose *stages* into a single stage (see :class:`Chain`)."""
    return Chain(stages)


async def set_pathname(request: Request, next: Next) -> AnyResponse:
    """Set ``request.pathname`` once, for every later stage.

    The server hands over the path already split from the query string
    and percent-decoded, so an encoded ``%3F`` stays part of the path.
    """
    return await next(replace(request, pathname=request.path))

"""Streamed document assembly.

A page document is a fixed sequence of literal text and named slots.
Each slot's value is computed independently, and the computations may
finish in any order, but bytes leave strictly in document order:

    skeleton text --> slot 1 --> text --> slot 2 --> ...

Text before the first slot goes out as soon as the stream is iterated.
A slot that finishes early is held by the :class:`SlotSequencer` until
every slot before it has been flushed.

Page dispatch awaits the shared preload and render step before it hands
the stream to the sender, so nothing, not even the skeleton, is sent
until that step has succeeded. Failures there become an ordinary 500.
"""

import asyncio
import inspect
from collections.abc import AsyncIterator, Awaitable, Iterable, Mapping
from typing import Any

from wren.templating.templates import Slot, Templates


async def _settle(value: Awaitable[str] | str) -> str:
    if inspect.isawaitable(value):
        return await value
    return value


class SlotSequencer:
    """Runs slot computations concurrently and releases them in order.

    Every computation starts as soon as the sequencer is built. ``release``
    waits for one slot; the document walk calls it in slot order, so an
    early finisher simply waits in its task until its turn.
    """

    __slots__ = ("_released", "_tasks")

    def __init__(self, slots: Mapping[str, Awaitable[str] | str]) -> None:
        self._tasks: dict[str, asyncio.Future[str]] = {
            name: asyncio.ensure_future(_settle(value)) for name, value in slots.items()
        }
        self._released: list[str] = []

    @property
    def released(self) -> tuple[str, ...]:
        """Slot names in the order they were flushed."""
        return tuple(self._released)

    async def release(self, name: str) -> str:
        """Wait for slot *name* and mark it flushed."""
        value = await self._tasks[name]
        self._released.append(name)
        return value

    def cancel(self) -> None:
        """Stop unfinished computations and collect finished failures."""
        for task in self._tasks.values():
            if not task.done():
                task.cancel()
            elif not task.cancelled():
                task.exception()


async def stream_document(
    segments: Iterable[str | Slot],
    slots: Mapping[str, Awaitable[str] | str],
) -> AsyncIterator[str]:
    """Yield the document chunk by chunk, slots in document order."""
    sequencer = SlotSequencer(slots)
    try:
        for segment in segments:
            if isinstance(segment, Slot):
                chunk = await sequencer.release(segment.name)
            else:
                chunk = segment
            if chunk:
                yield chunk
    finally:
        sequencer.cancel()


def render_document(templates: Templates, status: int, values: Mapping[str, Any]) -> str:
    """Render the whole document at once from already-resolved slot values."""
    return templates.render(status, **values)


def render_stream(
    templates: Templates,
    status: int,
    slots: Mapping[str, Awaitable[str] | str],
) -> AsyncIterator[str]:
    """Stream the document for *status* with pending slot values.

    The template is rendered to segments here, before the iterator is
    returned, so a broken template raises to the caller rather than
    after the response headers are out.
    """
    segments = templates.segments(status, tuple(slots))
    return stream_document(segments, slots)

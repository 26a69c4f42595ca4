"""Document templates, slot fragments and streamed assembly."""

from wren.templating.streaming import SlotSequencer, render_document, stream_document
from wren.templating.templates import Slot, Templates

__all__ = [
    "Slot",
    "SlotSequencer",
    "Templates",
    "render_document",
    "stream_document",
]

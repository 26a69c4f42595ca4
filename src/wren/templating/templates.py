"""Kida-backed document templates.

Three documents, picked by status class:

    2xx.html -- the page document, with ``scripts``/``html``/``head``/``styles`` slots
    4xx.html -- the not-found page
    5xx.html -- the error page

Built-in versions ship here; files with the same names in the configured
template directory take precedence. Slot values are inserted unescaped
(they are markup built by wren); everything else is autoescaped.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from kida import ChoiceLoader, DictLoader, Environment, FileSystemLoader
from kida.template import Markup

PAGE_SLOTS = ("scripts", "html", "head", "styles")

PAGE_TEMPLATE = """\
<!doctype html>
<html>
<head>
\t<meta charset='utf-8'>
\t<meta name='viewport' content='width=device-width'>
\t{{ head }}
\t{{ styles }}
</head>
<body>
\t<div id='wren'>{{ html }}</div>
\t{{ scripts }}
</body>
</html>
"""

NOT_FOUND_TEMPLATE = """\
<!doctype html>
<html>
<head>
\t<meta charset='utf-8'>
\t<title>{{ title }}</title>
</head>
<body>
\t<h1>{{ title }}</h1>
\t<p>Could not find {{ method }} {{ url }}</p>
\t{{ scripts }}
</body>
</html>
"""

ERROR_TEMPLATE = """\
<!doctype html>
<html>
<head>
\t<meta charset='utf-8'>
\t<title>{{ title }}</title>
</head>
<body>
\t<h1>{{ title }}</h1>
\t<p>Error while rendering {{ url }}</p>
\t<pre class='error'>{{ error }}</pre>
{% if stack %}
\t<pre class='stack'>{{ stack }}</pre>
{% end %}
</body>
</html>
"""

DEFAULT_TEMPLATES: dict[str, str] = {
    "2xx.html": PAGE_TEMPLATE,
    "4xx.html": NOT_FOUND_TEMPLATE,
    "5xx.html": ERROR_TEMPLATE,
}

_MARKER = re.compile(r"<!--%wren\.(\w+)%-->")


@dataclass(frozen=True, slots=True)
class Slot:
    """A named hole in a segmented document."""

    name: str


def _marker(name: str) -> Markup:
    return Markup(f"<!--%wren.{name}%-->")


def create_environment(template_dir: str | Path | None = None, *, auto_reload: bool = False) -> Environment:
    """Create the kida Environment used for every document.

    A missing *template_dir* is not an error; the built-ins are used.
    """
    loaders = []
    if template_dir is not None and Path(template_dir).is_dir():
        loaders.append(FileSystemLoader(str(template_dir)))
    loaders.append(DictLoader(DEFAULT_TEMPLATES))
    return Environment(
        loader=ChoiceLoader(loaders),
        autoescape=True,
        auto_reload=auto_reload,
    )


class Templates:
    """Renders documents by HTTP status.

    ``render`` produces a complete string. ``segments`` produces the same
    document as a sequence of literal text and :class:`Slot` holes, for
    streamed assembly.
    """

    __slots__ = ("env",)

    def __init__(
        self,
        template_dir: str | Path | None = None,
        *,
        env: Environment | None = None,
        auto_reload: bool = False,
    ) -> None:
        self.env = env or create_environment(template_dir, auto_reload=auto_reload)

    @staticmethod
    def template_name(status: int) -> str:
        return f"{status // 100}xx.html"

    def render(self, status: int, **context: Any) -> str:
        """Render the document for *status*.

        Values for the page slots are inserted raw; pass other markup as
        ``Markup`` if it must not be escaped.
        """
        for name in PAGE_SLOTS:
            if isinstance(context.get(name), str):
                context[name] = Markup(context[name])
        template = self.env.get_template(self.template_name(status))
        return template.render(context)

    def segments(
        self,
        status: int,
        slots: Iterable[str] = PAGE_SLOTS,
        **context: Any,
    ) -> tuple[str | Slot, ...]:
        """Split the document for *status* into literal text and slot holes."""
        names = tuple(slots)
        template = self.env.get_template(self.template_name(status))
        skeleton = template.render({**context, **{name: _marker(name) for name in names}})

        parts: list[str | Slot] = []
        pieces = _MARKER.split(skeleton)
        # re.split with one group alternates text, name, text, name, ..., text
        for index, piece in enumerate(pieces):
            if index % 2:
                parts.append(Slot(piece) if piece in names else _marker(piece))
            elif piece:
                parts.append(piece)
        return tuple(parts)

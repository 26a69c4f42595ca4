"""Route frozen dataclass and pattern compilation."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from wren.errors import ConfigurationError
from wren.routing.params import CONVERTERS, convert_param


class RouteKind(StrEnum):
    PAGE = "page"
    ENDPOINT = "endpoint"


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route pattern.

    Static:  ``/users``      (is_param=False)
    Param:   ``/{id}``       (is_param=True, param_name="id")
    Typed:   ``/{id:int}``   (is_param=True, param_name="id", param_type="int")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None
    param_type: str = "str"


def parse_pattern(pattern: str) -> list[PathSegment]:
    """Parse a route pattern into segments.

    Examples::

        "/blog"              -> [PathSegment("blog")]
        "/blog/{slug}"       -> [PathSegment("blog"), PathSegment("{slug}", is_param=True, ...)]
        "/files/{rest:path}" -> [..., PathSegment("{rest:path}", is_param=True, param_type="path")]
    """
    segments: list[PathSegment] = []
    for part in pattern.strip("/").split("/"):
        if not part:
            continue
        if part.startswith("{") and part.endswith("}"):
            name, _, param_type = part[1:-1].partition(":")
            param_type = param_type or "str"
            if param_type not in CONVERTERS:
                msg = f"Unknown converter {param_type!r} in route pattern {pattern!r}."
                raise ConfigurationError(msg)
            segments.append(
                PathSegment(value=part, is_param=True, param_name=name, param_type=param_type)
            )
        else:
            segments.append(PathSegment(value=part))
    return segments


def compile_pattern(pattern: str) -> tuple[re.Pattern[str], dict[str, str]]:
    """Compile a route pattern to an anchored regex plus its parameter types."""
    segments = parse_pattern(pattern)
    types: dict[str, str] = {}
    parts: list[str] = []
    for index, seg in enumerate(segments):
        if not seg.is_param:
            parts.append(re.escape(seg.value))
            continue
        if seg.param_type == "path" and index != len(segments) - 1:
            msg = f"Catch-all parameter must be the last segment of {pattern!r}."
            raise ConfigurationError(msg)
        regex, _ = CONVERTERS[seg.param_type]
        parts.append(f"(?P<{seg.param_name}>{regex})")
        types[seg.param_name or ""] = seg.param_type
    if not parts:
        return re.compile("^/$"), types
    return re.compile("^/" + "/".join(parts) + "/?$"), types


@dataclass(frozen=True, slots=True)
class Route:
    """A registered route. Never modified after registration.

    ``id`` names the route's export in the compiled server bundle and its
    entry in the client manifest's ``routes``.
    """

    id: str
    kind: RouteKind
    pattern: re.Pattern[str]
    param_types: dict[str, str] = field(default_factory=dict)
    source: str = ""

    @classmethod
    def from_pattern(cls, id: str, pattern: str, kind: RouteKind | str = RouteKind.PAGE) -> Route:
        """Build a route from a ``/blog/{slug}``-style pattern."""
        regex, types = compile_pattern(pattern)
        return cls(id=id, kind=RouteKind(kind), pattern=regex, param_types=types, source=pattern)

    @property
    def is_page(self) -> bool:
        return self.kind is RouteKind.PAGE

    def test(self, pathname: str) -> bool:
        """Whether this route's pattern matches *pathname*."""
        return self.pattern.match(pathname) is not None

    def exec(self, pathname: str) -> dict[str, Any]:
        """Extract route parameters from *pathname* (``{}`` if it doesn't match)."""
        match = self.pattern.match(pathname)
        if match is None:
            return {}
        params: dict[str, Any] = {}
        for name, value in match.groupdict().items():
            try:
                params[name] = convert_param(value, self.param_types.get(name, "str"))
            except ValueError:
                params[name] = value
        return params

"""Ordered route table.

Routes are registered during setup and frozen with ``compile()``; after
that the table is read-only and safe to share between requests.
"""

from collections.abc import Iterable, Iterator

from wren.errors import ConfigurationError
from wren.routing.route import Route


class RouteTable:
    """First-match-wins route table.

    Usage::

        table = RouteTable()
        table.add(Route.from_pattern("_about", "/about"))
        table.add(Route.from_pattern("_slug", "/{slug}"))
        table.compile()
        route = table.find("/about")   # the "_about" route
    """

    __slots__ = ("_compiled", "_ids", "_routes")

    def __init__(self, routes: Iterable[Route] = ()) -> None:
        self._routes: list[Route] = []
        self._ids: set[str] = set()
        self._compiled = False
        for route in routes:
            self.add(route)

    def add(self, route: Route) -> None:
        """Append *route*. Must be called before ``compile()``."""
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)
        if route.id in self._ids:
            msg = f"Duplicate route id {route.id!r}."
            raise ConfigurationError(msg)
        self._ids.add(route.id)
        self._routes.append(route)

    def compile(self) -> None:
        """Freeze the table. No more routes can be added."""
        self._compiled = True

    @property
    def compiled(self) -> bool:
        return self._compiled

    def find(self, pathname: str) -> Route | None:
        """The first route, in registration order, whose pattern matches."""
        for route in self._routes:
            if route.test(pathname):
                return route
        return None

    def __iter__(self) -> Iterator[Route]:
        return iter(self._routes)

    def __len__(self) -> int:
        return len(self._routes)

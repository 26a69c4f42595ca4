"""Query string parameters."""

from collections.abc import Iterator, Mapping
from typing import Any
from urllib.parse import parse_qs


class QueryParams(Mapping[str, str]):
    """Immutable, multi-value query string parameters.

    ``query["page"]`` is the first value; ``get_list`` returns all of them.
    """

    __slots__ = ("_data", "_raw")

    def __init__(self, query_string: bytes | str = b"") -> None:
        if isinstance(query_string, str):
            query_string = query_string.encode("latin-1")
        self._raw = query_string
        self._data: dict[str, list[str]] = parse_qs(
            query_string.decode("latin-1"), keep_blank_values=True
        )

    def __getitem__(self, key: str) -> str:
        return self._data[key][0]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"QueryParams({self.to_dict()!r})"

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key*."""
        return list(self._data.get(key, []))

    def to_dict(self) -> dict[str, Any]:
        """Plain dict view: single values unwrapped, repeated keys kept as lists."""
        return {key: values[0] if len(values) == 1 else list(values) for key, values in self._data.items()}

    @property
    def string(self) -> str:
        """The raw query string (without the leading ``?``)."""
        return self._raw.decode("latin-1")

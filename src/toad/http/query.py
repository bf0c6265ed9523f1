"""Query string parameters, parsed from a request URL.

``Request.query`` builds one on demand; routing never looks at it.
"""

from collections.abc import Iterator, Mapping
from urllib.parse import parse_qsl


class QueryParams(Mapping[str, str]):
    """Query string parameters, in the order they appear.

    ``params["tag"]`` is the first value for ``tag``; ``get_list("tag")``
    is every value. ``str(params)`` gives back the query string itself.
    """

    __slots__ = ("_pairs", "_source")

    def __init__(self, query_string: str = "") -> None:
        self._source = query_string
        self._pairs = tuple(parse_qsl(query_string, keep_blank_values=True))

    def __getitem__(self, key: str) -> str:
        for name, value in self._pairs:
            if name == key:
                return value
        raise KeyError(key)

    def __iter__(self) -> Iterator[str]:
        return iter(dict.fromkeys(name for name, _ in self._pairs))

    def __len__(self) -> int:
        return len({name for name, _ in self._pairs})

    def __str__(self) -> str:
        return self._source

    def __repr__(self) -> str:
        return f"QueryParams({self._source!r})"

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key*, in order."""
        return [value for name, value in self._pairs if name == key]

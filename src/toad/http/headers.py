"""Case-insensitive HTTP headers.

``Headers`` is the immutable request-side mapping. ``MutableHeaders``
is the response-side builder that middleware such as ``set_header``
and ``append_header`` write to before a handler builds its response.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping

type HeaderPairs = Iterable[tuple[str, str]]


def _pairs(source: Mapping[str, str] | HeaderPairs | None) -> tuple[tuple[str, str], ...]:
    if source is None:
        return ()
    if isinstance(source, Mapping):
        return tuple((str(k), str(v)) for k, v in source.items())
    return tuple((str(k), str(v)) for k, v in source)


class Headers(Mapping[str, str]):
    """Immutable, case-insensitive HTTP headers.

    ``__getitem__`` returns the first matching value.
    ``get_list`` returns all values for a header (e.g. multiple ``Cookie``).
    """

    __slots__ = ("_items",)

    def __init__(self, source: Mapping[str, str] | HeaderPairs | None = None) -> None:
        object.__setattr__(self, "_items", _pairs(source))

    @classmethod
    def from_raw(cls, raw: Iterable[tuple[bytes, bytes]]) -> Headers:
        """Build from ASGI-style raw byte pairs."""
        return cls((name.decode("latin-1"), value.decode("latin-1")) for name, value in raw)

    def __setattr__(self, name: str, value: object) -> None:
        msg = "Headers is immutable"
        raise AttributeError(msg)

    def __getitem__(self, key: str) -> str:
        key_lower = key.lower()
        for name, value in self._items:
            if name.lower() == key_lower:
                return value
        raise KeyError(key)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        key_lower = key.lower()
        return any(name.lower() == key_lower for name, _ in self._items)

    def __iter__(self) -> Iterator[str]:
        seen: set[str] = set()
        for name, _ in self._items:
            key = name.lower()
            if key not in seen:
                seen.add(key)
                yield key

    def __len__(self) -> int:
        return len(set(self))

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"Headers({{{items}}})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first value for *key*, or *default* if missing."""
        try:
            return self[key]
        except KeyError:
            return default

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key*."""
        key_lower = key.lower()
        return [value for name, value in self._items if name.lower() == key_lower]

    def items_list(self) -> list[tuple[str, str]]:
        """All ``(name, value)`` pairs in arrival order, names as sent."""
        return list(self._items)


class MutableHeaders:
    """Case-insensitive, multi-valued header builder.

    ``get`` joins repeated values with ``", "`` the way a fetch-style
    ``Headers`` object does, so ``append("foo", "bar")`` followed by
    ``append("foo", "baz")`` reads back as ``"bar, baz"``.
    """

    __slots__ = ("_items",)

    def __init__(self, source: Mapping[str, str] | HeaderPairs | None = None) -> None:
        self._items: list[tuple[str, str]] = [(n.lower(), v) for n, v in _pairs(source)]

    def set(self, name: str, value: str) -> None:
        """Replace every value of *name* with *value*."""
        self.delete(name)
        self._items.append((name.lower(), value))

    def append(self, name: str, value: str) -> None:
        """Add *value* without touching existing values of *name*."""
        self._items.append((name.lower(), value))

    def delete(self, name: str) -> None:
        key = name.lower()
        self._items = [(n, v) for n, v in self._items if n != key]

    def get(self, name: str, default: str | None = None) -> str | None:
        values = self.get_list(name)
        if not values:
            return default
        return ", ".join(values)

    def get_list(self, name: str) -> list[str]:
        key = name.lower()
        return [v for n, v in self._items if n == key]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and any(n == name.lower() for n, _ in self._items)

    def __len__(self) -> int:
        return len(self._items)

    def items(self) -> tuple[tuple[str, str], ...]:
        """Snapshot of all pairs, suitable for ``Response.headers``."""
        return tuple(self._items)

    def __repr__(self) -> str:
        return f"MutableHeaders({self._items!r})"

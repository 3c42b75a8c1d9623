"""Multi-valued response headers and the default header policy."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping

from config import CORS_ALLOW_HEADERS, ServerConfig

HeaderPairs = Iterable[tuple[str, str]]


class Headers:
    """Ordered, case-insensitive header collection that keeps repeated names.

    ``append`` adds another value for a name; ``set`` replaces every value for
    that name with a single one at the position of the first occurrence.
    """

    __slots__ = ("_items",)

    def __init__(self, initial: Headers | Mapping[str, str] | HeaderPairs | None = None) -> None:
        self._items: list[tuple[str, str]] = []
        if initial is None:
            return
        if isinstance(initial, Headers):
            self._items = list(initial._items)
            return
        self.extend(initial.items() if isinstance(initial, Mapping) else initial)

    def append(self, name: str, value: str) -> None:
        self._items.append((name, str(value)))

    def extend(self, pairs: HeaderPairs) -> None:
        for name, value in pairs:
            self.append(name, value)

    def set(self, name: str, value: str) -> None:
        key = name.lower()
        replaced = False
        kept: list[tuple[str, str]] = []
        for existing_name, existing_value in self._items:
            if existing_name.lower() != key:
                kept.append((existing_name, existing_value))
            elif not replaced:
                kept.append((name, str(value)))
                replaced = True
        if not replaced:
            kept.append((name, str(value)))
        self._items = kept

    def setdefault(self, name: str, value: str) -> str:
        current = self.get(name)
        if current is not None:
            return current
        self.append(name, value)
        return value

    def get(self, name: str, default: str | None = None) -> str | None:
        """Return all values for ``name`` joined with ``", "``, or ``default``."""
        values = self.get_all(name)
        if not values:
            return default
        return ", ".join(values)

    def get_all(self, name: str) -> list[str]:
        key = name.lower()
        return [value for existing, value in self._items if existing.lower() == key]

    def delete(self, name: str) -> None:
        key = name.lower()
        self._items = [(n, v) for n, v in self._items if n.lower() != key]

    def pop(self, name: str, default: str | None = None) -> str | None:
        value = self.get(name, default)
        self.delete(name)
        return value

    def copy(self) -> "Headers":
        return Headers(self)

    def items(self) -> list[tuple[str, str]]:
        return list(self._items)

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        key = name.lower()
        return any(existing.lower() == key for existing, _ in self._items)

    def __getitem__(self, name: str) -> str:
        value = self.get(name)
        if value is None:
            raise KeyError(name)
        return value

    def __setitem__(self, name: str, value: str) -> None:
        self.set(name, value)

    def __delitem__(self, name: str) -> None:
        if name not in self:
            raise KeyError(name)
        self.delete(name)

    def __iter__(self) -> Iterator[str]:
        return (name for name, _ in self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Headers):
            return NotImplemented
        return [(n.lower(), v) for n, v in self._items] == [
            (n.lower(), v) for n, v in other._items
        ]

    def __repr__(self) -> str:
        return f"Headers({self._items!r})"


def parse_header_spec(raw: str) -> tuple[str, str]:
    """Split a ``"Name: value"`` string on its first colon.

    Anything after the first colon is the value, colons included. A string
    with no colon is treated as a bare name with an empty value.
    """
    name, _sep, value = raw.partition(":")
    return name.strip(), value.strip()


def build_default_headers(config: ServerConfig) -> Headers:
    headers = Headers()
    headers.append("content-type", "text/html")
    for raw in config.extra_headers:
        headers.append(*parse_header_spec(raw))
    if config.cors_enabled:
        headers.extend(cors_headers())
    return headers


def cors_headers() -> list[tuple[str, str]]:
    return [
        ("access-control-allow-origin", "*"),
        ("access-control-allow-headers", CORS_ALLOW_HEADERS),
    ]

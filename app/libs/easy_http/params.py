import re
from collections.abc import Iterable, Iterator, Mapping
from urllib.parse import parse_qsl, urlencode

from .exceptions import URLParseError

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2}).{0,2}")


class Params:
    """Ordered multi-value mapping used for query params, headers and form data."""

    def __init__(self, values: Mapping[str, str | list[str]] | None = None):
        self._data: dict[str, list[str]] = {}
        if values:
            for key, value in values.items():
                if isinstance(value, list):
                    self.set_all(key, value)
                else:
                    self.set(key, value)

    def _key(self, key: str) -> str:
        return key

    def set(self, key: str, value: str) -> None:
        self._data[self._key(key)] = [value]

    def set_all(self, key: str, values: Iterable[str]) -> None:
        self._data[self._key(key)] = list(values)

    def add(self, key: str, value: str) -> None:
        self._data.setdefault(self._key(key), []).append(value)

    def get(self, key: str) -> str:
        values = self._data.get(self._key(key))
        return values[0] if values else ""

    def get_all(self, key: str) -> list[str]:
        return list(self._data.get(self._key(key), []))

    def delete(self, key: str) -> None:
        self._data.pop(self._key(key), None)

    def keys(self) -> list[str]:
        return list(self._data)

    def items(self) -> list[tuple[str, list[str]]]:
        return [(key, list(values)) for key, values in self._data.items()]

    def multi_items(self) -> list[tuple[str, str]]:
        return [(key, value) for key, values in self._data.items() for value in values]

    def to_dict(self) -> dict[str, list[str]]:
        return {key: list(values) for key, values in self._data.items()}

    def copy(self):
        clone = type(self)()
        clone._data = self.to_dict()
        return clone

    def encode(self) -> str:
        return urlencode(self.multi_items())

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._key(key) in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._data))

    def __len__(self) -> int:
        return len(self._data)

    def __bool__(self) -> bool:
        return bool(self._data)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Params):
            return self._data == other._data
        return NotImplemented

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._data!r})"


def canonical_header_key(key: str) -> str:
    """``content-type`` -> ``Content-Type``."""
    return "-".join(part[:1].upper() + part[1:].lower() for part in key.split("-"))


class Headers(Params):
    def _key(self, key: str) -> str:
        return canonical_header_key(key)


def merge_params(client_params: Params, request_params: Params) -> Params:
    """Request keys win; client keys absent at request level are inherited whole."""
    merged = request_params.copy()
    for key, values in client_params.items():
        if key in merged:
            continue
        merged.set_all(key, values)
    return merged


def parse_query_string(query: str) -> list[tuple[str, str]]:
    query = query.strip()
    if not query:
        return []
    if ";" in query:
        raise URLParseError(f"invalid query string {query!r}: semicolon separator")
    if match := _BAD_ESCAPE.search(query):
        raise URLParseError(f"invalid query string {query!r}: bad escape {match.group()!r}")
    # bare keys decode to "", empty segments are skipped
    return parse_qsl(query, keep_blank_values=True)

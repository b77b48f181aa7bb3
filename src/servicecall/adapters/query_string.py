"""Query-string encoder for nested request data.

Supports a practical subset of bracket notation:
- mappings: `filters[name]=foo`
- sequences (index style): `ids[0]=1&ids[1]=2`
- booleans as `true`/`false`; `None` values are skipped.

Keys keep their brackets literal; values are percent-encoded.
"""

from __future__ import annotations

from typing import Any, Iterator, Mapping
from urllib.parse import quote


def encode_query(data: Any) -> str:
    if data is None:
        return ""
    if isinstance(data, Mapping):
        items = ((str(k), v) for k, v in data.items())
    elif _is_sequence(data):
        items = ((str(i), v) for i, v in enumerate(data))
    else:
        raise TypeError(f"Query data must be a mapping or a sequence, got {type(data).__name__}")

    pairs: list[str] = []
    for key, value in items:
        pairs.extend(_encode_pairs(key, value))
    return "&".join(pairs)


def _encode_pairs(prefix: str, value: Any) -> Iterator[str]:
    if value is None:
        return
    if isinstance(value, Mapping):
        for k, v in value.items():
            yield from _encode_pairs(f"{prefix}[{k}]", v)
        return
    if _is_sequence(value):
        for i, v in enumerate(value):
            yield from _encode_pairs(f"{prefix}[{i}]", v)
        return
    yield f"{quote(prefix, safe='[]')}={quote(_scalar(value), safe='')}"


def _scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def append_query(url: str, query: Any) -> str:
    encoded = encode_query(query)
    if not encoded:
        return url
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{encoded}"

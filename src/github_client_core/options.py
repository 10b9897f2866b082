"""Structured query options and their query-string encoding.

Options are plain dataclasses. Each field declares its query key through
``query_field``; fields without one use their attribute name. Zero values
(None, 0, "", False, empty sequences) are left out of the query string, so a
default-constructed options value adds nothing:

```python
@dataclass
class IssueListOptions(ListOptions):
    state: str = query_field("state")
    labels: list[str] = query_field("labels", comma=True, default_factory=list)
    since: datetime | None = query_field("since")


add_options("repos/o/r/issues", IssueListOptions(state="open", per_page=50))
# "repos/o/r/issues?state=open&per_page=50"
```
"""

import dataclasses
import enum
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

import httpx

from github_client_core.errors.exceptions import InvalidOptionsError, InvalidURLError

_MISSING = dataclasses.MISSING


def query_field(key: str, *, comma: bool = False, default: Any = None, default_factory: Any = _MISSING) -> Any:
    """Declare a dataclass field that encodes as query parameter ``key``.

    Args:
        key: Query parameter name.
        comma: Join sequence values with commas instead of repeating the key.
        default: Default value (ignored when ``default_factory`` is given).
        default_factory: Factory for mutable defaults.
    """
    metadata = {"query": key, "comma": comma}
    if default_factory is not _MISSING:
        return dataclasses.field(default_factory=default_factory, metadata=metadata)
    return dataclasses.field(default=default, metadata=metadata)


@dataclasses.dataclass
class ListOptions:
    """Paging parameters accepted by every list endpoint."""

    page: int = query_field("page", default=0)
    per_page: int = query_field("per_page", default=0)


@dataclasses.dataclass
class UploadOptions:
    """Parameters for release asset uploads."""

    name: str = query_field("name", default="")


class RawType(enum.Enum):
    """Raw representations of a commit or pull request, selected by media type."""

    DIFF = "application/vnd.github.v3.diff"
    PATCH = "application/vnd.github.v3.patch"

    @property
    def media_type(self) -> str:
        return self.value


def _is_zero(value: Any) -> bool:
    if value is None or value is False:
        return True
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == 0
    if isinstance(value, (str, bytes, list, tuple, set, frozenset, Mapping)):
        return len(value) == 0
    return False


def _format(value: Any) -> str:
    if value is True:
        return "true"
    if isinstance(value, enum.Enum):
        return _format(value.value)
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(UTC)
            return value.strftime("%Y-%m-%dT%H:%M:%SZ")
        return value.strftime("%Y-%m-%dT%H:%M:%S")
    return str(value)


def _encode_value(key: str, value: Any, comma: bool) -> list[tuple[str, str]]:
    if _is_zero(value):
        return []
    if isinstance(value, (list, tuple, set, frozenset)):
        items = [_format(item) for item in value if not _is_zero(item)]
        if comma:
            return [(key, ",".join(items))] if items else []
        return [(key, item) for item in items]
    return [(key, _format(value))]


def encode_query(options: Any) -> list[tuple[str, str]]:
    """Encode an options value into ordered ``(key, value)`` pairs.

    Args:
        options: A dataclass instance or a mapping of parameter names to values.

    Returns:
        Pairs for every non-zero field, in declaration order.

    Raises:
        InvalidOptionsError: If ``options`` is not a dataclass instance or mapping.
    """
    if dataclasses.is_dataclass(options) and not isinstance(options, type):
        params: list[tuple[str, str]] = []
        for f in dataclasses.fields(options):
            value = getattr(options, f.name)
            if dataclasses.is_dataclass(value) and not isinstance(value, type):
                params.extend(encode_query(value))
                continue
            key = f.metadata.get("query", f.name)
            params.extend(_encode_value(key, value, f.metadata.get("comma", False)))
        return params

    if isinstance(options, Mapping):
        params = []
        for key, value in options.items():
            params.extend(_encode_value(str(key), value, False))
        return params

    raise InvalidOptionsError(f"Query options must be a dataclass instance or mapping, got {type(options).__name__}")


def add_options(url: str, options: Any) -> str:
    """Return ``url`` with the non-zero fields of ``options`` added to its query.

    ``options=None`` returns ``url`` untouched. Parameters already present in
    ``url`` are kept; option parameters with the same key replace them.

    Raises:
        InvalidURLError: If ``url`` cannot be parsed.
        InvalidOptionsError: If ``options`` cannot be encoded.
    """
    if options is None:
        return url

    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as e:
        raise InvalidURLError(f"Cannot parse URL {url!r}: {e}") from e

    params = encode_query(options)
    if not params:
        return url

    option_keys = {key for key, _ in params}
    existing = [(k, v) for k, v in parsed.params.multi_items() if k not in option_keys]
    query = str(httpx.QueryParams(existing + params))
    return str(parsed.copy_with(query=query.encode("ascii")))

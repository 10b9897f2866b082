"""Pagination metadata parsed from the ``Link`` response header."""

from collections.abc import Mapping
from dataclasses import dataclass

import httpx

_RELATIONS = {
    'rel="first"': "first",
    'rel="prev"': "prev",
    'rel="next"': "next",
    'rel="last"': "last",
}


@dataclass(frozen=True)
class Pagination:
    """Page numbers of the neighbouring pages; 0 means not present."""

    first: int = 0
    prev: int = 0
    next: int = 0
    last: int = 0

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> "Pagination":
        if isinstance(headers, httpx.Headers):
            links = headers.get_list("Link")
            return parse_link_header(links[0] if links else None)
        return parse_link_header(headers.get("Link"))


def parse_link_header(value: str | None) -> Pagination:
    """Extract first/prev/next/last page numbers from a Link header.

    Example value::

        <https://api.github.com/user/repos?page=3>; rel="next",
        <https://api.github.com/user/repos?page=50>; rel="last"

    Segments that are malformed, lack a ``page`` parameter, or name another
    relation are skipped. Pagination is advisory, so this never raises.
    """
    pages = {"first": 0, "prev": 0, "next": 0, "last": 0}
    if not value:
        return Pagination()

    for link in value.split(","):
        segments = link.strip().split(";")
        if len(segments) < 2:
            continue

        target = segments[0].strip()
        if not (target.startswith("<") and target.endswith(">")):
            continue

        try:
            url = httpx.URL(target[1:-1])
        except httpx.InvalidURL:
            continue

        page = url.params.get("page")
        if not page:
            continue
        try:
            number = int(page)
        except ValueError:
            continue

        for segment in segments[1:]:
            relation = _RELATIONS.get(segment.strip())
            if relation is not None:
                pages[relation] = number

    return Pagination(**pages)

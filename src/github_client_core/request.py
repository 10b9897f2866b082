"""Request construction for the GitHub REST API.

Resource methods build a request with ``RequestBuilder.new_request`` and hand
it to the response processor. Requests are immutable once built.

Example:
    ```python
    builder = RequestBuilder()
    url = add_options("user/repos", ListOptions(page=2))
    request = builder.new_request("GET", url)
    request = builder.new_request("PATCH", "repos/o/r", body={"private": True})
    ```
"""

import dataclasses
import enum
import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from types import MappingProxyType
from typing import Any

import httpx

from github_client_core import __version__
from github_client_core.errors.exceptions import InvalidBodyError, InvalidURLError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.github.com/"
UPLOAD_BASE_URL = "https://uploads.github.com/"
USER_AGENT = f"github-client-core/{__version__}"

MEDIA_TYPE_V3 = "application/vnd.github.v3+json"
MEDIA_TYPE_JSON = "application/json"
DEFAULT_UPLOAD_MEDIA_TYPE = "application/octet-stream"

REDACTED = "REDACTED"


def sanitize_url(url: httpx.URL | str) -> httpx.URL:
    """Replace a non-empty ``client_secret`` query parameter with REDACTED."""
    url = httpx.URL(url)
    if url.params.get("client_secret"):
        return url.copy_set_param("client_secret", REDACTED)
    return url


@dataclass(frozen=True)
class EndpointRequest:
    """A fully resolved outbound request.

    ``body`` is None when the request has no payload at all, which is not the
    same as an empty payload.
    """

    method: str
    url: httpx.URL
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    body: bytes | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    @property
    def path(self) -> str:
        return self.url.path

    def with_header(self, name: str, value: str) -> "EndpointRequest":
        """Copy of this request with ``name`` set to ``value``."""
        headers = {k: v for k, v in self.headers.items() if k.lower() != name.lower()}
        headers[name] = value
        return dataclasses.replace(self, headers=headers)

    def to_httpx(self) -> httpx.Request:
        if self.body is None:
            return httpx.Request(self.method, self.url, headers=dict(self.headers))
        return httpx.Request(self.method, self.url, headers=dict(self.headers), content=self.body)


def _json_default(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {k: v for k, v in dataclasses.asdict(value).items() if v is not None}
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, enum.Enum):
        return value.value
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def encode_body(body: Any) -> bytes:
    """Serialize a request body to JSON.

    Raises:
        InvalidBodyError: If the value cannot be represented as JSON.
    """
    try:
        return json.dumps(body, default=_json_default, allow_nan=False).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise InvalidBodyError(f"Cannot serialize request body: {e}") from e


def _parse_base(url: str, name: str) -> httpx.URL:
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as e:
        raise InvalidURLError(f"Cannot parse {name} {url!r}: {e}") from e
    if not parsed.path.endswith("/"):
        raise InvalidURLError(f"{name} must have a trailing slash, but {url!r} does not")
    return parsed


class RequestBuilder:
    """Builds EndpointRequest values relative to the API and upload base URLs.

    Args:
        base_url: API root, must end with ``/``.
        upload_url: Upload root, must end with ``/``.
        user_agent: User-Agent header value; empty string omits the header.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        upload_url: str = UPLOAD_BASE_URL,
        user_agent: str = USER_AGENT,
    ) -> None:
        self.base_url = _parse_base(base_url, "base URL")
        self.upload_url = _parse_base(upload_url, "upload URL")
        self.user_agent = user_agent

    def _resolve(self, root: httpx.URL, path: str) -> httpx.URL:
        if path.startswith("/"):
            raise InvalidURLError(f"Request path {path!r} must be relative (no leading '/')")
        try:
            return root.join(path)
        except httpx.InvalidURL as e:
            raise InvalidURLError(f"Cannot parse request path {path!r}: {e}") from e

    def new_request(
        self,
        method: str,
        path: str,
        body: Any = None,
        *,
        accept: str | None = None,
    ) -> EndpointRequest:
        """Build a request for ``path`` resolved against the base URL.

        Args:
            method: HTTP method.
            path: Relative path, optionally with a query string.
            body: Value to send as JSON, or None for no body at all.
            accept: Media type overriding the default v3 JSON type, for
                preview APIs or raw formats.

        Raises:
            InvalidURLError: If ``path`` is absolute-path or unparsable.
            InvalidBodyError: If ``body`` cannot be serialized.
        """
        url = self._resolve(self.base_url, path)

        headers = {"Accept": accept or MEDIA_TYPE_V3}
        if self.user_agent:
            headers["User-Agent"] = self.user_agent

        content = None
        if body is not None:
            content = encode_body(body)
            headers["Content-Type"] = MEDIA_TYPE_JSON

        logger.debug(f"Built request {method} {sanitize_url(url)}")
        return EndpointRequest(method=method.upper(), url=url, headers=headers, body=content)

    def new_upload_request(self, path: str, content: bytes, media_type: str | None = None) -> EndpointRequest:
        """Build a POST uploading raw ``content`` relative to the upload URL."""
        url = self._resolve(self.upload_url, path)
        headers = {
            "Accept": MEDIA_TYPE_V3,
            "Content-Type": media_type or DEFAULT_UPLOAD_MEDIA_TYPE,
            "Content-Length": str(len(content)),
        }
        if self.user_agent:
            headers["User-Agent"] = self.user_agent
        return EndpointRequest(method="POST", url=url, headers=headers, body=bytes(content))

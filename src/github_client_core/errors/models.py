"""Models for error response bodies."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

import httpx


@dataclass(frozen=True)
class FieldError:
    """A single per-field problem reported in an error body.

    Known codes: ``missing``, ``missing_field``, ``invalid``,
    ``already_exists`` and ``custom`` (in which case ``message`` is set).
    """

    resource: str = ""
    field: str = ""
    code: str = ""
    message: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "FieldError":
        if not isinstance(data, dict):
            # Some endpoints report errors as bare strings
            return cls(message=str(data))
        return cls(
            resource=str(data.get("resource") or ""),
            field=str(data.get("field") or ""),
            code=str(data.get("code") or ""),
            message=str(data.get("message") or ""),
        )

    def __str__(self) -> str:
        return f"{self.code} error caused by {self.field} field on {self.resource} resource"


@dataclass(frozen=True)
class Block:
    """Why a resource is blocked (e.g. DMCA takedown)."""

    reason: str | None = None
    created_at: datetime | None = None


@dataclass
class ErrorDetail:
    """Decoded error body: ``{"message", "errors", "block", "documentation_url"}``."""

    message: str = ""
    errors: list[FieldError] = field(default_factory=list)
    block: Block | None = None
    documentation_url: str | None = None

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ErrorDetail":
        """Parse the error body from an HTTP response.

        Bodies that are empty or not JSON objects yield an empty detail; the
        status code alone still drives classification.

        Args:
            response: HTTP response object whose content has been read

        Returns:
            ErrorDetail, possibly empty
        """
        try:
            data = response.json()
        except (ValueError, TypeError, UnicodeDecodeError):
            return cls()

        if not isinstance(data, dict):
            return cls()

        raw_errors = data.get("errors") or []
        if not isinstance(raw_errors, list):
            raw_errors = [raw_errors]

        block = None
        raw_block = data.get("block")
        if isinstance(raw_block, dict):
            created_at = None
            if raw_block.get("created_at"):
                try:
                    created_at = datetime.fromisoformat(str(raw_block["created_at"]).replace("Z", "+00:00"))
                except ValueError:
                    created_at = None
            block = Block(reason=raw_block.get("reason"), created_at=created_at)

        return cls(
            message=str(data.get("message") or ""),
            errors=[FieldError.from_dict(e) for e in raw_errors],
            block=block,
            documentation_url=data.get("documentation_url"),
        )

"""Inbound webhook deliveries: verification and dispatch to typed events."""

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from urllib.parse import parse_qs

from github_client_core.webhooks.events import EVENT_TYPES, Event
from github_client_core.webhooks.exceptions import PayloadDecodeError, UnknownEventTypeError
from github_client_core.webhooks.signature import HEADER_SIGNATURE, validate_signature

logger = logging.getLogger(__name__)

HEADER_EVENT = "X-GitHub-Event"
HEADER_DELIVERY = "X-GitHub-Delivery"

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def parse_event(event_type: str, payload: bytes | str) -> Event:
    """Decode ``payload`` into the event class registered for ``event_type``.

    The mapping is closed: an unknown name is an error, never a generic event.

    Raises:
        UnknownEventTypeError: ``event_type`` is not a known webhook event.
        PayloadDecodeError: ``payload`` is not a JSON object.
    """
    event_cls = EVENT_TYPES.get(event_type)
    if event_cls is None:
        raise UnknownEventTypeError(event_type)

    try:
        data = json.loads(payload)
    except ValueError as e:
        raise PayloadDecodeError(f"{event_type} payload is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise PayloadDecodeError(f"{event_type} payload must be a JSON object, got {type(data).__name__}")

    return event_cls.from_payload(data)


def _header(headers: Mapping[str, str], name: str) -> str | None:
    value = headers.get(name)
    if value is None:
        lowered = name.lower()
        for key, candidate in headers.items():
            if key.lower() == lowered:
                return candidate
    return value


@dataclass(frozen=True)
class WebhookEnvelope:
    """One inbound delivery, as received.

    ``body`` holds the exact request bytes the signature covers. For
    form-encoded deliveries ``payload`` is the JSON taken from the ``payload``
    form field, otherwise it is the body itself.
    """

    event_type: str
    signature: str | None
    body: bytes
    payload: bytes
    delivery_id: str | None = None

    @classmethod
    def from_headers(cls, headers: Mapping[str, str], body: bytes) -> "WebhookEnvelope":
        """Build an envelope from request headers and the raw body.

        Header lookup is case-insensitive for plain dicts too.
        """
        payload = body
        content_type = (_header(headers, "Content-Type") or "").split(";")[0].strip().lower()
        if content_type == FORM_CONTENT_TYPE:
            try:
                form = parse_qs(body.decode("utf-8"), errors="strict")
            except UnicodeDecodeError as e:
                raise PayloadDecodeError(f"form-encoded delivery is not valid UTF-8: {e}") from e
            if "payload" not in form:
                raise PayloadDecodeError("form-encoded delivery has no payload field")
            payload = form["payload"][0].encode("utf-8")

        return cls(
            event_type=_header(headers, HEADER_EVENT) or "",
            signature=_header(headers, HEADER_SIGNATURE),
            body=body,
            payload=payload,
            delivery_id=_header(headers, HEADER_DELIVERY),
        )

    def validate(self, secret: str | bytes) -> bytes:
        """Verify the signature and return the JSON payload bytes."""
        validate_signature(self.body, self.signature, secret)
        return self.payload

    def parse(self, secret: str | bytes) -> Event:
        """Verify, then decode into the typed event."""
        payload = self.validate(secret)
        event = parse_event(self.event_type, payload)
        logger.debug(f"Parsed {self.event_type} delivery {self.delivery_id}")
        return event

"""Exceptions raised while verifying and decoding inbound webhooks."""

from github_client_core.errors.exceptions import GitHubError


class WebhookError(GitHubError):
    """Base exception for webhook handling."""

    pass


class SignatureError(WebhookError):
    """The payload signature could not be verified."""

    pass


class MissingSignatureError(SignatureError):
    """No signature header was sent."""

    pass


class MalformedSignatureError(SignatureError):
    """The signature header is not ``<algorithm>=<hex digest>``."""

    pass


class UnknownAlgorithmError(SignatureError):
    """The signature names a hash algorithm that is not supported."""

    def __init__(self, algorithm: str):
        super().__init__(f"unknown signature algorithm {algorithm!r}")
        self.algorithm = algorithm


class SignatureMismatchError(SignatureError):
    """The computed digest does not match the one sent."""

    pass


class UnknownEventTypeError(WebhookError):
    """The event type is not one of the known webhook events."""

    def __init__(self, event_type: str):
        super().__init__(f"unknown webhook event type {event_type!r}")
        self.event_type = event_type


class PayloadDecodeError(WebhookError):
    """The payload is not a JSON object."""

    pass

"""HMAC signature verification for webhook payloads.

GitHub signs each delivery with the hook's secret and sends the result as
``X-Hub-Signature: sha1=<hex digest>``.
"""

import binascii
import hashlib
import hmac
import logging

from github_client_core.webhooks.exceptions import (
    MalformedSignatureError,
    MissingSignatureError,
    SignatureMismatchError,
    UnknownAlgorithmError,
)

logger = logging.getLogger(__name__)

HEADER_SIGNATURE = "X-Hub-Signature"

ALGORITHMS = {
    "sha1": hashlib.sha1,
    "sha256": hashlib.sha256,
    "sha512": hashlib.sha512,
}


def _as_bytes(value: str | bytes) -> bytes:
    return value.encode("utf-8") if isinstance(value, str) else value


def compute_signature(payload: bytes, secret: str | bytes, algorithm: str = "sha1") -> str:
    """Signature header value for ``payload`` (handy for tests and relays)."""
    if algorithm not in ALGORITHMS:
        raise UnknownAlgorithmError(algorithm)
    digest = hmac.new(_as_bytes(secret), payload, ALGORITHMS[algorithm]).hexdigest()
    return f"{algorithm}={digest}"


def validate_signature(payload: bytes, signature: str | None, secret: str | bytes) -> bytes:
    """Verify that ``signature`` was computed over ``payload`` with ``secret``.

    Args:
        payload: Exact raw request body bytes.
        signature: Signature header value, ``<algorithm>=<hex digest>``.
        secret: The webhook secret.

    Returns:
        ``payload``, unchanged, once verified.

    Raises:
        MissingSignatureError: Header absent or empty.
        MalformedSignatureError: No ``=`` separator or invalid hex.
        UnknownAlgorithmError: Algorithm other than sha1, sha256 or sha512.
        SignatureMismatchError: Digest does not match.
    """
    if not signature:
        raise MissingSignatureError("missing signature")

    algorithm, sep, hex_digest = signature.partition("=")
    if not sep:
        raise MalformedSignatureError(f"signature {signature!r} lacks an '=' separator")

    try:
        expected = binascii.unhexlify(hex_digest)
    except (binascii.Error, ValueError) as e:
        raise MalformedSignatureError(f"signature digest is not valid hex: {e}") from e

    hash_func = ALGORITHMS.get(algorithm)
    if hash_func is None:
        raise UnknownAlgorithmError(algorithm)

    actual = hmac.new(_as_bytes(secret), payload, hash_func).digest()
    if not hmac.compare_digest(actual, expected):
        logger.warning(f"Webhook payload {algorithm} signature mismatch")
        raise SignatureMismatchError("payload signature check failed")

    return payload

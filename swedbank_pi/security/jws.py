"""Detached JWS signing and verification.

Tokens follow RFC 7515 with the unencoded, detached payload option of
RFC 7797: the protected header carries ``"b64": false`` and the payload
segment of the compact serialization is left empty::

    <base64url(header)>..<base64url(signature)>

The signing input is ``base64url(header) + "." + payload`` where ``payload``
is the raw request or response body, byte for byte.
"""

from __future__ import annotations

import json
import reprlib
import time
from typing import Any, Dict, Optional, Union

from cryptography.exceptions import InvalidSignature
from cryptography.exceptions import UnsupportedAlgorithm as BackendUnsupportedAlgorithm
from cryptography.hazmat.primitives.asymmetric import ec, padding
from pydantic import BaseModel, Field

from ..constants import DEFAULT_MAX_SIGNATURE_AGE
from .algorithms import DEFAULT_ALGORITHM, ALGORITHMS, AlgorithmSpec, get_algorithm
from .der import der_to_raw, raw_to_der
from .encoding import b64url_decode, b64url_encode
from .exceptions import InvalidKey, MalformedToken, SigningFailed, StaleSignature
from .keys import ensure_key_matches, load_private_key, load_public_key

SEPARATOR = ".."
UNDERSTOOD_CRITICAL = frozenset({"b64"})

Payload = Union[bytes, str]


def _payload_bytes(payload: Payload) -> bytes:
    if isinstance(payload, str):
        return payload.encode("utf-8")
    return bytes(payload)


def _now(now: Optional[int]) -> int:
    return int(time.time()) if now is None else int(now)


def _signing_input(encoded_header: str, payload: bytes) -> bytes:
    return encoded_header.encode("ascii") + b"." + payload


def build_header(
    url: str, merchant_id: str, country: str, algorithm: str, issued_at: int
) -> Dict[str, Any]:
    """Return the protected header in its fixed key order."""
    return {
        "b64": False,
        "crit": ["b64"],
        "iat": issued_at,
        "alg": algorithm,
        "url": url,
        "kid": f"{country}:{merchant_id}",
    }


def encode_header(header: Dict[str, Any]) -> str:
    """Serialize ``header`` as compact JSON and base64url encode it."""
    return b64url_encode(json.dumps(header, separators=(",", ":")))


def sign(
    payload: Payload,
    url: str,
    merchant_id: str,
    country: str,
    private_key_pem: Union[str, bytes],
    algorithm: str = DEFAULT_ALGORITHM,
    *,
    now: Optional[int] = None,
) -> str:
    """Produce a detached JWS over ``payload`` bound to ``url`` and the merchant.

    Args:
        payload: Exact body bytes that will be sent.
        url: Request URL, signed verbatim.
        merchant_id: Merchant identifier issued by the bank.
        country: Agreement country code (``LV``, ``EE``, ``LT``).
        private_key_pem: Merchant private key in PEM format.
        algorithm: One of :data:`~swedbank_pi.security.algorithms.ALGORITHMS`.
        now: Unix time to use for ``iat``; defaults to the wall clock.

    Returns:
        The token ``<header>..<signature>``.

    Raises:
        UnsupportedAlgorithm: ``algorithm`` is not supported.
        InvalidKey: The key cannot be parsed or does not fit ``algorithm``.
        SigningFailed: The signing primitive failed.
    """
    spec = get_algorithm(algorithm)

    header = build_header(url, merchant_id, country, spec.name, _now(now))
    encoded_header = encode_header(header)
    data = _signing_input(encoded_header, _payload_bytes(payload))

    key = load_private_key(private_key_pem)
    ensure_key_matches(key, spec)
    signature = _sign_data(data, key, spec)

    return encoded_header + SEPARATOR + b64url_encode(signature)


def _sign_data(data: bytes, key: Any, spec: AlgorithmSpec) -> bytes:
    try:
        if spec.is_ec:
            der = key.sign(data, ec.ECDSA(spec.new_hash()))
            return der_to_raw(der, spec)
        return key.sign(data, padding.PKCS1v15(), spec.new_hash())
    except (ValueError, TypeError, BackendUnsupportedAlgorithm) as exc:
        raise SigningFailed(f"Failed to sign data with {spec.name}: {exc}") from exc


def _split(token: str) -> tuple:
    if not isinstance(token, str):
        raise MalformedToken("JWS token must be a string")
    parts = token.split(SEPARATOR)
    if len(parts) != 2 or not all(parts):
        raise MalformedToken(
            'Invalid JWS Detached format - expected "header..signature" '
            f"but got format: {token[:50]}"
        )
    return parts[0], parts[1]


def _decode_header(encoded_header: str) -> Dict[str, Any]:
    try:
        header = json.loads(b64url_decode(encoded_header))
    except (ValueError, RecursionError) as exc:
        raise MalformedToken(f"Invalid JWS header: {exc}") from None
    if not isinstance(header, dict):
        raise MalformedToken(f"Invalid JWS header: expected a JSON object, got {reprlib.repr(header)}")
    return header


def parse_header(token: str) -> Dict[str, Any]:
    """Decode the protected header of ``token`` without verifying it."""
    encoded_header, _ = _split(token)
    return _decode_header(encoded_header)


def _validate_header(header: Dict[str, Any]) -> AlgorithmSpec:
    if "alg" not in header or "iat" not in header:
        raise MalformedToken(f"Missing required header fields in JWS: {sorted(header)}")
    algorithm = header["alg"]
    if not isinstance(algorithm, str) or algorithm not in ALGORITHMS:
        raise MalformedToken(f"Unsupported algorithm in JWS header: {reprlib.repr(algorithm)}")
    issued_at = header["iat"]
    if isinstance(issued_at, bool) or not isinstance(issued_at, int):
        raise MalformedToken(f"Invalid iat in JWS header: {reprlib.repr(issued_at)}")
    if header.get("b64", False) is not False:
        raise MalformedToken("Only unencoded payloads (b64=false) are supported")
    critical = header.get("crit", [])
    if (
        not isinstance(critical, list)
        or not all(isinstance(name, str) for name in critical)
        or not set(critical) <= UNDERSTOOD_CRITICAL
    ):
        raise MalformedToken(f"Unsupported critical header parameters: {reprlib.repr(critical)}")
    return ALGORITHMS[algorithm]


def check_freshness(issued_at: int, max_age_seconds: int, now: Optional[int] = None) -> None:
    """Raise :class:`StaleSignature` when ``issued_at`` is too far from ``now``.

    The window is symmetric: timestamps in the future are held to the same
    tolerance as timestamps in the past. ``max_age_seconds <= 0`` disables
    the check.
    """
    if max_age_seconds <= 0:
        return
    current = _now(now)
    age = abs(current - issued_at)
    if age > max_age_seconds:
        raise StaleSignature(
            f"Signature too old: {age} seconds (iat: {issued_at}, now: {current})",
            age=age,
            issued_at=issued_at,
            now=current,
        )


def verify(
    token: str,
    payload: Payload,
    public_key_pem: Union[str, bytes],
    max_age_seconds: int = DEFAULT_MAX_SIGNATURE_AGE,
    *,
    now: Optional[int] = None,
) -> bool:
    """Verify a detached JWS against the received ``payload``.

    Args:
        token: Value of the ``x-jws-signature`` header.
        payload: Body bytes exactly as received.
        public_key_pem: Bank public key or X.509 certificate in PEM format.
        max_age_seconds: Allowed distance between ``iat`` and ``now``;
            ``0`` disables the freshness check.
        now: Unix time to compare ``iat`` against; defaults to the wall clock.

    Returns:
        ``True`` when the signature matches, ``False`` when it does not.

    Raises:
        MalformedToken: The token or its header is not well formed.
        StaleSignature: ``iat`` lies outside ``max_age_seconds``.
        InvalidKey: The key cannot be parsed, does not fit the declared
            algorithm, or the backend failed for another reason.
    """
    encoded_header, encoded_signature = _split(token)
    header = _decode_header(encoded_header)
    spec = _validate_header(header)

    check_freshness(header["iat"], max_age_seconds, now)

    data = _signing_input(encoded_header, _payload_bytes(payload))
    try:
        signature = b64url_decode(encoded_signature)
    except ValueError as exc:
        raise MalformedToken(f"Invalid JWS signature encoding: {exc}") from None

    key = load_public_key(public_key_pem)
    ensure_key_matches(key, spec)
    return _verify_data(data, signature, key, spec)


def _verify_data(data: bytes, signature: bytes, key: Any, spec: AlgorithmSpec) -> bool:
    try:
        if spec.is_ec:
            key.verify(raw_to_der(signature, spec), data, ec.ECDSA(spec.new_hash()))
        else:
            key.verify(signature, data, padding.PKCS1v15(), spec.new_hash())
    except InvalidSignature:
        return False
    except (ValueError, TypeError, BackendUnsupportedAlgorithm) as exc:
        raise InvalidKey(f"Error verifying signature with algorithm {spec.name}: {exc}") from exc
    return True


class SignatureInspection(BaseModel):
    """Diagnostic view of a detached token."""

    valid_format: bool = False
    error: Optional[str] = None
    parts_count: Optional[int] = None
    token_preview: Optional[str] = None
    header: Dict[str, Any] = Field(default_factory=dict)
    header_json: Optional[str] = None
    signature_length: Optional[int] = None
    signature_length_base64: Optional[int] = None
    encoded_header_length: Optional[int] = None


def inspect_signature(token: str) -> SignatureInspection:
    """Describe ``token`` for debugging; never raises."""
    if not isinstance(token, str):
        return SignatureInspection(error="JWS token must be a string")
    parts = token.split(SEPARATOR)
    if len(parts) != 2:
        preview = token[:100] + ("..." if len(token) > 100 else "")
        return SignatureInspection(
            error='Invalid JWS Detached format - expected "header..signature"',
            parts_count=len(parts),
            token_preview=preview,
        )

    encoded_header, encoded_signature = parts
    result = SignatureInspection(
        valid_format=True,
        parts_count=2,
        signature_length_base64=len(encoded_signature),
        encoded_header_length=len(encoded_header),
    )
    try:
        header_bytes = b64url_decode(encoded_header)
        result.header_json = header_bytes.decode("utf-8", errors="replace")
        result.header = _decode_header(encoded_header)
        result.signature_length = len(b64url_decode(encoded_signature))
    except (ValueError, RecursionError, MalformedToken) as exc:
        result.error = f"Exception while inspecting signature: {exc}"
    return result


__all__ = [
    "SignatureInspection",
    "build_header",
    "check_freshness",
    "encode_header",
    "inspect_signature",
    "parse_header",
    "sign",
    "verify",
]

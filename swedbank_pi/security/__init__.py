"""Detached JWS codec used to sign requests and verify bank responses."""

from .algorithms import ALGORITHMS, DEFAULT_ALGORITHM, AlgorithmSpec, get_algorithm
from .exceptions import (
    InvalidKey,
    JwsError,
    MalformedToken,
    SigningFailed,
    StaleSignature,
    UnsupportedAlgorithm,
)
from .jws import SignatureInspection, inspect_signature, parse_header, sign, verify
from .keys import KeyDetails, KeyProvider, describe_public_key

__all__ = [
    "ALGORITHMS",
    "AlgorithmSpec",
    "DEFAULT_ALGORITHM",
    "InvalidKey",
    "JwsError",
    "KeyDetails",
    "KeyProvider",
    "MalformedToken",
    "SignatureInspection",
    "SigningFailed",
    "StaleSignature",
    "UnsupportedAlgorithm",
    "describe_public_key",
    "get_algorithm",
    "inspect_signature",
    "parse_header",
    "sign",
    "verify",
]

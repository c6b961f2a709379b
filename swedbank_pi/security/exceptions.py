"""Errors raised by the detached JWS codec."""

from __future__ import annotations


class JwsError(Exception):
    """Base class for all signature codec failures."""


class UnsupportedAlgorithm(JwsError):
    """The requested signing algorithm is not one of the supported set."""


class InvalidKey(JwsError):
    """Key material could not be used by the cryptographic backend."""


class MalformedToken(JwsError):
    """The detached token or its header does not have the expected shape."""


class StaleSignature(JwsError):
    """The token's ``iat`` lies outside the accepted clock window."""

    def __init__(self, message: str, age: int, issued_at: int, now: int) -> None:
        super().__init__(message)
        self.age = age
        self.issued_at = issued_at
        self.now = now


class SigningFailed(JwsError):
    """The signing primitive refused to produce a signature."""


__all__ = [
    "InvalidKey",
    "JwsError",
    "MalformedToken",
    "SigningFailed",
    "StaleSignature",
    "UnsupportedAlgorithm",
]

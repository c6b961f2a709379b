"""Key loading and inspection for signing and verification."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm as BackendUnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from pydantic import BaseModel, Field

from .algorithms import AlgorithmSpec, KeyFamily
from .exceptions import InvalidKey

PrivateKey = Union[rsa.RSAPrivateKey, ec.EllipticCurvePrivateKey]
PublicKey = Union[rsa.RSAPublicKey, ec.EllipticCurvePublicKey]

CERTIFICATE_MARKER = "-----BEGIN CERTIFICATE-----"


def _pem_bytes(pem: Union[str, bytes]) -> bytes:
    if isinstance(pem, str):
        return pem.encode("utf-8")
    return pem


def read_pem(path: Union[str, Path]) -> str:
    """Read PEM text from ``path``."""
    key_path = Path(path).expanduser()
    if not key_path.is_file():
        raise FileNotFoundError(f"Key file not found: {key_path}")
    return key_path.read_text()


def load_private_key(pem: Union[str, bytes]) -> PrivateKey:
    """Parse an unencrypted PEM private key."""
    if not pem:
        raise InvalidKey("Invalid private key: no key material supplied")
    try:
        key = serialization.load_pem_private_key(_pem_bytes(pem), password=None)
    except (ValueError, TypeError, BackendUnsupportedAlgorithm) as exc:
        raise InvalidKey(f"Invalid private key: {exc}") from None
    if not isinstance(key, (rsa.RSAPrivateKey, ec.EllipticCurvePrivateKey)):
        raise InvalidKey(f"Invalid private key: unsupported key type {type(key).__name__}")
    return key


def load_public_key(pem: Union[str, bytes]) -> PublicKey:
    """Parse a PEM public key or the public key of a PEM X.509 certificate."""
    if not pem:
        raise InvalidKey("Invalid public key format: no key material supplied")
    data = _pem_bytes(pem)
    try:
        if CERTIFICATE_MARKER.encode() in data:
            key = x509.load_pem_x509_certificate(data).public_key()
        else:
            key = serialization.load_pem_public_key(data)
    except (ValueError, TypeError, BackendUnsupportedAlgorithm) as exc:
        raise InvalidKey(
            f"Invalid public key format: {exc}. Key should be in PEM format "
            "(-----BEGIN CERTIFICATE----- or -----BEGIN PUBLIC KEY-----)"
        ) from None
    if not isinstance(key, (rsa.RSAPublicKey, ec.EllipticCurvePublicKey)):
        raise InvalidKey(f"Invalid public key: unsupported key type {type(key).__name__}")
    return key


def ensure_key_matches(key: Union[PrivateKey, PublicKey], spec: AlgorithmSpec) -> None:
    """Raise :class:`InvalidKey` unless ``key`` can be used with ``spec``."""
    if spec.family is KeyFamily.RSA:
        if not isinstance(key, (rsa.RSAPrivateKey, rsa.RSAPublicKey)):
            raise InvalidKey(f"{spec.name} requires an RSA key")
        return
    if not isinstance(key, (ec.EllipticCurvePrivateKey, ec.EllipticCurvePublicKey)):
        raise InvalidKey(f"{spec.name} requires an elliptic curve key")
    if not isinstance(key.curve, spec.curve):
        raise InvalidKey(
            f"{spec.name} requires curve {spec.curve.name}, key uses {key.curve.name}"
        )


class KeyDetails(BaseModel):
    """Summary of a public key or certificate for diagnostics."""

    valid: bool
    error: Optional[str] = None
    type: Optional[str] = None
    bits: Optional[int] = None
    curve: Optional[str] = None
    subject: Dict[str, str] = Field(default_factory=dict)
    issuer: Dict[str, str] = Field(default_factory=dict)
    valid_from: Optional[datetime] = None
    valid_to: Optional[datetime] = None
    is_expired: Optional[bool] = None


def _name_to_dict(name: x509.Name) -> Dict[str, str]:
    result: Dict[str, str] = {}
    for attribute in name:
        result[attribute.rfc4514_attribute_name] = str(attribute.value)
    return result


def describe_public_key(pem: Union[str, bytes], now: Optional[datetime] = None) -> KeyDetails:
    """Describe ``pem`` without raising; invalid input yields ``valid=False``."""
    try:
        key = load_public_key(pem)
    except InvalidKey as exc:
        return KeyDetails(valid=False, error=str(exc))

    details: Dict[str, Any] = {"valid": True, "bits": key.key_size}
    if isinstance(key, rsa.RSAPublicKey):
        details["type"] = "RSA"
    else:
        details["type"] = "EC"
        details["curve"] = key.curve.name

    data = _pem_bytes(pem)
    if CERTIFICATE_MARKER.encode() in data:
        cert = x509.load_pem_x509_certificate(data)
        valid_to = cert.not_valid_after_utc
        details.update(
            subject=_name_to_dict(cert.subject),
            issuer=_name_to_dict(cert.issuer),
            valid_from=cert.not_valid_before_utc,
            valid_to=valid_to,
            is_expired=(now or datetime.now(timezone.utc)) > valid_to,
        )
    return KeyDetails(**details)


class KeyProvider:
    """Holds the merchant signing key and the bank verification key as PEM text."""

    def __init__(self, private_key: str = "", bank_public_key: str = "") -> None:
        self._private_key = private_key
        self._bank_public_key = bank_public_key

    @classmethod
    def from_config(cls, config: Any) -> "KeyProvider":
        """Build from a :class:`~swedbank_pi.config.GatewayConfig`.

        Inline PEM values take precedence over the ``*_path`` settings.
        """
        private_key = config.private_key or (
            read_pem(config.private_key_path) if config.private_key_path else ""
        )
        bank_key = config.bank_public_key or (
            read_pem(config.bank_public_key_path) if config.bank_public_key_path else ""
        )
        return cls(private_key=private_key, bank_public_key=bank_key)

    def get_signing_key(self) -> str:
        """Return the merchant private key PEM used for signing requests."""
        return self._private_key

    def get_verification_key(self) -> str:
        """Return the bank public key or certificate PEM used for responses."""
        return self._bank_public_key

    def __repr__(self) -> str:
        return (
            f"KeyProvider(private_key={'set' if self._private_key else 'unset'}, "
            f"bank_public_key={'set' if self._bank_public_key else 'unset'})"
        )

"""Supported JWS algorithms and their cryptographic parameters."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Type

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec

from .exceptions import UnsupportedAlgorithm


class KeyFamily(str, Enum):
    RSA = "RSA"
    EC = "EC"


@dataclass(frozen=True)
class AlgorithmSpec:
    """Hash, key family and (for ECDSA) curve and component width of an ``alg``."""

    name: str
    hash_type: Type[hashes.HashAlgorithm]
    family: KeyFamily
    curve: Optional[Type[ec.EllipticCurve]] = None
    component_length: int = 0

    @property
    def is_ec(self) -> bool:
        return self.family is KeyFamily.EC

    def new_hash(self) -> hashes.HashAlgorithm:
        return self.hash_type()


ALGORITHMS: Mapping[str, AlgorithmSpec] = MappingProxyType(
    {
        "RS512": AlgorithmSpec("RS512", hashes.SHA512, KeyFamily.RSA),
        "ES256": AlgorithmSpec("ES256", hashes.SHA256, KeyFamily.EC, ec.SECP256R1, 32),
        "ES256K": AlgorithmSpec("ES256K", hashes.SHA256, KeyFamily.EC, ec.SECP256K1, 32),
        "ES384": AlgorithmSpec("ES384", hashes.SHA384, KeyFamily.EC, ec.SECP384R1, 48),
        "ES512": AlgorithmSpec("ES512", hashes.SHA512, KeyFamily.EC, ec.SECP521R1, 66),
    }
)

DEFAULT_ALGORITHM = "RS512"


def get_algorithm(name: str) -> AlgorithmSpec:
    """Return the :class:`AlgorithmSpec` for ``name`` or raise :class:`UnsupportedAlgorithm`."""
    try:
        return ALGORITHMS[name]
    except (KeyError, TypeError):
        raise UnsupportedAlgorithm(f"Unsupported algorithm: {name}") from None


__all__ = ["ALGORITHMS", "AlgorithmSpec", "DEFAULT_ALGORITHM", "KeyFamily", "get_algorithm"]

"""Conversion between JWS raw ``r||s`` and ASN.1 DER ECDSA signatures.

JWS carries an ECDSA signature as the two integers ``r`` and ``s`` written
big-endian and left-padded to the curve's fixed width, concatenated.  The
``cryptography`` primitives produce and consume the DER form::

    SEQUENCE { INTEGER r, INTEGER s }

Both directions are implemented here so that the codec controls the exact
byte layout, including the sign byte on high-bit components and the long
length form that P-521 signatures need.
"""

from __future__ import annotations

from typing import Tuple

from jwt.utils import bytes_to_number, number_to_bytes

from .algorithms import AlgorithmSpec

_SEQUENCE = 0x30
_INTEGER = 0x02


def _encode_length(length: int) -> bytes:
    if length < 0x80:
        return bytes([length])
    body = length.to_bytes((length.bit_length() + 7) // 8, "big")
    return bytes([0x80 | len(body)]) + body


def _encode_integer(component: bytes) -> bytes:
    """Encode an unsigned big-endian component as a DER INTEGER."""
    content = component.lstrip(b"\x00")
    if not content or content[0] & 0x80:
        content = b"\x00" + content
    return bytes([_INTEGER]) + _encode_length(len(content)) + content


def _read_tlv(data: bytes, offset: int, tag: int) -> Tuple[bytes, int]:
    """Read one tag-length-value at ``offset``; return its value and the next offset."""
    if offset + 2 > len(data):
        raise ValueError("truncated DER element")
    if data[offset] != tag:
        raise ValueError(f"expected DER tag 0x{tag:02x}, found 0x{data[offset]:02x}")
    length = data[offset + 1]
    offset += 2
    if length & 0x80:
        count = length & 0x7F
        if count == 0 or count > 2 or offset + count > len(data):
            raise ValueError("unsupported DER length encoding")
        length = int.from_bytes(data[offset : offset + count], "big")
        if length < 0x80:
            raise ValueError("non-minimal DER length encoding")
        offset += count
    end = offset + length
    if end > len(data):
        raise ValueError("DER element overruns signature")
    return data[offset:end], end


def raw_to_der(signature: bytes, spec: AlgorithmSpec) -> bytes:
    """Convert a raw ``r||s`` signature to DER.

    Signatures that are not exactly twice the component width are returned
    unchanged, so tokens produced by DER-native signers still reach the
    verification primitive.
    """
    size = spec.component_length
    if len(signature) != 2 * size:
        return signature
    body = _encode_integer(signature[:size]) + _encode_integer(signature[size:])
    return bytes([_SEQUENCE]) + _encode_length(len(body)) + body


def der_to_raw(signature: bytes, spec: AlgorithmSpec) -> bytes:
    """Convert a DER ``SEQUENCE { r, s }`` into fixed-width ``r||s``.

    Raises:
        ValueError: If ``signature`` is not a well-formed DER pair or a
            component does not fit in the algorithm's component width.
    """
    size = spec.component_length
    body, end = _read_tlv(signature, 0, _SEQUENCE)
    if end != len(signature):
        raise ValueError("trailing bytes after DER signature")
    r, offset = _read_tlv(body, 0, _INTEGER)
    s, offset = _read_tlv(body, offset, _INTEGER)
    if offset != len(body):
        raise ValueError("unexpected content in DER signature")

    raw = b""
    for component in (r, s):
        if not component or component[0] & 0x80:
            raise ValueError("DER signature component is not a positive integer")
        value = bytes_to_number(component)
        if value.bit_length() > size * 8:
            raise ValueError(f"signature component exceeds {size} bytes")
        raw += number_to_bytes(value, size)
    return raw


__all__ = ["der_to_raw", "raw_to_der"]

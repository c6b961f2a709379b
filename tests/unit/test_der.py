"""Tests for raw r||s <-> DER conversion of ECDSA signatures."""

import os

import pytest
from cryptography.hazmat.primitives.asymmetric.utils import (
    decode_dss_signature,
    encode_dss_signature,
)

from swedbank_pi.security.algorithms import ALGORITHMS
from swedbank_pi.security.der import der_to_raw, raw_to_der

EC_ALGORITHMS = ["ES256", "ES256K", "ES384", "ES512"]


@pytest.mark.parametrize("algorithm", EC_ALGORITHMS)
def test_der_round_trip_random_signatures(algorithm):
    spec = ALGORITHMS[algorithm]
    for _ in range(25):
        raw = os.urandom(2 * spec.component_length)
        assert der_to_raw(raw_to_der(raw, spec), spec) == raw


@pytest.mark.parametrize("algorithm", EC_ALGORITHMS)
def test_raw_to_der_matches_cryptography_encoding(algorithm):
    spec = ALGORITHMS[algorithm]
    size = spec.component_length
    raw = os.urandom(2 * size)
    r = int.from_bytes(raw[:size], "big")
    s = int.from_bytes(raw[size:], "big")

    der = raw_to_der(raw, spec)

    assert der == encode_dss_signature(r, s)
    assert decode_dss_signature(der) == (r, s)


def test_high_bit_component_gets_sign_byte():
    spec = ALGORITHMS["ES256"]
    raw = b"\xff" + os.urandom(31) + b"\x01" * 32

    der = raw_to_der(raw, spec)

    assert der[0] == 0x30
    assert der[2] == 0x02
    assert der[3] == 33
    assert der[4] == 0x00
    assert der[5:37] == raw[:32]


def test_leading_zero_component_round_trips_without_growing():
    spec = ALGORITHMS["ES256"]
    raw = b"\x00\x00\x17" + os.urandom(29) + b"\x00" + b"\x42" * 31

    der = raw_to_der(raw, spec)
    back = der_to_raw(der, spec)

    assert der[3] == 30
    assert len(back) == 64
    assert back == raw


def test_zero_component_encodes_as_single_zero_byte():
    spec = ALGORITHMS["ES256"]
    raw = b"\x00" * 32 + b"\x01" * 32

    der = raw_to_der(raw, spec)

    assert der[2:5] == b"\x02\x01\x00"
    assert der_to_raw(der, spec) == raw


def test_es512_uses_long_form_sequence_length():
    spec = ALGORITHMS["ES512"]
    raw = b"\x01" + b"\xff" * 65 + b"\x01" + b"\xff" * 65

    der = raw_to_der(raw, spec)

    assert der[:2] == b"\x30\x81"
    assert der[2] == len(der) - 3
    assert der_to_raw(der, spec) == raw


def test_raw_to_der_passes_through_other_lengths():
    spec = ALGORITHMS["ES256"]
    der = encode_dss_signature(12345, 67890)

    assert raw_to_der(der, spec) is der
    assert raw_to_der(b"\x01\x02", spec) == b"\x01\x02"


@pytest.mark.parametrize(
    "signature",
    [
        b"",
        b"\x31\x06\x02\x01\x01\x02\x01\x01",
        b"\x30\x06\x02\x01\x01\x02\x01\x01\x00",
        b"\x30\x06\x02\x01\x01\x04\x01\x01",
        b"\x30\x06\x02\x01\x81\x02\x01\x01",
        b"\x30\x08\x02\x01\x01\x02\x01\x01",
        b"\x30\x07\x02\x01\x01\x02\x01\x01\x05",
    ],
)
def test_der_to_raw_rejects_malformed_input(signature):
    with pytest.raises(ValueError):
        der_to_raw(signature, ALGORITHMS["ES256"])


def test_der_to_raw_rejects_oversized_component():
    spec = ALGORITHMS["ES256"]
    der = encode_dss_signature(1 << 256, 1)

    with pytest.raises(ValueError, match="exceeds 32 bytes"):
        der_to_raw(der, spec)

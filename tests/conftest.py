import datetime

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from cryptography.x509.oid import NameOID

from swedbank_pi.config import GatewayConfig

CURVES = {
    "ES256": ec.SECP256R1,
    "ES256K": ec.SECP256K1,
    "ES384": ec.SECP384R1,
    "ES512": ec.SECP521R1,
}


def generate_private_key(algorithm):
    if algorithm == "RS512":
        return rsa.generate_private_key(public_exponent=65537, key_size=2048)
    return ec.generate_private_key(CURVES[algorithm]())


def pem_pair(key):
    private_pem = key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    ).decode()
    public_pem = key.public_key().public_bytes(
        serialization.Encoding.PEM,
        serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode()
    return private_pem, public_pem


def self_signed_certificate(key, common_name="pi.swedbank.com", days=365):
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    now = datetime.datetime.now(datetime.timezone.utc)
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - datetime.timedelta(days=1))
        .not_valid_after(now + datetime.timedelta(days=days))
        .sign(key, hashes.SHA256())
    )
    return cert.public_bytes(serialization.Encoding.PEM).decode()


@pytest.fixture(scope="session")
def key_pairs():
    """PEM ``(private, public)`` pairs for every supported algorithm."""
    return {alg: pem_pair(generate_private_key(alg)) for alg in ["RS512", *CURVES]}


@pytest.fixture(scope="session")
def bank_key():
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem, public_pem = pem_pair(key)
    return {
        "private": private_pem,
        "public": public_pem,
        "certificate": self_signed_certificate(key),
    }


@pytest.fixture
def gateway_config(key_pairs, bank_key):
    private_pem, _ = key_pairs["RS512"]
    return GatewayConfig(
        merchant_id="M1",
        country="lv",
        private_key=private_pem,
        bank_public_key=bank_key["certificate"],
        algorithm="RS512",
        test_mode=True,
    )

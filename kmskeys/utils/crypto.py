"""Local RSA key helpers used by the in-memory client and the tests."""

from __future__ import annotations

from typing import Literal

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

RSAModulus = Literal[2048, 3072, 4096]

_SUPPORTED_MODULI = (2048, 3072, 4096)


def generate_rsa_key_pair(modulus: RSAModulus = 2048) -> rsa.RSAPrivateKey:
    """Generate an RSA private key; the public half is ``key.public_key()``."""
    if modulus not in _SUPPORTED_MODULI:
        raise ValueError(f"Unsupported RSA modulus: {modulus}")
    return rsa.generate_private_key(public_exponent=65537, key_size=modulus)


def der_serialize_public_key(public_key: rsa.RSAPublicKey) -> bytes:
    """Serialize ``public_key`` as DER SubjectPublicKeyInfo."""
    return public_key.public_bytes(
        serialization.Encoding.DER,
        serialization.PublicFormat.SubjectPublicKeyInfo,
    )


def pem_serialize_public_key(public_key: rsa.RSAPublicKey) -> str:
    return public_key.public_bytes(
        serialization.Encoding.PEM,
        serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode("ascii")

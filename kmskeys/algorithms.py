"""Algorithm identifiers and parameters for RSA-PSS signing."""

from __future__ import annotations

from enum import Enum
from typing import Dict

from pydantic import BaseModel, Field

RSA_PSS = "RSA-PSS"


class HashingAlgorithm(str, Enum):
    """Digest algorithms a KMS-backed RSA-PSS key may use."""

    SHA256 = "SHA-256"
    SHA512 = "SHA-512"

    @property
    def digest_size(self) -> int:
        """Digest size in octets."""
        return DIGEST_SIZES[self]


DIGEST_SIZES: Dict[HashingAlgorithm, int] = {
    HashingAlgorithm.SHA256: 256 // 8,
    HashingAlgorithm.SHA512: 512 // 8,
}

# See: https://cloud.google.com/kms/docs/algorithms#rsa_signing_algorithms
SUPPORTED_SALT_LENGTHS = tuple(DIGEST_SIZES.values())


class RsaPssParams(BaseModel):
    """Parameters of an RSA-PSS sign request."""

    name: str = RSA_PSS
    salt_length: int = Field(..., description="PSS salt length in octets")

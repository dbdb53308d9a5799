"""In-memory KMS client for tests and local development."""

from __future__ import annotations

import asyncio
from collections import Counter
from typing import Dict, List, Tuple

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from google.api_core import exceptions as core_exceptions
from google.rpc import error_details_pb2

from ..algorithms import HashingAlgorithm
from ..errors import KEY_PENDING_GENERATION
from ..utils.checksum import crc32c
from ..utils.crypto import pem_serialize_public_key
from .base import BaseKmsClient, RequestOptions, SignResponse

_HASHES = {
    HashingAlgorithm.SHA256: hashes.SHA256,
    HashingAlgorithm.SHA512: hashes.SHA512,
}


def pending_generation_error(key_path: str) -> core_exceptions.FailedPrecondition:
    """Build the error KMS returns while a key version is still being generated."""
    failure = error_details_pb2.PreconditionFailure(
        violations=[
            error_details_pb2.PreconditionFailure.Violation(
                type=KEY_PENDING_GENERATION,
                subject=key_path,
                description=f"{key_path} is not enabled, current state is: PENDING_GENERATION.",
            )
        ]
    )
    return core_exceptions.FailedPrecondition(
        f"{key_path} is not enabled, current state is: PENDING_GENERATION.",
        details=[failure],
    )


class InMemoryKmsClient(BaseKmsClient):
    """Holds RSA keys in process and signs with RSA-PSS like KMS would."""

    def __init__(self) -> None:
        self._keys: Dict[str, Tuple[rsa.RSAPrivateKey, HashingAlgorithm]] = {}
        self._pending: Counter[str] = Counter()
        self._lock = asyncio.Lock()
        self.calls: List[Tuple[str, str]] = []

    def add_key(
        self,
        key_path: str,
        private_key: rsa.RSAPrivateKey,
        hash_algorithm: HashingAlgorithm = HashingAlgorithm.SHA256,
    ) -> None:
        """Register ``private_key`` under ``key_path``."""
        self._keys[key_path] = (private_key, hash_algorithm)

    def mark_pending(self, key_path: str, attempts: int = 1) -> None:
        """Report ``key_path`` as pending generation for the next ``attempts`` lookups."""
        self._pending[key_path] = attempts

    async def _lookup(self, operation: str, key_path: str) -> Tuple[rsa.RSAPrivateKey, HashingAlgorithm]:
        async with self._lock:
            self.calls.append((operation, key_path))
            if self._pending[key_path] > 0:
                self._pending[key_path] -= 1
                raise pending_generation_error(key_path)
            if key_path not in self._keys:
                raise core_exceptions.NotFound(f"{key_path} not found.")
            return self._keys[key_path]

    async def get_public_key(self, key_path: str, options: RequestOptions) -> str:
        private_key, _ = await self._lookup("get_public_key", key_path)
        return pem_serialize_public_key(private_key.public_key())

    async def asymmetric_sign(
        self,
        key_path: str,
        data: bytes,
        data_crc32c: int,
        options: RequestOptions,
    ) -> SignResponse:
        private_key, hash_algorithm = await self._lookup("asymmetric_sign", key_path)
        if crc32c(data) != data_crc32c:
            raise core_exceptions.InvalidArgument(
                "The checksum in field data_crc32c did not match the data in field data."
            )

        hash_cls = _HASHES[hash_algorithm]
        signature = private_key.sign(
            data,
            padding.PSS(mgf=padding.MGF1(hash_cls()), salt_length=hash_algorithm.digest_size),
            hash_cls(),
        )
        return SignResponse(
            name=key_path,
            signature=signature,
            signature_crc32c=crc32c(signature),
            verified_data_crc32c=True,
        )

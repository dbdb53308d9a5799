"""RSA-PSS provider whose private-key operations run in a remote KMS.

Only two operations are real code paths: ``sign`` (delegated to the KMS
``AsymmetricSign`` call, with CRC32C checks in both directions) and
``export_key`` in SPKI format (a public key lookup). Key generation, key
import and signature verification are rejected before any remote call.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, FrozenSet, Optional, Tuple

from .algorithms import RSA_PSS, SUPPORTED_SALT_LENGTHS, HashingAlgorithm, RsaPssParams
from .clients import BaseKmsClient, get_kms_client
from .config import KmsKeysConfig, RequestOptions, load_config
from .errors import KmsError, is_key_pending_creation, wrap_kms_call_error
from .keys import RemoteKeyHandle, is_kms_key
from .utils.checksum import crc32c
from .utils.pem import pem_to_der
from .utils.retry import RetryPolicy

logger = logging.getLogger(__name__)

PUBLIC_KEY_REQUEST_OPTIONS = RequestOptions(max_retries=3, timeout=0.3)
SIGN_REQUEST_OPTIONS = RequestOptions(max_retries=3, timeout=3.0)
PUBLIC_KEY_RETRY_POLICY = RetryPolicy(max_attempts=2, backoff=0.5)


class Operation(str, Enum):
    """Operations a key provider may be asked to perform."""

    GENERATE = "generate"
    IMPORT = "import"
    EXPORT = "export"
    SIGN = "sign"
    VERIFY = "verify"


_UNSUPPORTED_MESSAGES = {
    Operation.GENERATE: "Key generation is unsupported",
    Operation.IMPORT: "Key import is unsupported",
    Operation.EXPORT: "Key export is unsupported",
    Operation.SIGN: "Signing is unsupported",
    Operation.VERIFY: "Signature verification is unsupported",
}


def _algorithm_name(algorithm: Any) -> str:
    return getattr(algorithm, "value", str(algorithm))


class KmsRsaPssProvider:
    """Signs with RSA-PSS keys that never leave the KMS."""

    name = RSA_PSS
    hash_algorithms: Tuple[HashingAlgorithm, ...] = (
        HashingAlgorithm.SHA256,
        HashingAlgorithm.SHA512,
    )
    capabilities: FrozenSet[Operation] = frozenset({Operation.EXPORT, Operation.SIGN})

    def __init__(
        self,
        kms_client: BaseKmsClient,
        request_options: Optional[RequestOptions] = None,
        public_key_options: Optional[RequestOptions] = None,
        public_key_retry: Optional[RetryPolicy] = None,
    ) -> None:
        self.kms_client = kms_client
        self.request_options = request_options or SIGN_REQUEST_OPTIONS
        self.public_key_options = public_key_options or PUBLIC_KEY_REQUEST_OPTIONS
        self.public_key_retry = public_key_retry or PUBLIC_KEY_RETRY_POLICY

    def supports(self, operation: Operation) -> bool:
        return operation in self.capabilities

    def _require(self, operation: Operation) -> None:
        if not self.supports(operation):
            raise KmsError(_UNSUPPORTED_MESSAGES[operation])

    def get_private_key(
        self,
        kms_key_version_path: str,
        hash_algorithm: HashingAlgorithm = HashingAlgorithm.SHA256,
    ) -> RemoteKeyHandle:
        """Return a handle for ``kms_key_version_path`` bound to this provider."""
        if hash_algorithm not in self.hash_algorithms:
            raise KmsError(f"Unsupported hash algorithm ({_algorithm_name(hash_algorithm)})")
        return RemoteKeyHandle(
            kms_key_version_path=kms_key_version_path,
            hash_algorithm=hash_algorithm,
            provider=self,
        )

    async def generate_key(self, *args: Any, **kwargs: Any) -> None:
        self._require(Operation.GENERATE)

    async def import_key(self, *args: Any, **kwargs: Any) -> None:
        self._require(Operation.IMPORT)

    async def verify(self, *args: Any, **kwargs: Any) -> None:
        self._require(Operation.VERIFY)

    async def export_key(self, format: str, key: Any) -> bytes:
        """Export the public half of ``key`` as DER SubjectPublicKeyInfo."""
        self._require(Operation.EXPORT)
        if format != "spki":
            raise KmsError("Private key cannot be exported")
        if not is_kms_key(key):
            raise KmsError("Key is not managed by KMS")
        return await retrieve_kms_public_key(
            key.kms_key_version_path,
            self.kms_client,
            options=self.public_key_options,
            retry_policy=self.public_key_retry,
        )

    async def sign(self, algorithm: RsaPssParams, key: Any, data: bytes) -> bytes:
        """Sign ``data`` with the KMS key version behind ``key``."""
        self._require(Operation.SIGN)
        if not is_kms_key(key):
            raise KmsError(f"Cannot sign with key of unsupported type ({type(key).__name__})")
        if key.hash_algorithm not in self.hash_algorithms:
            raise KmsError(f"Unsupported hash algorithm ({_algorithm_name(key.hash_algorithm)})")
        if algorithm.salt_length not in SUPPORTED_SALT_LENGTHS:
            raise KmsError(f"Unsupported salt length of {algorithm.salt_length} octets")

        return await self._kms_sign(bytes(data), key)

    async def _kms_sign(self, plaintext: bytes, key: RemoteKeyHandle) -> bytes:
        key_path = key.kms_key_version_path
        response = await wrap_kms_call_error(
            self.kms_client.asymmetric_sign(
                key_path, plaintext, crc32c(plaintext), self.request_options
            ),
            "KMS signature request failed",
        )

        if response.name != key_path:
            raise KmsError(f"KMS used the wrong key version ({response.name})")
        if not response.verified_data_crc32c:
            raise KmsError("KMS failed to verify plaintext CRC32C checksum")
        if crc32c(response.signature) != response.signature_crc32c:
            raise KmsError("Signature CRC32C checksum does not match one received from KMS")

        logger.debug(f"KMS signed {len(plaintext)} octets with {key_path}")
        return response.signature


async def retrieve_kms_public_key(
    kms_key_version_path: str,
    kms_client: BaseKmsClient,
    options: Optional[RequestOptions] = None,
    retry_policy: Optional[RetryPolicy] = None,
) -> bytes:
    """Retrieve the DER-encoded public key of ``kms_key_version_path``.

    A freshly created key version may not be ready yet; that one condition is
    retried according to ``retry_policy`` (one retry after 500 ms by default).
    """
    options = options or PUBLIC_KEY_REQUEST_OPTIONS
    retry_policy = retry_policy or PUBLIC_KEY_RETRY_POLICY

    public_key_pem = await wrap_kms_call_error(
        retry_policy.run(
            lambda: kms_client.get_public_key(kms_key_version_path, options),
            should_retry=is_key_pending_creation,
        ),
        "Failed to retrieve public key",
    )
    return pem_to_der(public_key_pem)


def get_kms_provider(
    config: Optional[KmsKeysConfig] = None, kms_client: Optional[BaseKmsClient] = None
) -> KmsRsaPssProvider:
    """Build a provider wired with the configured client, bounds and retry policy."""

    config = config or load_config()
    return KmsRsaPssProvider(
        kms_client or get_kms_client(config=config),
        request_options=config.requests.sign,
        public_key_options=config.requests.public_key,
        public_key_retry=config.public_key_retry,
    )

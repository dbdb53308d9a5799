"""Google Cloud KMS client adapter."""

from __future__ import annotations

import itertools
import logging
from typing import Any, Callable, Optional

from google.api_core import retry as retries
from google.api_core.client_options import ClientOptions
from google.cloud import kms_v1

from .base import BaseKmsClient, RequestOptions, SignResponse

logger = logging.getLogger(__name__)


def retry_predicate(max_retries: int) -> Callable[[Exception], bool]:
    """Accept transient errors (unavailable, internal, resource exhausted) at
    most ``max_retries`` times.
    """
    failures = itertools.count(1)

    def predicate(exc: Exception) -> bool:
        return retries.if_transient_error(exc) and next(failures) <= max_retries

    return predicate


def build_retry(options: RequestOptions) -> retries.AsyncRetry:
    """Translate ``options`` into an ``AsyncRetry`` bounded by attempt count."""
    return retries.AsyncRetry(
        predicate=retry_predicate(options.max_retries),
        initial=0.1,
        maximum=1.0,
        multiplier=2.0,
        timeout=options.timeout * (options.max_retries + 1),
    )


class GcpKmsClient(BaseKmsClient):
    """Calls Google Cloud KMS through ``KeyManagementServiceAsyncClient``."""

    def __init__(
        self,
        endpoint: Optional[str] = None,
        client: Optional[Any] = None,
    ) -> None:
        self.endpoint = endpoint
        self._client = client

    def _get_client(self) -> Any:
        if self._client is None:
            client_options = ClientOptions(api_endpoint=self.endpoint) if self.endpoint else None
            self._client = kms_v1.KeyManagementServiceAsyncClient(
                client_options=client_options
            )
        return self._client

    async def close(self) -> None:
        """Close the underlying gRPC channel."""
        if self._client is not None:
            await self._client.transport.close()
            self._client = None

    async def get_public_key(self, key_path: str, options: RequestOptions) -> str:
        logger.debug(f"Retrieving public key for {key_path}")
        response = await self._get_client().get_public_key(
            request={"name": key_path},
            retry=build_retry(options),
            timeout=options.timeout,
        )
        return response.pem

    async def asymmetric_sign(
        self,
        key_path: str,
        data: bytes,
        data_crc32c: int,
        options: RequestOptions,
    ) -> SignResponse:
        logger.debug(f"Requesting signature from {key_path} over {len(data)} octets")
        response = await self._get_client().asymmetric_sign(
            request={"name": key_path, "data": data, "data_crc32c": data_crc32c},
            retry=build_retry(options),
            timeout=options.timeout,
        )
        # proto-plus marshals the Int64Value wrapper to int (or None when unset)
        signature_crc32c = response.signature_crc32c
        return SignResponse(
            name=response.name,
            signature=response.signature,
            signature_crc32c=signature_crc32c if signature_crc32c is not None else -1,
            verified_data_crc32c=response.verified_data_crc32c,
        )

"""Base KMS client interface used by the signing provider."""

from __future__ import annotations

import abc

from pydantic import BaseModel

from ..config import RequestOptions


class SignResponse(BaseModel):
    """Result of an asymmetric sign call as reported by the KMS."""

    name: str
    signature: bytes
    signature_crc32c: int
    verified_data_crc32c: bool


class BaseKmsClient(metaclass=abc.ABCMeta):
    """Abstract client for the KMS calls the provider needs."""

    async def close(self) -> None:
        """Release client resources (no-op by default)."""
        pass

    @abc.abstractmethod
    async def get_public_key(self, key_path: str, options: RequestOptions) -> str:
        """Return the PEM-encoded public key of the key version at ``key_path``."""
        raise NotImplementedError

    @abc.abstractmethod
    async def asymmetric_sign(
        self,
        key_path: str,
        data: bytes,
        data_crc32c: int,
        options: RequestOptions,
    ) -> SignResponse:
        """Sign ``data`` with the key version at ``key_path``."""
        raise NotImplementedError

"""KMS client factory and initialization."""

from __future__ import annotations

from typing import Optional

from ..config import KmsKeysConfig, load_config
from .base import BaseKmsClient, RequestOptions, SignResponse
from .inmemory import InMemoryKmsClient


def get_kms_client(
    backend: Optional[str] = None, config: Optional[KmsKeysConfig] = None
) -> BaseKmsClient:
    """Factory function to get the configured KMS client.

    ``backend="inmemory"`` returns an empty ``InMemoryKmsClient`` for tests;
    keys must be added to it with ``add_key`` before use. Configuration can
    only select ``gcp``.
    """

    config = config or load_config()
    backend = (backend or config.client.backend).lower()

    if backend == "inmemory":
        return InMemoryKmsClient()
    elif backend == "gcp":
        from .gcp import GcpKmsClient

        return GcpKmsClient(endpoint=config.client.gcp.endpoint)
    else:
        raise ValueError(f"Unsupported KMS client backend: {backend}")


__all__ = [
    "BaseKmsClient",
    "InMemoryKmsClient",
    "RequestOptions",
    "SignResponse",
    "get_kms_client",
]

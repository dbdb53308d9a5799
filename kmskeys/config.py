from __future__ import annotations

import os
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field

from .utils.retry import RetryPolicy


class RequestOptions(BaseModel):
    """Per-call retry and timeout bounds for transport-level failures."""

    max_retries: int = Field(default=3, ge=0)
    timeout: float = Field(default=3.0, gt=0, description="Seconds per call")


class GcpConfig(BaseModel):
    """Configuration for the Google Cloud KMS client."""

    endpoint: Optional[str] = None


class ClientConfig(BaseModel):
    """KMS client selection."""

    backend: Literal["gcp"] = "gcp"
    gcp: GcpConfig = Field(default_factory=GcpConfig)


class RequestsConfig(BaseModel):
    """Transport-level bounds for each kind of KMS call."""

    sign: RequestOptions = RequestOptions(max_retries=3, timeout=3.0)
    public_key: RequestOptions = RequestOptions(max_retries=3, timeout=0.3)


class KmsKeysConfig(BaseModel):
    """Top-level configuration model."""

    client: ClientConfig = Field(default_factory=ClientConfig)
    requests: RequestsConfig = Field(default_factory=RequestsConfig)
    public_key_retry: RetryPolicy = RetryPolicy()


def load_config(path: Optional[str] = None) -> KmsKeysConfig:
    """Load configuration from YAML file.

    Args:
        path: Optional path to config file. Falls back to KMSKEYS_CONFIG env
            variable or 'config.yaml' in the current directory.
    """

    config_path = path or os.getenv("KMSKEYS_CONFIG", "config.yaml")
    if os.path.exists(config_path):
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
        config = KmsKeysConfig(**data)
    else:
        config = KmsKeysConfig()

    env_endpoint = os.getenv("KMSKEYS_GCP_ENDPOINT")
    if env_endpoint:
        config.client.gcp.endpoint = env_endpoint
    return config

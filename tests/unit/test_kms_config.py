"""Tests for configuration loading."""

import pytest
from pydantic import ValidationError

from kmskeys import InMemoryKmsClient, KmsRsaPssProvider, get_kms_client, get_kms_provider
from kmskeys.clients.gcp import GcpKmsClient
from kmskeys.config import load_config


def test_load_config_defaults(tmp_path, monkeypatch):
    monkeypatch.setenv("KMSKEYS_CONFIG", str(tmp_path / "missing.yaml"))
    monkeypatch.delenv("KMSKEYS_GCP_ENDPOINT", raising=False)

    config = load_config()
    assert config.client.backend == "gcp"
    assert config.client.gcp.endpoint is None
    assert config.requests.public_key.max_retries == 3
    assert config.requests.public_key.timeout == 0.3
    assert config.public_key_retry.max_attempts == 2
    assert config.public_key_retry.backoff == 0.5


def test_load_config_from_env(tmp_path, monkeypatch):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        """
requests:
  sign:
    max_retries: 1
    timeout: 5
public_key_retry:
  backoff: 0.25
"""
    )
    monkeypatch.setenv("KMSKEYS_CONFIG", str(config_path))

    config = load_config()
    assert config.client.backend == "gcp"
    assert config.requests.sign.max_retries == 1
    assert config.requests.sign.timeout == 5
    assert config.public_key_retry.backoff == 0.25
    assert config.public_key_retry.max_attempts == 2


def test_endpoint_env_override(tmp_path, monkeypatch):
    monkeypatch.setenv("KMSKEYS_CONFIG", str(tmp_path / "missing.yaml"))
    monkeypatch.setenv("KMSKEYS_GCP_ENDPOINT", "us-east1-kms.googleapis.com")

    config = load_config()
    assert config.client.gcp.endpoint == "us-east1-kms.googleapis.com"


def test_get_kms_client_uses_config(tmp_path, monkeypatch):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        """
client:
  backend: gcp
  gcp:
    endpoint: europe-west2-kms.googleapis.com
"""
    )
    monkeypatch.setenv("KMSKEYS_CONFIG", str(config_path))
    monkeypatch.delenv("KMSKEYS_GCP_ENDPOINT", raising=False)

    client = get_kms_client()
    assert isinstance(client, GcpKmsClient)
    assert client.endpoint == "europe-west2-kms.googleapis.com"


def test_get_kms_client_builds_empty_inmemory_client_on_request(tmp_path, monkeypatch):
    monkeypatch.setenv("KMSKEYS_CONFIG", str(tmp_path / "missing.yaml"))

    client = get_kms_client("inmemory")
    assert isinstance(client, InMemoryKmsClient)
    assert client.calls == []


def test_config_rejects_inmemory_backend(tmp_path, monkeypatch):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        """
client:
  backend: inmemory
"""
    )
    monkeypatch.setenv("KMSKEYS_CONFIG", str(config_path))

    with pytest.raises(ValidationError):
        load_config()


def test_get_kms_client_rejects_unknown_backend(tmp_path, monkeypatch):
    monkeypatch.setenv("KMSKEYS_CONFIG", str(tmp_path / "missing.yaml"))

    with pytest.raises(ValueError, match="Unsupported KMS client backend: aws"):
        get_kms_client("aws")


def test_get_kms_provider_applies_configured_bounds(tmp_path, monkeypatch):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        """
requests:
  public_key:
    max_retries: 0
    timeout: 1
public_key_retry:
  max_attempts: 3
"""
    )
    monkeypatch.setenv("KMSKEYS_CONFIG", str(config_path))

    provider = get_kms_provider(kms_client=InMemoryKmsClient())
    assert isinstance(provider, KmsRsaPssProvider)
    assert isinstance(provider.kms_client, InMemoryKmsClient)
    assert provider.public_key_options.max_retries == 0
    assert provider.public_key_retry.max_attempts == 3

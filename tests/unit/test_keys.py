import pytest
from pydantic import ValidationError

from kmskeys import HashingAlgorithm, KeyKind, KmsRsaPssProvider, RemoteKeyHandle
from kmskeys.keys import is_kms_key


def test_handle_attributes(key_path):
    provider = KmsRsaPssProvider(kms_client=None)
    key = provider.get_private_key(key_path, HashingAlgorithm.SHA512)

    assert key.kind is KeyKind.KMS
    assert key.kms_key_version_path == key_path
    assert key.provider is provider
    assert key.type == "private"
    assert key.extractable is False
    assert key.usages == ("sign",)
    assert key.algorithm == {"name": "RSA-PSS", "hash": {"name": "SHA-512"}}


def test_handle_is_immutable(key_path):
    key = RemoteKeyHandle(kms_key_version_path=key_path, hash_algorithm="SHA-256")

    with pytest.raises(ValidationError):
        key.kms_key_version_path = "projects/other"


def test_handle_rejects_unknown_hash(key_path):
    with pytest.raises(ValidationError):
        RemoteKeyHandle(kms_key_version_path=key_path, hash_algorithm="SHA-1")


def test_is_kms_key_uses_tag(key_path):
    class LookAlike:
        kind = "kms"
        kms_key_version_path = key_path
        hash_algorithm = "SHA-256"

    assert is_kms_key(RemoteKeyHandle(kms_key_version_path=key_path, hash_algorithm="SHA-256"))
    assert is_kms_key(LookAlike())
    assert not is_kms_key(object())


def test_is_kms_key_requires_handle_attributes(key_path):
    class TagOnly:
        kind = "kms"

    class NoHash:
        kind = "kms"
        kms_key_version_path = key_path

    class NonStringPath:
        kind = "kms"
        kms_key_version_path = 42
        hash_algorithm = "SHA-256"

    assert not is_kms_key(TagOnly())
    assert not is_kms_key(NoHash())
    assert not is_kms_key(NonStringPath())


def test_handle_serialization_omits_provider(key_path):
    provider = KmsRsaPssProvider(kms_client=None)
    dumped = provider.get_private_key(key_path).model_dump()

    assert "provider" not in dumped
    assert dumped["kms_key_version_path"] == key_path

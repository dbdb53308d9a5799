import pytest

from kmskeys import InMemoryKmsClient, KmsRsaPssProvider, RetryPolicy
from kmskeys.utils.crypto import generate_rsa_key_pair

KEY_PATH = "projects/p/locations/global/keyRings/r/cryptoKeys/k/cryptoKeyVersions/1"


@pytest.fixture(scope="session")
def rsa_private_key():
    return generate_rsa_key_pair(2048)


@pytest.fixture
def inmemory_client(rsa_private_key):
    client = InMemoryKmsClient()
    client.add_key(KEY_PATH, rsa_private_key)
    return client


@pytest.fixture
def inmemory_provider(inmemory_client):
    return KmsRsaPssProvider(
        inmemory_client, public_key_retry=RetryPolicy(max_attempts=2, backoff=0)
    )


@pytest.fixture
def key_path():
    return KEY_PATH

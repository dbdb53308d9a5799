"""kmskeys: RSA-PSS signing keys whose private half lives in a remote KMS."""

from .algorithms import HashingAlgorithm, RsaPssParams
from .clients import BaseKmsClient, InMemoryKmsClient, get_kms_client
from .config import KmsKeysConfig, RequestOptions, load_config
from .errors import KmsError
from .keys import KeyKind, RemoteKeyHandle
from .provider import KmsRsaPssProvider, Operation, get_kms_provider, retrieve_kms_public_key
from .utils.retry import RetryPolicy

__version__ = "0.1.0"
__all__ = [
    "BaseKmsClient",
    "HashingAlgorithm",
    "InMemoryKmsClient",
    "KeyKind",
    "KmsError",
    "KmsKeysConfig",
    "KmsRsaPssProvider",
    "Operation",
    "RemoteKeyHandle",
    "RequestOptions",
    "RetryPolicy",
    "RsaPssParams",
    "get_kms_client",
    "get_kms_provider",
    "load_config",
    "retrieve_kms_public_key",
]

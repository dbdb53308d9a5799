"""Key handles for private keys that live in a remote KMS."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Literal, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .algorithms import RSA_PSS, HashingAlgorithm


class KeyKind(str, Enum):
    """Tag identifying who can operate on a key handle."""

    KMS = "kms"


class RemoteKeyHandle(BaseModel):
    """Immutable reference to one key version held by the KMS.

    The handle carries no secret material. ``kms_key_version_path`` is an
    opaque token compared by exact match only.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: Literal[KeyKind.KMS] = KeyKind.KMS
    kms_key_version_path: str = Field(..., min_length=1)
    hash_algorithm: HashingAlgorithm
    provider: Any = Field(default=None, repr=False, exclude=True)

    type: Literal["private"] = "private"
    extractable: Literal[False] = False
    usages: Tuple[str, ...] = ("sign",)

    @property
    def algorithm(self) -> Dict[str, Any]:
        return {"name": RSA_PSS, "hash": {"name": self.hash_algorithm.value}}


def is_kms_key(key: object) -> bool:
    """Return ``True`` if ``key`` is tagged as a KMS-backed handle.

    A tagged object must also carry a key version path and a hash algorithm.
    """
    return (
        getattr(key, "kind", None) == KeyKind.KMS
        and isinstance(getattr(key, "kms_key_version_path", None), str)
        and hasattr(key, "hash_algorithm")
    )

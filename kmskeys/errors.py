"""Error type raised by every KMS-backed key operation."""

from __future__ import annotations

from typing import Awaitable, Optional, TypeVar

from google.api_core import exceptions as core_exceptions

T = TypeVar("T")

KMS_CALL_ERRORS = (core_exceptions.GoogleAPICallError, core_exceptions.RetryError)

# Violation type KMS reports while a new key version is still being generated
KEY_PENDING_GENERATION = "KEY_PENDING_GENERATION"


class KmsError(Exception):
    """Raised when a KMS-backed key operation fails or is unsupported."""

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause


async def wrap_kms_call_error(call: Awaitable[T], message: str) -> T:
    """Await ``call`` and convert KMS client failures into :class:`KmsError`."""
    try:
        return await call
    except KMS_CALL_ERRORS as exc:
        raise KmsError(f"{message}: {exc}", cause=exc) from exc


def is_key_pending_creation(exc: BaseException) -> bool:
    """Return ``True`` if ``exc`` reports a key version still being generated.

    KMS attaches ``PreconditionFailure`` details to the error; the key is
    pending when one of their violations has type ``KEY_PENDING_GENERATION``.
    """
    details = getattr(exc, "details", None) or []
    for detail in details:
        for violation in getattr(detail, "violations", ()):
            if getattr(violation, "type", None) == KEY_PENDING_GENERATION:
                return True
    return False

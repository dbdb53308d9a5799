"""Small helpers shared by the provider and the KMS clients."""

from .checksum import crc32c
from .pem import pem_to_der
from .retry import RetryPolicy, compute_backoff, schedule_retry

__all__ = ["RetryPolicy", "compute_backoff", "crc32c", "pem_to_der", "schedule_retry"]

from __future__ import annotations

import google_crc32c


def crc32c(data: bytes) -> int:
    """Return the CRC32C checksum of ``data`` as an unsigned 32-bit integer."""
    return google_crc32c.value(bytes(data))

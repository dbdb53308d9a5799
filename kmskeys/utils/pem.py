from __future__ import annotations

import base64
import re

_PEM_FRAMING = re.compile(r"(-----[\w ]*-----|\n)")


def pem_to_der(pem: str) -> bytes:
    """Strip PEM header, footer and newlines, then base64-decode the body."""
    body = _PEM_FRAMING.sub("", pem)
    return base64.b64decode(body)

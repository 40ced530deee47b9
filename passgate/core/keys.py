from __future__ import annotations

import base64
import binascii
import re

from passgate.core.errors import InvalidSecretError

# 256-bit minimum for both the password pepper and the HS256 signing keys.
MIN_SECRET_BYTES = 32

_B64URL = re.compile(r"^[A-Za-z0-9_-]+={0,2}$")


def decode_secret(secret: object) -> bytes:
    """Decode a base64url secret (padding optional) into key bytes.

    Raises InvalidSecretError if the value is not a base64url string or
    decodes to fewer than MIN_SECRET_BYTES bytes.
    """
    if not isinstance(secret, str) or not _B64URL.match(secret):
        raise InvalidSecretError("Invalid secret: expected a base64url string")
    stripped = secret.rstrip("=")
    try:
        raw = base64.urlsafe_b64decode(stripped + "=" * (-len(stripped) % 4))
    except (binascii.Error, ValueError):
        raise InvalidSecretError("Invalid secret: not valid base64url") from None
    if len(raw) < MIN_SECRET_BYTES:
        raise InvalidSecretError(
            f"Invalid secret: must decode to at least {MIN_SECRET_BYTES} bytes"
        )
    return raw

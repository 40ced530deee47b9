"""JWT signing and verification (HS256, PyJWT).

Access and refresh tokens share one claims schema and one set of keys:

    {"iss": "<subject id>", "typ": "access"|"refresh",
     "iat": ..., "nbf": ..., "exp": ..., "jti": ...}

KEY ROTATION
------------
TOKEN_SECRET may list several keys.  sign() picks one at random and writes
its index into the "kid" header; verify() reads "kid" back to choose the
key.  To rotate, append the new key, wait one refresh lifetime, then drop
the old one.

The "typ" claim keeps the two token kinds apart: a refresh token handed
to verify(..., is_access=True) is rejected even though the signature is
valid, and the reverse.

"iss" is signed as a decimal string, which PyJWT requires, and verify()
hands it back as an int.  A value that is not a decimal string is left
as is for the caller to range-check.
"""

from __future__ import annotations

import secrets as secrets_mod
import uuid
from collections.abc import Sequence
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from passgate.core.errors import InvalidBearerFormatError, MissingAuthorizationError
from passgate.core.keys import decode_secret
from passgate.models.tokens import ACCESS, REFRESH, TokenType
from passgate.services.validate import to_subject_id

ALGORITHM = "HS256"


def sign(
    iss: int,
    duration_seconds: int,
    token_type: TokenType,
    secrets: Sequence[str],
) -> str:
    """Build and sign a token for subject *iss* valid for *duration_seconds*."""
    if token_type not in (ACCESS, REFRESH):
        raise ValueError(f"token_type must be access|refresh (got {token_type!r})")
    if not secrets:
        raise ValueError("at least one signing secret is required")

    kid = secrets_mod.randbelow(len(secrets))
    now = datetime.now(UTC)
    payload = {
        "iss": str(iss),
        "typ": token_type,
        "iat": now,
        "nbf": now,
        "exp": now + timedelta(seconds=duration_seconds),
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(
        payload,
        decode_secret(secrets[kid]),
        algorithm=ALGORITHM,
        headers={"kid": str(kid)},
    )


def verify(token: str, secrets: Sequence[str], is_access: bool) -> dict[str, Any]:
    """Verify signature, expiry and token type.  Return the claims.

    Pins the algorithm to HS256 so alg:none and alg-switching are refused.
    Raises jwt.InvalidTokenError (or a subclass) on any failure.
    """
    header = jwt.get_unverified_header(token)
    kid = header.get("kid")
    if not isinstance(kid, str) or not kid.isdigit() or int(kid) >= len(secrets):
        raise jwt.InvalidTokenError("Unknown key id")

    claims = jwt.decode(
        token,
        decode_secret(secrets[int(kid)]),
        algorithms=[ALGORITHM],
        options={"require": ["iss", "typ", "iat", "exp"]},
    )

    expected = ACCESS if is_access else REFRESH
    if claims["typ"] != expected:
        raise jwt.InvalidTokenError(
            f"Wrong token type: expected {expected}, got {claims['typ']}"
        )

    subject = to_subject_id(claims["iss"])
    if subject is not None:
        claims["iss"] = subject
    return claims


def parse_bearer(authorization: str | None) -> str:
    """Extract the token from an ``Authorization: Bearer <token>`` value."""
    if not authorization or not authorization.strip():
        raise MissingAuthorizationError()
    scheme, _, token = authorization.strip().partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token or " " in token:
        raise InvalidBearerFormatError()
    return token

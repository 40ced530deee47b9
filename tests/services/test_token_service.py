from __future__ import annotations

from datetime import UTC, datetime, timedelta

import jwt
import pytest

from passgate.core.errors import InvalidBearerFormatError, MissingAuthorizationError
from passgate.core.keys import decode_secret
from passgate.services import token_service
from tests.conftest import OTHER_TOKEN_SECRET, TOKEN_SECRET


def test_sign_and_verify_access_token() -> None:
    token = token_service.sign(42, 600, "access", [TOKEN_SECRET])
    claims = token_service.verify(token, [TOKEN_SECRET], is_access=True)
    assert claims["iss"] == 42
    assert claims["typ"] == "access"
    assert claims["exp"] - claims["iat"] == 600


def test_iss_is_signed_as_string_and_verified_as_int() -> None:
    token = token_service.sign(42, 600, "access", [TOKEN_SECRET])
    unverified = jwt.decode(token, options={"verify_signature": False})
    assert unverified["iss"] == "42"
    claims = token_service.verify(token, [TOKEN_SECRET], is_access=True)
    assert claims["iss"] == 42


def test_kid_header_selects_signing_key() -> None:
    secrets = [TOKEN_SECRET, OTHER_TOKEN_SECRET]
    for _ in range(10):
        token = token_service.sign(7, 60, "refresh", secrets)
        kid = int(jwt.get_unverified_header(token)["kid"])
        assert kid in (0, 1)
        assert token_service.verify(token, secrets, is_access=False)["iss"] == 7


def test_verify_rejects_wrong_type() -> None:
    refresh = token_service.sign(42, 600, "refresh", [TOKEN_SECRET])
    with pytest.raises(jwt.InvalidTokenError, match="Wrong token type"):
        token_service.verify(refresh, [TOKEN_SECRET], is_access=True)


def test_verify_rejects_other_key() -> None:
    token = token_service.sign(42, 600, "access", [OTHER_TOKEN_SECRET])
    with pytest.raises(jwt.InvalidSignatureError):
        token_service.verify(token, [TOKEN_SECRET], is_access=True)


def test_verify_rejects_unknown_kid() -> None:
    token = token_service.sign(42, 600, "access", [TOKEN_SECRET, TOKEN_SECRET])
    # Force kid=1 then verify against a single-key set.
    payload = jwt.decode(token, options={"verify_signature": False})
    forged = jwt.encode(
        payload, decode_secret(TOKEN_SECRET), algorithm="HS256", headers={"kid": "1"}
    )
    with pytest.raises(jwt.InvalidTokenError, match="Unknown key id"):
        token_service.verify(forged, [TOKEN_SECRET], is_access=True)


def test_verify_rejects_expired_token() -> None:
    now = datetime.now(UTC)
    expired = jwt.encode(
        {
            "iss": "42",
            "typ": "access",
            "iat": now - timedelta(hours=1),
            "exp": now - timedelta(minutes=1),
        },
        decode_secret(TOKEN_SECRET),
        algorithm="HS256",
        headers={"kid": "0"},
    )
    with pytest.raises(jwt.ExpiredSignatureError):
        token_service.verify(expired, [TOKEN_SECRET], is_access=True)


def test_verify_rejects_alg_none() -> None:
    unsigned = jwt.encode(
        {"iss": "42", "typ": "access", "iat": 0, "exp": 9999999999},
        key=None,
        algorithm="none",
        headers={"kid": "0"},
    )
    with pytest.raises(jwt.InvalidTokenError):
        token_service.verify(unsigned, [TOKEN_SECRET], is_access=True)


def test_sign_rejects_unknown_type() -> None:
    with pytest.raises(ValueError):
        token_service.sign(42, 600, "session", [TOKEN_SECRET])  # type: ignore[arg-type]


# ---- parse_bearer ----


def test_parse_bearer() -> None:
    assert token_service.parse_bearer("Bearer abc.def.ghi") == "abc.def.ghi"
    assert token_service.parse_bearer("bearer   abc") == "abc"


@pytest.mark.parametrize("header", [None, "", "   "])
def test_parse_bearer_missing(header: str | None) -> None:
    with pytest.raises(MissingAuthorizationError):
        token_service.parse_bearer(header)


@pytest.mark.parametrize("header", ["Basic abc", "Bearer", "Bearer a b", "abc"])
def test_parse_bearer_malformed(header: str) -> None:
    with pytest.raises(InvalidBearerFormatError):
        token_service.parse_bearer(header)

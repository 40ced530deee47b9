from __future__ import annotations

import base64

import pytest

from passgate.core.errors import InvalidSecretError
from passgate.core.keys import MIN_SECRET_BYTES, decode_secret
from tests.conftest import PWD_SECRET


def test_decodes_unpadded_secret() -> None:
    raw = decode_secret(PWD_SECRET)
    assert len(raw) >= MIN_SECRET_BYTES


def test_padding_is_optional() -> None:
    key = base64.urlsafe_b64encode(b"k" * 40).decode()
    assert key.endswith("=")
    assert decode_secret(key) == decode_secret(key.rstrip("=")) == b"k" * 40


@pytest.mark.parametrize(
    "secret",
    [
        None,
        123,
        "",
        "has spaces in it",
        "plus+and/slash",
        base64.urlsafe_b64encode(b"k" * (MIN_SECRET_BYTES - 1)).decode(),
    ],
)
def test_rejects_bad_secrets(secret: object) -> None:
    with pytest.raises(InvalidSecretError, match="Invalid secret"):
        decode_secret(secret)

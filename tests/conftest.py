from __future__ import annotations

import os
import sys
from pathlib import Path

# Settings are resolved at import time and refuse to load without secrets,
# so the environment must be in place before anything under passgate is
# imported.
os.environ["APP_ENV"] = "test"
os.environ["PWD_SECRET"] = "YS1zdHJpbmctc2VjcmV0LWF0LWxlYXN0LTI1Ni1iaXRzLWxvbmc"
os.environ["TOKEN_SECRET"] = "dG9rZW4tc2lnbmluZy1zZWNyZXQtdGhhdC1pcy0yNTYtYml0cy1sb25n"

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from passgate.api import dependencies  # noqa: E402
from passgate.main import app  # noqa: E402
from passgate.models.exchange import AuthRequest, AuthResponse  # noqa: E402
from passgate.models.password_policy import PasswordPolicy  # noqa: E402
from passgate.services.credential_issuer import CredentialIssuer  # noqa: E402
from passgate.services.credential_verifier import CredentialVerifier  # noqa: E402
from passgate.services.token_lifecycle import TokenLifecycle  # noqa: E402

PWD_SECRET = os.environ["PWD_SECRET"]
TOKEN_SECRET = os.environ["TOKEN_SECRET"]
OTHER_TOKEN_SECRET = "YW5vdGhlci1zaWduaW5nLXNlY3JldC13aXRoLWVub3VnaC1ieXRlcw"


@pytest.fixture(autouse=True)
def reset_password_policy() -> None:
    """init() mutates the shared issuer; restore the default for each test."""
    dependencies.issuer.init(PasswordPolicy())


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def verifier() -> CredentialVerifier:
    return CredentialVerifier(PWD_SECRET)


@pytest.fixture
def issuer() -> CredentialIssuer:
    return CredentialIssuer(PWD_SECRET, PasswordPolicy())


@pytest.fixture
def lifecycle() -> TokenLifecycle:
    return TokenLifecycle([TOKEN_SECRET])


def issue_pair(lifecycle: TokenLifecycle, subject_id: object = 42) -> AuthResponse:
    """Run issue() for *subject_id* via body.id and return the response."""
    response = AuthResponse()
    error = lifecycle.issue(AuthRequest(body={"id": subject_id}), response)
    assert error is None
    return response

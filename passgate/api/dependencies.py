"""Glue between FastAPI requests and the auth steps.

The step objects are module-level singletons built from SETTINGS, the
same way every route shares one configuration.  Password policy is the
only thing that may change after import, through init(), which belongs
in startup code before the app serves traffic.

Steps return PipelineError values; this module is the one place those
become HTTPExceptions.
"""

from __future__ import annotations

import json
import logging
from typing import Annotated, Any

from fastapi import Depends, HTTPException, Request, status
from starlette.concurrency import run_in_threadpool

from passgate.core.config import SETTINGS
from passgate.core.errors import PipelineError
from passgate.middleware.pipeline import Pipeline
from passgate.models.exchange import AuthRequest, AuthResponse
from passgate.models.password_policy import PasswordPolicy
from passgate.services.credential_issuer import CredentialIssuer
from passgate.services.credential_verifier import CredentialVerifier
from passgate.services.token_lifecycle import TokenLifecycle

logger = logging.getLogger(__name__)

verifier = CredentialVerifier(SETTINGS.pwd_secret)
issuer = CredentialIssuer(SETTINGS.pwd_secret, SETTINGS.password_policy)
tokens = TokenLifecycle(
    SETTINGS.token_secrets,
    access_duration=SETTINGS.access_token_duration,
    refresh_duration=SETTINGS.refresh_token_duration,
)


def init(policy: PasswordPolicy) -> None:
    """Replace the password generation policy used by POST /auth/passwords."""
    issuer.init(policy)


def raise_for(error: PipelineError) -> None:
    headers = {"WWW-Authenticate": "Bearer"} if error.code == 401 else None
    raise HTTPException(status_code=error.code, detail=error.message, headers=headers)


async def read_body(request: Request) -> Any:
    """Parsed JSON body, or {} for an empty one.

    Shape is NOT validated here: the steps own those checks and their
    error messages.
    """
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        return json.loads(raw)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Request body must be valid JSON",
        ) from None


async def build_request(request: Request, *, protected: bool = False) -> AuthRequest:
    return AuthRequest(
        body=await read_body(request),
        headers=dict(request.headers),
        protected=protected,
    )


async def run_pipeline(
    pipeline: Pipeline, auth_request: AuthRequest, auth_response: AuthResponse
) -> None:
    # argon2 and HMAC work is CPU-bound; keep it off the event loop.
    error = await run_in_threadpool(pipeline.run, auth_request, auth_response)
    if error is not None:
        raise_for(error)


_verify_access = Pipeline(tokens.verify_access)


async def require_access(request: Request) -> dict[str, Any]:
    """Dependency for protected endpoints.  Returns the access token claims."""
    auth_request = AuthRequest(headers=dict(request.headers), protected=True)
    await run_pipeline(_verify_access, auth_request, AuthResponse())
    return auth_request.decoded_access_token or {}


AccessClaims = Annotated[dict[str, Any], Depends(require_access)]

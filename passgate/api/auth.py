"""Auth routes.

  GET  /auth/me         protected; echoes the access token claims
  POST /auth/refresh    body.refreshToken -> new access + refresh pair
  POST /auth/passwords  protected; body.rows -> each row gets pwd + encryptedPwd
                        (at most MAX_PASSWORD_ROWS rows per call)

Login is not here: it needs a user lookup, which belongs to the host
application.  A host composes it from the same steps, e.g.

    Pipeline(load_user_row, verifier.compare, tokens.issue)

where load_user_row puts the stored hash in response.rows and the user id
in body.id.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, Request, status
from pydantic import BaseModel

from passgate.api.dependencies import (
    AccessClaims,
    build_request,
    issuer,
    run_pipeline,
    tokens,
)
from passgate.middleware.pipeline import Pipeline
from passgate.models.exchange import AuthResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

_refresh = Pipeline(tokens.verify_refresh, tokens.issue)
_passwords = Pipeline(issuer.create)

# Each row costs one argon2 hash.
MAX_PASSWORD_ROWS = 100


class TokenPairOut(BaseModel):
    accessToken: str
    refreshToken: str


class ClaimsOut(BaseModel):
    iss: int
    typ: str
    iat: int
    exp: int
    jti: str | None = None


class PasswordsOut(BaseModel):
    rows: list[dict[str, Any]]


@router.get("/me", response_model=ClaimsOut)
async def me(claims: AccessClaims) -> ClaimsOut:
    return ClaimsOut(**claims)


@router.post("/refresh", response_model=TokenPairOut)
async def refresh(request: Request) -> TokenPairOut:
    """Verify body.refreshToken, then issue a new pair for its subject."""
    auth_request = await build_request(request)
    auth_response = AuthResponse()
    await run_pipeline(_refresh, auth_request, auth_response)

    pair = auth_response.tokens
    if pair is None:  # issue() sets it whenever the pipeline passes
        raise RuntimeError("refresh pipeline passed without issuing tokens")
    logger.info(
        "Tokens refreshed  subject=%s",
        (auth_request.decoded_refresh_token or {}).get("iss"),
    )
    return TokenPairOut(**pair.as_dict())


@router.post("/passwords", response_model=PasswordsOut)
async def create_passwords(request: Request, claims: AccessClaims) -> PasswordsOut:
    """Generate a password for every row.  The plaintext is returned once."""
    auth_request = await build_request(request)
    body = auth_request.body
    rows = body.get("rows") if isinstance(body, dict) else None
    if isinstance(rows, list) and len(rows) > MAX_PASSWORD_ROWS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Too many resources. At most {MAX_PASSWORD_ROWS} rows per request",
        )
    await run_pipeline(_passwords, auth_request, AuthResponse())
    rows = auth_request.body["rows"]
    logger.info(
        "Generated passwords for %d records  by=%s", len(rows), claims.get("iss")
    )
    return PasswordsOut(rows=rows)

"""Issue and verify access/refresh token pairs.

Three steps, each mounted on its own route:

  issue           mint a new pair for a subject (login, refresh)
  verify_access   check the bearer token on a protected route
  verify_refresh  check body.refreshToken on the refresh route

Each step runs the same one-way sequence and stops at the first failure:

  resolve input -> JWT shape -> signature/expiry/type -> iss range -> pass

The shape check runs before the signature check on purpose: garbage is
turned away with a 401 without ever reaching the verifier.

The "iss" claim is the subject id.  It is range-checked after every
verification, so even a correctly signed token with iss=0 is refused.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import jwt

from passgate.core.errors import BearerError, PassgateError, PipelineError
from passgate.models.exchange import AuthRequest, AuthResponse
from passgate.models.tokens import (
    DEFAULT_ACCESS_TOKEN_DURATION,
    DEFAULT_REFRESH_TOKEN_DURATION,
    MAX_SUBJECT_ID,
    MIN_SUBJECT_ID,
    TokenPair,
)
from passgate.services import token_service
from passgate.services.outcomes import accept, reject
from passgate.services.validate import is_jwt_shaped, to_subject_id

logger = logging.getLogger(__name__)

MISSING_ISS_MESSAGE = "Missing iss"


def _subject_id(value: Any) -> int | None:
    number = to_subject_id(value)
    if number is None or not MIN_SUBJECT_ID <= number <= MAX_SUBJECT_ID:
        return None
    return number


def _claim(decoded: dict[str, Any] | None) -> Any:
    return decoded.get("iss") if isinstance(decoded, dict) else None


class TokenLifecycle:
    def __init__(
        self,
        secrets: Sequence[str],
        access_duration: int = DEFAULT_ACCESS_TOKEN_DURATION,
        refresh_duration: int = DEFAULT_REFRESH_TOKEN_DURATION,
    ) -> None:
        self._secrets = tuple(secrets)
        self.access_duration = access_duration
        self.refresh_duration = refresh_duration

    # ------------------------------------------------------------------
    # issue
    # ------------------------------------------------------------------

    def issue(self, request: AuthRequest, response: AuthResponse) -> PipelineError | None:
        """Sign a fresh pair and attach it to ``response.tokens``.

        Subject id, first valid one of:
          1. iss of the access token decoded earlier in this request
          2. iss of the refresh token decoded earlier in this request
          3. body.id (int or digit string), e.g. set by a login lookup
        """
        body = request.body if isinstance(request.body, dict) else {}
        candidates = (
            _claim(request.decoded_access_token),
            _claim(request.decoded_refresh_token),
            body.get("id"),
        )
        iss = next(
            (n for n in map(_subject_id, candidates) if n is not None), None
        )
        if iss is None:
            return reject(logger, "issue", 400, MISSING_ISS_MESSAGE)

        logger.debug("Create tokens for subject %d", iss)
        try:
            access_token = token_service.sign(
                iss, self.access_duration, "access", self._secrets
            )
            refresh_token = token_service.sign(
                iss, self.refresh_duration, "refresh", self._secrets
            )
        except PassgateError as e:
            return reject(logger, "issue", e.status_code, str(e))
        except (ValueError, TypeError, jwt.PyJWTError) as e:
            return reject(logger, "issue", 500, f"Token signing failed: {e}")
        response.tokens = TokenPair(
            access_token=access_token, refresh_token=refresh_token
        )
        accept("issue")
        return None

    # ------------------------------------------------------------------
    # verify
    # ------------------------------------------------------------------

    def verify_access(
        self, request: AuthRequest, response: AuthResponse
    ) -> PipelineError | None:
        """Decode the Authorization bearer token onto ``request.decoded_access_token``.

        No-op on routes that are not protected.
        """
        if not request.protected:
            accept("verify_access", "skipped")
            return None

        try:
            token = token_service.parse_bearer(request.header("authorization"))
        except BearerError as e:
            return reject(logger, "verify_access", e.status_code, str(e))

        claims = self._decode(token, is_access=True)
        if isinstance(claims, PipelineError):
            return claims

        request.decoded_access_token = claims
        accept("verify_access")
        return None

    def verify_refresh(
        self, request: AuthRequest, response: AuthResponse
    ) -> PipelineError | None:
        """Decode ``body.refreshToken`` onto ``request.decoded_refresh_token``.

        Always enforced; the route protection flag does not apply here.
        """
        body = request.body if isinstance(request.body, dict) else {}
        claims = self._decode(body.get("refreshToken"), is_access=False)
        if isinstance(claims, PipelineError):
            return claims

        request.decoded_refresh_token = claims
        accept("verify_refresh")
        return None

    def _decode(self, token: Any, *, is_access: bool) -> dict[str, Any] | PipelineError:
        kind = "access" if is_access else "refresh"
        operation = f"verify_{kind}"

        if not is_jwt_shaped(token):
            return reject(logger, operation, 401, f"Invalid {kind} token")

        try:
            claims = token_service.verify(token, self._secrets, is_access)
        except jwt.InvalidTokenError as e:
            return reject(logger, operation, 401, f"Invalid {kind} token: {e}")
        except PassgateError as e:
            return reject(logger, operation, e.status_code, str(e))

        if _subject_id(claims.get("iss")) is None:
            return reject(logger, operation, 400, MISSING_ISS_MESSAGE)

        logger.debug("Decoded %s token for subject %s", kind, claims["iss"])
        return claims

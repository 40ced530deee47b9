"""Error types shared by the middleware steps.

Two families live here:

  PassgateError and subclasses: raised by the primitive adapters
    (password_service, token_service).  Each carries the HTTP status the
    steps map it to, so the mapping lives next to the failure.

  PipelineError: the value a step RETURNS when it rejects a request.
    Steps never raise to signal a rejection; the boundary (Pipeline,
    as_middleware, the FastAPI routes) decides how to surface it.
"""

from __future__ import annotations

from dataclasses import dataclass


class PassgateError(Exception):
    status_code: int = 400


# ---------------------------------------------------------------------------
# Password primitives (400)
# ---------------------------------------------------------------------------


class PasswordServiceError(PassgateError):
    status_code = 400


class InvalidPasswordError(PasswordServiceError):
    """Plaintext or stored hash is unusable (empty, wrong type, malformed)."""


class InvalidSecretError(PasswordServiceError):
    """Secret is not base64url or decodes to too few bytes."""


class PasswordPolicyError(PasswordServiceError):
    """Policy cannot produce a password (no character class, bad length)."""


# ---------------------------------------------------------------------------
# Bearer parsing (401)
# ---------------------------------------------------------------------------


class BearerError(PassgateError):
    status_code = 401


class MissingAuthorizationError(BearerError):
    def __init__(self) -> None:
        super().__init__("Missing authorization header")


class InvalidBearerFormatError(BearerError):
    def __init__(self) -> None:
        super().__init__(
            "Authorization header must be in the format 'Bearer <token>'"
        )


# ---------------------------------------------------------------------------
# Step result
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PipelineError:
    code: int
    message: str

    @classmethod
    def from_exception(cls, exc: PassgateError) -> PipelineError:
        return cls(code=exc.status_code, message=str(exc))

    def as_dict(self) -> dict[str, object]:
        return {"code": self.code, "message": self.message}

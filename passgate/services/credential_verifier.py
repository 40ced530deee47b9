from __future__ import annotations

import logging

from passgate.core.errors import PasswordServiceError, PipelineError
from passgate.models.credential import Credential
from passgate.models.exchange import AuthRequest, AuthResponse
from passgate.services import password_service
from passgate.services.field_resolver import (
    MISSING_HASH_MESSAGE,
    MISSING_PASSWORD_MESSAGE,
    resolve_hash,
    resolve_password,
)
from passgate.services.outcomes import accept, reject

logger = logging.getLogger(__name__)

OPERATION = "compare"


class CredentialVerifier:
    """Checks a submitted password against the hash a previous step loaded."""

    def __init__(self, secret: str) -> None:
        self._secret = secret

    def compare(self, request: AuthRequest, response: AuthResponse) -> PipelineError | None:
        """Return None when the password matches, else the rejection.

        Reads only; neither request nor response is modified.
        """
        password = resolve_password(request)
        if password is None:
            return reject(logger, OPERATION, 400, MISSING_PASSWORD_MESSAGE)

        stored_hash = resolve_hash(response)
        if stored_hash is None:
            return reject(logger, OPERATION, 400, MISSING_HASH_MESSAGE)

        credential = Credential(candidate_password=password, stored_hash=stored_hash)

        try:
            matches = password_service.compare(
                credential.candidate_password, credential.stored_hash, self._secret
            )
        except PasswordServiceError as e:
            return reject(logger, OPERATION, e.status_code, str(e))

        if not matches:
            return reject(logger, OPERATION, 401, "Wrong password")

        logger.debug("Correct password")
        accept(OPERATION)
        return None

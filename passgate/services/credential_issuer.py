from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping

from passgate.core.errors import PasswordServiceError, PipelineError
from passgate.models.exchange import AuthRequest, AuthResponse
from passgate.models.password_policy import PasswordPolicy
from passgate.services import password_service
from passgate.services.outcomes import accept, reject
from passgate.services.validate import is_non_empty_list

logger = logging.getLogger(__name__)

OPERATION = "create"

MISSING_ROWS_MESSAGE = "Missing resources. Should be in body.rows"


class CredentialIssuer:
    """Generates a password for each record in ``body.rows``.

    Each record gets ``pwd`` (plaintext, to hand to the user once) and
    ``encryptedPwd`` (to store).  Other keys are left alone.

    The batch is not transactional: if the generator or the hasher fails
    midway, records before the failure keep their new values.
    """

    def __init__(self, secret: str, policy: PasswordPolicy | None = None) -> None:
        self._secret = secret
        self.policy = policy or PasswordPolicy()

    def init(self, policy: PasswordPolicy) -> None:
        """Replace the generation policy.  Call during startup only."""
        self.policy = policy
        logger.info(
            "Password policy set  length=%d strict=%s",
            policy.length,
            policy.strict,
        )

    def create(self, request: AuthRequest, response: AuthResponse) -> PipelineError | None:
        body = request.body
        rows = body.get("rows") if isinstance(body, Mapping) else None
        if not is_non_empty_list(rows):
            return reject(logger, OPERATION, 400, MISSING_ROWS_MESSAGE)

        for i, record in enumerate(rows):
            if not isinstance(record, MutableMapping):
                return reject(
                    logger,
                    OPERATION,
                    400,
                    f"Invalid resource at body.rows[{i}]. Should be an object",
                )

        logger.debug("Create passwords for %d records", len(rows))
        policy = self.policy
        for record in rows:
            try:
                pwd = password_service.random_password(policy)
                encrypted = password_service.encrypt(pwd, self._secret)
            except PasswordServiceError as e:
                return reject(logger, OPERATION, e.status_code, str(e))
            record["pwd"] = pwd
            record["encryptedPwd"] = encrypted

        accept(OPERATION)
        return None

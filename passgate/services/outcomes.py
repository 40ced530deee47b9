from __future__ import annotations

import logging

from passgate.core.errors import PipelineError
from passgate.core.metrics import record_decision


def reject(
    logger: logging.Logger, operation: str, code: int, message: str
) -> PipelineError:
    """Log and count a rejection, then return it as the step result."""
    logger.warning(
        "%s rejected  code=%d  %s",
        operation,
        code,
        message,
        extra={"operation": operation, "code": code},
    )
    record_decision(operation, f"rejected_{code}")
    return PipelineError(code=code, message=message)


def accept(operation: str, outcome: str = "passed") -> None:
    record_decision(operation, outcome)

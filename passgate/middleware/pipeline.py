"""Run auth steps in order, and adapt them to callback-style pipelines.

A step is any callable ``step(request, response) -> PipelineError | None``.
None means "continue"; a PipelineError means "stop here".  Steps never
raise to reject a request, which keeps them trivially composable:

    pipeline = Pipeline(load_user, verifier.compare, tokens.issue)
    error = pipeline.run(request, response)

Frameworks that chain middleware with a continuation callback (the
``next()`` style) get the same steps through as_middleware():

    mw = as_middleware(verifier.compare)
    mw(request, response, call_next)   # call_next() or call_next(error)
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from passgate.core.errors import PipelineError
from passgate.models.exchange import AuthRequest, AuthResponse

logger = logging.getLogger(__name__)

Step = Callable[[AuthRequest, AuthResponse], "PipelineError | None"]
Continuation = Callable[..., None]
Middleware = Callable[[AuthRequest, AuthResponse, Continuation], None]


class Pipeline:
    def __init__(self, *steps: Step) -> None:
        self.steps = steps

    def run(self, request: AuthRequest, response: AuthResponse) -> PipelineError | None:
        for step in self.steps:
            error = step(request, response)
            if error is not None:
                logger.debug(
                    "Pipeline stopped at %s  code=%d",
                    getattr(step, "__name__", repr(step)),
                    error.code,
                )
                return error
        return None


def as_middleware(step: Step) -> Middleware:
    """Wrap *step* in the ``(request, response, continuation)`` convention.

    The continuation is called exactly once: with no arguments on success,
    with the PipelineError on failure.
    """

    def middleware(
        request: AuthRequest, response: AuthResponse, call_next: Continuation
    ) -> None:
        error = step(request, response)
        if error is None:
            call_next()
        else:
            call_next(error)

    middleware.__name__ = getattr(step, "__name__", "middleware")
    return middleware

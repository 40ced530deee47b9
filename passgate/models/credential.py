from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Credential:
    """A candidate password paired with the stored hash it is checked against.

    Built per compare() call and dropped afterwards.  Both values are kept
    out of repr() so an accidental log line or traceback shows neither.
    """

    candidate_password: str = field(repr=False)
    stored_hash: str = field(repr=False)

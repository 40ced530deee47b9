"""Request/response values the auth steps read and mutate.

These are deliberately loose: the body is whatever JSON the client sent,
and the response side holds whatever an earlier step (typically a DB
lookup) put there.  The steps treat every value as untrusted and check
shapes themselves.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from passgate.models.tokens import TokenPair


@dataclass
class AuthRequest:
    body: Any = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)
    # Route-level flag: verify_access is a no-op unless set.
    protected: bool = False
    decoded_access_token: dict[str, Any] | None = None
    decoded_refresh_token: dict[str, Any] | None = None

    def header(self, name: str) -> str | None:
        """Case-insensitive header lookup."""
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return None


@dataclass
class AuthResponse:
    # Result set of a preceding lookup, e.g. [{"id": 1, "password": "<hash>"}]
    rows: Any = None
    # Values set directly on the response (res.password and friends)
    fields: dict[str, Any] = field(default_factory=dict)
    # Side-channel bag shared between steps; may carry its own "rows"
    locals: Any = field(default_factory=dict)
    tokens: TokenPair | None = None

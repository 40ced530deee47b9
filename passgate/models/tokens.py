from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

TokenType = Literal["access", "refresh"]

ACCESS: TokenType = "access"
REFRESH: TokenType = "refresh"

# Bounds for the "iss" claim (subject id)
MIN_SUBJECT_ID = 1
MAX_SUBJECT_ID = 999_999_999

DEFAULT_ACCESS_TOKEN_DURATION = 600  # 10 minutes
DEFAULT_REFRESH_TOKEN_DURATION = 86400  # 1 day


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str

    def as_dict(self) -> dict[str, str]:
        return {"accessToken": self.access_token, "refreshToken": self.refresh_token}

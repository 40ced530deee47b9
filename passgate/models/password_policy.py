from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

# Short option keys accepted by init(); maps to PasswordPolicy field names.
# similarChars means "allow similar characters", the inverse of our flag.
_SHORT_KEYS = {
    "len": "length",
    "num": "numbers",
    "ucase": "uppercase",
    "lcase": "lowercase",
    "sym": "symbols",
    "strict": "strict",
}


@dataclass(frozen=True)
class PasswordPolicy:
    """Shape of generated passwords.

    strict: every enabled character class appears at least once.
    exclude_similar_chars: drop look-alikes (i, l, 1, L, o, 0, O).
    """

    length: int = 12
    numbers: bool = True
    uppercase: bool = True
    lowercase: bool = True
    symbols: bool = False
    strict: bool = True
    exclude_similar_chars: bool = True

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> PasswordPolicy:
        """Build a policy from either field names or the short option keys.

        Unknown keys are ignored; missing keys keep their defaults.
        """
        kwargs: dict[str, Any] = {}
        for key, value in options.items():
            if key == "similarChars":
                kwargs["exclude_similar_chars"] = not value
            elif key in _SHORT_KEYS:
                kwargs[_SHORT_KEYS[key]] = value
            elif key in cls.__dataclass_fields__:
                kwargs[key] = value
        return cls(**kwargs)
